"""Google Cloud Storage helpers for user uploads.

The GCS client is synchronous; async callers wrap these in
``asyncio.to_thread``.
"""

import datetime

from google.cloud import storage as gcs_storage

from app.config import get_settings


def get_storage_client():
    return gcs_storage.Client(project=get_settings().GCP_PROJECT_ID or None)


def get_bucket():
    settings = get_settings()
    if not settings.GCS_BUCKET_NAME:
        raise RuntimeError("GCS_BUCKET_NAME is not configured")
    return get_storage_client().bucket(settings.GCS_BUCKET_NAME)


def public_url(key: str) -> str:
    settings = get_settings()
    base = settings.GCS_PUBLIC_BASE_URL or f"https://storage.googleapis.com/{settings.GCS_BUCKET_NAME}"
    return f"{base.rstrip('/')}/{key.lstrip('/')}"


def put_object(key: str, data: bytes, content_type: str = "application/octet-stream") -> dict:
    """Upload *data* under *key*. Returns ``{"key", "url"}``."""
    key = key.lstrip("/")
    blob = get_bucket().blob(key)
    blob.upload_from_string(data, content_type=content_type)
    return {"key": key, "url": public_url(key)}


def generate_signed_url(key: str, expiry_minutes: int = 60) -> str:
    """Signed v4 GET URL for temporary access to a private object."""
    blob = get_bucket().blob(key.lstrip("/"))
    return blob.generate_signed_url(
        version="v4",
        expiration=datetime.timedelta(minutes=expiry_minutes),
        method="GET",
    )


def delete_object(key: str) -> None:
    get_bucket().blob(key.lstrip("/")).delete()
