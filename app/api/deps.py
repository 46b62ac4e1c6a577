"""
Predicsure AI — Shared API dependencies.

The identity provider sits in front of this service and forwards the
internal user id in the ``X-User-Id`` header.
"""

from __future__ import annotations

import hmac
import uuid
from typing import Optional

import structlog
from fastapi import Depends, Header, HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import get_settings
from app.database import get_db
from app.models.user import User

logger = structlog.get_logger("predicsure.api.deps")


async def get_current_user(
    x_user_id: Optional[str] = Header(None),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Resolve the authenticated user or fail with 401."""
    if not x_user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
        )
    try:
        user_id = uuid.UUID(x_user_id)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
        )

    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if user is None:
        logger.warning("auth_unknown_user", user_id=x_user_id)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
        )
    return user


async def require_admin(user: User = Depends(get_current_user)) -> User:
    if not user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return user


async def require_gateway(x_gateway_secret: Optional[str] = Header(None)) -> None:
    """Admit only calls carrying the gateway's shared secret.

    With no secret configured the check is skipped outside production and
    every call is refused in production.
    """
    settings = get_settings()
    expected = settings.GATEWAY_SHARED_SECRET
    if not expected:
        if settings.is_production:
            logger.error("gateway_secret_not_configured")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Gateway authentication required",
            )
        return
    if not x_gateway_secret or not hmac.compare_digest(x_gateway_secret, expected):
        logger.warning("gateway_secret_mismatch")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Gateway authentication required",
        )
