"""HTTP-level tests for authentication, error mapping and the webhook route."""
import uuid
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
import stripe
from fastapi.testclient import TestClient

from app.api.deps import get_current_user
from app.database import get_db
from app.main import app
from app.services.prediction_service import PredictionGenerationError
from app.services.subscription_service import TierAccessError


@pytest.fixture
def api(db, user):
    """TestClient with the database and caller swapped for test doubles.

    The client is not entered as a context manager so the lifespan never
    opens real connections.
    """

    async def _db():
        yield db

    app.dependency_overrides[get_db] = _db
    app.dependency_overrides[get_current_user] = lambda: user
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def predictions():
    service = MagicMock()
    with patch("app.api.predictions._get_prediction_service", return_value=service):
        yield service


class TestHealth:

    def test_liveness(self, api):
        assert api.get("/health").json() == {"status": "healthy"}


class TestAuthentication:

    def test_missing_header_is_401(self, db):
        async def _db():
            yield db

        app.dependency_overrides[get_db] = _db
        try:
            response = TestClient(app).get("/api/v1/users/me")
        finally:
            app.dependency_overrides.clear()
        assert response.status_code == 401
        assert response.json()["detail"] == "Authentication required"

    def test_malformed_header_is_401(self, db):
        async def _db():
            yield db

        app.dependency_overrides[get_db] = _db
        try:
            response = TestClient(app).get("/api/v1/users/me", headers={"X-User-Id": "nope"})
        finally:
            app.dependency_overrides.clear()
        assert response.status_code == 401

    def test_admin_routes_need_admin_role(self, api):
        response = api.get("/api/v1/admin/test-users")
        assert response.status_code == 403
        assert response.json()["detail"] == "Admin access required"


class TestIdentitySync:

    @pytest.fixture
    def gateway_settings(self):
        settings = MagicMock(GATEWAY_SHARED_SECRET="s3cret", is_production=False)
        with patch("app.api.deps.get_settings", return_value=settings):
            yield settings

    def test_missing_secret_is_401(self, api, gateway_settings, db):
        response = api.post("/api/v1/users/sync", json={"external_id": "ext_1"})
        assert response.status_code == 401
        assert response.json()["detail"] == "Gateway authentication required"
        db.execute.assert_not_awaited()

    def test_wrong_secret_is_401(self, api, gateway_settings):
        response = api.post(
            "/api/v1/users/sync",
            json={"external_id": "ext_1"},
            headers={"X-Gateway-Secret": "guess"},
        )
        assert response.status_code == 401

    def test_unconfigured_secret_refused_in_production(self, api, gateway_settings):
        gateway_settings.GATEWAY_SHARED_SECRET = ""
        gateway_settings.is_production = True
        response = api.post("/api/v1/users/sync", json={"external_id": "ext_1"})
        assert response.status_code == 401

    def test_gateway_call_syncs_user(self, api, gateway_settings, db, result_of, user):
        db.execute.return_value = result_of(user)
        response = api.post(
            "/api/v1/users/sync",
            json={"external_id": user.external_id, "name": "Alexandra"},
            headers={"X-Gateway-Secret": "s3cret"},
        )
        assert response.status_code == 200
        assert response.json()["id"] == str(user.id)
        assert user.name == "Alexandra"
        assert user.last_signed_in is not None


class TestUserAndPsycheRoutes:

    def test_me(self, api, user):
        body = api.get("/api/v1/users/me").json()
        assert body["id"] == str(user.id)
        assert body["role"] == "user"
        assert body["interests"] == ["career"]

    def test_weighted_onboarding_rejects_bad_payload(self, api):
        response = api.post("/api/v1/psyche/weighted", json={"nickname": "Sam"})
        assert response.status_code == 422
        assert response.json()["detail"] == "Invalid onboarding data"

    def test_weighted_onboarding_unknown_type_is_422(self, api, user):
        payload = {
            "nickname": "Sam",
            "primary_interest": "career",
            "core_responses": [
                {
                    "question_id": f"core_{i}",
                    "selected_option": "a",
                    "indicators": ["The Maverick"],
                    "parameters": {},
                }
                for i in range(1, 9)
            ],
            "adaptive_responses": [
                {
                    "question_id": f"adaptive_{i}",
                    "selected_option": "b",
                    "indicators": ["The Maverick"],
                    "domain_insight": "Bold moves",
                }
                for i in range(1, 5)
            ],
        }
        response = api.post("/api/v1/psyche/weighted", json=payload)
        assert response.status_code == 422
        assert response.json()["detail"] == "Invalid psyche type"
        assert user.nickname == "Alex"

    def test_deepening_rejects_unknown_category(self, api):
        response = api.post("/api/v1/deepening/categories", json={"new_categories": ["astrology"]})
        assert response.status_code == 422

    def test_core_questions_fall_back_to_catalog(self, api, db, result_of):
        db.execute.return_value = result_of([])
        questions = api.get("/api/v1/psyche/core-questions").json()
        assert len(questions) == 8
        assert questions[0]["id"] == "core_1_decision_style"


class TestPredictionRoutes:

    def test_generate(self, api, predictions):
        prediction_id = uuid.uuid4()
        predictions.generate = AsyncMock(return_value={
            "prediction": "Good news.",
            "prediction_id": prediction_id,
            "share_token": "abc",
            "remaining_today": 2,
            "confidence_score": 70,
            "deep_mode": False,
            "is_follow_up": False,
        })
        response = api.post("/api/v1/predictions/", json={"user_input": "Will I?", "category": "career"})
        assert response.status_code == 201
        assert response.json()["prediction_id"] == str(prediction_id)

    def test_tier_error_is_403(self, api, predictions):
        predictions.generate = AsyncMock(side_effect=TierAccessError("Upgrade to Pro"))
        response = api.post("/api/v1/predictions/", json={"user_input": "Will I?", "deep_mode": True})
        assert response.status_code == 403
        assert response.json()["detail"] == "Upgrade to Pro"

    def test_llm_failure_is_500(self, api, predictions):
        predictions.generate = AsyncMock(side_effect=RuntimeError("All models in chain exhausted"))
        response = api.post("/api/v1/predictions/", json={"user_input": "Will I?"})
        assert response.status_code == 500
        assert response.json()["detail"] == "Failed to generate prediction: All models in chain exhausted"

    def test_invalid_category_is_422(self, api, predictions):
        response = api.post("/api/v1/predictions/", json={"user_input": "Will I?", "category": "astrology"})
        assert response.status_code == 422

    def test_anonymous_failure(self, api, predictions):
        predictions.generate_anonymous = AsyncMock(
            side_effect=PredictionGenerationError("Failed to generate prediction: quota")
        )
        response = api.post("/api/v1/predictions/anonymous", json={"user_input": "Rain?"})
        assert response.status_code == 500
        assert response.json()["detail"] == "Failed to generate prediction: quota"

    def test_missing_shared_prediction_is_404(self, api, predictions):
        predictions.get_shared = AsyncMock(side_effect=LookupError("Prediction not found"))
        response = api.get("/api/v1/predictions/shared/unknown")
        assert response.status_code == 404

    def test_delete_not_owned_is_404(self, api, predictions):
        predictions.delete = AsyncMock(
            side_effect=LookupError("Prediction not found or you don't have permission to delete it")
        )
        response = api.delete(f"/api/v1/predictions/{uuid.uuid4()}")
        assert response.status_code == 404

    def test_feedback(self, api, predictions):
        predictions.submit_feedback = AsyncMock()
        response = api.post(f"/api/v1/predictions/{uuid.uuid4()}/feedback", json={"feedback": "like"})
        assert response.status_code == 200
        assert response.json() == {"success": True}


class TestStripeWebhook:

    @pytest.fixture
    def billing(self):
        service = MagicMock()
        service.handle_event = AsyncMock()
        with patch("app.api.billing._get_billing_service", return_value=service):
            yield service

    def test_missing_signature(self, api, billing):
        response = api.post("/api/v1/billing/webhook", content=b"{}")
        assert response.status_code == 400
        assert response.json() == {"error": "No signature"}

    def test_bad_signature(self, api, billing):
        billing.construct_event.side_effect = stripe.SignatureVerificationError("bad", "sig")
        response = api.post("/api/v1/billing/webhook", content=b"{}", headers={"stripe-signature": "sig"})
        assert response.status_code == 400
        assert response.json()["error"].startswith("Webhook Error:")

    def test_test_event_is_acknowledged_only(self, api, billing):
        billing.construct_event.return_value = {"id": "evt_test_123", "type": "checkout.session.completed"}
        response = api.post("/api/v1/billing/webhook", content=b"{}", headers={"stripe-signature": "sig"})
        assert response.json() == {"verified": True}
        billing.handle_event.assert_not_awaited()

    def test_processing_failure_rolls_back(self, api, billing, db):
        billing.construct_event.return_value = {"id": "evt_1", "type": "checkout.session.completed"}
        billing.handle_event.side_effect = RuntimeError("db down")
        response = api.post("/api/v1/billing/webhook", content=b"{}", headers={"stripe-signature": "sig"})
        assert response.status_code == 500
        assert response.json() == {"error": "Webhook processing failed"}
        db.rollback.assert_awaited()

    def test_event_handled(self, api, billing):
        billing.construct_event.return_value = {"id": "evt_2", "type": "invoice.payment_failed"}
        response = api.post("/api/v1/billing/webhook", content=b"{}", headers={"stripe-signature": "sig"})
        assert response.json() == {"received": True}
        billing.handle_event.assert_awaited_once()
