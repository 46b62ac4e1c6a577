"""Unit tests for PredictionService and the prompt builders."""
import uuid
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from sqlalchemy.dialects import postgresql

from app.models.prediction import Prediction
from app.services import prompts
from app.services.prediction_service import (
    PredictionGenerationError,
    PredictionService,
    new_share_token,
    parse_confidence,
)
from app.services.subscription_service import TierAccessError


def _prediction(**overrides):
    fields = dict(
        id=uuid.uuid4(),
        user_id=uuid.uuid4(),
        user_input="Will I get the promotion?",
        prediction_result="Likely.",
        category="career",
        share_token="tok",
        user_feedback=None,
    )
    fields.update(overrides)
    return Prediction(**fields)


@pytest.fixture
def collaborators(user, subscription_factory):
    subscription = subscription_factory(user, tier="plus", daily_limit=20, used_today=2, total_used=5)
    subscriptions = MagicMock()
    subscriptions.check_and_reset = AsyncMock(return_value=subscription)
    subscriptions.enforce_generation_access = MagicMock()
    subscriptions.remaining_today = MagicMock(return_value=17)
    subscriptions.increment_usage = AsyncMock()

    psyche = MagicMock()
    psyche.get_profile = AsyncMock(return_value=None)

    deepening = MagicMock()
    deepening.increment_prediction_count = AsyncMock()

    llm = MagicMock()
    llm.complete = AsyncMock(return_value="Expect a strong month.\nConfidence: 72%")

    email = MagicMock()
    email.send_welcome_email = AsyncMock(return_value=True)

    return {
        "subscription": subscription,
        "subscriptions": subscriptions,
        "psyche": psyche,
        "deepening": deepening,
        "llm": llm,
        "email": email,
    }


@pytest.fixture
def prediction_service(collaborators):
    return PredictionService(
        llm=collaborators["llm"],
        subscriptions=collaborators["subscriptions"],
        psyche=collaborators["psyche"],
        deepening=collaborators["deepening"],
        email=collaborators["email"],
    )


class TestParseConfidence:

    def test_strips_confidence_line(self):
        score, text = parse_confidence("Good things ahead.\nConfidence: 85%\n")
        assert score == 85
        assert text == "Good things ahead."

    def test_case_insensitive(self):
        score, _ = parse_confidence("ok\nconfidence:  40%")
        assert score == 40

    def test_no_score_returns_text_unchanged(self):
        assert parse_confidence("  Just text  ") == (None, "  Just text  ")

    def test_share_tokens_are_unique_and_url_safe(self):
        tokens = {new_share_token() for _ in range(50)}
        assert len(tokens) == 50
        assert all(len(t) == 16 and "/" not in t and "+" not in t for t in tokens)


class TestPrompts:

    @pytest.mark.parametrize(
        "trajectory, deep, expected",
        [
            ("instant", False, prompts.STANDARD_PROMPT),
            ("instant", True, prompts.DEEP_PROMPT),
            ("30day", True, prompts.THIRTY_DAY_PROMPT),
            ("90day", False, prompts.NINETY_DAY_PROMPT),
            ("yearly", True, prompts.YEARLY_PROMPT),
        ],
    )
    def test_base_prompt_selection(self, trajectory, deep, expected):
        assert prompts.base_prompt(trajectory, deep) == expected

    def test_user_prompt(self):
        assert prompts.user_prompt("x?", "love") == "Generate a love prediction for: x?"
        assert prompts.user_prompt("x?", None) == "Generate a prediction for: x?"

    def test_profile_block_empty_without_context(self, user_factory):
        assert prompts.profile_block(user_factory(interests=None, relationship_status=None), "career") == ""

    def test_profile_block_includes_category_profile(self, user_factory):
        user = user_factory(
            interests=["career"],
            relationship_status="single",
            career_profile={"position": "mid", "direction": "growth", "challenge": "focus", "timeline": "6mo"},
            love_profile={"goal": "partner", "patterns": "avoidant", "desires": "stability"},
        )
        block = prompts.profile_block(user, "career")
        assert "- Primary Interests: career" in block
        assert "personal growth" in block
        assert "Career Profile: mid position" in block
        # love profile only shows for love asks or a love interest
        assert "Love Profile" not in block
        assert "Love Profile" in prompts.profile_block(user, "love")

    def test_premium_block_requires_flag(self, user_factory):
        assert prompts.premium_block(user_factory(premium_data_completed=False, location="Austin")) == ""
        block = prompts.premium_block(
            user_factory(
                premium_data_completed=True,
                location="Austin",
                major_transition=True,
                transition_type="career change",
            )
        )
        assert "- Location: Austin" in block
        assert "Currently undergoing career change" in block

    def test_psyche_block_levels(self, user, profile_factory):
        block = prompts.psyche_block(profile_factory(user))
        assert "LOW RISK APPETITE (30%)" in block
        assert "ANALYTICAL (20%)" in block
        # time_horizon falls back to time_consistency, analytical_weight to data_orientation
        assert "LONG-TERM FOCUSED (80%)" in block
        assert "HIGHLY ANALYTICAL (90%)" in block

    def test_psyche_block_none(self):
        assert prompts.psyche_block(None) == ""

    def test_history_block(self):
        history = [
            _prediction(category="love", user_feedback="like"),
            _prediction(category="career"),
            _prediction(category="health"),
        ]
        stats = {"total": 3, "liked": 1, "disliked": 0, "liked_categories": ["love"]}
        block = prompts.history_block(history, stats)
        assert "received 3 predictions previously" in block
        assert "be more optimistic and encouraging" in block
        assert "(User liked this)" in block
        assert "- health:" not in block

    def test_anonymous_prompt_with_onboarding(self):
        prompt = prompts.anonymous_prompt({"nickname": "Sam", "interests": ["love", "health"]})
        assert prompt.startswith(prompts.ANONYMOUS_PROMPT)
        assert "- Name: Sam" in prompt
        assert "- Interests: love, health" in prompt
        assert prompts.anonymous_prompt(None) == prompts.ANONYMOUS_PROMPT


class TestBuildSystemPrompt:

    @pytest.mark.asyncio
    async def test_blocks_in_order(self, prediction_service, collaborators, user_factory, profile_factory, db, result_of):
        user = user_factory(interests=["career"], premium_data_completed=True, location="Austin")
        collaborators["psyche"].get_profile.return_value = profile_factory(user)
        db.execute.return_value = result_of([])

        prompt = await prediction_service.build_system_prompt(
            db, user, "Should I switch jobs next month?", "career", False, "instant"
        )

        positions = [
            prompt.index(prompts.STANDARD_PROMPT),
            prompt.index("**User Profile:**"),
            prompt.index("**Premium Precision Context:**"),
            prompt.index("Personality Profile:"),
            prompt.index("**PREDICTION ACCURACY CONTEXT:**"),
        ]
        assert positions == sorted(positions)
        assert "Prediction History Context" not in prompt

    @pytest.mark.asyncio
    async def test_live_data_only_for_sports_and_stocks(self, collaborators):
        sports = MagicMock()
        sports.get_context = AsyncMock(return_value={"games": []})
        sports.format_context = MagicMock(return_value="\n\nSPORTS")
        service = PredictionService(llm=collaborators["llm"], sports=sports, stocks=MagicMock())

        assert await service.live_data_block("Lakers tonight?", "sports") == "\n\nSPORTS"
        assert await service.live_data_block("Lakers tonight?", "career") == ""
        sports.get_context.assert_awaited_once_with("Lakers tonight?")


class TestGenerate:

    @pytest.mark.asyncio
    async def test_stores_prediction_and_counts_usage(self, prediction_service, collaborators, user, db, result_of):
        db.execute.return_value = result_of([])

        result = await prediction_service.generate(db, user, "Will I get promoted?", "career")

        assert result["prediction"] == "Expect a strong month."
        assert result["confidence_score"] == 72
        assert result["remaining_today"] == 17
        assert result["is_follow_up"] is False
        stored = db.add.call_args[0][0]
        assert isinstance(stored, Prediction)
        assert stored.prediction_result == "Expect a strong month."
        assert stored.prediction_mode == "standard"
        assert stored.share_token == result["share_token"]
        collaborators["subscriptions"].increment_usage.assert_awaited_once_with(db, user)
        collaborators["deepening"].increment_prediction_count.assert_awaited_once_with(db, user)
        collaborators["email"].send_welcome_email.assert_not_awaited()
        _, user_content, _ = collaborators["llm"].complete.call_args[0]
        assert user_content == "Generate a career prediction for: Will I get promoted?"

    @pytest.mark.asyncio
    async def test_tier_rejection_skips_llm(self, prediction_service, collaborators, user, db):
        collaborators["subscriptions"].enforce_generation_access.side_effect = TierAccessError("nope")

        with pytest.raises(TierAccessError):
            await prediction_service.generate(db, user, "q", deep_mode=True)

        collaborators["llm"].complete.assert_not_awaited()
        db.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_first_prediction_sends_welcome_email(self, prediction_service, collaborators, user, db, result_of):
        collaborators["subscription"].total_used = 0
        db.execute.return_value = result_of([])

        await prediction_service.generate(db, user, "q", trajectory_type="30day", deep_mode=True)

        collaborators["email"].send_welcome_email.assert_awaited_once_with("alex@example.com", "Alex")
        stored = db.add.call_args[0][0]
        assert (stored.prediction_mode, stored.trajectory_type, stored.category) == ("deep", "30day", "general")

    @pytest.mark.asyncio
    async def test_follow_up_flag(self, prediction_service, user, db, result_of):
        db.execute.return_value = result_of([])
        parent = uuid.uuid4()
        result = await prediction_service.generate(db, user, "and then?", parent_prediction_id=parent)
        assert result["is_follow_up"] is True
        assert db.add.call_args[0][0].parent_prediction_id == parent

    @pytest.mark.asyncio
    async def test_llm_failure_propagates(self, prediction_service, collaborators, user, db, result_of):
        db.execute.return_value = result_of([])
        collaborators["llm"].complete.side_effect = RuntimeError("All models in chain exhausted")
        with pytest.raises(RuntimeError):
            await prediction_service.generate(db, user, "q")
        collaborators["subscriptions"].increment_usage.assert_not_awaited()


class TestAnonymousAndWelcome:

    @pytest.mark.asyncio
    async def test_anonymous(self, prediction_service, collaborators):
        collaborators["llm"].complete.return_value = "Bright skies."
        result = await prediction_service.generate_anonymous("Will it rain?")
        assert result == {"prediction": "Bright skies.", "category": "general"}

    @pytest.mark.asyncio
    async def test_anonymous_failure_is_wrapped(self, prediction_service, collaborators):
        collaborators["llm"].complete.side_effect = RuntimeError("quota")
        with pytest.raises(PredictionGenerationError, match="Failed to generate prediction: quota"):
            await prediction_service.generate_anonymous("Will it rain?", "general")

    @pytest.mark.asyncio
    async def test_welcome_uses_primary_interest(self, prediction_service, collaborators, user_factory, db):
        user = user_factory(interests=["love", "career"])
        result = await prediction_service.generate_welcome_prediction(db, user)

        stored = db.add.call_args[0][0]
        assert stored.user_input == prompts.WELCOME_QUESTIONS["love"]
        assert stored.category == "love"
        assert stored.trajectory_type == "30day"
        assert result["confidence_score"] == 72

    @pytest.mark.asyncio
    async def test_welcome_falls_back_on_llm_error(self, prediction_service, collaborators, user_factory, db):
        collaborators["llm"].complete.side_effect = RuntimeError("down")
        result = await prediction_service.generate_welcome_prediction(db, user_factory(interests=None))

        assert result["welcome_prediction"] == prompts.WELCOME_FALLBACK_TEXT
        assert result["confidence_score"] is None
        assert db.add.call_args[0][0].user_input == prompts.WELCOME_QUESTIONS["general"]


class TestHistoryAndOwnership:

    @pytest.mark.asyncio
    async def test_feedback_stats(self, prediction_service, user, db):
        result = MagicMock()
        result.all.return_value = [("love", "like"), ("career", "dislike"), ("love", "like"), ("health", "like"), (None, None)]
        db.execute.return_value = result

        stats = await prediction_service.feedback_stats(db, user)

        assert stats == {"total": 5, "liked": 3, "disliked": 1, "liked_categories": ["love", "health"]}

    @pytest.mark.asyncio
    async def test_history_has_more(self, prediction_service, user, db, result_of):
        page = [_prediction(), _prediction()]
        db.execute.side_effect = [result_of(page), result_of(5)]

        result = await prediction_service.get_history(db, user, limit=2, offset=0, search="  ")

        assert result["total"] == 5
        assert result["has_more"] is True
        assert len(result["predictions"]) == 2

    @staticmethod
    async def _history_where(prediction_service, user, db, result_of, **filters):
        db.execute.side_effect = [result_of([]), result_of(0)]
        await prediction_service.get_history(db, user, **filters)
        page, count = (c.args[0].compile(dialect=postgresql.dialect()) for c in db.execute.call_args_list)
        where = str(page).split("WHERE", 1)[1].split("ORDER BY", 1)[0]
        assert where.strip() == str(count).split("WHERE", 1)[1].strip()
        return where, page.params

    @pytest.mark.asyncio
    async def test_history_returns_root_predictions_only(self, prediction_service, user, db, result_of):
        where, params = await self._history_where(prediction_service, user, db, result_of)
        assert "predictions.user_id =" in where
        assert "predictions.parent_prediction_id IS NULL" in where
        assert "predictions.category" not in where
        assert "predictions.user_feedback" not in where
        assert user.id in params.values()

    @pytest.mark.asyncio
    async def test_history_category_all_is_unfiltered(self, prediction_service, user, db, result_of):
        where, _ = await self._history_where(prediction_service, user, db, result_of, category="all", feedback="all")
        assert "predictions.category" not in where
        assert "predictions.user_feedback" not in where

    @pytest.mark.asyncio
    async def test_history_category_filter(self, prediction_service, user, db, result_of):
        where, params = await self._history_where(prediction_service, user, db, result_of, category="love")
        assert "predictions.category =" in where
        assert "love" in params.values()

    @pytest.mark.asyncio
    async def test_history_feedback_none_matches_null(self, prediction_service, user, db, result_of):
        where, params = await self._history_where(prediction_service, user, db, result_of, feedback="none")
        assert "predictions.user_feedback IS NULL" in where
        assert "none" not in params.values()

    @pytest.mark.asyncio
    async def test_history_feedback_value(self, prediction_service, user, db, result_of):
        where, params = await self._history_where(prediction_service, user, db, result_of, feedback="like")
        assert "predictions.user_feedback =" in where
        assert "like" in params.values()

    @pytest.mark.asyncio
    async def test_history_search_is_case_insensitive_over_both_texts(self, prediction_service, user, db, result_of):
        where, params = await self._history_where(prediction_service, user, db, result_of, search="  Promotion ")
        assert "predictions.user_input ILIKE" in where
        assert "predictions.prediction_result ILIKE" in where
        assert " OR " in where
        assert list(params.values()).count("%Promotion%") == 2

    @pytest.mark.asyncio
    async def test_shared_missing(self, prediction_service, db, result_of):
        db.execute.return_value = result_of(None)
        with pytest.raises(LookupError, match="Prediction not found"):
            await prediction_service.get_shared(db, "missing")

    @pytest.mark.asyncio
    async def test_rename_not_owned(self, prediction_service, user, db, result_of):
        db.execute.return_value = result_of(None)
        with pytest.raises(LookupError, match="permission to rename"):
            await prediction_service.rename(db, user, uuid.uuid4(), "New title")

    @pytest.mark.asyncio
    async def test_submit_feedback(self, prediction_service, user, db, result_of):
        prediction = _prediction(user_id=user.id)
        db.execute.return_value = result_of(prediction)
        await prediction_service.submit_feedback(db, user, prediction.id, "dislike")
        assert prediction.user_feedback == "dislike"

    @pytest.mark.asyncio
    async def test_submit_invalid_feedback(self, prediction_service, user, db):
        with pytest.raises(ValueError):
            await prediction_service.submit_feedback(db, user, uuid.uuid4(), "meh")
        db.execute.assert_not_awaited()


class TestUpload:

    @pytest.mark.asyncio
    async def test_upload_stores_under_user_prefix(self, prediction_service, user):
        with patch("app.services.prediction_service.storage.put_object") as put_object:
            put_object.side_effect = lambda key, data, mime: {"key": key, "url": f"https://cdn/{key}"}
            result = await prediction_service.upload_file(user, "resume.pdf", "aGVsbG8=", "application/pdf")

        key, data, mime = put_object.call_args[0]
        assert key.startswith(f"predictions/{user.id}/")
        assert key.endswith(".pdf")
        assert data == b"hello"
        assert result["file_name"] == "resume.pdf"
        assert result["url"] == f"https://cdn/{key}"

    @pytest.mark.asyncio
    async def test_invalid_base64(self, prediction_service, user):
        with pytest.raises(ValueError, match="not valid base64"):
            await prediction_service.upload_file(user, "x.png", "abc", "image/png")
