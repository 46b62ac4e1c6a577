"""Unit tests for DeepeningService — prompt gating and cross-domain insights."""
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest

from app.services.deepening_service import DeepeningService

NOW = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def deepening_service():
    return DeepeningService()


class TestShouldShowPrompt:

    def test_first_prompt_after_three_predictions(self, deepening_service, user_factory):
        assert deepening_service.should_show_prompt(user_factory(interests=["career"], prediction_count=3), NOW)
        assert not deepening_service.should_show_prompt(user_factory(interests=["career"], prediction_count=2), NOW)

    def test_later_prompts_need_five_per_interest(self, deepening_service, user_factory):
        interests = ["career", "love"]
        assert deepening_service.should_show_prompt(user_factory(interests=interests, prediction_count=10), NOW)
        assert not deepening_service.should_show_prompt(user_factory(interests=interests, prediction_count=9), NOW)

    def test_all_categories_covered(self, deepening_service, user_factory):
        user = user_factory(
            interests=["career", "love", "finance", "health", "sports", "stocks"],
            prediction_count=100,
        )
        assert not deepening_service.should_show_prompt(user, NOW)

    def test_dismissed_three_times(self, deepening_service, user_factory):
        user = user_factory(prediction_count=50, deepening_dismissed_count=3)
        assert not deepening_service.should_show_prompt(user, NOW)

    def test_cooldown(self, deepening_service, user_factory):
        recent = user_factory(prediction_count=5, deepening_prompted_at=NOW - timedelta(hours=23))
        stale = user_factory(prediction_count=5, deepening_prompted_at=NOW - timedelta(hours=25))
        assert not deepening_service.should_show_prompt(recent, NOW)
        assert deepening_service.should_show_prompt(stale, NOW)

    def test_naive_prompted_at_treated_as_utc(self, deepening_service, user_factory):
        user = user_factory(prediction_count=5, deepening_prompted_at=datetime(2025, 6, 1, 11, 0))
        assert not deepening_service.should_show_prompt(user, NOW)

    def test_no_interests(self, deepening_service, user_factory):
        assert not deepening_service.should_show_prompt(user_factory(interests=None, prediction_count=20), NOW)


class TestAvailableCategories:

    def test_canonical_order_minus_interests(self, deepening_service, user_factory):
        user = user_factory(interests=["finance", "career"])
        assert deepening_service.available_categories(user) == ["love", "health", "sports", "stocks"]


class TestCrossDomainInsights:

    def test_single_category_returns_existing(self, deepening_service):
        responses = [{"category": "love", "indicators": ["intuitive_empath"]}]
        assert deepening_service.calculate_cross_domain_insights(responses, ["kept"]) == ["kept"]

    def test_shared_indicator_two_categories(self, deepening_service):
        responses = [
            {"category": "love", "indicators": ["intuitive_empath"]},
            {"category": "finance", "indicators": ["intuitive_empath", "stabilizer"]},
        ]
        insights = deepening_service.calculate_cross_domain_insights(responses)
        assert insights == ["You trust emotional wisdom in both Relationships and Financial contexts"]

    def test_three_categories_use_oxford_comma(self, deepening_service):
        responses = [
            {"category": "career", "indicators": ["risk_addict"]},
            {"category": "sports", "indicators": ["risk_addict"]},
            {"category": "stocks", "indicators": ["risk_addict"]},
        ]
        insights = deepening_service.calculate_cross_domain_insights(responses)
        assert insights == ["You embrace high-risk opportunities in Career, Sports, and Investment"]

    def test_unknown_indicator_and_category(self, deepening_service):
        responses = [
            {"category": "travel", "indicators": ["wanderer"]},
            {"category": "health", "indicators": ["wanderer"]},
        ]
        insights = deepening_service.calculate_cross_domain_insights(responses)
        assert insights == ["Consistent wanderer pattern across travel and Health"]

    def test_duplicates_skipped(self, deepening_service):
        existing = ["You apply analytical precision across Career and Health"]
        responses = [
            {"category": "career", "indicators": ["quiet_strategist"]},
            {"category": "health", "indicators": ["quiet_strategist"]},
        ]
        assert deepening_service.calculate_cross_domain_insights(responses, existing) == existing


class TestDeepeningQuestionId:

    @pytest.mark.parametrize(
        "question_id, expected",
        [
            ("adaptive_12_love", 2012),
            ("deep_3", 2003),
            ("deep_x", 2000),
            ("nounderscore", 2000),
        ],
    )
    def test_offset(self, question_id, expected):
        assert DeepeningService.deepening_question_id(question_id) == expected


class TestMutations:

    @pytest.mark.asyncio
    async def test_add_interest_categories(self, user_factory, profile_factory, db):
        user = user_factory(interests=["career"])
        profile = profile_factory(user)
        psyche = MagicMock()
        psyche.get_profile = AsyncMock(return_value=profile)
        psyche.save_onboarding_response = AsyncMock()
        service = DeepeningService(psyche)

        responses = [
            {"question_id": "love_1", "category": "love", "indicators": ["stabilizer"]},
            {"question_id": "finance_2", "category": "finance", "indicators": ["stabilizer"]},
        ]
        result = await service.add_interest_categories(db, user, ["love", "finance"], responses)

        assert result["updated_interests"] == ["career", "love", "finance"]
        assert result["profile_completeness"] == 50
        assert result["cross_domain_insights"] == [
            "You prioritize security and consistency across Relationships and Financial"
        ]
        assert profile.secondary_interests == ["love", "finance"]
        question_ids = [c.kwargs["question_id"] for c in psyche.save_onboarding_response.call_args_list]
        assert question_ids == [2001, 2002]

    @pytest.mark.asyncio
    async def test_add_categories_requires_profile(self, user, db):
        psyche = MagicMock()
        psyche.get_profile = AsyncMock(return_value=None)
        with pytest.raises(LookupError):
            await DeepeningService(psyche).add_interest_categories(db, user, ["love"], [])

    @pytest.mark.asyncio
    async def test_existing_categories_not_duplicated(self, user_factory, profile_factory, db):
        user = user_factory(interests=["career", "love", "finance", "health", "sports", "stocks"])
        profile = profile_factory(user)
        psyche = MagicMock()
        psyche.get_profile = AsyncMock(return_value=profile)
        psyche.save_onboarding_response = AsyncMock()

        result = await DeepeningService(psyche).add_interest_categories(db, user, ["love", "love"], [])

        assert user.interests == ["career", "love", "finance", "health", "sports", "stocks"]
        assert result["profile_completeness"] == 100
        assert profile.secondary_interests == []

    @pytest.mark.asyncio
    async def test_unknown_category_rejected(self, user_factory, profile_factory, db):
        user = user_factory(interests=["career"])
        psyche = MagicMock()
        psyche.get_profile = AsyncMock(return_value=profile_factory(user))
        with pytest.raises(ValueError, match="Unknown category: astrology"):
            await DeepeningService(psyche).add_interest_categories(db, user, ["astrology"], [])
        assert user.interests == ["career"]

    @pytest.mark.asyncio
    async def test_dismiss_prompt(self, deepening_service, user, db):
        await deepening_service.dismiss_prompt(db, user, NOW)
        assert user.deepening_prompted_at == NOW
        assert user.deepening_dismissed_count == 1

    @pytest.mark.asyncio
    async def test_increment_prediction_count(self, deepening_service, user, db):
        await deepening_service.increment_prediction_count(db, user)
        await deepening_service.increment_prediction_count(db, user)
        assert user.prediction_count == 2
