"""Unit tests for PsycheService — the three onboarding classifiers."""
import pytest

from app.models.psyche import OnboardingResponse, PsycheProfile
from app.services.psyche_catalog import ARCHETYPE_PERSONAS, PSYCHE_TYPES
from app.services.psyche_service import PsycheService


@pytest.fixture
def psyche_service():
    return PsycheService()


def _dims(risk, emotional, time_horizon, decision_style):
    return {
        "scores": {
            "risk": risk,
            "emotional": emotional,
            "time_horizon": time_horizon,
            "decision_style": decision_style,
        }
    }


def _weighted_payload(core_indicators, adaptive_indicators, risk=0.2):
    return {
        "nickname": "Sam",
        "primary_interest": "career",
        "core_responses": [
            {
                "question_id": f"core_{i}",
                "selected_option": "a",
                "indicators": indicators,
                "parameters": {"risk_appetite": risk},
            }
            for i, indicators in enumerate(core_indicators, start=1)
        ],
        "adaptive_responses": [
            {
                "question_id": f"adaptive_{i}",
                "selected_option": "b",
                "indicators": indicators,
                "domain_insight": f"insight {i}",
            }
            for i, indicators in enumerate(adaptive_indicators, start=1)
        ],
    }


class TestLegacyClassifier:
    """Tests for calculate_psyche_type."""

    def test_most_votes_wins(self, psyche_service):
        responses = [
            {"question_id": 1, "selected_option": "C"},
            {"question_id": 2, "selected_option": "B"},
        ]
        assert psyche_service.calculate_psyche_type(responses) == "risk_addict"

    def test_tie_resolves_to_catalog_order(self, psyche_service):
        # quiet_strategist, pattern_analyst and long_term_builder each get one vote
        responses = [{"question_id": 1, "selected_option": "A"}]
        assert psyche_service.calculate_psyche_type(responses) == "quiet_strategist"

    def test_no_answers_defaults(self, psyche_service):
        assert psyche_service.calculate_psyche_type([]) == "quiet_strategist"

    def test_unknown_question_and_option_ignored(self, psyche_service):
        responses = [
            {"question_id": 999, "selected_option": "A"},
            {"question_id": 3, "selected_option": "Z"},
            {"question_id": 3, "selected_option": "E"},
        ]
        assert psyche_service.calculate_psyche_type(responses) == "ambitious_builder"

    def test_mapped_types_for(self, psyche_service):
        assert psyche_service.mapped_types_for(2, "C") == ["intuitive_empath"]
        assert psyche_service.mapped_types_for(2, "Z") == []


class TestWeightedClassifier:
    """Tests for calculate_weighted_psyche_type and validation."""

    def test_dominant_type_and_parameters(self, psyche_service):
        data = _weighted_payload([["quiet_strategist"]] * 8, [["quiet_strategist"]] * 4)
        result = psyche_service.calculate_weighted_psyche_type(data)

        assert result["psyche_type"] == "quiet_strategist"
        assert result["confidence"] == pytest.approx(1.0)
        assert result["parameters"]["risk_appetite"] == 0.2
        # Parameters without samples fall back to the type defaults
        assert result["parameters"]["data_orientation"] == PSYCHE_TYPES["quiet_strategist"]["parameters"]["data_orientation"]
        assert result["domain_insights"] == ["insight 1", "insight 2", "insight 3", "insight 4"]

    def test_primary_indicator_outweighs_secondary(self, psyche_service):
        data = _weighted_payload(
            [["stabilizer", "risk_addict"]] * 8,
            [["stabilizer"]] * 4,
        )
        result = psyche_service.calculate_weighted_psyche_type(data)
        # stabilizer 8*3 + 4*2 = 32, risk_addict 8*1 = 8
        assert result["psyche_type"] == "stabilizer"
        assert result["confidence"] == pytest.approx(32 / 40)

    def test_low_confidence_falls_back(self, psyche_service):
        types = ["quiet_strategist", "stabilizer", "risk_addict", "intuitive_empath"]
        data = _weighted_payload(
            [[types[i % 4]] for i in range(8)],
            [[types[i % 4]] for i in range(4)],
        )
        result = psyche_service.calculate_weighted_psyche_type(data)
        assert result["confidence"] < 0.6
        assert result["psyche_type"] == "long_term_builder"

    def test_low_confidence_keeps_dominant_type_defaults(self, psyche_service):
        core = [["risk_addict"]] * 3 + [["stabilizer"]] * 2 + [["intuitive_empath"]] * 2 + [["quiet_strategist"]]
        adaptive = [["risk_addict"], ["stabilizer"], ["intuitive_empath"], ["quiet_strategist"]]
        result = psyche_service.calculate_weighted_psyche_type(_weighted_payload(core, adaptive))

        # risk_addict 3*3 + 2 = 11 of 32
        assert result["confidence"] == pytest.approx(11 / 32)
        assert result["psyche_type"] == "long_term_builder"
        risk_addict = PSYCHE_TYPES["risk_addict"]["parameters"]
        assert result["parameters"]["data_orientation"] == risk_addict["data_orientation"]
        assert result["parameters"]["change_aversion"] == risk_addict["change_aversion"]
        assert risk_addict["data_orientation"] != PSYCHE_TYPES["long_term_builder"]["parameters"]["data_orientation"]

    def test_tie_keeps_first_type_to_reach_maximum(self, psyche_service):
        # both score 16; risk_addict is scored first despite following stabilizer in the catalog
        core = [["risk_addict"]] * 4 + [["stabilizer"]] * 4
        adaptive = [["stabilizer"]] * 2 + [["risk_addict"]] * 2
        result = psyche_service.calculate_weighted_psyche_type(_weighted_payload(core, adaptive))

        assert result["confidence"] == pytest.approx(0.5)
        assert result["parameters"]["change_aversion"] == PSYCHE_TYPES["risk_addict"]["parameters"]["change_aversion"]
        assert PsycheService._strict_argmax({"stabilizer": 5, "risk_addict": 5}, "quiet_strategist") == "stabilizer"
        assert PsycheService._strict_argmax({}, "quiet_strategist") == "quiet_strategist"

    def test_parameters_are_averaged_and_rounded(self, psyche_service):
        data = _weighted_payload([["stabilizer"]] * 8, [["stabilizer"]] * 4)
        data["core_responses"][0]["parameters"] = {"risk_appetite": 0.9}
        result = psyche_service.calculate_weighted_psyche_type(data)
        assert result["parameters"]["risk_appetite"] == round((0.9 + 0.2 * 7) / 8, 2)

    def test_valid_payload(self, psyche_service):
        data = _weighted_payload([["stabilizer"]] * 8, [["stabilizer"]] * 4)
        assert psyche_service.validate_weighted_onboarding(data) is True

    def test_empty_parameters_dict_is_valid(self, psyche_service):
        data = _weighted_payload([["stabilizer"]] * 8, [["stabilizer"]] * 4)
        data["core_responses"][0]["parameters"] = {}
        assert psyche_service.validate_weighted_onboarding(data) is True

    @pytest.mark.parametrize(
        "mutate",
        [
            lambda d: d.pop("nickname"),
            lambda d: d["core_responses"].pop(),
            lambda d: d["adaptive_responses"].append(dict(d["adaptive_responses"][0])),
            lambda d: d["core_responses"][0].pop("parameters"),
            lambda d: d["adaptive_responses"][0].pop("domain_insight"),
            lambda d: d["core_responses"][0].update(indicators="stabilizer"),
        ],
    )
    def test_invalid_payloads(self, psyche_service, mutate):
        data = _weighted_payload([["stabilizer"]] * 8, [["stabilizer"]] * 4)
        mutate(data)
        assert psyche_service.validate_weighted_onboarding(data) is False

    def test_non_dict_is_invalid(self, psyche_service):
        assert psyche_service.validate_weighted_onboarding(["not", "a", "dict"]) is False


class TestArchetypeClassifier:
    """Tests for calculate_archetype."""

    def test_maverick(self, psyche_service):
        result = psyche_service.calculate_archetype([_dims(3, 3, 1, 3)] * 12, "career")
        assert result["archetype"]["name"] == "The Maverick"
        assert result["archetype"]["db_type"] == "risk_addict"
        assert result["scores"]["risk"] == pytest.approx(1.0)

    def test_strategist(self, psyche_service):
        result = psyche_service.calculate_archetype([_dims(1, 1, 3, 1)] * 12)
        assert result["archetype"]["name"] == "The Strategist"

    def test_balanced_middle_is_pioneer(self, psyche_service):
        # 24 / 36 sits just above the high threshold on every axis
        result = psyche_service.calculate_archetype([_dims(2, 2, 2, 2)] * 12)
        assert result["archetype"]["name"] == "The Pioneer"

    def test_no_answers_is_pragmatist(self, psyche_service):
        result = psyche_service.calculate_archetype([])
        assert result["archetype"]["name"] == "The Pragmatist"

    def test_unmatched_profile_is_adapter(self, psyche_service):
        result = psyche_service.calculate_archetype([_dims(2, 1, 2, 2)] * 12)
        assert result["archetype"]["name"] == "The Adapter"

    def test_partial_answers_still_divide_by_full_set(self, psyche_service):
        result = psyche_service.calculate_archetype([_dims(3, 3, 3, 3)] * 6)
        assert result["scores"]["risk"] == pytest.approx(0.5)

    def test_category_insights_fall_back_to_generic(self, psyche_service):
        insights = psyche_service.generate_category_insights("The Maverick", "career")
        assert insights[0].startswith("You thrive in dynamic")
        generic = psyche_service.generate_category_insights("The Maverick", "astrology")
        assert "Your unique approach brings valuable perspective to this area." in generic


class TestRadarTraits:

    def test_missing_traits_default_to_half(self, psyche_service):
        traits = psyche_service.radar_traits({"risk_appetite": 0.9})
        assert traits["risk_appetite"] == 0.9
        assert traits["emotional_reactivity"] == 0.5
        assert len(traits) == 5

    def test_none_parameters(self, psyche_service):
        assert set(psyche_service.radar_traits(None).values()) == {0.5}


class TestPersistence:
    """Tests for the profile and response writers."""

    @pytest.mark.asyncio
    async def test_save_profile_creates_and_completes_onboarding(self, psyche_service, user, db, result_of):
        user.onboarding_completed = False
        db.execute.return_value = result_of(None)

        data = await psyche_service.save_psyche_profile(db, user, "stabilizer")

        assert data["display_name"] == PSYCHE_TYPES["stabilizer"]["display_name"]
        assert user.onboarding_completed is True
        added = db.add.call_args[0][0]
        assert isinstance(added, PsycheProfile)
        assert added.psyche_type == "stabilizer"
        assert added.psyche_parameters == PSYCHE_TYPES["stabilizer"]["parameters"]

    @pytest.mark.asyncio
    async def test_save_profile_updates_existing(self, psyche_service, user, db, result_of, profile_factory):
        existing = profile_factory(user)
        db.execute.return_value = result_of(existing)

        await psyche_service.save_psyche_profile(db, user, "risk_addict")

        db.add.assert_not_called()
        assert existing.psyche_type == "risk_addict"

    @pytest.mark.asyncio
    async def test_save_profile_rejects_unknown_type(self, psyche_service, user, db):
        with pytest.raises(ValueError, match="Invalid psyche type"):
            await psyche_service.save_psyche_profile(db, user, "wizard")

    @pytest.mark.asyncio
    async def test_apply_persona(self, psyche_service, user, db, result_of):
        db.execute.return_value = result_of(None)
        persona = await psyche_service.apply_persona(db, user, "guardian")
        added = db.add.call_args[0][0]
        assert added.display_name == persona["display_name"] == ARCHETYPE_PERSONAS["guardian"]["display_name"]

    @pytest.mark.asyncio
    async def test_apply_unknown_persona(self, psyche_service, user, db):
        with pytest.raises(ValueError):
            await psyche_service.apply_persona(db, user, "nobody")

    @pytest.mark.asyncio
    async def test_update_parameters_requires_profile(self, psyche_service, user, db, result_of):
        db.execute.return_value = result_of(None)
        with pytest.raises(LookupError):
            await psyche_service.update_parameters(db, user, {"risk_appetite": 0.4})

    @pytest.mark.asyncio
    async def test_save_onboarding_response(self, psyche_service, user, db):
        row = await psyche_service.save_onboarding_response(
            db, user, 4, "Question?", "B", "Answer", ["ambitious_builder", "risk_addict"]
        )
        assert isinstance(row, OnboardingResponse)
        assert row.mapped_psyche_types == ["ambitious_builder", "risk_addict"]
        db.add.assert_called_once_with(row)
