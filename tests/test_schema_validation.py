import pytest
from pydantic import ValidationError

from leadscore.schemas.common import MomentumLevel
from leadscore.schemas.jobs import DecayJobResult
from leadscore.schemas.lead_activity import ActivityCreate
from leadscore.schemas.scoring import LeadScoreResult, ScoreBreakdown


class TestActivityCreate:
    """Activity payload normalisation and validation."""

    def test_type_and_subtype_lowercased_and_stripped(self):
        payload = ActivityCreate(activity_type="  Page_View ", activity_subtype=" PRICING")
        assert payload.activity_type == "page_view"
        assert payload.activity_subtype == "pricing"

    def test_blank_subtype_becomes_none(self):
        assert ActivityCreate(activity_type="page_view", activity_subtype="  ").activity_subtype is None

    @pytest.mark.parametrize("value", ["", "   "])
    def test_blank_type_rejected(self, value):
        with pytest.raises(ValidationError):
            ActivityCreate(activity_type=value)

    def test_type_required(self):
        with pytest.raises(ValidationError):
            ActivityCreate()

    def test_overlong_type_rejected(self):
        with pytest.raises(ValidationError):
            ActivityCreate(activity_type="x" * 101)

    def test_timestamp_optional(self):
        payload = ActivityCreate(activity_type="email_engagement")
        assert payload.activity_timestamp is None
        assert payload.page_url is None


class TestScoreBreakdown:
    def test_total_is_sum(self):
        assert ScoreBreakdown.from_parts(30, 20, -10).total == 40

    def test_total_floored_at_zero(self):
        breakdown = ScoreBreakdown.from_parts(5, 0, -60)
        assert breakdown.total == 0
        assert breakdown.negative == -60


class TestResultModels:
    def test_job_result_defaults(self):
        result = DecayJobResult()
        assert result.total_processed == 0
        assert result.lead_updates == []
        assert result.dry_run is False

    def test_lead_score_result_requires_classification(self):
        with pytest.raises(ValidationError):
            LeadScoreResult(
                lead_id="00000000-0000-0000-0000-000000000001",
                breakdown=ScoreBreakdown(),
                momentum={"score": 0, "level": MomentumLevel.none},
                classification="lukewarm",
                reason="",
                score_tier="low",
                calculated_at="2026-03-02T12:00:00Z",
            )
