from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from leadscore.schemas.common import (
    Classification,
    MomentumLevel,
    RuleCategory,
    ScoreTier,
)


# ---------------------------------------------------------------------------
# Rule snapshot
# ---------------------------------------------------------------------------


class ScoringRule(BaseModel):
    """One demographic, behavioral, or negative scoring rule.

    Demographic and negative rules match through ``condition_*``;
    behavioral rules match on ``(activity_type, activity_subtype)``.
    ``points`` is always a magnitude; negative rules subtract it.
    """

    model_config = ConfigDict(frozen=True)

    rule_id: Optional[UUID] = None
    rule_name: str
    category: RuleCategory
    condition_field: Optional[str] = None
    condition_operator: Optional[str] = None
    condition_value: Optional[str] = None
    points: int
    priority_order: int = 0
    is_active: bool = True
    activity_type: Optional[str] = None
    activity_subtype: Optional[str] = None
    max_occurrences: Optional[int] = None
    repeat_multiplier: Optional[float] = None


class ScoringThreshold(BaseModel):
    model_config = ConfigDict(frozen=True)

    classification_name: str
    min_score: int
    max_score: int
    recommended_action: Optional[str] = None
    sla_response_hours: Optional[int] = None


class RuleSnapshot(BaseModel):
    """Immutable set of rules used for one evaluation pass."""

    model_config = ConfigDict(frozen=True)

    demographic: Tuple[ScoringRule, ...] = ()
    behavioral: Tuple[ScoringRule, ...] = ()
    negative: Tuple[ScoringRule, ...] = ()
    thresholds: Tuple[ScoringThreshold, ...] = ()

    @property
    def rule_count(self) -> int:
        return len(self.demographic) + len(self.behavioral) + len(self.negative)


# ---------------------------------------------------------------------------
# Engine inputs
# ---------------------------------------------------------------------------


class ActivityRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    activity_type: str
    activity_subtype: Optional[str] = None
    timestamp: datetime


class LeadSnapshot(BaseModel):
    """Flattened lead + contact + company attributes read by the rules.

    ``employee_count`` may be a raw integer or a descriptive bucket such
    as ``"50-249"`` or ``"1001+"``.  Anything not modelled explicitly
    goes into ``extra`` and is still reachable by field name.
    """

    lead_id: Optional[UUID] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    job_title: Optional[str] = None
    seniority_level: Optional[str] = None
    has_budget_authority: bool = False
    has_technical_authority: bool = False
    email_status: Optional[str] = None
    company_name: Optional[str] = None
    industry: Optional[str] = None
    employee_count: Optional[int | str] = None
    company_size: Optional[str] = None
    revenue_inr_crore: Optional[float | str] = None
    location_city: Optional[str] = None
    lead_source: Optional[str] = None
    last_activity_date: Optional[datetime] = None
    created_at: Optional[datetime] = None
    extra: Dict[str, Any] = Field(default_factory=dict)


# ---------------------------------------------------------------------------
# Engine outputs
# ---------------------------------------------------------------------------


class MatchedRule(BaseModel):
    type: RuleCategory
    rule_name: str
    points: int
    count: Optional[int] = None


class ScoreBreakdown(BaseModel):
    demographic: int = 0
    behavioral: int = 0
    negative: int = 0
    total: int = 0

    @classmethod
    def from_parts(
        cls, demographic: int, behavioral: int, negative: int
    ) -> "ScoreBreakdown":
        """Build a breakdown whose total is floored at zero."""
        return cls(
            demographic=demographic,
            behavioral=behavioral,
            negative=negative,
            total=max(0, demographic + behavioral + negative),
        )


class Momentum(BaseModel):
    score: int = 0
    level: MomentumLevel = MomentumLevel.none
    actions_last_1h: int = 0
    actions_last_24h: int = 0
    actions_last_72h: int = 0
    actions_last_7d: int = 0
    surge_detected: bool = False
    last_high_intent_action: Optional[datetime] = None
    weighted_score: float = 0.0


class MomentumAnalysis(BaseModel):
    momentum: Momentum
    classification: Classification
    reason: str
    score_tier: ScoreTier
    total_score: int


class LeadScoreResult(BaseModel):
    """Everything computed for one lead in one scoring pass."""

    lead_id: UUID
    breakdown: ScoreBreakdown
    matched_rules: List[MatchedRule] = Field(default_factory=list)
    momentum: Momentum
    classification: Classification
    reason: str
    score_tier: ScoreTier
    recommended_action: Optional[str] = None
    sla_response_hours: Optional[int] = None
    calculated_at: datetime
    persisted: bool = False
