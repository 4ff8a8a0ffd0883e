"""Pydantic schemas package – re-exports for convenience."""

from leadscore.schemas.common import (
    Classification,
    IntentLevel,
    MomentumLevel,
    RuleCategory,
    ScoreTier,
    SuccessResponse,
)
from leadscore.schemas.jobs import DecayJobResult, LeadMomentumUpdate
from leadscore.schemas.lead_activity import ActivityCreate, ActivityOut
from leadscore.schemas.lead_score import (
    ActivityRecordedResponse,
    LeadScoreOut,
    MomentumResponse,
    RecalculateResponse,
    ScoreHistoryOut,
    ScoreHistoryResponse,
)
from leadscore.schemas.scoring import (
    ActivityRecord,
    LeadScoreResult,
    LeadSnapshot,
    MatchedRule,
    Momentum,
    MomentumAnalysis,
    RuleSnapshot,
    ScoreBreakdown,
    ScoringRule,
    ScoringThreshold,
)

__all__ = [
    "Classification",
    "IntentLevel",
    "MomentumLevel",
    "RuleCategory",
    "ScoreTier",
    "SuccessResponse",
    "DecayJobResult",
    "LeadMomentumUpdate",
    "ActivityCreate",
    "ActivityOut",
    "ActivityRecordedResponse",
    "LeadScoreOut",
    "MomentumResponse",
    "RecalculateResponse",
    "ScoreHistoryOut",
    "ScoreHistoryResponse",
    "ActivityRecord",
    "LeadScoreResult",
    "LeadSnapshot",
    "MatchedRule",
    "Momentum",
    "MomentumAnalysis",
    "RuleSnapshot",
    "ScoreBreakdown",
    "ScoringRule",
    "ScoringThreshold",
]
