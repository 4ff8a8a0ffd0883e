"""Response schemas for stored scores, history, and live analysis."""

from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from leadscore.schemas.common import Classification, MomentumLevel, SuccessResponse
from leadscore.schemas.lead_activity import ActivityOut
from leadscore.schemas.scoring import LeadScoreResult, MomentumAnalysis


class LeadScoreOut(BaseModel):
    """The persisted ``lead_scores`` row of one lead."""

    model_config = ConfigDict(from_attributes=True)

    lead_id: UUID
    demographic_score: int
    behavioral_score: int
    negative_score: int
    total_score: int
    score_classification: Classification
    classification_reason: Optional[str] = None
    matched_rules: List[Dict[str, Any]] = Field(default_factory=list)
    momentum_score: int
    momentum_level: MomentumLevel
    actions_last_24h: int
    actions_last_72h: int
    actions_last_7d: int
    surge_detected: bool
    last_high_intent_action: Optional[datetime] = None
    last_calculated_at: Optional[datetime] = None
    momentum_updated_at: Optional[datetime] = None


class ScoreHistoryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    history_id: UUID
    demographic_score: int
    behavioral_score: int
    negative_score: int
    total_score: int
    score_classification: str
    momentum_score: int
    momentum_level: str
    change_reason: Optional[str] = None
    triggered_by_activity_id: Optional[UUID] = None
    calculated_at: Optional[datetime] = None


class ScoreHistoryResponse(SuccessResponse):
    lead_id: UUID
    history: List[ScoreHistoryOut]


class RecalculateResponse(SuccessResponse):
    score: LeadScoreResult


class ActivityRecordedResponse(SuccessResponse):
    activity: ActivityOut
    score: LeadScoreResult


class MomentumResponse(SuccessResponse):
    lead_id: UUID
    analysis: MomentumAnalysis
