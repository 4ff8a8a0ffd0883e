from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from leadscore.schemas.common import Classification


class LeadMomentumUpdate(BaseModel):
    """One lead whose stored momentum or classification changed in a sweep."""

    lead_id: UUID
    old_classification: Optional[Classification] = None
    new_classification: Classification
    old_momentum: int
    new_momentum: int
    reason: str


class DecayJobResult(BaseModel):
    total_processed: int = 0
    classifications_changed: int = 0
    leads_updated: int = 0
    errors_encountered: int = 0
    dry_run: bool = False
    lead_updates: List[LeadMomentumUpdate] = Field(default_factory=list)
    duration_seconds: float = 0.0
