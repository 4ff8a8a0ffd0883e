from leadscore.models.base import Base
from leadscore.models.lead import Company, Contact, Lead
from leadscore.models.activity import LeadActivity
from leadscore.models.scoring_rule import (
    BehavioralRule,
    DemographicRule,
    NegativeRule,
    ScoringThreshold,
)
from leadscore.models.lead_score import LeadScore, ScoreHistory

# Import event listeners to register them
from leadscore.models import listeners  # noqa: F401

__all__ = [
    "Base",
    "Company",
    "Contact",
    "Lead",
    "LeadActivity",
    "DemographicRule",
    "BehavioralRule",
    "NegativeRule",
    "ScoringThreshold",
    "LeadScore",
    "ScoreHistory",
]
