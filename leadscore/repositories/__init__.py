"""Repository layer – all database access goes through here.

Repositories encapsulate SQLAlchemy queries so that the scoring
services only contain business logic.
"""

from leadscore.repositories.lead_repository import LeadRepository
from leadscore.repositories.activity_repository import ActivityRepository
from leadscore.repositories.scoring_rule_repository import ScoringRuleRepository
from leadscore.repositories.lead_score_repository import LeadScoreRepository

__all__ = [
    "LeadRepository",
    "ActivityRepository",
    "ScoringRuleRepository",
    "LeadScoreRepository",
]
