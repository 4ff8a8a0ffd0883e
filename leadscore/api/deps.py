"""API-layer dependency functions.

Re-exports all dependency factories from ``leadscore.dependencies`` so that
endpoint modules only need to import from ``leadscore.api.deps``.
"""

from leadscore.dependencies import (
    # Repository factories
    get_lead_repo,
    get_activity_repo,
    get_lead_score_repo,
    get_session_factory,
    # Service factories
    get_rule_cache,
    get_scoring_engine,
    get_lead_score_service,
)

__all__ = [
    "get_lead_repo",
    "get_activity_repo",
    "get_lead_score_repo",
    "get_session_factory",
    "get_rule_cache",
    "get_scoring_engine",
    "get_lead_score_service",
]
