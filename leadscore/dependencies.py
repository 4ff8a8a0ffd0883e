import logging
from typing import Callable

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from leadscore.core.config import settings
from leadscore.core.database import AsyncSessionLocal, get_db
from leadscore.services.lead_scoring import LeadScoringEngine
from leadscore.services.rule_cache import RuleSnapshotCache, make_rule_loader

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Repository factory functions (one per repository, each gets the shared db)
# ---------------------------------------------------------------------------


async def get_lead_repo(
    db: AsyncSession = Depends(get_db),
):
    from leadscore.repositories.lead_repository import LeadRepository

    return LeadRepository(db)


async def get_activity_repo(
    db: AsyncSession = Depends(get_db),
):
    from leadscore.repositories.activity_repository import ActivityRepository

    return ActivityRepository(db)


async def get_lead_score_repo(
    db: AsyncSession = Depends(get_db),
):
    from leadscore.repositories.lead_score_repository import LeadScoreRepository

    return LeadScoreRepository(db)


# ---------------------------------------------------------------------------
# Batch jobs open one session per lead, so they get the factory itself
# ---------------------------------------------------------------------------


async def get_session_factory() -> Callable[..., AsyncSession]:
    return AsyncSessionLocal


# ---------------------------------------------------------------------------
# Rule snapshot cache
# ---------------------------------------------------------------------------


def build_rule_cache(cache=None) -> RuleSnapshotCache:
    """Create the process-wide rule cache over ``AsyncSessionLocal``."""
    return RuleSnapshotCache(
        loader=make_rule_loader(AsyncSessionLocal),
        cache=cache,
        ttl=settings.RULES_CACHE_TTL,
    )


async def get_rule_cache(request: Request) -> RuleSnapshotCache:
    """Return the app-wide :class:`RuleSnapshotCache`, creating it lazily.

    The lifespan normally installs it on ``app.state``; the lazy path
    covers apps started without the lifespan (e.g. some test clients).
    """
    rule_cache = getattr(request.app.state, "rule_cache", None)
    if rule_cache is None:
        logger.info("Rule cache not initialised by lifespan, creating in-memory cache")
        rule_cache = build_rule_cache()
        request.app.state.rule_cache = rule_cache
    return rule_cache


# ---------------------------------------------------------------------------
# Service factory functions
# ---------------------------------------------------------------------------


async def get_scoring_engine() -> LeadScoringEngine:
    return LeadScoringEngine()


async def get_lead_score_service(
    rule_cache: RuleSnapshotCache = Depends(get_rule_cache),
    scoring_engine: LeadScoringEngine = Depends(get_scoring_engine),
):
    """Build a :class:`LeadScoreService` with injected dependencies."""
    from leadscore.services.lead_score_service import LeadScoreService

    return LeadScoreService(rule_cache=rule_cache, scoring_engine=scoring_engine)
