from typing import Callable

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from leadscore.api.deps import get_rule_cache, get_session_factory
from leadscore.core.rate_limit import limiter
from leadscore.schemas.jobs import DecayJobResult
from leadscore.services.momentum_decay import (
    recalculate_all_leads,
    run_momentum_decay_job,
)
from leadscore.services.rule_cache import RuleSnapshotCache

router = APIRouter(prefix="/jobs", tags=["Jobs"])


@router.post("/momentum-decay", response_model=DecayJobResult)
@limiter.limit("5/minute")
async def trigger_momentum_decay(
    request: Request,
    dry_run: bool = Query(False),
    session_factory: Callable[..., AsyncSession] = Depends(get_session_factory),
) -> DecayJobResult:
    """Run one momentum decay sweep now and return its summary."""
    return await run_momentum_decay_job(session_factory, dry_run=dry_run)


@router.post("/recalculate-all", response_model=DecayJobResult)
@limiter.limit("2/minute")
async def trigger_full_recalculation(
    request: Request,
    dry_run: bool = Query(False),
    session_factory: Callable[..., AsyncSession] = Depends(get_session_factory),
    rule_cache: RuleSnapshotCache = Depends(get_rule_cache),
) -> DecayJobResult:
    """Recalculate every lead's score and momentum from scratch."""
    return await recalculate_all_leads(session_factory, rule_cache, dry_run=dry_run)
