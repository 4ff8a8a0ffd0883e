import asyncio
import logging
import time
from datetime import datetime
from typing import Awaitable, Callable, List, NamedTuple, Optional, TypeVar
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from leadscore.core.clock import ensure_aware, utc_now
from leadscore.core.config import settings
from leadscore.core.exceptions import ScoreSourceUnavailableError
from leadscore.repositories.activity_repository import ActivityRepository
from leadscore.repositories.lead_repository import LeadRepository
from leadscore.repositories.lead_score_repository import LeadScoreRepository
from leadscore.schemas.jobs import DecayJobResult, LeadMomentumUpdate
from leadscore.services.classification import analyze_momentum
from leadscore.services.lead_score_service import LeadScoreService
from leadscore.services.rule_cache import RuleSnapshotCache

logger = logging.getLogger(__name__)

T = TypeVar("T")

DECAY_CHANGE_REASON = "Momentum decay"
FULL_RECALC_CHANGE_REASON = "Full recalculation"


class _Candidate(NamedTuple):
    """Plain copy of a stored score row, safe to use after its session closes."""

    lead_id: UUID
    demographic_score: int
    behavioral_score: int
    negative_score: int
    total_score: int
    momentum_score: int
    score_classification: str


async def _sweep(
    fetch_page: Callable[[Optional[UUID], int], Awaitable[List[T]]],
    key: Callable[[T], UUID],
    handle: Callable[[T], Awaitable[None]],
    *,
    batch_size: int,
    concurrency: int,
    batch_delay: float,
    stop_event: Optional[asyncio.Event],
) -> None:
    """Drive *handle* over every keyset page returned by *fetch_page*.

    At most *concurrency* handlers run at once.  The stop flag is checked
    before each lead and each page.
    """
    semaphore = asyncio.Semaphore(max(1, concurrency))

    def stopped() -> bool:
        return stop_event is not None and stop_event.is_set()

    async def guarded(item: T) -> None:
        if stopped():
            return
        async with semaphore:
            if stopped():
                return
            await handle(item)

    after: Optional[UUID] = None
    while not stopped():
        try:
            page = await fetch_page(after, batch_size)
        except Exception as exc:
            logger.error("Failed to fetch sweep candidates", exc_info=True)
            raise ScoreSourceUnavailableError() from exc
        if not page:
            break

        await asyncio.gather(*(guarded(item) for item in page))

        after = key(page[-1])
        if len(page) < batch_size:
            break
        if batch_delay > 0:
            await asyncio.sleep(batch_delay)


async def run_momentum_decay_job(
    session_factory: Callable[..., AsyncSession],
    *,
    dry_run: bool = False,
    batch_size: Optional[int] = None,
    concurrency: Optional[int] = None,
    min_momentum: Optional[int] = None,
    activity_limit: Optional[int] = None,
    batch_delay: Optional[float] = None,
    now: Optional[datetime] = None,
    stop_event: Optional[asyncio.Event] = None,
) -> DecayJobResult:
    """Re-run momentum and classification for every lead with stored momentum.

    Each lead is read, recomputed against *now* and written back in its
    own session, and only when its momentum score or classification
    changed.  Per-lead failures are logged and counted; the sweep itself
    raises only if the candidate list cannot be read.

    Parameters:
        session_factory: An async context-manager callable that yields
            an ``AsyncSession`` (e.g. ``AsyncSessionLocal``).
    """
    started = time.monotonic()
    now = ensure_aware(now) if now is not None else utc_now()
    batch_size = batch_size or settings.DECAY_BATCH_SIZE
    min_momentum = settings.MIN_MOMENTUM_TO_CHECK if min_momentum is None else min_momentum
    activity_limit = activity_limit or settings.ACTIVITY_FETCH_LIMIT
    result = DecayJobResult(dry_run=dry_run)

    async def fetch_page(after: Optional[UUID], limit: int) -> List[_Candidate]:
        async with session_factory() as session:
            rows = await LeadScoreRepository(session).list_momentum_candidates(
                min_momentum, after, limit
            )
            return [
                _Candidate(
                    lead_id=row.lead_id,
                    demographic_score=row.demographic_score,
                    behavioral_score=row.behavioral_score,
                    negative_score=row.negative_score,
                    total_score=row.total_score,
                    momentum_score=row.momentum_score,
                    score_classification=row.score_classification,
                )
                for row in rows
            ]

    async def handle(candidate: _Candidate) -> None:
        try:
            update = await _refresh_lead_momentum(
                session_factory, candidate, now, dry_run, activity_limit
            )
        except Exception:
            logger.warning(
                "Failed to refresh momentum for lead %s",
                candidate.lead_id,
                exc_info=True,
            )
            result.errors_encountered += 1
            return

        result.total_processed += 1
        if update is None:
            return
        result.lead_updates.append(update)
        if update.old_classification != update.new_classification:
            result.classifications_changed += 1
            logger.info(
                "Lead %s: %s -> %s (momentum %d -> %d)",
                update.lead_id,
                candidate.score_classification,
                update.new_classification.value,
                update.old_momentum,
                update.new_momentum,
            )
        if not dry_run:
            result.leads_updated += 1

    logger.info("Starting momentum decay sweep (dry_run=%s)", dry_run)
    await _sweep(
        fetch_page,
        lambda c: c.lead_id,
        handle,
        batch_size=batch_size,
        concurrency=concurrency or settings.DECAY_CONCURRENCY,
        batch_delay=(
            settings.DECAY_BATCH_DELAY_SECONDS if batch_delay is None else batch_delay
        ),
        stop_event=stop_event,
    )

    result.duration_seconds = round(time.monotonic() - started, 2)
    logger.info(
        "Momentum decay sweep finished in %.2fs: processed=%d changed=%d updated=%d errors=%d",
        result.duration_seconds,
        result.total_processed,
        result.classifications_changed,
        result.leads_updated,
        result.errors_encountered,
    )
    return result


async def _refresh_lead_momentum(
    session_factory: Callable[..., AsyncSession],
    candidate: _Candidate,
    now: datetime,
    dry_run: bool,
    activity_limit: int,
) -> Optional[LeadMomentumUpdate]:
    async with session_factory() as session:
        activity_repo = ActivityRepository(session)
        score_repo = LeadScoreRepository(session)

        activities = await activity_repo.get_recent_activities(
            candidate.lead_id, limit=activity_limit
        )
        analysis = analyze_momentum(activities, candidate.total_score, now)
        momentum = analysis.momentum

        if (
            momentum.score == candidate.momentum_score
            and analysis.classification.value == candidate.score_classification
        ):
            return None

        update = LeadMomentumUpdate(
            lead_id=candidate.lead_id,
            old_classification=candidate.score_classification,
            new_classification=analysis.classification,
            old_momentum=candidate.momentum_score,
            new_momentum=momentum.score,
            reason=analysis.reason,
        )
        if dry_run:
            return update

        try:
            await score_repo.update_momentum(candidate.lead_id, analysis, now)
            await score_repo.add_history(
                candidate.lead_id,
                demographic_score=candidate.demographic_score,
                behavioral_score=candidate.behavioral_score,
                negative_score=candidate.negative_score,
                total_score=candidate.total_score,
                score_classification=analysis.classification.value,
                momentum_score=momentum.score,
                momentum_level=momentum.level.value,
                change_reason=DECAY_CHANGE_REASON,
                calculated_at=now,
            )
            await score_repo.commit()
        except Exception:
            await score_repo.rollback()
            raise
        return update


async def recalculate_all_leads(
    session_factory: Callable[..., AsyncSession],
    rule_cache: RuleSnapshotCache,
    *,
    dry_run: bool = False,
    batch_size: Optional[int] = None,
    concurrency: Optional[int] = None,
    batch_delay: Optional[float] = None,
    activity_limit: Optional[int] = None,
    now: Optional[datetime] = None,
    stop_event: Optional[asyncio.Event] = None,
) -> DecayJobResult:
    """Run the full single-lead recalculation for every lead.

    Used to backfill scores after a rule change or on first deployment.
    Leads without a stored score are included.  Each lead is scored from
    its most recent *activity_limit* activities, as in the decay sweep.
    """
    started = time.monotonic()
    now = ensure_aware(now) if now is not None else utc_now()
    batch_size = batch_size or settings.FULL_RECALC_BATCH_SIZE
    activity_limit = activity_limit or settings.ACTIVITY_FETCH_LIMIT
    service = LeadScoreService(rule_cache)
    result = DecayJobResult(dry_run=dry_run)

    async def fetch_page(after: Optional[UUID], limit: int) -> List[UUID]:
        async with session_factory() as session:
            return await LeadRepository(session).list_ids_after(after, limit)

    async def handle(lead_id: UUID) -> None:
        try:
            async with session_factory() as session:
                score_repo = LeadScoreRepository(session)
                stored = await score_repo.get_by_lead_id(lead_id)
                old_classification = stored.score_classification if stored else None
                old_momentum = stored.momentum_score if stored else 0

                scored = await service.recalculate_lead(
                    lead_id,
                    LeadRepository(session),
                    ActivityRepository(session),
                    score_repo,
                    change_reason=FULL_RECALC_CHANGE_REASON,
                    persist=not dry_run,
                    activity_limit=activity_limit,
                    now=now,
                )
        except Exception:
            logger.warning("Failed to recalculate lead %s", lead_id, exc_info=True)
            result.errors_encountered += 1
            return

        result.total_processed += 1
        if not dry_run:
            result.leads_updated += 1
        classification_changed = old_classification != scored.classification.value
        if classification_changed:
            result.classifications_changed += 1
        if classification_changed or old_momentum != scored.momentum.score:
            result.lead_updates.append(
                LeadMomentumUpdate(
                    lead_id=lead_id,
                    old_classification=old_classification,
                    new_classification=scored.classification,
                    old_momentum=old_momentum,
                    new_momentum=scored.momentum.score,
                    reason=scored.reason,
                )
            )

    logger.info("Starting full lead recalculation (dry_run=%s)", dry_run)
    await _sweep(
        fetch_page,
        lambda lead_id: lead_id,
        handle,
        batch_size=batch_size,
        concurrency=concurrency or settings.DECAY_CONCURRENCY,
        batch_delay=(
            settings.DECAY_BATCH_DELAY_SECONDS if batch_delay is None else batch_delay
        ),
        stop_event=stop_event,
    )

    result.duration_seconds = round(time.monotonic() - started, 2)
    logger.info(
        "Full recalculation finished in %.2fs: processed=%d updated=%d errors=%d",
        result.duration_seconds,
        result.total_processed,
        result.leads_updated,
        result.errors_encountered,
    )
    return result


async def start_momentum_decay_loop(
    session_factory: Callable[..., AsyncSession],
    interval_seconds: Optional[int] = None,
    stop_event: Optional[asyncio.Event] = None,
) -> None:
    """Infinite loop that runs the decay sweep on a fixed interval.

    Parameters:
        session_factory: An async context-manager callable that yields
            an ``AsyncSession``.
        interval_seconds: Pause between sweeps; defaults to
            ``MOMENTUM_DECAY_INTERVAL_SECONDS``.
        stop_event: Set to finish the current lead and leave the loop.
    """
    interval = interval_seconds or settings.MOMENTUM_DECAY_INTERVAL_SECONDS
    logger.info("Momentum decay background task started (interval=%ds)", interval)
    while stop_event is None or not stop_event.is_set():
        try:
            result = await run_momentum_decay_job(session_factory, stop_event=stop_event)
            if result.leads_updated:
                logger.info(
                    "Momentum decay cycle complete: %d lead(s) updated",
                    result.leads_updated,
                )
        except Exception:
            logger.error("Momentum decay cycle failed", exc_info=True)

        if stop_event is None:
            await asyncio.sleep(interval)
            continue
        try:
            await asyncio.wait_for(stop_event.wait(), timeout=interval)
        except asyncio.TimeoutError:
            pass
