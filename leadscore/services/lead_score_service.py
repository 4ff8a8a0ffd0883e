import logging
from datetime import datetime
from typing import Optional, Tuple
from uuid import UUID

from leadscore.core.clock import Clock, ensure_aware, utc_now
from leadscore.core.exceptions import (
    ActivityFetchError,
    LeadNotFoundError,
    ScoreWriteError,
)
from leadscore.models.activity import LeadActivity
from leadscore.repositories.activity_repository import ActivityRepository
from leadscore.repositories.lead_repository import LeadRepository
from leadscore.repositories.lead_score_repository import LeadScoreRepository
from leadscore.schemas.lead_activity import ActivityCreate
from leadscore.schemas.scoring import LeadScoreResult, MomentumAnalysis
from leadscore.services.classification import analyze_momentum
from leadscore.services.lead_scoring import LeadScoringEngine
from leadscore.services.rule_cache import RuleSnapshotCache

logger = logging.getLogger(__name__)


class LeadScoreService:
    """Orchestrates single-lead scoring: read, compute, persist.

    All database operations are delegated to the repositories passed to
    each call; the scoring itself is done by the pure engine functions.
    Every recalculation recomputes from the lead's activity history and
    overwrites the stored score.  Single-lead calls read the full history,
    since behavioral counts span it; bulk runs pass ``activity_limit``.
    """

    def __init__(
        self,
        rule_cache: RuleSnapshotCache,
        scoring_engine: Optional[LeadScoringEngine] = None,
        clock: Clock = utc_now,
    ) -> None:
        self._rule_cache = rule_cache
        self._engine = scoring_engine or LeadScoringEngine()
        self._clock = clock

    async def recalculate_lead(
        self,
        lead_id: UUID,
        lead_repo: LeadRepository,
        activity_repo: ActivityRepository,
        score_repo: LeadScoreRepository,
        *,
        change_reason: str = "Manual recalculation",
        triggered_by_activity_id: Optional[UUID] = None,
        persist: bool = True,
        activity_limit: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> LeadScoreResult:
        now = ensure_aware(now) if now is not None else self._clock()

        lead = await lead_repo.get_snapshot(lead_id)
        if lead is None:
            raise LeadNotFoundError(f"Lead {lead_id} not found")

        rules = await self._rule_cache.get_or_refresh()

        try:
            activities = await activity_repo.get_recent_activities(
                lead_id, limit=activity_limit
            )
        except Exception as exc:
            logger.warning("Failed to read activities for lead %s", lead_id)
            raise ActivityFetchError(
                f"Activities for lead {lead_id} could not be fetched"
            ) from exc

        breakdown, matched = self._engine.calculate_breakdown(lead, activities, rules, now)
        analysis = analyze_momentum(activities, breakdown.total, now)
        threshold = self._engine.find_threshold(breakdown.total, rules.thresholds)

        result = LeadScoreResult(
            lead_id=lead_id,
            breakdown=breakdown,
            matched_rules=matched,
            momentum=analysis.momentum,
            classification=analysis.classification,
            reason=analysis.reason,
            score_tier=analysis.score_tier,
            recommended_action=threshold.recommended_action if threshold else None,
            sla_response_hours=threshold.sla_response_hours if threshold else None,
            calculated_at=now,
        )

        if not persist:
            return result

        try:
            await score_repo.upsert_score(result)
            await score_repo.add_history(
                lead_id,
                demographic_score=breakdown.demographic,
                behavioral_score=breakdown.behavioral,
                negative_score=breakdown.negative,
                total_score=breakdown.total,
                score_classification=result.classification.value,
                momentum_score=result.momentum.score,
                momentum_level=result.momentum.level.value,
                change_reason=change_reason,
                calculated_at=now,
                triggered_by_activity_id=triggered_by_activity_id,
            )
            await score_repo.commit()
        except Exception as exc:
            await score_repo.rollback()
            logger.error("Failed to persist score for lead %s", lead_id, exc_info=True)
            raise ScoreWriteError(f"Score for lead {lead_id} could not be saved") from exc

        logger.info(
            "Lead %s scored %d (%s, momentum %d/%s)",
            lead_id,
            breakdown.total,
            result.classification.value,
            result.momentum.score,
            result.momentum.level.value,
        )
        return result.model_copy(update={"persisted": True})

    async def record_activity(
        self,
        lead_id: UUID,
        payload: ActivityCreate,
        lead_repo: LeadRepository,
        activity_repo: ActivityRepository,
        score_repo: LeadScoreRepository,
        now: Optional[datetime] = None,
    ) -> Tuple[LeadActivity, LeadScoreResult]:
        """Append an activity, then rescore the lead with it included."""
        now = ensure_aware(now) if now is not None else self._clock()

        if await lead_repo.get_by_id(lead_id) is None:
            raise LeadNotFoundError(f"Lead {lead_id} not found")

        timestamp = (
            ensure_aware(payload.activity_timestamp)
            if payload.activity_timestamp is not None
            else now
        )
        activity = await activity_repo.create(
            lead_id=lead_id,
            activity_type=payload.activity_type,
            activity_subtype=payload.activity_subtype,
            page_url=payload.page_url,
            activity_timestamp=timestamp,
        )
        await activity_repo.flush()
        await lead_repo.touch_last_activity(lead_id, timestamp)
        await activity_repo.commit()

        reason = f"Activity: {payload.activity_type}"
        if payload.activity_subtype:
            reason = f"{reason}/{payload.activity_subtype}"

        result = await self.recalculate_lead(
            lead_id,
            lead_repo,
            activity_repo,
            score_repo,
            change_reason=reason,
            triggered_by_activity_id=activity.activity_id,
            now=now,
        )
        return activity, result

    async def analyze_lead_momentum(
        self,
        lead_id: UUID,
        activity_repo: ActivityRepository,
        score_repo: LeadScoreRepository,
        now: Optional[datetime] = None,
    ) -> MomentumAnalysis:
        """Live momentum read against the stored total; nothing is written."""
        now = ensure_aware(now) if now is not None else self._clock()

        stored = await score_repo.get_by_lead_id(lead_id)
        if stored is None:
            raise LeadNotFoundError(f"No score recorded for lead {lead_id}")

        try:
            activities = await activity_repo.get_recent_activities(lead_id)
        except Exception as exc:
            raise ActivityFetchError(
                f"Activities for lead {lead_id} could not be fetched"
            ) from exc

        return analyze_momentum(activities, stored.total_score, now)
