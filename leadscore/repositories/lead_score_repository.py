from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.dialects.postgresql import insert

from leadscore.models.lead_score import LeadScore, ScoreHistory
from leadscore.repositories.base import BaseRepository
from leadscore.schemas.scoring import LeadScoreResult, MomentumAnalysis


class LeadScoreRepository(BaseRepository):
    """Encapsulates queries against ``lead_scores`` and ``score_history``."""

    async def get_by_lead_id(self, lead_id: UUID) -> Optional[LeadScore]:
        result = await self._db.execute(
            select(LeadScore).where(LeadScore.lead_id == lead_id)
        )
        return result.scalar_one_or_none()

    async def list_momentum_candidates(
        self,
        min_momentum: int,
        after_lead_id: Optional[UUID],
        limit: int,
    ) -> List[LeadScore]:
        """Keyset page of score rows with ``momentum_score >= min_momentum``.

        Pagination is on ``lead_id`` so rows whose momentum drops during
        a sweep do not shift later pages.
        """
        query = (
            select(LeadScore)
            .where(LeadScore.momentum_score >= min_momentum)
            .order_by(LeadScore.lead_id)
            .limit(limit)
        )
        if after_lead_id is not None:
            query = query.where(LeadScore.lead_id > after_lead_id)
        result = await self._db.execute(query)
        return list(result.scalars().all())

    async def upsert_score(self, result: LeadScoreResult) -> None:
        """Insert or overwrite the single score row for ``result.lead_id``."""
        momentum = result.momentum
        values = dict(
            lead_id=result.lead_id,
            demographic_score=result.breakdown.demographic,
            behavioral_score=result.breakdown.behavioral,
            negative_score=result.breakdown.negative,
            total_score=result.breakdown.total,
            score_classification=result.classification.value,
            classification_reason=result.reason,
            matched_rules=[m.model_dump(mode="json") for m in result.matched_rules],
            momentum_score=momentum.score,
            momentum_level=momentum.level.value,
            actions_last_24h=momentum.actions_last_24h,
            actions_last_72h=momentum.actions_last_72h,
            actions_last_7d=momentum.actions_last_7d,
            surge_detected=momentum.surge_detected,
            last_high_intent_action=momentum.last_high_intent_action,
            last_calculated_at=result.calculated_at,
            momentum_updated_at=result.calculated_at,
            updated_at=result.calculated_at,
        )
        stmt = insert(LeadScore).values(**values)
        stmt = stmt.on_conflict_do_update(
            index_elements=[LeadScore.lead_id],
            set_={k: v for k, v in values.items() if k != "lead_id"},
        )
        await self._db.execute(stmt)

    async def update_momentum(
        self, lead_id: UUID, analysis: MomentumAnalysis, now: datetime
    ) -> None:
        """Overwrite only the momentum and classification columns."""
        momentum = analysis.momentum
        await self._db.execute(
            update(LeadScore)
            .where(LeadScore.lead_id == lead_id)
            .values(
                momentum_score=momentum.score,
                momentum_level=momentum.level.value,
                actions_last_24h=momentum.actions_last_24h,
                actions_last_72h=momentum.actions_last_72h,
                actions_last_7d=momentum.actions_last_7d,
                surge_detected=momentum.surge_detected,
                last_high_intent_action=momentum.last_high_intent_action,
                score_classification=analysis.classification.value,
                classification_reason=analysis.reason,
                momentum_updated_at=now,
                updated_at=now,
            )
        )

    async def add_history(
        self,
        lead_id: UUID,
        *,
        demographic_score: int,
        behavioral_score: int,
        negative_score: int,
        total_score: int,
        score_classification: str,
        momentum_score: int,
        momentum_level: str,
        change_reason: str,
        calculated_at: datetime,
        triggered_by_activity_id: Optional[UUID] = None,
    ) -> ScoreHistory:
        """Append one history record; history is never updated or deleted."""
        entry = ScoreHistory(
            lead_id=lead_id,
            demographic_score=demographic_score,
            behavioral_score=behavioral_score,
            negative_score=negative_score,
            total_score=total_score,
            score_classification=score_classification,
            momentum_score=momentum_score,
            momentum_level=momentum_level,
            change_reason=change_reason[:255],
            triggered_by_activity_id=triggered_by_activity_id,
            calculated_at=calculated_at,
        )
        self._db.add(entry)
        return entry

    async def list_history(self, lead_id: UUID, limit: int = 50) -> List[ScoreHistory]:
        """Return history records for a lead, newest first."""
        result = await self._db.execute(
            select(ScoreHistory)
            .where(ScoreHistory.lead_id == lead_id)
            .order_by(ScoreHistory.calculated_at.desc())
            .limit(limit)
        )
        return list(result.scalars().all())
