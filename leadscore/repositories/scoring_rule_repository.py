import logging

from sqlalchemy import func, select

from leadscore.models.scoring_rule import (
    BehavioralRule,
    DemographicRule,
    NegativeRule,
    ScoringThreshold,
)
from leadscore.repositories.base import BaseRepository
from leadscore.schemas.common import RuleCategory
from leadscore.schemas.scoring import (
    RuleSnapshot,
    ScoringRule,
    ScoringThreshold as ThresholdValue,
)

logger = logging.getLogger(__name__)


class ScoringRuleRepository(BaseRepository):
    """Encapsulates queries against the four scoring rule tables."""

    async def get_rule_snapshot(self) -> RuleSnapshot:
        """Load every active rule and all thresholds as one frozen snapshot."""
        demographic = await self._db.execute(
            select(DemographicRule)
            .where(DemographicRule.is_active.is_(True))
            .order_by(DemographicRule.priority_order, DemographicRule.rule_name)
        )
        behavioral = await self._db.execute(
            select(BehavioralRule)
            .where(BehavioralRule.is_active.is_(True))
            .order_by(BehavioralRule.rule_name)
        )
        negative = await self._db.execute(
            select(NegativeRule)
            .where(NegativeRule.is_active.is_(True))
            .order_by(NegativeRule.rule_name)
        )
        thresholds = await self._db.execute(
            select(ScoringThreshold).order_by(ScoringThreshold.min_score.desc())
        )

        return RuleSnapshot(
            demographic=tuple(
                ScoringRule(
                    rule_id=r.rule_id,
                    rule_name=r.rule_name,
                    category=RuleCategory.demographic,
                    condition_field=r.condition_field,
                    condition_operator=r.condition_operator,
                    condition_value=r.condition_value,
                    points=r.points_awarded,
                    priority_order=r.priority_order,
                )
                for r in demographic.scalars().all()
            ),
            behavioral=tuple(
                ScoringRule(
                    rule_id=r.rule_id,
                    rule_name=r.rule_name,
                    category=RuleCategory.behavioral,
                    activity_type=r.activity_type,
                    activity_subtype=r.activity_subtype,
                    points=r.base_points,
                    max_occurrences=r.max_occurrences,
                    repeat_multiplier=(
                        float(r.repeat_multiplier)
                        if r.repeat_multiplier is not None
                        else None
                    ),
                )
                for r in behavioral.scalars().all()
            ),
            negative=tuple(
                ScoringRule(
                    rule_id=r.rule_id,
                    rule_name=r.rule_name,
                    category=RuleCategory.negative,
                    condition_field=r.condition_field,
                    condition_operator=r.condition_operator,
                    condition_value=r.condition_value,
                    points=r.points_deducted,
                )
                for r in negative.scalars().all()
            ),
            thresholds=tuple(
                ThresholdValue(
                    classification_name=t.classification_name,
                    min_score=t.min_score,
                    max_score=t.max_score,
                    recommended_action=t.recommended_action,
                    sla_response_hours=t.sla_response_hours,
                )
                for t in thresholds.scalars().all()
            ),
        )

    async def seed_if_empty(self) -> None:
        """Insert the default rule set when no demographic rules exist.

        The canonical rule definitions live in
        ``leadscore.core.default_scoring_rules``.
        """
        from leadscore.core.default_scoring_rules import (
            DEFAULT_BEHAVIORAL_RULES,
            DEFAULT_DEMOGRAPHIC_RULES,
            DEFAULT_NEGATIVE_RULES,
            DEFAULT_SCORING_THRESHOLDS,
        )

        count_result = await self._db.execute(
            select(func.count()).select_from(DemographicRule)
        )
        if count_result.scalar():
            return  # rules already present

        logger.info("Scoring rule tables are empty, seeding defaults")
        for data in DEFAULT_DEMOGRAPHIC_RULES:
            self._db.add(DemographicRule(**data))
        for data in DEFAULT_BEHAVIORAL_RULES:
            self._db.add(BehavioralRule(**data))
        for data in DEFAULT_NEGATIVE_RULES:
            self._db.add(NegativeRule(**data))
        for data in DEFAULT_SCORING_THRESHOLDS:
            self._db.add(ScoringThreshold(**data))
        await self._db.flush()
        logger.info(
            "Seeded %d default scoring rules",
            len(DEFAULT_DEMOGRAPHIC_RULES)
            + len(DEFAULT_BEHAVIORAL_RULES)
            + len(DEFAULT_NEGATIVE_RULES),
        )
