import logging
import math
from collections import Counter
from datetime import datetime
from typing import Iterable, List, Optional, Sequence, Tuple

from leadscore.core.clock import utc_now
from leadscore.core.constants import BEHAVIORAL_MAX, DEMOGRAPHIC_MAX
from leadscore.schemas.common import RuleCategory
from leadscore.schemas.scoring import (
    ActivityRecord,
    LeadSnapshot,
    MatchedRule,
    RuleSnapshot,
    ScoreBreakdown,
    ScoringRule,
    ScoringThreshold,
)
from leadscore.services.condition_evaluator import evaluate_condition
from leadscore.services.field_resolver import resolve_field

logger = logging.getLogger(__name__)


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def _ordered(rules: Iterable[ScoringRule]) -> List[ScoringRule]:
    return sorted((r for r in rules if r.is_active), key=lambda r: r.priority_order)


class LeadScoringEngine:
    """Apply a rule snapshot to a lead and its activity history.

    The engine is stateless and performs no I/O; every method is a pure
    function of its arguments.  Category sub-scores are capped
    independently:

        - demographic  sum of matching rule points, clamped to ``[0, 50]``
        - behavioral   per-rule repeat formula, summed, clamped to ``[0, 100]``
        - negative     sum of matching rule magnitudes, subtracted

    The total is ``max(0, demographic + behavioral + negative)``.
    """

    def score_demographic(
        self,
        lead: LeadSnapshot,
        rules: Sequence[ScoringRule],
        now: Optional[datetime] = None,
    ) -> Tuple[int, List[MatchedRule]]:
        score = 0
        matched: List[MatchedRule] = []
        for rule in _ordered(rules):
            value = resolve_field(lead, rule.condition_field or "")
            if evaluate_condition(value, rule.condition_operator, rule.condition_value, now):
                score += rule.points
                matched.append(
                    MatchedRule(
                        type=RuleCategory.demographic,
                        rule_name=rule.rule_name,
                        points=rule.points,
                    )
                )
        return _clamp(score, 0, DEMOGRAPHIC_MAX), matched

    def score_behavioral(
        self,
        activities: Iterable[ActivityRecord],
        rules: Sequence[ScoringRule],
    ) -> Tuple[int, List[MatchedRule]]:
        counts = Counter(
            (a.activity_type, a.activity_subtype or "") for a in activities
        )

        score = 0
        matched: List[MatchedRule] = []
        for rule in _ordered(rules):
            count = counts.get((rule.activity_type, rule.activity_subtype or ""), 0)
            if count == 0:
                continue
            points = self._behavioral_points(rule, count)
            score += points
            matched.append(
                MatchedRule(
                    type=RuleCategory.behavioral,
                    rule_name=rule.rule_name,
                    points=points,
                    count=count,
                )
            )
        # Cap after summation, not per rule
        return _clamp(score, 0, BEHAVIORAL_MAX), matched

    @staticmethod
    def _behavioral_points(rule: ScoringRule, count: int) -> int:
        effective = (
            min(count, rule.max_occurrences) if rule.max_occurrences is not None else count
        )
        multiplier = rule.repeat_multiplier or 1.0
        base = rule.points
        if effective > 1 and multiplier > 1:
            raw = base + base * (effective - 1) * multiplier
        else:
            raw = base * effective
        return math.floor(raw)

    def score_negative(
        self,
        lead: LeadSnapshot,
        rules: Sequence[ScoringRule],
        now: Optional[datetime] = None,
    ) -> Tuple[int, List[MatchedRule]]:
        score = 0
        matched: List[MatchedRule] = []
        for rule in _ordered(rules):
            value = resolve_field(lead, rule.condition_field or "")
            if evaluate_condition(value, rule.condition_operator, rule.condition_value, now):
                deduction = abs(rule.points)
                score -= deduction
                matched.append(
                    MatchedRule(
                        type=RuleCategory.negative,
                        rule_name=rule.rule_name,
                        points=-deduction,
                    )
                )
        return score, matched

    def calculate_breakdown(
        self,
        lead: LeadSnapshot,
        activities: Sequence[ActivityRecord],
        snapshot: RuleSnapshot,
        now: Optional[datetime] = None,
    ) -> Tuple[ScoreBreakdown, List[MatchedRule]]:
        """Score *lead* against every category of *snapshot*.

        Returns the breakdown and the matched-rule trace in category
        order (demographic, behavioral, negative).
        """
        now = now or utc_now()
        demographic, demo_trace = self.score_demographic(lead, snapshot.demographic, now)
        behavioral, behav_trace = self.score_behavioral(activities, snapshot.behavioral)
        negative, neg_trace = self.score_negative(lead, snapshot.negative, now)

        breakdown = ScoreBreakdown.from_parts(demographic, behavioral, negative)
        logger.debug(
            "Scored lead %s: demographic=%d behavioral=%d negative=%d total=%d",
            lead.lead_id,
            demographic,
            behavioral,
            negative,
            breakdown.total,
        )
        return breakdown, demo_trace + behav_trace + neg_trace

    @staticmethod
    def find_threshold(
        total: int, thresholds: Sequence[ScoringThreshold]
    ) -> Optional[ScoringThreshold]:
        """Return the threshold band containing *total*, highest band first."""
        for threshold in sorted(thresholds, key=lambda t: t.min_score, reverse=True):
            if threshold.min_score <= total <= threshold.max_score:
                return threshold
        return None
