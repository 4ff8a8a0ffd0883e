from datetime import datetime
from typing import Iterable, Optional

from leadscore.core.constants import (
    CLASSIFICATION_MATRIX,
    SCORE_TIER_HIGH,
    SCORE_TIER_MEDIUM,
)
from leadscore.schemas.common import Classification, MomentumLevel, ScoreTier
from leadscore.schemas.scoring import ActivityRecord, Momentum, MomentumAnalysis
from leadscore.services.momentum import calculate_momentum


def score_tier(total_score: int) -> ScoreTier:
    if total_score >= SCORE_TIER_HIGH:
        return ScoreTier.high
    if total_score >= SCORE_TIER_MEDIUM:
        return ScoreTier.medium
    return ScoreTier.low


def classify(total_score: int, momentum: Momentum) -> Classification:
    """Combine the static score tier with the momentum level."""
    key = (score_tier(total_score), MomentumLevel(momentum.level))
    return CLASSIFICATION_MATRIX.get(key, Classification.cold)


def generate_reason(
    momentum: Momentum, classification: Classification, total_score: int
) -> str:
    """Human-readable explanation for *classification*; first match wins."""
    if momentum.surge_detected:
        return f"Surge: {momentum.actions_last_1h} actions in the last hour"
    if momentum.level == MomentumLevel.high:
        if momentum.last_high_intent_action is not None:
            return (
                f"High intent: {momentum.actions_last_24h} actions today, "
                "recent pricing/demo activity"
            )
        return f"Active: {momentum.actions_last_24h} actions today"
    if momentum.level == MomentumLevel.medium:
        return f"Engaged: {momentum.actions_last_72h} actions in the last 3 days"
    if momentum.actions_last_7d > 0:
        return f"Some activity: {momentum.actions_last_7d} actions in the last 7 days"
    if classification == Classification.cold and total_score >= SCORE_TIER_HIGH:
        return "High score but no recent activity"
    return "No recent activity"


def analyze_momentum(
    activities: Iterable[ActivityRecord],
    total_score: int,
    now: Optional[datetime] = None,
) -> MomentumAnalysis:
    momentum = calculate_momentum(activities, now)
    classification = classify(total_score, momentum)
    return MomentumAnalysis(
        momentum=momentum,
        classification=classification,
        reason=generate_reason(momentum, classification, total_score),
        score_tier=score_tier(total_score),
        total_score=total_score,
    )
