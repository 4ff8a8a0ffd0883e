"""Time-decayed activity momentum.

Momentum answers "how hot is this lead *right now*": each activity in the
last 14 days contributes ``5 * time_weight * intent_multiplier`` and a
burst of actions within one hour (a surge) boosts the sum by half.
"""

import math
from datetime import datetime
from typing import Iterable, Optional

from leadscore.core.clock import ensure_aware, utc_now
from leadscore.core.constants import (
    BASE_POINTS_PER_ACTIVITY,
    HIGH_INTENT_ACTIVITIES,
    INTENT_MULTIPLIERS,
    MEDIUM_INTENT_ACTIVITIES,
    MOMENTUM_HIGH_THRESHOLD,
    MOMENTUM_HORIZON_HOURS,
    MOMENTUM_LOW_THRESHOLD,
    MOMENTUM_MAX,
    MOMENTUM_MEDIUM_THRESHOLD,
    SURGE_ACTIONS,
    SURGE_BONUS_MULTIPLIER,
    SURGE_WINDOW_HOURS,
    TIME_DECAY_WINDOWS,
)
from leadscore.schemas.common import IntentLevel, MomentumLevel
from leadscore.schemas.scoring import ActivityRecord, Momentum

_SECONDS_PER_HOUR = 3600


def get_intent_level(activity_type: Optional[str]) -> IntentLevel:
    """Classify an activity by keyword match on its type."""
    text = (activity_type or "").lower()
    if any(keyword in text for keyword in HIGH_INTENT_ACTIVITIES):
        return IntentLevel.high
    if any(keyword in text for keyword in MEDIUM_INTENT_ACTIVITIES):
        return IntentLevel.medium
    return IntentLevel.low


def get_intent_multiplier(activity_type: Optional[str]) -> int:
    return INTENT_MULTIPLIERS[get_intent_level(activity_type)]


def get_time_weight(hours_ago: float) -> float:
    """Weight for an activity *hours_ago* old; 0.0 past the horizon.

    Only the first window is exclusive: an activity exactly 24h old
    already takes the 72h weight.  Later windows include their bound.
    """
    first_upper, first_weight = TIME_DECAY_WINDOWS[0]
    if hours_ago < first_upper:
        return first_weight
    for upper, weight in TIME_DECAY_WINDOWS[1:]:
        if hours_ago <= upper:
            return weight
    return 0.0


def get_momentum_level(score: int, surge_detected: bool = False) -> MomentumLevel:
    if surge_detected or score >= MOMENTUM_HIGH_THRESHOLD:
        return MomentumLevel.high
    if score >= MOMENTUM_MEDIUM_THRESHOLD:
        return MomentumLevel.medium
    if score >= MOMENTUM_LOW_THRESHOLD:
        return MomentumLevel.low
    return MomentumLevel.none


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def calculate_momentum(
    activities: Iterable[ActivityRecord], now: Optional[datetime] = None
) -> Momentum:
    now = ensure_aware(now) if now is not None else utc_now()

    weighted = 0.0
    last_1h = last_24h = last_72h = last_7d = 0
    last_high_intent: Optional[datetime] = None

    for activity in activities:
        timestamp = ensure_aware(activity.timestamp)
        hours_ago = max(0.0, (now - timestamp).total_seconds() / _SECONDS_PER_HOUR)
        if hours_ago > MOMENTUM_HORIZON_HOURS:
            continue

        if hours_ago <= SURGE_WINDOW_HOURS:
            last_1h += 1
        if hours_ago <= 24:
            last_24h += 1
        if hours_ago <= 72:
            last_72h += 1
        if hours_ago <= 168:
            last_7d += 1

        intent = get_intent_level(activity.activity_type)
        if intent is IntentLevel.high and (
            last_high_intent is None or timestamp > last_high_intent
        ):
            last_high_intent = timestamp

        weighted += (
            BASE_POINTS_PER_ACTIVITY * get_time_weight(hours_ago) * INTENT_MULTIPLIERS[intent]
        )

    surge = last_1h >= SURGE_ACTIONS
    if surge:
        weighted *= SURGE_BONUS_MULTIPLIER

    score = min(_round_half_up(weighted), MOMENTUM_MAX)
    return Momentum(
        score=score,
        level=get_momentum_level(score, surge),
        actions_last_1h=last_1h,
        actions_last_24h=last_24h,
        actions_last_72h=last_72h,
        actions_last_7d=last_7d,
        surge_detected=surge,
        last_high_intent_action=last_high_intent,
        weighted_score=round(weighted, 2),
    )
