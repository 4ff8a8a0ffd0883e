from typing import Dict, FrozenSet, Tuple

from leadscore.schemas.common import (
    Classification,
    IntentLevel,
    MomentumLevel,
    ScoreTier,
)

# Category caps applied before the grand total is summed
DEMOGRAPHIC_MAX: int = 50
BEHAVIORAL_MAX: int = 100
TOTAL_MAX: int = DEMOGRAPHIC_MAX + BEHAVIORAL_MAX

# Descriptive employee-count buckets that carry no usable upper bound
EMPLOYEE_COUNT_BUCKETS: Dict[str, int] = {"1001+": 1500}

SUPPORTED_OPERATORS: FrozenSet[str] = frozenset(
    {
        "equals",
        "not_equals",
        "contains",
        "in",
        "not_in",
        "greater_than",
        "less_than",
        "between",
        "in_range",
        "days_since",
    }
)


# ---------------------------------------------------------------------------
# Momentum
# ---------------------------------------------------------------------------

# (upper bound in hours, weight).  The first bound is exclusive, the rest
# inclusive; the last is the retention horizon itself.
TIME_DECAY_WINDOWS: Tuple[Tuple[float, float], ...] = (
    (24, 1.0),
    (72, 0.7),
    (168, 0.4),
    (336, 0.2),
)
MOMENTUM_HORIZON_HOURS: float = 336  # 14 days

HIGH_INTENT_ACTIVITIES: Tuple[str, ...] = (
    "pricing_page",
    "demo_request",
    "contact_sales",
    "free_trial",
    "quote_request",
    "pricing",
    "demo",
    "trial",
    "quote",
)

MEDIUM_INTENT_ACTIVITIES: Tuple[str, ...] = (
    "product_page",
    "product_comparison",
    "case_study",
    "whitepaper",
    "whitepaper_download",
    "webinar",
    "ebook",
    "ebook_download",
    "video_watch",
    "video",
    "comparison",
    "product",
)

INTENT_MULTIPLIERS: Dict[IntentLevel, int] = {
    IntentLevel.high: 3,
    IntentLevel.medium: 2,
    IntentLevel.low: 1,
}

BASE_POINTS_PER_ACTIVITY: int = 5
MOMENTUM_MAX: int = 100

SURGE_ACTIONS: int = 3
SURGE_WINDOW_HOURS: float = 1
SURGE_BONUS_MULTIPLIER: float = 1.5

MOMENTUM_HIGH_THRESHOLD: int = 60
MOMENTUM_MEDIUM_THRESHOLD: int = 30
MOMENTUM_LOW_THRESHOLD: int = 10


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------

SCORE_TIER_HIGH: int = 60
SCORE_TIER_MEDIUM: int = 40

# High score with no momentum is deliberately *cold* while medium score with
# no momentum is *qualified*: recency outranks historical score.
CLASSIFICATION_MATRIX: Dict[Tuple[ScoreTier, MomentumLevel], Classification] = {
    (ScoreTier.high, MomentumLevel.high): Classification.hot,
    (ScoreTier.high, MomentumLevel.medium): Classification.warm,
    (ScoreTier.high, MomentumLevel.low): Classification.cold,
    (ScoreTier.high, MomentumLevel.none): Classification.cold,
    (ScoreTier.medium, MomentumLevel.high): Classification.hot,
    (ScoreTier.medium, MomentumLevel.medium): Classification.warm,
    (ScoreTier.medium, MomentumLevel.low): Classification.qualified,
    (ScoreTier.medium, MomentumLevel.none): Classification.qualified,
    (ScoreTier.low, MomentumLevel.high): Classification.warm,
    (ScoreTier.low, MomentumLevel.medium): Classification.qualified,
    (ScoreTier.low, MomentumLevel.low): Classification.cold,
    (ScoreTier.low, MomentumLevel.none): Classification.cold,
}

CLASSIFICATIONS: FrozenSet[str] = frozenset(c.value for c in Classification)
MOMENTUM_LEVELS: FrozenSet[str] = frozenset(m.value for m in MomentumLevel)

CLASSIFICATION_CHECK_CLAUSE: str = (
    f"score_classification IN ({', '.join(repr(c) for c in sorted(CLASSIFICATIONS))})"
)
MOMENTUM_LEVEL_CHECK_CLAUSE: str = (
    f"momentum_level IN ({', '.join(repr(m) for m in sorted(MOMENTUM_LEVELS))})"
)
