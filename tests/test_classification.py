from unittest.mock import patch

import pytest

from conftest import NOW, hours_ago
from leadscore.schemas.common import Classification, MomentumLevel, ScoreTier
from leadscore.schemas.scoring import ActivityRecord, Momentum
from leadscore.services.classification import (
    analyze_momentum,
    classify,
    generate_reason,
    score_tier,
)


def _activity(activity_type, subtype=None, hours=1.0):
    return ActivityRecord(
        activity_type=activity_type,
        activity_subtype=subtype,
        timestamp=hours_ago(hours),
    )


class TestScoreTier:
    @pytest.mark.parametrize(
        "total, tier",
        [
            (100, ScoreTier.high),
            (60, ScoreTier.high),
            (59, ScoreTier.medium),
            (40, ScoreTier.medium),
            (39, ScoreTier.low),
            (0, ScoreTier.low),
        ],
    )
    def test_boundaries(self, total, tier):
        assert score_tier(total) is tier


class TestClassify:
    """Static score tier crossed with momentum level."""

    @pytest.mark.parametrize(
        "total, level, expected",
        [
            (75, MomentumLevel.high, Classification.hot),
            (75, MomentumLevel.medium, Classification.warm),
            (75, MomentumLevel.low, Classification.cold),
            (75, MomentumLevel.none, Classification.cold),
            (45, MomentumLevel.high, Classification.hot),
            (45, MomentumLevel.medium, Classification.warm),
            (45, MomentumLevel.low, Classification.qualified),
            (45, MomentumLevel.none, Classification.qualified),
            (20, MomentumLevel.high, Classification.warm),
            (20, MomentumLevel.medium, Classification.qualified),
            (20, MomentumLevel.low, Classification.cold),
            (20, MomentumLevel.none, Classification.cold),
        ],
    )
    def test_matrix(self, total, level, expected):
        assert classify(total, Momentum(level=level)) is expected

    def test_high_score_without_momentum_is_cold(self):
        assert classify(95, Momentum()) is Classification.cold

    def test_missing_matrix_entry_defaults_to_cold(self):
        with patch("leadscore.services.classification.CLASSIFICATION_MATRIX", {}):
            assert classify(95, Momentum(level=MomentumLevel.high)) is Classification.cold


class TestGenerateReason:
    """First matching reason wins."""

    def test_surge(self):
        momentum = Momentum(surge_detected=True, actions_last_1h=4, level=MomentumLevel.high)
        assert generate_reason(momentum, Classification.hot, 50) == "Surge: 4 actions in the last hour"

    def test_high_with_high_intent(self):
        momentum = Momentum(
            level=MomentumLevel.high,
            actions_last_24h=5,
            last_high_intent_action=NOW,
        )
        assert generate_reason(momentum, Classification.hot, 70) == (
            "High intent: 5 actions today, recent pricing/demo activity"
        )

    def test_high_without_high_intent(self):
        momentum = Momentum(level=MomentumLevel.high, actions_last_24h=6)
        assert generate_reason(momentum, Classification.hot, 70) == "Active: 6 actions today"

    def test_medium(self):
        momentum = Momentum(level=MomentumLevel.medium, actions_last_72h=3)
        assert generate_reason(momentum, Classification.warm, 70) == (
            "Engaged: 3 actions in the last 3 days"
        )

    def test_some_activity(self):
        momentum = Momentum(level=MomentumLevel.low, actions_last_7d=2)
        assert generate_reason(momentum, Classification.cold, 20) == (
            "Some activity: 2 actions in the last 7 days"
        )

    def test_high_score_gone_quiet(self):
        assert generate_reason(Momentum(), Classification.cold, 75) == (
            "High score but no recent activity"
        )

    def test_no_recent_activity(self):
        assert generate_reason(Momentum(), Classification.qualified, 50) == "No recent activity"
        assert generate_reason(Momentum(), Classification.cold, 10) == "No recent activity"


class TestAnalyzeMomentum:
    """Full momentum + classification pass over real activity lists."""

    def test_single_pricing_view_one_hour_ago(self):
        analysis = analyze_momentum([_activity("pricing_page", hours=1)], 20, NOW)
        assert analysis.momentum.actions_last_1h == 1
        assert analysis.momentum.score == 15
        assert analysis.momentum.level is MomentumLevel.low
        assert analysis.classification is Classification.cold
        assert analysis.reason == "Some activity: 1 actions in the last 7 days"

    def test_high_score_lead_gone_cold(self):
        analysis = analyze_momentum([_activity("pricing_page", hours=500)], 85, NOW)
        assert analysis.classification is Classification.cold
        assert analysis.score_tier is ScoreTier.high
        assert analysis.reason == "High score but no recent activity"

    def test_surge_lifts_low_score_to_warm(self):
        activities = [
            _activity("demo_request", hours=h) for h in (0.2, 0.4, 0.6)
        ]
        analysis = analyze_momentum(activities, 35, NOW)
        assert analysis.momentum.surge_detected is True
        assert analysis.momentum.score == 68
        assert analysis.classification is Classification.warm
        assert analysis.reason == "Surge: 3 actions in the last hour"

    def test_engaged_high_score_is_warm(self):
        activities = [_activity("pricing_page", hours=h) for h in (10, 12)]
        analysis = analyze_momentum(activities, 65, NOW)
        assert analysis.momentum.score == 30
        assert analysis.momentum.level is MomentumLevel.medium
        assert analysis.classification is Classification.warm
        assert analysis.reason == "Engaged: 2 actions in the last 3 days"

    def test_sustained_high_intent_is_hot(self):
        activities = [_activity("pricing_page", hours=h) for h in (2, 3, 4, 5)]
        analysis = analyze_momentum(activities, 45, NOW)
        assert analysis.momentum.score == 60
        assert analysis.classification is Classification.hot
        assert analysis.reason == (
            "High intent: 4 actions today, recent pricing/demo activity"
        )

    def test_medium_intent_activity_without_high_intent(self):
        activities = [_activity("case_study", hours=h) for h in range(2, 8)]
        analysis = analyze_momentum(activities, 45, NOW)
        assert analysis.momentum.score == 60
        assert analysis.momentum.last_high_intent_action is None
        assert analysis.reason == "Active: 6 actions today"

    def test_total_score_echoed(self):
        analysis = analyze_momentum([], 42, NOW)
        assert analysis.total_score == 42
        assert analysis.score_tier is ScoreTier.medium
        assert analysis.classification is Classification.qualified
