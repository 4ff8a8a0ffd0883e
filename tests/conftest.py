from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, AsyncGenerator
from unittest.mock import AsyncMock, MagicMock

if TYPE_CHECKING:
    from leadscore.core.cache import CacheService

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from leadscore.core.rate_limit import limiter
from leadscore.main import app

# Fixed reference time for every time-dependent test
NOW = datetime(2026, 3, 2, 12, 0, tzinfo=timezone.utc)


def hours_ago(hours: float) -> datetime:
    return NOW - timedelta(hours=hours)


@pytest.fixture(autouse=True)
def reset_rate_limits():
    """Start every test with fresh slowapi counters."""
    limiter.reset()
    yield
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def async_client() -> AsyncGenerator[AsyncClient, None]:
    """Yield an ``httpx.AsyncClient`` wired to the FastAPI app."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def mock_redis() -> AsyncMock:
    """Return an ``AsyncMock`` that behaves like ``redis.asyncio.Redis``."""
    redis = AsyncMock()
    redis.get = AsyncMock(return_value=None)
    redis.set = AsyncMock()
    redis.setex = AsyncMock()
    redis.delete = AsyncMock()
    redis.ping = AsyncMock()
    redis.aclose = AsyncMock()
    return redis


@pytest.fixture
def mock_cache(mock_redis) -> "CacheService":
    """Return a ``CacheService`` backed by the mock Redis client."""
    from leadscore.core.cache import CacheService

    return CacheService(redis_client=mock_redis)


def make_session_factory(session=None):
    """Return ``(factory, session)`` where ``factory()`` is an async context manager."""
    session = session or AsyncMock()
    session.__aenter__ = AsyncMock(return_value=session)
    session.__aexit__ = AsyncMock(return_value=False)
    return MagicMock(return_value=session), session


def default_rule_snapshot():
    """Build a ``RuleSnapshot`` from the shipped default rule set."""
    from leadscore.core.default_scoring_rules import (
        DEFAULT_BEHAVIORAL_RULES,
        DEFAULT_DEMOGRAPHIC_RULES,
        DEFAULT_NEGATIVE_RULES,
        DEFAULT_SCORING_THRESHOLDS,
    )
    from leadscore.schemas.common import RuleCategory
    from leadscore.schemas.scoring import RuleSnapshot, ScoringRule, ScoringThreshold

    return RuleSnapshot(
        demographic=tuple(
            ScoringRule(
                rule_name=r["rule_name"],
                category=RuleCategory.demographic,
                condition_field=r["condition_field"],
                condition_operator=r["condition_operator"],
                condition_value=r["condition_value"],
                points=r["points_awarded"],
                priority_order=r["priority_order"],
            )
            for r in DEFAULT_DEMOGRAPHIC_RULES
        ),
        behavioral=tuple(
            ScoringRule(
                rule_name=r["rule_name"],
                category=RuleCategory.behavioral,
                activity_type=r["activity_type"],
                activity_subtype=r["activity_subtype"],
                points=r["base_points"],
                repeat_multiplier=r["repeat_multiplier"],
                max_occurrences=r["max_occurrences"],
            )
            for r in DEFAULT_BEHAVIORAL_RULES
        ),
        negative=tuple(
            ScoringRule(
                rule_name=r["rule_name"],
                category=RuleCategory.negative,
                condition_field=r["condition_field"],
                condition_operator=r["condition_operator"],
                condition_value=r["condition_value"],
                points=r["points_deducted"],
            )
            for r in DEFAULT_NEGATIVE_RULES
        ),
        thresholds=tuple(ScoringThreshold(**t) for t in DEFAULT_SCORING_THRESHOLDS),
    )
