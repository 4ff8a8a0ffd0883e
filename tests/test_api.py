import uuid
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from httpx import ASGITransport, AsyncClient

from conftest import NOW
from leadscore.api.deps import (
    get_activity_repo,
    get_lead_repo,
    get_lead_score_repo,
    get_lead_score_service,
    get_rule_cache,
    get_session_factory,
)
from leadscore.core.database import get_db
from leadscore.core.exceptions import (
    ActivityFetchError,
    LeadNotFoundError,
    RuleSourceUnavailableError,
    ScoreSourceUnavailableError,
    ScoreWriteError,
)
from leadscore.main import app
from leadscore.schemas.common import Classification, MomentumLevel, ScoreTier
from leadscore.schemas.jobs import DecayJobResult
from leadscore.schemas.scoring import (
    LeadScoreResult,
    Momentum,
    MomentumAnalysis,
    ScoreBreakdown,
)

LEAD_ID = uuid.UUID("00000000-0000-0000-0000-0000000000b2")
BASE = f"/api/v1/leads/{LEAD_ID}"


def _result(persisted=True):
    return LeadScoreResult(
        lead_id=LEAD_ID,
        breakdown=ScoreBreakdown.from_parts(50, 58, 0),
        momentum=Momentum(score=45, level=MomentumLevel.medium, actions_last_72h=3),
        classification=Classification.warm,
        reason="Engaged: 3 actions in the last 3 days",
        score_tier=ScoreTier.high,
        recommended_action="Immediate contact by senior sales rep.",
        sla_response_hours=2,
        calculated_at=NOW,
        persisted=persisted,
    )


def _stored_score(**overrides):
    row = dict(
        lead_id=LEAD_ID,
        demographic_score=50,
        behavioral_score=58,
        negative_score=0,
        total_score=108,
        score_classification="warm",
        classification_reason="Engaged: 3 actions in the last 3 days",
        matched_rules=[{"type": "demographic", "rule_name": "Technology/Software", "points": 12}],
        momentum_score=45,
        momentum_level="medium",
        actions_last_24h=3,
        actions_last_72h=3,
        actions_last_7d=3,
        surge_detected=False,
        last_high_intent_action=NOW,
        last_calculated_at=NOW,
        momentum_updated_at=NOW,
    )
    row.update(overrides)
    return SimpleNamespace(**row)


@pytest.fixture
def service():
    svc = MagicMock()
    svc.recalculate_lead = AsyncMock(return_value=_result())
    svc.record_activity = AsyncMock()
    svc.analyze_lead_momentum = AsyncMock()
    return svc


@pytest.fixture
def score_repo():
    repo = AsyncMock()
    repo.get_by_lead_id = AsyncMock(return_value=_stored_score())
    repo.list_history = AsyncMock(return_value=[])
    return repo


@pytest.fixture
def rule_cache():
    cache = AsyncMock()
    cache.invalidate = AsyncMock()
    return cache


@pytest.fixture(autouse=True)
def overrides(service, score_repo, rule_cache):
    app.dependency_overrides[get_lead_score_service] = lambda: service
    app.dependency_overrides[get_lead_repo] = lambda: AsyncMock()
    app.dependency_overrides[get_activity_repo] = lambda: AsyncMock()
    app.dependency_overrides[get_lead_score_repo] = lambda: score_repo
    app.dependency_overrides[get_rule_cache] = lambda: rule_cache
    yield


class TestHealth:
    @pytest.mark.asyncio
    async def test_healthy(self, async_client):
        session = AsyncMock()

        async def db():
            yield session

        app.dependency_overrides[get_db] = db
        resp = await async_client.get("/api/v1/health")

        assert resp.status_code == 200
        assert resp.json() == {"status": "ok", "database": "ok"}

    @pytest.mark.asyncio
    async def test_database_down_is_degraded(self, async_client):
        session = AsyncMock()
        session.execute.side_effect = ConnectionRefusedError()

        async def db():
            yield session

        app.dependency_overrides[get_db] = db
        resp = await async_client.get("/api/v1/health")

        assert resp.status_code == 200
        assert resp.json() == {"status": "degraded", "database": "unavailable"}

    @pytest.mark.asyncio
    async def test_cors_preflight(self, async_client):
        resp = await async_client.options(
            "/api/v1/health",
            headers={
                "Origin": "http://localhost:3000",
                "Access-Control-Request-Method": "GET",
            },
        )
        assert resp.headers["access-control-allow-origin"] == "http://localhost:3000"


class TestScoreEndpoints:
    """Stored score, recalculation, and history."""

    @pytest.mark.asyncio
    async def test_get_score(self, async_client):
        resp = await async_client.get(f"{BASE}/score")

        assert resp.status_code == 200
        body = resp.json()
        assert body["total_score"] == 108
        assert body["score_classification"] == "warm"
        assert body["momentum_level"] == "medium"
        assert body["matched_rules"][0]["rule_name"] == "Technology/Software"

    @pytest.mark.asyncio
    async def test_get_score_for_unscored_lead(self, async_client, score_repo):
        score_repo.get_by_lead_id.return_value = None

        resp = await async_client.get(f"{BASE}/score")

        assert resp.status_code == 404
        assert resp.json()["type"] == "lead_not_found"

    @pytest.mark.asyncio
    async def test_invalid_lead_id(self, async_client):
        resp = await async_client.get("/api/v1/leads/not-a-uuid/score")

        assert resp.status_code == 422
        assert resp.json()["type"] == "validation_error"

    @pytest.mark.asyncio
    async def test_recalculate(self, async_client, service):
        resp = await async_client.post(f"{BASE}/score/recalculate")

        assert resp.status_code == 200
        body = resp.json()
        assert body["success"] is True
        assert body["score"]["breakdown"]["total"] == 108
        assert body["score"]["classification"] == "warm"
        assert body["score"]["persisted"] is True
        assert service.recalculate_lead.call_args.args[0] == LEAD_ID
        assert service.recalculate_lead.call_args.kwargs["change_reason"] == (
            "Manual recalculation"
        )

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error, status, error_type",
        [
            (LeadNotFoundError(), 404, "lead_not_found"),
            (ActivityFetchError(), 503, "activity_fetch_failed"),
            (RuleSourceUnavailableError(), 503, "rule_source_unavailable"),
            (ScoreWriteError(), 500, "score_write_failed"),
        ],
    )
    async def test_recalculate_error_mapping(
        self, async_client, service, error, status, error_type
    ):
        service.recalculate_lead.side_effect = error

        resp = await async_client.post(f"{BASE}/score/recalculate")

        assert resp.status_code == status
        assert resp.json()["type"] == error_type
        assert resp.json()["detail"] == error.detail

    @pytest.mark.asyncio
    async def test_recalculate_rate_limited(self, async_client):
        for _ in range(10):
            resp = await async_client.post(f"{BASE}/score/recalculate")
            assert resp.status_code == 200

        resp = await async_client.post(f"{BASE}/score/recalculate")
        assert resp.status_code == 429

    @pytest.mark.asyncio
    async def test_history(self, async_client, score_repo):
        score_repo.list_history.return_value = [
            SimpleNamespace(
                history_id=uuid.uuid4(),
                demographic_score=50,
                behavioral_score=58,
                negative_score=0,
                total_score=108,
                score_classification="warm",
                momentum_score=45,
                momentum_level="medium",
                change_reason="Manual recalculation",
                triggered_by_activity_id=None,
                calculated_at=NOW,
            )
        ]

        resp = await async_client.get(f"{BASE}/score/history", params={"limit": 5})

        assert resp.status_code == 200
        body = resp.json()
        assert body["lead_id"] == str(LEAD_ID)
        assert body["history"][0]["change_reason"] == "Manual recalculation"
        score_repo.list_history.assert_awaited_once_with(LEAD_ID, limit=5)

    @pytest.mark.asyncio
    async def test_history_limit_bounds(self, async_client):
        resp = await async_client.get(f"{BASE}/score/history", params={"limit": 0})
        assert resp.status_code == 422

    @pytest.mark.asyncio
    async def test_unhandled_error_is_generic_500(self, service):
        service.recalculate_lead.side_effect = RuntimeError("secret stack detail")
        transport = ASGITransport(app=app, raise_app_exceptions=False)

        async with AsyncClient(transport=transport, base_url="http://test") as client:
            resp = await client.post(f"{BASE}/score/recalculate")

        assert resp.status_code == 500
        assert resp.json()["type"] == "internal_server_error"
        assert "secret" not in resp.text


class TestActivityEndpoint:
    @pytest.mark.asyncio
    async def test_record_activity(self, async_client, service):
        activity = SimpleNamespace(
            activity_id=uuid.uuid4(),
            lead_id=LEAD_ID,
            activity_type="page_view",
            activity_subtype="pricing",
            activity_timestamp=NOW,
        )
        service.record_activity.return_value = (activity, _result())

        resp = await async_client.post(
            f"{BASE}/activities",
            json={"activity_type": "Page_View", "activity_subtype": "Pricing"},
        )

        assert resp.status_code == 201
        body = resp.json()
        assert body["activity"]["activity_subtype"] == "pricing"
        assert body["score"]["classification"] == "warm"
        payload = service.record_activity.call_args.args[1]
        assert payload.activity_type == "page_view"

    @pytest.mark.asyncio
    async def test_blank_activity_type_rejected(self, async_client, service):
        resp = await async_client.post(f"{BASE}/activities", json={"activity_type": "   "})

        assert resp.status_code == 422
        assert resp.json()["type"] == "validation_error"
        service.record_activity.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unknown_lead(self, async_client, service):
        service.record_activity.side_effect = LeadNotFoundError(f"Lead {LEAD_ID} not found")

        resp = await async_client.post(f"{BASE}/activities", json={"activity_type": "page_view"})

        assert resp.status_code == 404


class TestMomentumEndpoint:
    @pytest.mark.asyncio
    async def test_live_momentum(self, async_client, service):
        service.analyze_lead_momentum.return_value = MomentumAnalysis(
            momentum=Momentum(score=23, level=MomentumLevel.high, surge_detected=True, actions_last_1h=3),
            classification=Classification.warm,
            reason="Surge: 3 actions in the last hour",
            score_tier=ScoreTier.low,
            total_score=35,
        )

        resp = await async_client.get(f"{BASE}/momentum")

        assert resp.status_code == 200
        analysis = resp.json()["analysis"]
        assert analysis["momentum"]["surge_detected"] is True
        assert analysis["reason"] == "Surge: 3 actions in the last hour"


class TestJobEndpoints:
    @pytest.mark.asyncio
    async def test_momentum_decay_dry_run(self, async_client):
        factory = MagicMock()
        app.dependency_overrides[get_session_factory] = lambda: factory
        summary = DecayJobResult(total_processed=5, classifications_changed=2, dry_run=True)

        with patch(
            "leadscore.api.v1.endpoints.jobs.run_momentum_decay_job",
            AsyncMock(return_value=summary),
        ) as job:
            resp = await async_client.post(
                "/api/v1/jobs/momentum-decay", params={"dry_run": "true"}
            )

        assert resp.status_code == 200
        assert resp.json()["classifications_changed"] == 2
        job.assert_awaited_once_with(factory, dry_run=True)

    @pytest.mark.asyncio
    async def test_momentum_decay_source_down(self, async_client):
        app.dependency_overrides[get_session_factory] = lambda: MagicMock()

        with patch(
            "leadscore.api.v1.endpoints.jobs.run_momentum_decay_job",
            AsyncMock(side_effect=ScoreSourceUnavailableError()),
        ):
            resp = await async_client.post("/api/v1/jobs/momentum-decay")

        assert resp.status_code == 503
        assert resp.json()["type"] == "score_source_unavailable"

    @pytest.mark.asyncio
    async def test_recalculate_all(self, async_client, rule_cache):
        factory = MagicMock()
        app.dependency_overrides[get_session_factory] = lambda: factory

        with patch(
            "leadscore.api.v1.endpoints.jobs.recalculate_all_leads",
            AsyncMock(return_value=DecayJobResult(total_processed=7, leads_updated=7)),
        ) as job:
            resp = await async_client.post("/api/v1/jobs/recalculate-all")

        assert resp.status_code == 200
        assert resp.json()["leads_updated"] == 7
        job.assert_awaited_once_with(factory, rule_cache, dry_run=False)


class TestRuleEndpoints:
    @pytest.mark.asyncio
    async def test_invalidate_cache(self, async_client, rule_cache):
        resp = await async_client.post("/api/v1/rules/cache/invalidate")

        assert resp.status_code == 200
        assert resp.json() == {"success": True}
        rule_cache.invalidate.assert_awaited_once()
