from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request

from leadscore.api.deps import (
    get_activity_repo,
    get_lead_repo,
    get_lead_score_repo,
    get_lead_score_service,
)
from leadscore.core.exceptions import LeadNotFoundError
from leadscore.core.rate_limit import limiter
from leadscore.repositories.activity_repository import ActivityRepository
from leadscore.repositories.lead_repository import LeadRepository
from leadscore.repositories.lead_score_repository import LeadScoreRepository
from leadscore.schemas.lead_activity import ActivityCreate, ActivityOut
from leadscore.schemas.lead_score import (
    ActivityRecordedResponse,
    LeadScoreOut,
    MomentumResponse,
    RecalculateResponse,
    ScoreHistoryOut,
    ScoreHistoryResponse,
)
from leadscore.services.lead_score_service import LeadScoreService

router = APIRouter(prefix="/leads", tags=["Lead Scores"])


@router.post(
    "/{lead_id}/activities",
    response_model=ActivityRecordedResponse,
    status_code=201,
)
@limiter.limit("120/minute")
async def record_activity(
    request: Request,
    lead_id: UUID,
    payload: ActivityCreate,
    service: LeadScoreService = Depends(get_lead_score_service),
    lead_repo: LeadRepository = Depends(get_lead_repo),
    activity_repo: ActivityRepository = Depends(get_activity_repo),
    score_repo: LeadScoreRepository = Depends(get_lead_score_repo),
) -> ActivityRecordedResponse:
    """Record a tracked activity and rescore the lead with it included."""
    activity, result = await service.record_activity(
        lead_id,
        payload,
        lead_repo=lead_repo,
        activity_repo=activity_repo,
        score_repo=score_repo,
    )
    return ActivityRecordedResponse(
        activity=ActivityOut.model_validate(activity), score=result
    )


@router.post("/{lead_id}/score/recalculate", response_model=RecalculateResponse)
@limiter.limit("10/minute")
async def recalculate_score(
    request: Request,
    lead_id: UUID,
    service: LeadScoreService = Depends(get_lead_score_service),
    lead_repo: LeadRepository = Depends(get_lead_repo),
    activity_repo: ActivityRepository = Depends(get_activity_repo),
    score_repo: LeadScoreRepository = Depends(get_lead_score_repo),
) -> RecalculateResponse:
    """Recompute and persist the lead's score from scratch.

    Rate-limited to 10 requests/minute per IP.
    """
    result = await service.recalculate_lead(
        lead_id,
        lead_repo,
        activity_repo,
        score_repo,
        change_reason="Manual recalculation",
    )
    return RecalculateResponse(score=result)


@router.get("/{lead_id}/score", response_model=LeadScoreOut)
async def get_score(
    lead_id: UUID,
    score_repo: LeadScoreRepository = Depends(get_lead_score_repo),
) -> LeadScoreOut:
    stored = await score_repo.get_by_lead_id(lead_id)
    if stored is None:
        raise LeadNotFoundError(f"No score recorded for lead {lead_id}")
    return LeadScoreOut.model_validate(stored)


@router.get("/{lead_id}/score/history", response_model=ScoreHistoryResponse)
async def get_score_history(
    lead_id: UUID,
    limit: int = Query(50, ge=1, le=500),
    score_repo: LeadScoreRepository = Depends(get_lead_score_repo),
) -> ScoreHistoryResponse:
    """Score history for a lead, newest first."""
    rows = await score_repo.list_history(lead_id, limit=limit)
    return ScoreHistoryResponse(
        lead_id=lead_id,
        history=[ScoreHistoryOut.model_validate(row) for row in rows],
    )


@router.get("/{lead_id}/momentum", response_model=MomentumResponse)
async def get_momentum(
    lead_id: UUID,
    service: LeadScoreService = Depends(get_lead_score_service),
    activity_repo: ActivityRepository = Depends(get_activity_repo),
    score_repo: LeadScoreRepository = Depends(get_lead_score_repo),
) -> MomentumResponse:
    """Live momentum against the stored total score; nothing is written."""
    analysis = await service.analyze_lead_momentum(lead_id, activity_repo, score_repo)
    return MomentumResponse(lead_id=lead_id, analysis=analysis)
