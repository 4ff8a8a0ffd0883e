from fastapi import APIRouter, Depends

from leadscore.api.deps import get_rule_cache
from leadscore.schemas.common import SuccessResponse
from leadscore.services.rule_cache import RuleSnapshotCache

router = APIRouter(prefix="/rules", tags=["Scoring Rules"])


@router.post("/cache/invalidate", response_model=SuccessResponse)
async def invalidate_rule_cache(
    rule_cache: RuleSnapshotCache = Depends(get_rule_cache),
) -> SuccessResponse:
    """Drop the cached rule snapshot so the next score reloads the rules."""
    await rule_cache.invalidate()
    return SuccessResponse()
