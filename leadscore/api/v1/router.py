from fastapi import APIRouter

from leadscore.api.v1.endpoints import health, jobs, leads, rules

router = APIRouter(prefix="/api/v1")

router.include_router(leads.router)
router.include_router(jobs.router)
router.include_router(rules.router)
router.include_router(health.router)
