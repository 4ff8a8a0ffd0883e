import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Dict, Tuple, Type

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from leadscore.api.v1.router import router as api_v1_router
from leadscore.core.cache import CacheService, create_redis_client
from leadscore.core.config import settings as app_settings
from leadscore.core.database import AsyncSessionLocal
from leadscore.core.exceptions import (
    ActivityFetchError,
    LeadNotFoundError,
    LeadScoringError,
    RuleSourceUnavailableError,
    ScoreSourceUnavailableError,
    ScoreWriteError,
)
from leadscore.core.rate_limit import limiter
from leadscore.dependencies import build_rule_cache
from leadscore.services.momentum_decay import start_momentum_decay_loop

logging.basicConfig(level=app_settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

SHUTDOWN_GRACE_SECONDS = 10


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage the rule cache and the periodic momentum decay task."""
    redis_client = await create_redis_client(app_settings.REDIS_URL)
    app.state.rule_cache = build_rule_cache(CacheService(redis_client))

    stop_decay = asyncio.Event()
    decay_task = None
    if app_settings.MOMENTUM_DECAY_ENABLED:
        decay_task = asyncio.create_task(
            start_momentum_decay_loop(AsyncSessionLocal, stop_event=stop_decay)
        )
        logger.info("Background momentum decay task scheduled")
    yield
    # Let the in-flight lead finish, then give up on the sweep
    if decay_task is not None:
        stop_decay.set()
        try:
            await asyncio.wait_for(decay_task, timeout=SHUTDOWN_GRACE_SECONDS)
        except asyncio.TimeoutError:
            logger.warning("Momentum decay task did not stop in time, cancelled")
        logger.info("Background momentum decay task stopped")
    await app.state.rule_cache.close()


app = FastAPI(
    title="Lead Priority Scoring Service",
    description="Rule-based lead scoring with time-decayed momentum classification",
    version="0.1.0",
    lifespan=lifespan,
)

# slowapi looks the limiter up on app.state
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# CORS restricted to configured origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=app_settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_v1_router)


# exception type -> (status, error type, log level)
_DOMAIN_ERRORS: Dict[Type[LeadScoringError], Tuple[int, str, int]] = {
    LeadNotFoundError: (404, "lead_not_found", logging.WARNING),
    ActivityFetchError: (503, "activity_fetch_failed", logging.ERROR),
    RuleSourceUnavailableError: (503, "rule_source_unavailable", logging.ERROR),
    ScoreSourceUnavailableError: (503, "score_source_unavailable", logging.ERROR),
    ScoreWriteError: (500, "score_write_failed", logging.ERROR),
}


async def domain_error_handler(request: Request, exc: LeadScoringError):
    status_code, error_type, level = _DOMAIN_ERRORS[type(exc)]
    logger.log(level, "%s on %s: %s", error_type, request.url.path, exc.detail)
    return JSONResponse(
        status_code=status_code,
        content={"detail": exc.detail, "type": error_type},
    )


for _exc_class in _DOMAIN_ERRORS:
    app.add_exception_handler(_exc_class, domain_error_handler)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.warning("Request validation error: %s", exc.errors())
    return JSONResponse(
        status_code=422,
        content={
            "detail": "Request validation failed",
            "errors": jsonable_encoder(exc.errors()),
            "type": "validation_error",
        },
    )


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception):
    """Return a generic 500 so stack traces never reach the client."""
    logger.error(
        "Unhandled exception on %s %s: %s",
        request.method,
        request.url.path,
        exc,
        exc_info=True,
    )
    return JSONResponse(
        status_code=500,
        content={
            "detail": "An unexpected internal error occurred. Please try again later.",
            "type": "internal_server_error",
        },
    )
