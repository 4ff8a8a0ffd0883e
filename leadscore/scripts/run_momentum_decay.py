"""Run the momentum decay sweep (or a full recalculation) once.

Usage:
    python -m leadscore.scripts.run_momentum_decay [--dry-run] [--full]

Exit codes:
    0  sweep completed (per-lead errors are reported, not fatal)
    1  the sweep could not start (database or rule source unreachable)
"""

import argparse
import asyncio
import logging
import sys

from leadscore.core.cache import CacheService, create_redis_client
from leadscore.core.config import settings
from leadscore.core.database import AsyncSessionLocal, engine
from leadscore.core.exceptions import LeadScoringError
from leadscore.dependencies import build_rule_cache
from leadscore.schemas.jobs import DecayJobResult
from leadscore.services.momentum_decay import (
    recalculate_all_leads,
    run_momentum_decay_job,
)

logger = logging.getLogger("leadscore.scripts.run_momentum_decay")


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Recompute lead momentum and classification."
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="compute changes without writing them",
    )
    parser.add_argument(
        "--full",
        action="store_true",
        help="recalculate every lead's full score instead of the decay sweep",
    )
    return parser.parse_args(argv)


async def run(dry_run: bool, full: bool) -> DecayJobResult:
    if not full:
        return await run_momentum_decay_job(AsyncSessionLocal, dry_run=dry_run)

    redis_client = await create_redis_client(settings.REDIS_URL)
    rule_cache = build_rule_cache(CacheService(redis_client))
    try:
        return await recalculate_all_leads(AsyncSessionLocal, rule_cache, dry_run=dry_run)
    finally:
        await rule_cache.close()


async def main(argv=None) -> int:
    args = parse_args(argv)
    try:
        result = await run(args.dry_run, args.full)
    except LeadScoringError as exc:
        logger.error("Sweep aborted: %s", exc.detail)
        return 1
    finally:
        await engine.dispose()

    print(result.model_dump_json(indent=2))
    return 0


if __name__ == "__main__":
    logging.basicConfig(level=settings.LOG_LEVEL)
    sys.exit(asyncio.run(main()))
