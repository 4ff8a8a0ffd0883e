import asyncio
import logging
from datetime import datetime, timedelta
from typing import Awaitable, Callable, Optional

from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from leadscore.core.cache import CacheService
from leadscore.core.clock import Clock, utc_now
from leadscore.core.exceptions import RuleSourceUnavailableError
from leadscore.repositories.scoring_rule_repository import ScoringRuleRepository
from leadscore.schemas.scoring import RuleSnapshot

logger = logging.getLogger(__name__)

RULES_CACHE_KEY = "scoring:rules:snapshot"

RuleLoader = Callable[[], Awaitable[RuleSnapshot]]


def make_rule_loader(
    session_factory: Callable[..., AsyncSession], seed_defaults: bool = True
) -> RuleLoader:
    """Build a loader that reads the rule tables in a fresh session.

    When *seed_defaults* is set, the default rule set is inserted the
    first time the tables are found empty.
    """
    seeded = False

    async def load() -> RuleSnapshot:
        nonlocal seeded
        async with session_factory() as session:
            repo = ScoringRuleRepository(session)
            if seed_defaults and not seeded:
                await repo.seed_if_empty()
                await repo.commit()
                seeded = True
            return await repo.get_rule_snapshot()

    return load


class RuleSnapshotCache:
    """Process-wide holder of the current scoring rule snapshot.

    Lookup order on ``get_or_refresh``:

        1. the in-memory snapshot, while younger than *ttl* seconds
        2. the shared Redis copy (via ``CacheService``)
        3. the rule tables (via *loader*)

    If the loader fails, the last known good snapshot keeps being served
    and the failure is logged.  ``RuleSourceUnavailableError`` is raised
    only when no snapshot has ever been loaded.
    """

    def __init__(
        self,
        loader: RuleLoader,
        cache: Optional[CacheService] = None,
        ttl: int = 300,
        clock: Clock = utc_now,
    ) -> None:
        self._loader = loader
        self._cache = cache or CacheService()
        self._ttl = ttl
        self._clock = clock
        self._snapshot: Optional[RuleSnapshot] = None
        self._loaded_at: Optional[datetime] = None
        self._lock = asyncio.Lock()

    @property
    def snapshot(self) -> Optional[RuleSnapshot]:
        return self._snapshot

    def _is_fresh(self) -> bool:
        if self._snapshot is None or self._loaded_at is None:
            return False
        return self._clock() - self._loaded_at < timedelta(seconds=self._ttl)

    async def get_or_refresh(self) -> RuleSnapshot:
        if self._is_fresh():
            return self._snapshot  # type: ignore[return-value]

        async with self._lock:
            if self._is_fresh():
                return self._snapshot  # type: ignore[return-value]

            shared = await self._read_shared()
            if shared is not None:
                self._store(shared)
                return shared

            try:
                snapshot = await self._loader()
            except Exception as exc:
                if self._snapshot is not None:
                    logger.warning(
                        "Scoring rule refresh failed, serving stale snapshot",
                        exc_info=True,
                    )
                    return self._snapshot
                raise RuleSourceUnavailableError() from exc

            self._store(snapshot)
            await self._cache.set_json(
                RULES_CACHE_KEY, snapshot.model_dump(mode="json"), ttl=self._ttl
            )
            logger.info("Loaded %d scoring rules", snapshot.rule_count)
            return snapshot

    async def _read_shared(self) -> Optional[RuleSnapshot]:
        data = await self._cache.get_json(RULES_CACHE_KEY)
        if data is None:
            return None
        try:
            return RuleSnapshot.model_validate(data)
        except ValidationError:
            logger.warning("Discarding malformed rule snapshot in cache")
            await self._cache.delete(RULES_CACHE_KEY)
            return None

    def _store(self, snapshot: RuleSnapshot) -> None:
        self._snapshot = snapshot
        self._loaded_at = self._clock()

    async def invalidate(self) -> None:
        """Force the next lookup to reload; the old snapshot stays as fallback."""
        self._loaded_at = None
        await self._cache.delete(RULES_CACHE_KEY)

    async def close(self) -> None:
        await self._cache.close()
