from sqlalchemy.ext.asyncio import AsyncSession


class BaseRepository:
    """Holds the ``AsyncSession`` a repository queries through.

    Repositories built on the same session share one transaction, so a
    score upsert and its history row commit or roll back together.
    Batch jobs give each lead its own session instead.
    """

    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def flush(self) -> None:
        await self._db.flush()

    async def commit(self) -> None:
        await self._db.commit()

    async def rollback(self) -> None:
        await self._db.rollback()
