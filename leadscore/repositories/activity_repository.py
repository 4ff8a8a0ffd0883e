from typing import Any, List, Optional
from uuid import UUID

from sqlalchemy import select

from leadscore.models.activity import LeadActivity
from leadscore.repositories.base import BaseRepository
from leadscore.schemas.scoring import ActivityRecord


class ActivityRepository(BaseRepository):
    """Encapsulates queries against the ``lead_activities`` table."""

    async def create(self, **kwargs: Any) -> LeadActivity:
        """Insert a new lead activity record."""
        activity = LeadActivity(**kwargs)
        self._db.add(activity)
        return activity

    async def get_recent_activities(
        self, lead_id: UUID, limit: Optional[int] = None
    ) -> List[ActivityRecord]:
        """Return the lead's activities, most recent first.

        ``limit=None`` returns the full history.
        """
        query = (
            select(
                LeadActivity.activity_type,
                LeadActivity.activity_subtype,
                LeadActivity.activity_timestamp,
            )
            .where(LeadActivity.lead_id == lead_id)
            .order_by(LeadActivity.activity_timestamp.desc())
        )
        if limit is not None:
            query = query.limit(limit)
        result = await self._db.execute(query)
        return [
            ActivityRecord(
                activity_type=row.activity_type,
                activity_subtype=row.activity_subtype,
                timestamp=row.activity_timestamp,
            )
            for row in result.all()
        ]
