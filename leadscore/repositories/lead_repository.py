from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.orm import selectinload

from leadscore.models.lead import Lead
from leadscore.repositories.base import BaseRepository
from leadscore.schemas.scoring import LeadSnapshot


class LeadRepository(BaseRepository):
    """Encapsulates every SQL query that touches the ``leads`` table."""

    async def get_by_id(self, lead_id: UUID) -> Optional[Lead]:
        """Return a lead with its contact and company loaded, or ``None``."""
        result = await self._db.execute(
            select(Lead)
            .options(selectinload(Lead.contact), selectinload(Lead.company))
            .where(Lead.lead_id == lead_id)
        )
        return result.scalar_one_or_none()

    async def get_snapshot(self, lead_id: UUID) -> Optional[LeadSnapshot]:
        lead = await self.get_by_id(lead_id)
        if lead is None:
            return None
        return self.to_snapshot(lead)

    async def list_ids_after(
        self, after_lead_id: Optional[UUID], limit: int
    ) -> List[UUID]:
        """Keyset page of lead ids in ascending order."""
        query = select(Lead.lead_id).order_by(Lead.lead_id).limit(limit)
        if after_lead_id is not None:
            query = query.where(Lead.lead_id > after_lead_id)
        result = await self._db.execute(query)
        return list(result.scalars().all())

    async def touch_last_activity(self, lead_id: UUID, when: datetime) -> None:
        """Move ``last_activity_date`` forward to *when*; never backwards."""
        await self._db.execute(
            update(Lead)
            .where(Lead.lead_id == lead_id)
            .values(
                last_activity_date=func.greatest(
                    func.coalesce(Lead.last_activity_date, when), when
                )
            )
        )

    @staticmethod
    def to_snapshot(lead: Lead) -> LeadSnapshot:
        """Flatten a lead and its contact/company into a ``LeadSnapshot``."""
        contact = lead.contact
        company = lead.company
        return LeadSnapshot(
            lead_id=lead.lead_id,
            email=contact.email if contact else None,
            phone=contact.phone if contact else None,
            job_title=contact.job_title if contact else None,
            seniority_level=contact.seniority_level if contact else None,
            has_budget_authority=bool(contact and contact.has_budget_authority),
            has_technical_authority=bool(contact and contact.has_technical_authority),
            email_status=contact.email_status if contact else None,
            company_name=company.company_name if company else None,
            industry=company.industry if company else None,
            employee_count=company.employee_count if company else None,
            company_size=company.company_size if company else None,
            revenue_inr_crore=(
                float(company.revenue_inr_crore)
                if company and company.revenue_inr_crore is not None
                else None
            ),
            location_city=company.location_city if company else None,
            lead_source=lead.lead_source,
            last_activity_date=lead.last_activity_date,
            created_at=lead.created_at,
            extra={"lead_status": lead.lead_status},
        )
