from sqlalchemy import Column, DateTime, ForeignKey, Index, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from leadscore.models.base import Base, uuid_pk


class LeadActivity(Base):
    __tablename__ = "lead_activities"
    activity_id = uuid_pk()
    lead_id = Column(
        UUID(as_uuid=True), ForeignKey("leads.lead_id", ondelete="CASCADE"), nullable=False
    )
    activity_type = Column(String(100), nullable=False)
    activity_subtype = Column(String(100))
    page_url = Column(Text)
    activity_timestamp = Column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    lead = relationship("Lead", back_populates="activities")

    __table_args__ = (
        Index(
            "idx_lead_activities_lead_timestamp",
            "lead_id",
            activity_timestamp.desc(),
        ),
    )
