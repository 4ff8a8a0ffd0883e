from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, Integer, Numeric, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from leadscore.models.base import Base, TimestampMixin, uuid_pk


class Company(TimestampMixin, Base):
    """Firmographic data read by demographic rules.

    ``employee_count`` holds an exact headcount when known; otherwise
    ``company_size`` carries a descriptive bucket such as ``"50-249"``
    or ``"1001+"``.
    """

    __tablename__ = "companies"
    company_id = uuid_pk()
    company_name = Column(String(255), nullable=False)
    industry = Column(String(100))
    employee_count = Column(Integer)
    company_size = Column(String(50))
    revenue_inr_crore = Column(Numeric(10, 2))
    location_city = Column(String(100))

    contacts = relationship("Contact", back_populates="company")
    leads = relationship("Lead", back_populates="company")


class Contact(TimestampMixin, Base):
    __tablename__ = "contacts"
    contact_id = uuid_pk()
    company_id = Column(
        UUID(as_uuid=True), ForeignKey("companies.company_id", ondelete="CASCADE")
    )
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False, unique=True)
    phone = Column(String(20))
    job_title = Column(String(150))
    seniority_level = Column(String(50))
    has_budget_authority = Column(Boolean, nullable=False, server_default="false")
    has_technical_authority = Column(Boolean, nullable=False, server_default="false")
    # valid | bounced | unsubscribed
    email_status = Column(String(20), nullable=False, server_default="valid")

    company = relationship("Company", back_populates="contacts")
    leads = relationship("Lead", back_populates="contact")


class Lead(TimestampMixin, Base):
    """A tracked prospect: one contact at one company plus its activity stream.

    ``last_activity_date`` is bumped whenever an activity is recorded and
    drives the inactivity penalties.
    """

    __tablename__ = "leads"
    lead_id = uuid_pk()
    contact_id = Column(
        UUID(as_uuid=True), ForeignKey("contacts.contact_id", ondelete="CASCADE")
    )
    company_id = Column(
        UUID(as_uuid=True), ForeignKey("companies.company_id", ondelete="CASCADE")
    )
    lead_source = Column(String(100), nullable=False)
    lead_status = Column(String(50), nullable=False, server_default="active")
    last_activity_date = Column(DateTime(timezone=True))

    contact = relationship("Contact", back_populates="leads")
    company = relationship("Company", back_populates="leads")
    activities = relationship(
        "LeadActivity", back_populates="lead", cascade="all, delete-orphan"
    )
    score = relationship(
        "LeadScore", back_populates="lead", uselist=False, cascade="all, delete-orphan"
    )

    __table_args__ = (
        Index("idx_leads_contact_id", "contact_id"),
        Index("idx_leads_company_id", "company_id"),
    )
