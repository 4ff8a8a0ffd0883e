from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
)
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func, text

from leadscore.core.constants import (
    CLASSIFICATION_CHECK_CLAUSE,
    MOMENTUM_LEVEL_CHECK_CLAUSE,
)
from leadscore.models.base import Base, TimestampMixin, uuid_pk


class LeadScore(TimestampMixin, Base):
    """Current score, momentum, and classification of one lead.

    Exactly one row per lead; every recalculation overwrites it in place
    (``ON CONFLICT (lead_id) DO UPDATE``) and appends a ``ScoreHistory``
    row.  ``matched_rules`` stores the rule trace verbatim.
    """

    __tablename__ = "lead_scores"
    score_id = uuid_pk()
    lead_id = Column(
        UUID(as_uuid=True),
        ForeignKey("leads.lead_id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    demographic_score = Column(Integer, nullable=False, server_default=text("0"))
    behavioral_score = Column(Integer, nullable=False, server_default=text("0"))
    negative_score = Column(Integer, nullable=False, server_default=text("0"))
    total_score = Column(Integer, nullable=False, server_default=text("0"))
    score_classification = Column(String(50), nullable=False, server_default="cold")
    classification_reason = Column(String(255))
    matched_rules = Column(JSONB, nullable=False, server_default=text("'[]'::jsonb"))
    momentum_score = Column(Integer, nullable=False, server_default=text("0"))
    momentum_level = Column(String(20), nullable=False, server_default="none")
    actions_last_24h = Column(Integer, nullable=False, server_default=text("0"))
    actions_last_72h = Column(Integer, nullable=False, server_default=text("0"))
    actions_last_7d = Column(Integer, nullable=False, server_default=text("0"))
    surge_detected = Column(Boolean, nullable=False, server_default="false")
    last_high_intent_action = Column(DateTime(timezone=True))
    last_calculated_at = Column(DateTime(timezone=True), server_default=func.now())
    momentum_updated_at = Column(DateTime(timezone=True))

    lead = relationship("Lead", back_populates="score")

    __table_args__ = (
        CheckConstraint(
            "demographic_score BETWEEN 0 AND 50", name="ck_demographic_score_range"
        ),
        CheckConstraint(
            "behavioral_score BETWEEN 0 AND 100", name="ck_behavioral_score_range"
        ),
        CheckConstraint("negative_score <= 0", name="ck_negative_score_sign"),
        CheckConstraint(
            "momentum_score BETWEEN 0 AND 100", name="ck_momentum_score_range"
        ),
        CheckConstraint(CLASSIFICATION_CHECK_CLAUSE, name="ck_score_classification"),
        CheckConstraint(MOMENTUM_LEVEL_CHECK_CLAUSE, name="ck_momentum_level"),
        Index("idx_lead_scores_momentum", "momentum_score", "lead_id"),
    )


class ScoreHistory(Base):
    __tablename__ = "score_history"
    history_id = uuid_pk()
    lead_id = Column(
        UUID(as_uuid=True), ForeignKey("leads.lead_id", ondelete="CASCADE"), nullable=False
    )
    demographic_score = Column(Integer, nullable=False)
    behavioral_score = Column(Integer, nullable=False)
    negative_score = Column(Integer, nullable=False)
    total_score = Column(Integer, nullable=False)
    score_classification = Column(String(50), nullable=False)
    momentum_score = Column(Integer, nullable=False, server_default=text("0"))
    momentum_level = Column(String(20), nullable=False, server_default="none")
    change_reason = Column(String(255))
    triggered_by_activity_id = Column(UUID(as_uuid=True))
    calculated_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        Index("idx_score_history_lead_calculated", "lead_id", calculated_at.desc()),
    )
