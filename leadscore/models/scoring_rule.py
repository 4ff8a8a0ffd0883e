from sqlalchemy import Boolean, Column, DateTime, Integer, Numeric, String, Text
from sqlalchemy.sql import func

from leadscore.models.base import Base, uuid_pk


class DemographicRule(Base):
    """Firmographic / contact rule: ``condition_field condition_operator condition_value``.

    Evaluated in ``priority_order``; matching rules award ``points_awarded``
    and the category total is capped at 50.
    """

    __tablename__ = "scoring_rules_demographic"
    rule_id = uuid_pk()
    rule_name = Column(String(100), nullable=False)
    condition_field = Column(String(100), nullable=False)
    condition_operator = Column(String(50), nullable=False)
    condition_value = Column(Text, nullable=False)
    points_awarded = Column(Integer, nullable=False)
    priority_order = Column(Integer, nullable=False, server_default="0")
    is_active = Column(Boolean, nullable=False, server_default="true")
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class BehavioralRule(Base):
    """Points for activities matching ``(activity_type, activity_subtype)``.

    Repeats are capped at ``max_occurrences`` and boosted by
    ``repeat_multiplier`` when it exceeds 1.
    """

    __tablename__ = "scoring_rules_behavioral"
    rule_id = uuid_pk()
    rule_name = Column(String(100), nullable=False)
    activity_type = Column(String(100), nullable=False)
    activity_subtype = Column(String(100))
    base_points = Column(Integer, nullable=False)
    repeat_multiplier = Column(Numeric(3, 2), nullable=False, server_default="1.00")
    max_occurrences = Column(Integer)
    is_active = Column(Boolean, nullable=False, server_default="true")
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class NegativeRule(Base):
    __tablename__ = "scoring_rules_negative"
    rule_id = uuid_pk()
    rule_name = Column(String(100), nullable=False)
    condition_field = Column(String(100), nullable=False)
    condition_operator = Column(String(50), nullable=False)
    condition_value = Column(Text, nullable=False)
    points_deducted = Column(Integer, nullable=False)
    is_active = Column(Boolean, nullable=False, server_default="true")
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class ScoringThreshold(Base):
    __tablename__ = "scoring_thresholds"
    threshold_id = uuid_pk()
    classification_name = Column(String(50), nullable=False, unique=True)
    min_score = Column(Integer, nullable=False)
    max_score = Column(Integer, nullable=False)
    recommended_action = Column(Text)
    sla_response_hours = Column(Integer)
