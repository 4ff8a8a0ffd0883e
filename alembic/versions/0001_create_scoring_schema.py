"""create lead scoring schema

Revision ID: 0001_create_scoring_schema
Revises:
Create Date: 2026-10-19 09:00:00.000000

Creates the lead, contact, company and activity tables, the four rule
tables, ``lead_scores`` (one row per lead) and the append-only
``score_history``, then seeds the default rule set.

Seed values come from ``leadscore.core.default_scoring_rules``; edit
them there, not here.
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

from leadscore.core.constants import (
    CLASSIFICATION_CHECK_CLAUSE,
    MOMENTUM_LEVEL_CHECK_CLAUSE,
)
from leadscore.core.default_scoring_rules import (
    DEFAULT_BEHAVIORAL_RULES,
    DEFAULT_DEMOGRAPHIC_RULES,
    DEFAULT_NEGATIVE_RULES,
    DEFAULT_SCORING_THRESHOLDS,
)

# revision identifiers, used by Alembic.
revision: str = "0001_create_scoring_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _uuid_pk(name: str) -> sa.Column:
    return sa.Column(
        name,
        postgresql.UUID(as_uuid=True),
        primary_key=True,
        server_default=sa.text("gen_random_uuid()"),
    )


def _created_at() -> sa.Column:
    return sa.Column(
        "created_at", sa.DateTime(timezone=True), server_default=sa.func.now()
    )


def _updated_at() -> sa.Column:
    return sa.Column(
        "updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()
    )


def upgrade() -> None:
    op.execute("CREATE EXTENSION IF NOT EXISTS pgcrypto")

    op.create_table(
        "companies",
        _uuid_pk("company_id"),
        sa.Column("company_name", sa.String(255), nullable=False),
        sa.Column("industry", sa.String(100)),
        sa.Column("employee_count", sa.Integer()),
        sa.Column("company_size", sa.String(50)),
        sa.Column("revenue_inr_crore", sa.Numeric(10, 2)),
        sa.Column("location_city", sa.String(100)),
        _created_at(),
        _updated_at(),
    )

    op.create_table(
        "contacts",
        _uuid_pk("contact_id"),
        sa.Column(
            "company_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("companies.company_id", ondelete="CASCADE"),
        ),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("phone", sa.String(20)),
        sa.Column("job_title", sa.String(150)),
        sa.Column("seniority_level", sa.String(50)),
        sa.Column(
            "has_budget_authority", sa.Boolean(), nullable=False, server_default="false"
        ),
        sa.Column(
            "has_technical_authority",
            sa.Boolean(),
            nullable=False,
            server_default="false",
        ),
        sa.Column("email_status", sa.String(20), nullable=False, server_default="valid"),
        _created_at(),
        _updated_at(),
    )

    op.create_table(
        "leads",
        _uuid_pk("lead_id"),
        sa.Column(
            "contact_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("contacts.contact_id", ondelete="CASCADE"),
        ),
        sa.Column(
            "company_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("companies.company_id", ondelete="CASCADE"),
        ),
        sa.Column("lead_source", sa.String(100), nullable=False),
        sa.Column("lead_status", sa.String(50), nullable=False, server_default="active"),
        sa.Column("last_activity_date", sa.DateTime(timezone=True)),
        _created_at(),
        _updated_at(),
    )
    op.create_index("idx_leads_contact_id", "leads", ["contact_id"])
    op.create_index("idx_leads_company_id", "leads", ["company_id"])

    op.create_table(
        "lead_activities",
        _uuid_pk("activity_id"),
        sa.Column(
            "lead_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("leads.lead_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("activity_type", sa.String(100), nullable=False),
        sa.Column("activity_subtype", sa.String(100)),
        sa.Column("page_url", sa.Text()),
        sa.Column(
            "activity_timestamp",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        _created_at(),
    )
    op.create_index(
        "idx_lead_activities_lead_timestamp",
        "lead_activities",
        ["lead_id", sa.text("activity_timestamp DESC")],
    )

    demographic = op.create_table(
        "scoring_rules_demographic",
        _uuid_pk("rule_id"),
        sa.Column("rule_name", sa.String(100), nullable=False),
        sa.Column("condition_field", sa.String(100), nullable=False),
        sa.Column("condition_operator", sa.String(50), nullable=False),
        sa.Column("condition_value", sa.Text(), nullable=False),
        sa.Column("points_awarded", sa.Integer(), nullable=False),
        sa.Column("priority_order", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="true"),
        _created_at(),
    )

    behavioral = op.create_table(
        "scoring_rules_behavioral",
        _uuid_pk("rule_id"),
        sa.Column("rule_name", sa.String(100), nullable=False),
        sa.Column("activity_type", sa.String(100), nullable=False),
        sa.Column("activity_subtype", sa.String(100)),
        sa.Column("base_points", sa.Integer(), nullable=False),
        sa.Column(
            "repeat_multiplier", sa.Numeric(3, 2), nullable=False, server_default="1.00"
        ),
        sa.Column("max_occurrences", sa.Integer()),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="true"),
        _created_at(),
    )

    negative = op.create_table(
        "scoring_rules_negative",
        _uuid_pk("rule_id"),
        sa.Column("rule_name", sa.String(100), nullable=False),
        sa.Column("condition_field", sa.String(100), nullable=False),
        sa.Column("condition_operator", sa.String(50), nullable=False),
        sa.Column("condition_value", sa.Text(), nullable=False),
        sa.Column("points_deducted", sa.Integer(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="true"),
        _created_at(),
    )

    thresholds = op.create_table(
        "scoring_thresholds",
        _uuid_pk("threshold_id"),
        sa.Column("classification_name", sa.String(50), nullable=False, unique=True),
        sa.Column("min_score", sa.Integer(), nullable=False),
        sa.Column("max_score", sa.Integer(), nullable=False),
        sa.Column("recommended_action", sa.Text()),
        sa.Column("sla_response_hours", sa.Integer()),
    )

    op.create_table(
        "lead_scores",
        _uuid_pk("score_id"),
        sa.Column(
            "lead_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("leads.lead_id", ondelete="CASCADE"),
            nullable=False,
            unique=True,
        ),
        sa.Column("demographic_score", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("behavioral_score", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("negative_score", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_score", sa.Integer(), nullable=False, server_default="0"),
        sa.Column(
            "score_classification", sa.String(50), nullable=False, server_default="cold"
        ),
        sa.Column("classification_reason", sa.String(255)),
        sa.Column(
            "matched_rules",
            postgresql.JSONB(),
            nullable=False,
            server_default=sa.text("'[]'::jsonb"),
        ),
        sa.Column("momentum_score", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("momentum_level", sa.String(20), nullable=False, server_default="none"),
        sa.Column("actions_last_24h", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("actions_last_72h", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("actions_last_7d", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("surge_detected", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("last_high_intent_action", sa.DateTime(timezone=True)),
        sa.Column(
            "last_calculated_at", sa.DateTime(timezone=True), server_default=sa.func.now()
        ),
        sa.Column("momentum_updated_at", sa.DateTime(timezone=True)),
        _created_at(),
        _updated_at(),
        sa.CheckConstraint(
            "demographic_score BETWEEN 0 AND 50", name="ck_demographic_score_range"
        ),
        sa.CheckConstraint(
            "behavioral_score BETWEEN 0 AND 100", name="ck_behavioral_score_range"
        ),
        sa.CheckConstraint("negative_score <= 0", name="ck_negative_score_sign"),
        sa.CheckConstraint(
            "momentum_score BETWEEN 0 AND 100", name="ck_momentum_score_range"
        ),
        sa.CheckConstraint(CLASSIFICATION_CHECK_CLAUSE, name="ck_score_classification"),
        sa.CheckConstraint(MOMENTUM_LEVEL_CHECK_CLAUSE, name="ck_momentum_level"),
    )
    op.create_index(
        "idx_lead_scores_momentum", "lead_scores", ["momentum_score", "lead_id"]
    )

    op.create_table(
        "score_history",
        _uuid_pk("history_id"),
        sa.Column(
            "lead_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("leads.lead_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("demographic_score", sa.Integer(), nullable=False),
        sa.Column("behavioral_score", sa.Integer(), nullable=False),
        sa.Column("negative_score", sa.Integer(), nullable=False),
        sa.Column("total_score", sa.Integer(), nullable=False),
        sa.Column("score_classification", sa.String(50), nullable=False),
        sa.Column("momentum_score", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("momentum_level", sa.String(20), nullable=False, server_default="none"),
        sa.Column("change_reason", sa.String(255)),
        sa.Column("triggered_by_activity_id", postgresql.UUID(as_uuid=True)),
        sa.Column(
            "calculated_at", sa.DateTime(timezone=True), server_default=sa.func.now()
        ),
    )
    op.create_index(
        "idx_score_history_lead_calculated",
        "score_history",
        ["lead_id", sa.text("calculated_at DESC")],
    )

    op.bulk_insert(demographic, DEFAULT_DEMOGRAPHIC_RULES)
    op.bulk_insert(behavioral, DEFAULT_BEHAVIORAL_RULES)
    op.bulk_insert(negative, DEFAULT_NEGATIVE_RULES)
    op.bulk_insert(thresholds, DEFAULT_SCORING_THRESHOLDS)


def downgrade() -> None:
    op.drop_index("idx_score_history_lead_calculated", table_name="score_history")
    op.drop_table("score_history")
    op.drop_index("idx_lead_scores_momentum", table_name="lead_scores")
    op.drop_table("lead_scores")
    op.drop_table("scoring_thresholds")
    op.drop_table("scoring_rules_negative")
    op.drop_table("scoring_rules_behavioral")
    op.drop_table("scoring_rules_demographic")
    op.drop_index("idx_lead_activities_lead_timestamp", table_name="lead_activities")
    op.drop_table("lead_activities")
    op.drop_index("idx_leads_company_id", table_name="leads")
    op.drop_index("idx_leads_contact_id", table_name="leads")
    op.drop_table("leads")
    op.drop_table("contacts")
    op.drop_table("companies")
