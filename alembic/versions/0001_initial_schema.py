"""initial schema

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19 09:00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "0001_initial_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps(with_updated: bool = True):
    columns = [sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False)]
    if with_updated:
        columns.append(sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False))
    return columns


def _owner():
    return sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False)


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("email_visibility", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("password_reset_token", sa.String(255), nullable=True),
        sa.Column("password_reset_expires_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_users_id", "users", ["id"])
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_password_reset_token", "users", ["password_reset_token"])

    op.create_table(
        "auth_sessions",
        sa.Column("id", sa.Integer(), primary_key=True),
        _owner(),
        sa.Column("token_hash", sa.String(255), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("last_used_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_auth_sessions_id", "auth_sessions", ["id"])
    op.create_index("ix_auth_sessions_user_id", "auth_sessions", ["user_id"])
    op.create_index("ix_auth_sessions_token_hash", "auth_sessions", ["token_hash"], unique=True)

    op.create_table(
        "hiradc_analyses",
        sa.Column("id", sa.Integer(), primary_key=True),
        _owner(),
        sa.Column("activity_name", sa.String(255), nullable=False),
        sa.Column("location", sa.String(255), nullable=False),
        sa.Column("hazard", sa.Text(), nullable=False),
        sa.Column("severity", sa.Integer(), nullable=False),
        sa.Column("likelihood", sa.Integer(), nullable=False),
        sa.Column("risk_score", sa.Integer(), nullable=False),
        sa.Column(
            "risk_category",
            sa.Enum("Low", "Medium", "High", "Extreme", name="riskcategory"),
            nullable=False,
        ),
        sa.Column("recommended_controls", sa.JSON(), nullable=True),
        sa.Column("ai_insight", sa.Text(), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "fta_analyses",
        sa.Column("id", sa.Integer(), primary_key=True),
        _owner(),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("top_event", sa.Text(), nullable=False),
        sa.Column("structure", sa.JSON(), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "eta_analyses",
        sa.Column("id", sa.Integer(), primary_key=True),
        _owner(),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("initiating_event", sa.Text(), nullable=False),
        sa.Column("barriers", sa.JSON(), nullable=False),
        sa.Column("outcomes", sa.JSON(), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "cca_analyses",
        sa.Column("id", sa.Integer(), primary_key=True),
        _owner(),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("critical_event", sa.Text(), nullable=False),
        sa.Column("cause_tree", sa.JSON(), nullable=False),
        sa.Column("consequence_tree", sa.JSON(), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "k3_calculations",
        sa.Column("id", sa.Integer(), primary_key=True),
        _owner(),
        sa.Column("total_lti", sa.Float(), nullable=False),
        sa.Column("total_incidents", sa.Float(), nullable=False),
        sa.Column("total_work_hours", sa.Float(), nullable=False),
        sa.Column("total_days_lost", sa.Float(), nullable=False),
        sa.Column("employees_with_ppe", sa.Float(), nullable=False),
        sa.Column("total_employees", sa.Float(), nullable=False),
        sa.Column("ltir", sa.Float(), nullable=False),
        sa.Column("trir", sa.Float(), nullable=False),
        sa.Column("severity_rate", sa.Float(), nullable=False),
        sa.Column("frequency_rate", sa.Float(), nullable=False),
        sa.Column("safe_man_hours", sa.Float(), nullable=False),
        sa.Column("compliance_ppe", sa.Float(), nullable=False),
        *_timestamps(with_updated=False),
    )

    op.create_table(
        "contact_messages",
        sa.Column("id", sa.Integer(), primary_key=True),
        _owner(),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("status", sa.Enum("unread", "read", name="messagestatus"), nullable=False),
        *_timestamps(with_updated=False),
    )

    for table in ("hiradc_analyses", "fta_analyses", "eta_analyses", "cca_analyses", "k3_calculations", "contact_messages"):
        op.create_index(f"ix_{table}_id", table, ["id"])
        op.create_index(f"ix_{table}_user_id", table, ["user_id"])
        op.create_index(f"ix_{table}_created_at", table, ["created_at"])
    op.create_index("ix_hiradc_analyses_risk_score", "hiradc_analyses", ["risk_score"])
    op.create_index("ix_hiradc_analyses_risk_category", "hiradc_analyses", ["risk_category"])

    op.create_table(
        "activity_logs",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("timestamp", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("action", sa.String(100), nullable=False),
        sa.Column("resource_type", sa.String(50), nullable=True),
        sa.Column("resource_id", sa.Integer(), nullable=True),
        sa.Column("details", sa.JSON(), nullable=True),
        sa.Column("ip_address", sa.String(45), nullable=True),
        sa.Column("user_agent", sa.String(255), nullable=True),
    )
    for column in ("id", "timestamp", "user_id", "action", "resource_type", "resource_id"):
        op.create_index(f"ix_activity_logs_{column}", "activity_logs", [column])


def downgrade() -> None:
    op.drop_table("activity_logs")
    op.drop_table("contact_messages")
    op.drop_table("k3_calculations")
    op.drop_table("cca_analyses")
    op.drop_table("eta_analyses")
    op.drop_table("fta_analyses")
    op.drop_table("hiradc_analyses")
    op.drop_table("auth_sessions")
    op.drop_table("users")
    sa.Enum(name="messagestatus").drop(op.get_bind(), checkfirst=True)
    sa.Enum(name="riskcategory").drop(op.get_bind(), checkfirst=True)
