"""Initial schema - policies, audit_logs.

Revision ID: 001
Revises:
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "policies",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("customer_id", sa.UUID(), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("agent_id", sa.UUID(), nullable=True),
        sa.Column("policy_type", sa.String(50), nullable=False),
        sa.Column("rule_json", postgresql.JSONB(), nullable=True),
        sa.Column("enabled", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.CheckConstraint(
            "policy_type IN ('pii', 'content_safety', 'prompt_injection', 'custom')",
            name="ck_policies_policy_type",
        ),
    )
    # Lookup path of every evaluation: enabled policies for an agent or for all agents
    op.create_index(
        "ix_policies_enabled_agent",
        "policies",
        ["agent_id"],
        postgresql_where=sa.text("enabled"),
    )

    op.create_table(
        "audit_logs",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("agent_id", sa.UUID(), nullable=False),
        # NULL = no specific policy attributed
        sa.Column("policy_id", sa.UUID(), sa.ForeignKey("policies.id"), nullable=True),
        sa.Column(
            "timestamp",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column("input_hash", sa.String(64), nullable=False),
        sa.Column("decision", sa.String(50), nullable=False),
        sa.Column("latency_ms", sa.Integer(), nullable=False),
    )
    op.create_index("ix_audit_logs_agent_id", "audit_logs", ["agent_id"])


def downgrade() -> None:
    op.drop_index("ix_audit_logs_agent_id", table_name="audit_logs")
    op.drop_table("audit_logs")
    op.drop_index("ix_policies_enabled_agent", table_name="policies")
    op.drop_table("policies")
