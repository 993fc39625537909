"""Policy model."""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, String, Text
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column

from aegis_guardrails.database import Base


class Policy(Base):
    """Guardrail policies - customer-configured, optionally scoped to one agent."""

    __tablename__ = "policies"

    id: Mapped[str] = mapped_column(UUID(as_uuid=False), primary_key=True)
    customer_id: Mapped[str] = mapped_column(UUID(as_uuid=False), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    agent_id: Mapped[str | None] = mapped_column(
        UUID(as_uuid=False), nullable=True
    )  # null = all agents
    policy_type: Mapped[str] = mapped_column(
        String(50), nullable=False
    )  # pii|content_safety|prompt_injection|custom
    rule_spec: Mapped[dict | None] = mapped_column("rule_json", JSONB, nullable=True)
    enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
