"""Audit log model."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from aegis_guardrails.database import Base


class AuditLog(Base):
    """Evaluation audit records - append-only, one per evaluation."""

    __tablename__ = "audit_logs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    agent_id: Mapped[str] = mapped_column(UUID(as_uuid=False), nullable=False)
    policy_id: Mapped[str | None] = mapped_column(
        UUID(as_uuid=False), ForeignKey("policies.id"), nullable=True
    )  # null = no specific policy
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    input_hash: Mapped[str] = mapped_column(String(64), nullable=False)
    decision: Mapped[str] = mapped_column(String(50), nullable=False)
    latency_ms: Mapped[int] = mapped_column(Integer, nullable=False)
