"""Audit record schema."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from aegis_guardrails.schemas.evaluation import Decision


class AuditRecord(BaseModel):
    """One persisted evaluation. policy_id None means no specific policy."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: int | None = None
    agent_id: str
    policy_id: str | None = None
    timestamp: datetime
    input_hash: str
    decision: Decision
    latency_ms: int
