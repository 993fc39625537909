"""Evaluation request/outcome schemas."""

from enum import Enum
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class Decision(str, Enum):
    """Evaluation decision, strongest last."""

    ALLOWED = "ALLOWED"
    WARN = "WARN"
    DENIED = "DENIED"

    @property
    def rank(self) -> int:
        return _RANK[self]


_RANK = {Decision.ALLOWED: 0, Decision.WARN: 1, Decision.DENIED: 2}


class EvaluationRequest(BaseModel):
    """POST /v1/guardrails/evaluate request."""

    agent_id: UUID
    input_text: str
    context: dict[str, Any] = Field(default_factory=dict)


class EvaluationOutcome(BaseModel):
    """Result of evaluating one request. Produced once, never mutated."""

    model_config = ConfigDict(frozen=True)

    decision: Decision
    reason: str
    checks_run: tuple[str, ...] = ()
    attributed_policy_id: str | None = None
    latency_ms: int = 0  # set by the pipeline; the engine leaves it at 0


class EvaluationResponse(BaseModel):
    """POST /v1/guardrails/evaluate response."""

    decision: Decision
    reason: str
    checks_run: list[str] = Field(default_factory=list)
    attributed_policy_id: str | None = None
    latency_ms: int
