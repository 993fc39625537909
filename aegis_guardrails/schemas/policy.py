"""Policy schemas."""

from datetime import datetime
from enum import Enum
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class PolicyType(str, Enum):
    """Kinds of guardrail policy."""

    PII = "pii"
    CONTENT_SAFETY = "content_safety"
    PROMPT_INJECTION = "prompt_injection"
    CUSTOM = "custom"


class PolicySnapshot(BaseModel):
    """Read-only view of an enabled policy, as handed to the decision engine."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: str
    name: str
    policy_type: PolicyType
    rule_spec: dict[str, Any] | None = None
    agent_id: str | None = None


class CreatePolicyRequest(BaseModel):
    """POST /v1/policies request."""

    customer_id: UUID
    name: str = Field(min_length=1, max_length=255)
    description: str | None = None
    agent_id: UUID | None = None
    policy_type: PolicyType
    rule_spec: dict[str, Any] | None = None
    enabled: bool = True


class PolicyResponse(BaseModel):
    """Policy as returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    customer_id: str
    name: str
    description: str | None = None
    agent_id: str | None = None
    policy_type: PolicyType
    rule_spec: dict[str, Any] | None = None
    enabled: bool
    created_at: datetime
