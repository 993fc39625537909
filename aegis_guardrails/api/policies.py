"""Policy endpoints - create and list."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from aegis_guardrails.database import get_db
from aegis_guardrails.engine.rules import deny_keywords
from aegis_guardrails.schemas.policy import CreatePolicyRequest, PolicyResponse, PolicyType
from aegis_guardrails.storage.repositories import create_policy, list_policies

router = APIRouter()


def _validate_rule_spec(body: CreatePolicyRequest) -> None:
    """Custom policies need at least one usable deny keyword."""
    if body.policy_type is PolicyType.CUSTOM and not deny_keywords(body.rule_spec):
        raise HTTPException(
            status_code=422,
            detail="custom policies require rule_spec.deny_keywords: a non-empty list of strings",
        )


@router.post("/policies", response_model=PolicyResponse, status_code=status.HTTP_201_CREATED)
async def create_policy_endpoint(
    body: CreatePolicyRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Create a policy."""
    _validate_rule_spec(body)
    policy = await create_policy(
        db,
        customer_id=str(body.customer_id),
        name=body.name,
        policy_type=body.policy_type.value,
        rule_spec=body.rule_spec,
        agent_id=str(body.agent_id) if body.agent_id else None,
        description=body.description,
        enabled=body.enabled,
    )
    await db.commit()
    return PolicyResponse.model_validate(policy)


@router.get("/policies", response_model=list[PolicyResponse])
async def get_policies(
    db: Annotated[AsyncSession, Depends(get_db)],
    agent_id: UUID | None = None,
    enabled: bool | None = None,
):
    """List policies."""
    policies = await list_policies(
        db, agent_id=str(agent_id) if agent_id else None, enabled=enabled
    )
    return [PolicyResponse.model_validate(p) for p in policies]
