"""Audit log endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from aegis_guardrails.database import get_db
from aegis_guardrails.schemas.audit import AuditRecord
from aegis_guardrails.storage.repositories import list_audit_logs

router = APIRouter()


@router.get("/audit-logs", response_model=list[AuditRecord])
async def get_audit_logs(
    db: Annotated[AsyncSession, Depends(get_db)],
    agent_id: UUID | None = None,
    limit: Annotated[int, Query(ge=1, le=1000)] = 100,
):
    """Most recent audit records, newest first."""
    rows = await list_audit_logs(db, agent_id=str(agent_id) if agent_id else None, limit=limit)
    return [AuditRecord.model_validate(r) for r in rows]
