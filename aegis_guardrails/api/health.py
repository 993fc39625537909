"""Health and metrics endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from aegis_guardrails.config import settings
from aegis_guardrails.database import get_db
from aegis_guardrails.schemas.evaluation import Decision
from aegis_guardrails.storage.repositories import count_audit_logs_by_decision

router = APIRouter()


@router.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "ok"}


@router.get("/metrics")
async def metrics(db: Annotated[AsyncSession, Depends(get_db)]):
    """Recorded evaluations per decision, from the audit log."""
    counts = await count_audit_logs_by_decision(db)
    by_decision = {d.value: counts.get(d.value, 0) for d in Decision}
    return {
        "service": "guardrails",
        "fail_mode": settings.fail_mode,
        "evaluations_total": sum(by_decision.values()),
        "evaluations_by_decision": by_decision,
    }
