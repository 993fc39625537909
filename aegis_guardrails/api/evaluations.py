"""Evaluation endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from aegis_guardrails.audit.recorder import AuditRecorder
from aegis_guardrails.config import settings
from aegis_guardrails.database import async_session_maker
from aegis_guardrails.engine.checks import FailMode, default_checks
from aegis_guardrails.engine.decision import DecisionEngine
from aegis_guardrails.errors import AuditError
from aegis_guardrails.schemas.evaluation import EvaluationRequest, EvaluationResponse
from aegis_guardrails.service import GuardrailService
from aegis_guardrails.storage.repositories import SqlAuditSink, SqlPolicyStore

logger = logging.getLogger(__name__)

router = APIRouter()


def get_guardrail_service() -> GuardrailService:
    """Dependency building the evaluation pipeline from settings."""
    engine = DecisionEngine(
        checks=default_checks(
            settings.pii_phrases,
            settings.content_safety_phrases,
            settings.prompt_injection_phrases,
        ),
        fail_mode=FailMode(settings.fail_mode),
    )
    recorder = AuditRecorder(
        SqlAuditSink(async_session_maker),
        retry_attempts=settings.audit_retry_attempts,
        retry_backoff=settings.audit_retry_backoff,
    )
    return GuardrailService(SqlPolicyStore(async_session_maker), recorder, engine)


ServiceDep = Annotated[GuardrailService, Depends(get_guardrail_service)]


@router.post("/guardrails/evaluate", response_model=EvaluationResponse)
async def evaluate_guardrails(body: EvaluationRequest, service: ServiceDep):
    """
    Evaluate a prompt against built-in checks and the agent's policies.
    Every call writes one audit record.
    """
    try:
        outcome = await service.evaluate(body)
    except AuditError as exc:
        if settings.fail_on_audit_error or exc.outcome is None:
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="Audit log unavailable; evaluation not recorded",
            ) from exc
        logger.error("Returning unaudited decision for agent %s", body.agent_id)
        outcome = exc.outcome

    return EvaluationResponse(
        decision=outcome.decision,
        reason=outcome.reason,
        checks_run=list(outcome.checks_run),
        attributed_policy_id=outcome.attributed_policy_id,
        latency_ms=outcome.latency_ms,
    )
