"""Evaluation pipeline - fetch policies, decide, record the audit."""

import logging
import time
from typing import Protocol

from aegis_guardrails.audit.recorder import AuditRecorder
from aegis_guardrails.engine.decision import DecisionEngine
from aegis_guardrails.errors import AuditError, StoreError
from aegis_guardrails.schemas.evaluation import EvaluationOutcome, EvaluationRequest
from aegis_guardrails.schemas.policy import PolicySnapshot

logger = logging.getLogger(__name__)


class PolicyStore(Protocol):
    async def fetch_enabled_policies(self, agent_id: str) -> list[PolicySnapshot]: ...


class GuardrailService:
    """
    Runs one evaluation end to end.

    The only awaits are the policy fetch and the audit write. A failed fetch
    degrades to built-in checks only. A failed audit write raises AuditError
    carrying the outcome, so the caller can still decide what to return.
    """

    def __init__(
        self,
        store: PolicyStore,
        recorder: AuditRecorder,
        engine: DecisionEngine,
    ) -> None:
        self.store = store
        self.recorder = recorder
        self.engine = engine

    async def evaluate(self, request: EvaluationRequest) -> EvaluationOutcome:
        started = time.perf_counter()
        agent_id = str(request.agent_id)

        store_fault: StoreError | None = None
        try:
            policies = await self.store.fetch_enabled_policies(agent_id)
        except StoreError as exc:
            logger.error(
                "Policy lookup failed for agent %s; running built-in checks only",
                agent_id,
                exc_info=True,
            )
            policies, store_fault = [], exc

        decided = self.engine.evaluate(request, policies, store_fault=store_fault)
        latency_ms = int((time.perf_counter() - started) * 1000)
        outcome = decided.model_copy(update={"latency_ms": latency_ms})

        try:
            await self.recorder.record(
                agent_id,
                outcome.attributed_policy_id,
                outcome.decision,
                request.input_text,
                latency_ms,
            )
        except AuditError as exc:
            exc.outcome = outcome
            raise

        logger.info(
            "agent=%s decision=%s checks=%s policy=%s latency_ms=%d",
            agent_id,
            outcome.decision.value,
            ",".join(outcome.checks_run) or "-",
            outcome.attributed_policy_id or "-",
            latency_ms,
        )
        return outcome
