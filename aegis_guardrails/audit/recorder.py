"""Audit recorder - persists one immutable record per evaluation."""

import logging
from datetime import datetime, timezone
from typing import Protocol

from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from aegis_guardrails.errors import AuditError
from aegis_guardrails.schemas.audit import AuditRecord
from aegis_guardrails.schemas.evaluation import Decision
from aegis_guardrails.utils.digest import input_hash

logger = logging.getLogger(__name__)


class AuditSink(Protocol):
    async def append(self, record: AuditRecord) -> AuditRecord: ...


class AuditRecorder:
    """
    Builds the audit record and hands it to the sink.

    The raw input is reduced to its digest before anything is stored.
    Transient sink failures (AuditError) are retried; once retries are
    exhausted the error is logged and re-raised to the caller.
    """

    def __init__(
        self,
        sink: AuditSink,
        retry_attempts: int = 3,
        retry_backoff: float = 0.1,
    ) -> None:
        self.sink = sink
        self.retry_attempts = max(1, retry_attempts)
        self.retry_backoff = retry_backoff

    async def record(
        self,
        agent_id: str,
        attributed_policy_id: str | None,
        decision: Decision,
        input_text: str,
        latency_ms: int,
    ) -> AuditRecord:
        record = AuditRecord(
            agent_id=str(agent_id),
            policy_id=attributed_policy_id,
            timestamp=datetime.now(timezone.utc),
            input_hash=input_hash(input_text),
            decision=decision,
            latency_ms=latency_ms,
        )
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.retry_attempts),
            wait=wait_exponential(multiplier=self.retry_backoff, max=2),
            retry=retry_if_exception_type(AuditError),
            reraise=True,
        )
        try:
            async for attempt in retrying:
                with attempt:
                    stored = await self.sink.append(record)
        except AuditError:
            logger.error(
                "Audit record lost after %d attempt(s): agent=%s decision=%s input_hash=%s",
                self.retry_attempts,
                record.agent_id,
                record.decision.value,
                record.input_hash,
                exc_info=True,
            )
            raise
        return stored
