"""SQL store and sink translate database failures into domain errors."""

from datetime import datetime, timezone
from uuid import uuid4

import pytest
from sqlalchemy.exc import OperationalError

from aegis_guardrails.errors import AuditError, StoreError
from aegis_guardrails.schemas.audit import AuditRecord
from aegis_guardrails.schemas.evaluation import Decision
from aegis_guardrails.storage.repositories import SqlAuditSink, SqlPolicyStore
from aegis_guardrails.utils.digest import input_hash


class BrokenSession:
    """Session whose every database round trip fails."""

    def __init__(self, error):
        self.error = error
        self.added = []

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        return False

    def add(self, obj):
        self.added.append(obj)

    async def execute(self, *args, **kwargs):
        raise self.error

    async def flush(self):
        raise self.error

    async def commit(self):
        raise self.error


def _session_maker(error):
    return lambda: BrokenSession(error)


def _operational_error():
    return OperationalError("SELECT 1", {}, ConnectionRefusedError("connection refused"))


@pytest.mark.asyncio
async def test_policy_fetch_failure_raises_store_error():
    error = _operational_error()
    store = SqlPolicyStore(_session_maker(error))

    with pytest.raises(StoreError) as excinfo:
        await store.fetch_enabled_policies(str(uuid4()))

    assert excinfo.value.__cause__ is error


@pytest.mark.asyncio
async def test_policy_fetch_connection_failure_raises_store_error():
    error = ConnectionRefusedError("connection refused")
    store = SqlPolicyStore(_session_maker(error))

    with pytest.raises(StoreError) as excinfo:
        await store.fetch_enabled_policies(str(uuid4()))

    assert excinfo.value.__cause__ is error


@pytest.mark.asyncio
async def test_audit_append_failure_raises_audit_error():
    error = _operational_error()
    sink = SqlAuditSink(_session_maker(error))
    record = AuditRecord(
        agent_id=str(uuid4()),
        timestamp=datetime.now(timezone.utc),
        input_hash=input_hash("hello"),
        decision=Decision.ALLOWED,
        latency_ms=1,
    )

    with pytest.raises(AuditError) as excinfo:
        await sink.append(record)

    assert excinfo.value.__cause__ is error
