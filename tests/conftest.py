"""Shared fixtures: in-memory policy store and audit sink."""

import pytest

from aegis_guardrails.audit.recorder import AuditRecorder
from aegis_guardrails.engine.checks import FailMode
from aegis_guardrails.engine.decision import DecisionEngine
from aegis_guardrails.errors import AuditError
from aegis_guardrails.service import GuardrailService


class FakePolicyStore:
    """Returns enabled policies for the agent in insertion order, or raises."""

    def __init__(self, policies=None, error=None):
        self.policies = list(policies or [])
        self.error = error
        self.requested = []

    async def fetch_enabled_policies(self, agent_id):
        self.requested.append(agent_id)
        if self.error is not None:
            raise self.error
        return [p for p in self.policies if p.agent_id in (None, agent_id)]


class InMemoryAuditSink:
    """Keeps appended records; the first `failures` calls raise AuditError."""

    def __init__(self, failures=0):
        self.records = []
        self.failures = failures
        self.calls = 0

    async def append(self, record):
        self.calls += 1
        if self.calls <= self.failures:
            raise AuditError("audit sink unavailable")
        stored = record.model_copy(update={"id": len(self.records) + 1})
        self.records.append(stored)
        return stored


@pytest.fixture
def audit_sink():
    return InMemoryAuditSink()


@pytest.fixture
def make_sink():
    return InMemoryAuditSink


@pytest.fixture
def make_store():
    return FakePolicyStore


@pytest.fixture
def make_service(audit_sink):
    """Build a GuardrailService over fakes."""

    def _make(policies=None, store_error=None, sink=None, fail_mode=FailMode.OPEN, retry_attempts=1):
        store = FakePolicyStore(policies, store_error)
        recorder = AuditRecorder(sink or audit_sink, retry_attempts=retry_attempts, retry_backoff=0)
        return GuardrailService(store, recorder, DecisionEngine(fail_mode=fail_mode))

    return _make
