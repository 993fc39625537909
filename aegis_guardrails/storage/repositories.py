"""Repository functions for policies and audit logs, plus the SQL-backed store and sink."""

from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from aegis_guardrails.errors import AuditError, StoreError
from aegis_guardrails.models import AuditLog, Policy
from aegis_guardrails.schemas.audit import AuditRecord
from aegis_guardrails.schemas.policy import PolicySnapshot


def _now() -> datetime:
    return datetime.now(timezone.utc)


async def get_enabled_policies_for_agent(db: AsyncSession, agent_id: str) -> list[Policy]:
    """
    Enabled policies that apply to the agent: scoped to it, or to all agents
    (agent_id IS NULL). Ordered by creation so a snapshot iterates stably.
    """
    result = await db.execute(
        select(Policy)
        .where(Policy.enabled.is_(True))
        .where(or_(Policy.agent_id.is_(None), Policy.agent_id == agent_id))
        .order_by(Policy.created_at, Policy.id)
    )
    return list(result.scalars().all())


async def list_policies(
    db: AsyncSession, agent_id: str | None = None, enabled: bool | None = None
) -> list[Policy]:
    """List policies, optionally filtered by agent scope and enabled flag."""
    query = select(Policy).order_by(Policy.created_at, Policy.id)
    if agent_id is not None:
        query = query.where(Policy.agent_id == agent_id)
    if enabled is not None:
        query = query.where(Policy.enabled.is_(enabled))
    result = await db.execute(query)
    return list(result.scalars().all())


async def create_policy(
    db: AsyncSession,
    customer_id: str,
    name: str,
    policy_type: str,
    rule_spec: dict | None = None,
    agent_id: str | None = None,
    description: str | None = None,
    enabled: bool = True,
) -> Policy:
    """Create a policy."""
    policy = Policy(
        id=str(uuid4()),
        customer_id=customer_id,
        name=name,
        description=description,
        agent_id=agent_id,
        policy_type=policy_type,
        rule_spec=rule_spec,
        enabled=enabled,
        created_at=_now(),
    )
    db.add(policy)
    await db.flush()
    return policy


async def create_audit_log(db: AsyncSession, record: AuditRecord) -> AuditLog:
    """Append an audit log row."""
    row = AuditLog(
        agent_id=record.agent_id,
        policy_id=record.policy_id,
        timestamp=record.timestamp,
        input_hash=record.input_hash,
        decision=record.decision.value,
        latency_ms=record.latency_ms,
    )
    db.add(row)
    await db.flush()
    return row


async def list_audit_logs(
    db: AsyncSession, agent_id: str | None = None, limit: int = 100
) -> list[AuditLog]:
    """Most recent audit logs first."""
    query = select(AuditLog).order_by(AuditLog.id.desc()).limit(limit)
    if agent_id is not None:
        query = query.where(AuditLog.agent_id == agent_id)
    result = await db.execute(query)
    return list(result.scalars().all())



async def count_audit_logs_by_decision(db: AsyncSession) -> dict[str, int]:
    """Number of recorded evaluations per decision."""
    result = await db.execute(
        select(AuditLog.decision, func.count(AuditLog.id)).group_by(AuditLog.decision)
    )
    return {decision: count for decision, count in result.all()}

class SqlPolicyStore:
    """Policy store reading one committed snapshot per fetch."""

    def __init__(self, session_maker: async_sessionmaker[AsyncSession]) -> None:
        self.session_maker = session_maker

    async def fetch_enabled_policies(self, agent_id: str) -> list[PolicySnapshot]:
        try:
            async with self.session_maker() as session:
                rows = await get_enabled_policies_for_agent(session, agent_id)
                return [PolicySnapshot.model_validate(row) for row in rows]
        except (SQLAlchemyError, OSError) as exc:
            raise StoreError(f"Policy lookup failed for agent {agent_id}") from exc


class SqlAuditSink:
    """Audit sink writing each record in its own transaction."""

    def __init__(self, session_maker: async_sessionmaker[AsyncSession]) -> None:
        self.session_maker = session_maker

    async def append(self, record: AuditRecord) -> AuditRecord:
        try:
            async with self.session_maker() as session:
                row = await create_audit_log(session, record)
                await session.commit()
                return record.model_copy(update={"id": row.id})
        except (SQLAlchemyError, OSError) as exc:
            raise AuditError("Failed to persist audit record") from exc
