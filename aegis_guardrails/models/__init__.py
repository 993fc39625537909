"""Database models."""

from aegis_guardrails.models.audit import AuditLog
from aegis_guardrails.models.policy import Policy

__all__ = ["Policy", "AuditLog"]
