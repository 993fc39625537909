"""Guardrails exception hierarchy."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from aegis_guardrails.schemas.evaluation import EvaluationOutcome


class GuardrailsError(Exception):
    """Base exception for all guardrails errors."""


class CheckFault(GuardrailsError):
    """Raised when a detector fails while inspecting input."""

    def __init__(self, check_id: str, cause: BaseException | None = None) -> None:
        self.check_id = check_id
        self.cause = cause
        super().__init__(f"Check {check_id} failed: {cause!r}")


class StoreError(GuardrailsError):
    """Raised when the policy store cannot be queried."""


class AuditError(GuardrailsError):
    """Raised when an audit record could not be persisted.

    ``outcome`` holds the decision that was validly computed before the
    write failed, so callers can still return it.
    """

    def __init__(self, message: str, outcome: EvaluationOutcome | None = None) -> None:
        self.outcome = outcome
        super().__init__(message)
