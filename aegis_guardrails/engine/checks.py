"""
Built-in checks - detectors that inspect a prompt and may raise a finding.

Every check exposes the same capability:

    detect(input_text, context) -> Finding | None

The shipped detectors are phrase matchers. Real detectors (classifiers,
external moderation APIs) implement the same interface and can be passed to
the DecisionEngine in their place.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol

from aegis_guardrails.errors import CheckFault
from aegis_guardrails.schemas.policy import PolicyType

logger = logging.getLogger(__name__)


class Severity(str, Enum):
    DENY = "DENY"
    WARN = "WARN"


class FailMode(str, Enum):
    """What a failing dependency turns into."""

    OPEN = "open"
    CLOSED = "closed"


@dataclass(frozen=True)
class Finding:
    """A single check's verdict on the input."""

    severity: Severity
    check_id: str
    reason: str
    fault: bool = False  # produced by a failure, not by the detector


class Check(Protocol):
    check_id: str
    policy_type: PolicyType

    def detect(self, input_text: str, context: dict[str, Any]) -> Finding | None: ...


class PhraseCheck:
    """Flags input containing any of a set of phrases."""

    check_id = ""
    policy_type: PolicyType
    severity = Severity.DENY
    reason = ""
    default_phrases: tuple[str, ...] = ()
    case_sensitive = False

    def __init__(self, phrases: list[str] | tuple[str, ...] | None = None) -> None:
        self.phrases = tuple(p for p in (phrases if phrases is not None else self.default_phrases) if p)

    def detect(self, input_text: str, context: dict[str, Any]) -> Finding | None:
        haystack = input_text if self.case_sensitive else input_text.lower()
        for phrase in self.phrases:
            needle = phrase if self.case_sensitive else phrase.lower()
            if needle in haystack:
                return Finding(severity=self.severity, check_id=self.check_id, reason=self.reason)
        return None


class PIIDetector(PhraseCheck):
    check_id = "PII_Detection"
    policy_type = PolicyType.PII
    severity = Severity.DENY
    reason = "PII detected in prompt."
    default_phrases = ("SSN", "credit card")
    case_sensitive = True


class ContentSafetyDetector(PhraseCheck):
    check_id = "Content_Safety"
    policy_type = PolicyType.CONTENT_SAFETY
    severity = Severity.DENY
    reason = "Content safety violation detected."
    default_phrases = ("violence",)


class PromptInjectionDetector(PhraseCheck):
    check_id = "Prompt_Injection"
    policy_type = PolicyType.PROMPT_INJECTION
    severity = Severity.WARN
    reason = "Potential prompt injection detected."
    default_phrases = ("ignore all previous instructions",)


def default_checks(
    pii_phrases: list[str] | None = None,
    content_safety_phrases: list[str] | None = None,
    prompt_injection_phrases: list[str] | None = None,
) -> list[Check]:
    """Built-in checks in precedence order: PII, content safety, prompt injection."""
    return [
        PIIDetector(pii_phrases),
        ContentSafetyDetector(content_safety_phrases),
        PromptInjectionDetector(prompt_injection_phrases),
    ]


def run_check(
    check: Check,
    input_text: str,
    context: dict[str, Any],
    fail_mode: FailMode = FailMode.OPEN,
) -> Finding | None:
    """
    Run one check, containing any failure.

    A check that raises never aborts the evaluation. Fail-open turns the
    failure into "no finding"; fail-closed turns it into a DENY finding
    flagged as a fault.
    """
    try:
        return check.detect(input_text, context)
    except Exception as exc:
        fault = CheckFault(check.check_id, exc)
        logger.warning("%s (fail_mode=%s)", fault, fail_mode.value, exc_info=True)
        if fail_mode is FailMode.CLOSED:
            return Finding(
                severity=Severity.DENY,
                check_id=check.check_id,
                reason=f"Check {check.check_id} unavailable; denied under fail-closed mode.",
                fault=True,
            )
        return None
