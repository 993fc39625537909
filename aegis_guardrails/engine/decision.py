"""
Decision engine - combines built-in checks and custom policies into one outcome.

Precedence:
    1. PII check                      finding -> DENIED
    2. Content safety (if not DENIED) finding -> DENIED
    3. Prompt injection (if not DENIED) finding -> WARN, only from ALLOWED
    4. Policies in store order:
       custom    -> deny-keyword match is DENIED and ends the scan
       built-in  -> attributed when its check set the current decision
    5. Nothing fired -> ALLOWED, "No issues detected."

Results are folded with DENIED > WARN > ALLOWED; a decision never goes down.
"""

import logging
from dataclasses import dataclass, replace
from typing import Sequence

from aegis_guardrails.engine.checks import Check, FailMode, Finding, Severity, default_checks, run_check
from aegis_guardrails.engine.rules import match_deny_keyword
from aegis_guardrails.errors import StoreError
from aegis_guardrails.schemas.evaluation import Decision, EvaluationOutcome, EvaluationRequest
from aegis_guardrails.schemas.policy import PolicySnapshot, PolicyType

logger = logging.getLogger(__name__)

NO_ISSUES = "No issues detected."
POLICY_STORE_CHECK = "Policy_Store"

_SEVERITY_DECISION = {Severity.DENY: Decision.DENIED, Severity.WARN: Decision.WARN}


@dataclass(frozen=True)
class Verdict:
    """Running state of one evaluation."""

    decision: Decision = Decision.ALLOWED
    reason: str = NO_ISSUES
    checks_run: tuple[str, ...] = ()
    source: PolicyType | None = None  # type of the check that set the decision
    attributed_policy_id: str | None = None

    def fold(
        self,
        finding: Finding | None,
        source: PolicyType | None,
        takes_over: bool = False,
    ) -> "Verdict":
        """
        Fold one finding in. A stronger decision replaces the current one;
        with takes_over, an equally strong one replaces the reason too.
        """
        if finding is None:
            return self
        decision = _SEVERITY_DECISION[finding.severity]
        checks_run = self.checks_run + (finding.check_id,)
        if decision.rank > self.decision.rank or (takes_over and decision.rank == self.decision.rank):
            return replace(
                self,
                decision=decision,
                reason=finding.reason,
                checks_run=checks_run,
                source=None if finding.fault else source,
            )
        return replace(self, checks_run=checks_run)

    def attribute(self, policy: PolicySnapshot) -> "Verdict":
        """Attribute a built-in policy if its check set the decision and nothing is attributed yet."""
        if self.attributed_policy_id is not None or self.source is not policy.policy_type:
            return self
        return replace(self, attributed_policy_id=policy.id)

    def outcome(self) -> EvaluationOutcome:
        return EvaluationOutcome(
            decision=self.decision,
            reason=self.reason,
            checks_run=self.checks_run,
            attributed_policy_id=self.attributed_policy_id,
        )


class DecisionEngine:
    """
    Pure decision logic: request + policy snapshot in, outcome out.

    Holds no per-request state, so one instance serves concurrent
    evaluations.
    """

    def __init__(
        self,
        checks: Sequence[Check] | None = None,
        fail_mode: FailMode = FailMode.OPEN,
    ) -> None:
        self.checks = list(checks) if checks is not None else default_checks()
        self.fail_mode = fail_mode

    def evaluate(
        self,
        request: EvaluationRequest,
        applicable_policies: Sequence[PolicySnapshot],
        store_fault: StoreError | None = None,
    ) -> EvaluationOutcome:
        text = request.input_text
        verdict = Verdict()

        for check in self.checks:
            if verdict.decision is Decision.DENIED:
                break
            finding = run_check(check, text, request.context, self.fail_mode)
            verdict = verdict.fold(finding, check.policy_type)

        if store_fault is not None and self.fail_mode is FailMode.CLOSED:
            verdict = verdict.fold(
                Finding(
                    severity=Severity.DENY,
                    check_id=POLICY_STORE_CHECK,
                    reason="Policy lookup failed; denied under fail-closed mode.",
                    fault=True,
                ),
                None,
            )

        for policy in applicable_policies:
            if policy.policy_type is PolicyType.CUSTOM:
                keyword = match_deny_keyword(policy.rule_spec, text)
                if keyword is None:
                    continue
                finding = Finding(
                    severity=Severity.DENY,
                    check_id=f"Custom_Policy:{policy.name}",
                    reason=f"Custom policy '{policy.name}' triggered by keyword '{keyword}'.",
                )
                verdict = replace(
                    verdict.fold(finding, PolicyType.CUSTOM, takes_over=True),
                    attributed_policy_id=policy.id,
                )
                break
            verdict = verdict.attribute(policy)

        logger.debug(
            "Evaluated agent=%s decision=%s checks=%s",
            request.agent_id,
            verdict.decision.value,
            list(verdict.checks_run),
        )
        return verdict.outcome()
