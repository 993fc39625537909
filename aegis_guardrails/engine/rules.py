"""Custom rule evaluator - deny-keyword matching for custom policies."""

from typing import Any


def deny_keywords(rule_spec: dict[str, Any] | None) -> list[str]:
    """Return the declared deny keywords, skipping empty or non-string entries."""
    if not isinstance(rule_spec, dict):
        return []
    keywords = rule_spec.get("deny_keywords")
    if not isinstance(keywords, (list, tuple)):
        return []
    return [k for k in keywords if isinstance(k, str) and k]


def match_deny_keyword(rule_spec: dict[str, Any] | None, input_text: str) -> str | None:
    """
    Case-insensitive substring match of each keyword in declared order.
    First match wins; returns the keyword as declared, or None.
    """
    haystack = input_text.lower()
    for keyword in deny_keywords(rule_spec):
        if keyword.lower() in haystack:
            return keyword
    return None
