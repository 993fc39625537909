"""Content digests for audit records."""

import hashlib


def input_hash(text: str) -> str:
    """Compute SHA256 hex digest of the input text (UTF-8)."""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()
