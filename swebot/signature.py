"""Verification of HMAC SHA-256 webhook signatures."""

from __future__ import annotations

import hashlib
import hmac

_PREFIX = "sha256="


class SignatureError(ValueError):
    """Raised when a signature header is missing or malformed."""


def verify_signature(payload: bytes, signature: str, secret: str) -> bool:
    """Check a ``sha256=<hex>`` signature of ``payload`` made with ``secret``.

    The comparison is constant-time.
    """
    if not signature.startswith(_PREFIX):
        return False
    received = signature[len(_PREFIX):]
    expected = hmac.new(secret.encode(), payload, hashlib.sha256).hexdigest()
    return hmac.compare_digest(received.encode(), expected.encode())


def validate_signature_header(header: str) -> None:
    """Raise :class:`SignatureError` unless ``header`` looks like ``sha256=<hash>``."""
    if not header:
        raise SignatureError("missing X-Hub-Signature-256 header")
    if not header.startswith(_PREFIX):
        raise SignatureError("invalid signature format, expected 'sha256=<hash>'")