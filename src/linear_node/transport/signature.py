"""HMAC-SHA256 verification of Linear webhook deliveries."""

import hashlib
import hmac
from typing import Optional, Union


def _to_bytes(value: Union[str, bytes]) -> bytes:
    return value.encode("utf-8") if isinstance(value, str) else value


def compute_webhook_signature(payload: Union[str, bytes], secret: str) -> str:
    """Hex HMAC-SHA256 of the raw body."""
    return hmac.new(_to_bytes(secret), _to_bytes(payload), hashlib.sha256).hexdigest()


def verify_webhook_signature(
    payload: Union[str, bytes],
    signature: Optional[str],
    secret: str,
) -> bool:
    """Check a ``Linear-Signature`` header against the raw body.

    Signatures of the wrong length are rejected before the constant-time
    comparison.
    """
    if not signature:
        return False
    expected = compute_webhook_signature(payload, secret)
    provided = _to_bytes(signature)
    if len(provided) != len(expected):
        return False
    return hmac.compare_digest(provided, expected.encode("ascii"))
