"""
Webhook signature verification for N-Genius notifications.
"""
import hashlib
import hmac
from typing import Optional

from order_sync.core.exceptions import SignatureError
from order_sync.core.logging import get_logger

logger = get_logger(__name__)

SIGNATURE_HEADER = "X-N-Genius-Signature"


def compute_signature(body: bytes, secret: str) -> str:
    """Hex HMAC-SHA256 of the raw body."""
    return hmac.new(secret.encode(), body, hashlib.sha256).hexdigest()


def verify_gateway_signature(
    body: bytes,
    signature: Optional[str],
    secret: str,
    mode: str,
) -> bool:
    """
    Verify a webhook signature against the raw request body.

    A missing signature is rejected in every mode. In sandbox mode a
    mismatching signature is tolerated and logged; in any other mode it
    is rejected.

    Returns:
        True when the signature matched, False when it was bypassed.

    Raises:
        SignatureError: On a missing or (outside sandbox) invalid signature
    """
    if not signature or not signature.strip():
        logger.error("Webhook signature missing")
        raise SignatureError("Missing signature")

    expected = compute_signature(body, secret)
    if hmac.compare_digest(expected.encode(), signature.strip().encode()):
        return True

    if mode == "sandbox":
        logger.warning(
            "Webhook signature mismatch tolerated in sandbox mode",
            mode=mode,
        )
        return False

    logger.error("Webhook signature invalid", mode=mode)
    raise SignatureError("Invalid signature")
