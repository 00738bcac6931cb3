"""
Payment signatures.

The gateway signs `"{intent_id}|{payment_id}"` with the account secret
(HMAC-SHA256, lowercase hex). Verification is constant-time over the raw
bytes: the supplied signature must match exactly.
"""

import hashlib
import hmac


def sign_payment(secret: str, intent_id: str, payment_id: str) -> str:
    message = f"{intent_id}|{payment_id}".encode()
    return hmac.new(secret.encode(), message, hashlib.sha256).hexdigest()


def verify_signature(
    secret: str, intent_id: str, payment_id: str, signature: str
) -> bool:
    if not secret:
        return False
    expected = sign_payment(secret, intent_id, payment_id)
    return hmac.compare_digest(expected.encode(), signature.encode())


__all__ = ("sign_payment", "verify_signature")
