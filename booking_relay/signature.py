"""
Razorpay payment signature verification.

Checkout returns ``razorpay_signature``, the hex HMAC-SHA256 of
``"<order_id>|<payment_id>"`` keyed with the account secret. The message
format must match the gateway's exactly: pipe-delimited, order id first.
"""
import hashlib
import hmac


def generate_signature(secret: str, order_id: str, payment_id: str) -> str:
    """Compute the signature the gateway issues for an order/payment pair."""
    message = f"{order_id}|{payment_id}"
    return hmac.new(
        secret.encode("utf-8"),
        message.encode("utf-8"),
        hashlib.sha256,
    ).hexdigest()


def verify_payment_signature(secret: str, order_id: str, payment_id: str, signature: str) -> bool:
    """Return True iff ``signature`` is exactly the gateway signature for the pair."""
    if not secret or not signature:
        return False

    expected = generate_signature(secret, order_id, payment_id)
    return hmac.compare_digest(expected.encode("utf-8"), signature.encode("utf-8"))
