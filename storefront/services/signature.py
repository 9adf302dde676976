"""Checkout signature verification (Razorpay standard checkout)."""
import hashlib
import hmac


def checkout_signature(order_id: str, payment_id: str, secret: str) -> str:
    message = f"{order_id}|{payment_id}".encode()
    return hmac.new(secret.encode(), message, hashlib.sha256).hexdigest()


def verify_checkout_signature(order_id: str, payment_id: str, signature: str, secret: str) -> bool:
    """
    Check the signature the widget handed back against our key secret.

    The signature is HMAC-SHA256 over ``"{order_id}|{payment_id}"``.
    """
    if not secret:
        raise ValueError("Key secret not configured")
    digest = checkout_signature(order_id, payment_id, secret)
    return hmac.compare_digest(digest, signature or "")
