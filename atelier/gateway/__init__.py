"""
Payment gateway — intents, signatures and provider adapters.

    from atelier.gateway import RazorpayGateway, verify_signature

    intent = await gateway.create_intent(amount, "INR", receipt=order_id)
    ok = verify_signature(secret, intent_id, payment_id, signature)
"""

from atelier.gateway._types import PaymentIntent, PaymentGateway
from atelier.gateway._razorpay import RazorpayGateway
from atelier.gateway._memory import MemoryGateway
from atelier.gateway.signature import sign_payment, verify_signature

__all__ = (
    "PaymentIntent",
    "PaymentGateway",
    "RazorpayGateway",
    "MemoryGateway",
    "sign_payment",
    "verify_signature",
)
