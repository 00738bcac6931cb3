"""
Checkout — order placement, payment settlement and fulfilment.

Placement and settlement are computation graphs (see `atelier.graph`);
each terminal node has an `execute()` that returns a Result.

    result = await PlaceOrderNode.execute(request, ctx)
    match result:
        case Ok(placed): ...   # open the payment UI with placed.intent_id
        case Error(e): ...     # e.kind tells the caller what went wrong
"""

from atelier.checkout._context import CheckoutContext
from atelier.checkout._status import NEXT, SETTLED, advance
from atelier.checkout._orders import OrderStore, to_order
from atelier.checkout._place import (
    PricedLine,
    RequestNode,
    ResolvedItemsNode,
    TotalNode,
    PersistedOrderNode,
    IntentNode,
    PlaceOrderNode,
)
from atelier.checkout._settle import (
    CallbackNode,
    SignatureNode,
    ReceiptNode,
    SettleNode,
)
from atelier.checkout._service import CheckoutService

__all__ = (
    "CheckoutContext",
    "NEXT",
    "SETTLED",
    "advance",
    "OrderStore",
    "to_order",
    "PricedLine",
    "RequestNode",
    "ResolvedItemsNode",
    "TotalNode",
    "PersistedOrderNode",
    "IntentNode",
    "PlaceOrderNode",
    "CallbackNode",
    "SignatureNode",
    "ReceiptNode",
    "SettleNode",
    "CheckoutService",
)
