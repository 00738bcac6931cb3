"""
Cart — client-side cart state with pluggable persistence.
"""

from atelier.cart._storage import CartStorage, MemoryStorage
from atelier.cart._store import CART_KEY, CartLine, CartState, CartStore

__all__ = (
    "CartStorage",
    "MemoryStorage",
    "CART_KEY",
    "CartLine",
    "CartState",
    "CartStore",
)
