"""
CartStore — the shopper's cart as an explicit object.

    store = await CartStore.load(storage)
    unsubscribe = store.subscribe(lambda state: render(state))
    await store.add(product, quantity=2)
    lines = store.to_order_lines()

Every mutation persists the items and then notifies subscribers. Changes made
elsewhere (another tab, another process) arrive through `apply_external`: a
well-formed snapshot replaces the local items, last writer wins. A malformed
payload is ignored and the local cart is kept.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass, replace

import structlog
from pydantic import TypeAdapter, ValidationError

from atelier._types import ProductId, parse_ref
from atelier.cart._storage import CartStorage
from atelier.domain import OrderLine, Product

log = structlog.get_logger(__name__)

CART_KEY = "atelier_cart"


@dataclass(frozen=True, slots=True)
class CartLine:
    product_id: ProductId
    slug: str
    name: str
    price: int
    quantity: int
    image_url: str | None = None


@dataclass(frozen=True, slots=True)
class CartState:
    items: tuple[CartLine, ...] = ()
    open: bool = False

    @property
    def count(self) -> int:
        return sum(line.quantity for line in self.items)

    @property
    def subtotal(self) -> int:
        return sum(line.price * line.quantity for line in self.items)


type Listener = Callable[[CartState], None]
type ItemsUpdater = Callable[[tuple[CartLine, ...]], Iterable[CartLine]]

_lines = TypeAdapter(list[CartLine])


def _decode(payload: str | None) -> tuple[CartLine, ...] | None:
    """Parsed items, or None when the payload is not a valid cart."""
    if payload is None:
        return ()
    try:
        lines = _lines.validate_json(payload)
    except ValidationError:
        return None
    if any(line.quantity <= 0 or line.price < 0 for line in lines):
        return None
    return tuple(lines)


class CartStore:
    def __init__(self, storage: CartStorage, key: str = CART_KEY) -> None:
        self._storage = storage
        self._key = key
        self._state = CartState()
        self._listeners: list[Listener] = []

    @classmethod
    async def load(cls, storage: CartStorage, key: str = CART_KEY) -> "CartStore":
        store = cls(storage, key)
        items = _decode(await storage.get(key))
        if items is None:
            log.warning("cart.discarded_corrupt_payload", storage=storage.name, key=key)
            items = ()
        store._state = CartState(items=items)
        return store

    @property
    def state(self) -> CartState:
        return self._state

    @property
    def count(self) -> int:
        return self._state.count

    # ───────────────────────────────────────────────────────────────────────────
    # Subscribers
    # ───────────────────────────────────────────────────────────────────────────

    def subscribe(self, fn: Listener) -> Callable[[], None]:
        """Register a listener; it is called right away with the current state."""
        self._listeners.append(fn)
        fn(self._state)

        def unsubscribe() -> None:
            if fn in self._listeners:
                self._listeners.remove(fn)

        return unsubscribe

    async def _commit(self, state: CartState) -> None:
        self._state = state
        await self._storage.set(self._key, _lines.dump_json(list(state.items)).decode())
        for fn in list(self._listeners):
            fn(state)

    # ───────────────────────────────────────────────────────────────────────────
    # Mutations
    # ───────────────────────────────────────────────────────────────────────────

    async def set_open(self, open: bool) -> None:
        await self._commit(replace(self._state, open=open))

    async def set_items(self, items: Iterable[CartLine] | ItemsUpdater) -> None:
        if callable(items):
            items = items(self._state.items)
        await self._commit(replace(self._state, items=tuple(items)))

    async def add(self, product: Product, quantity: int = 1) -> None:
        if quantity <= 0:
            raise ValueError("quantity must be positive")

        items = list(self._state.items)
        for i, line in enumerate(items):
            if line.product_id == product.id:
                items[i] = replace(line, quantity=line.quantity + quantity)
                break
        else:
            cover = product.images[0].url if product.images else None
            items.append(
                CartLine(
                    product_id=product.id,
                    slug=product.slug,
                    name=product.name,
                    price=product.price,
                    quantity=quantity,
                    image_url=cover,
                )
            )
        await self._commit(replace(self._state, items=tuple(items)))

    async def remove(self, product_id: ProductId) -> None:
        await self.set_items(
            lambda items: (line for line in items if line.product_id != product_id)
        )

    async def clear(self) -> None:
        await self._commit(replace(self._state, items=()))

    async def apply_external(self, payload: str | None) -> bool:
        """
        Merge a snapshot written by someone else.

        Returns True if the local items were replaced.
        """
        items = _decode(payload)
        if items is None:
            log.debug("cart.ignored_external_payload", key=self._key)
            return False
        await self._commit(replace(self._state, items=items))
        return True

    # ───────────────────────────────────────────────────────────────────────────
    # Checkout
    # ───────────────────────────────────────────────────────────────────────────

    def to_order_lines(self) -> tuple[OrderLine, ...]:
        return tuple(
            OrderLine(ref=parse_ref(line.product_id or line.slug), quantity=line.quantity)
            for line in self._state.items
        )


__all__ = ("CART_KEY", "CartLine", "CartState", "CartStore")
