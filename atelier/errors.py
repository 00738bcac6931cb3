"""
Error taxonomy.

Every failure surfaced to a caller is a ShopError with a kind and a
human-readable message. Internal detail (storage codes, stack traces) never
goes into the message.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(Enum):
    INVALID_INPUT = "invalid_input"
    INVALID_PRODUCT = "invalid_product"
    INVALID_AMOUNT = "invalid_amount"
    INSUFFICIENT_STOCK = "insufficient_stock"
    OUT_OF_STOCK = "out_of_stock"
    SIGNATURE_MISMATCH = "signature_mismatch"
    GATEWAY_UNAVAILABLE = "gateway_unavailable"
    UNAUTHORIZED = "unauthorized"
    NOT_FOUND = "not_found"
    INVALID_TRANSITION = "invalid_transition"
    CONFLICT = "conflict"


class ShopError(Exception):
    def __init__(self, kind: ErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message

    @property
    def code(self) -> str:
        return self.kind.name

    def __repr__(self) -> str:
        return f"ShopError({self.kind.name}, {self.message!r})"


class Errors:
    @staticmethod
    def invalid_input(msg: str) -> ShopError:
        return ShopError(ErrorKind.INVALID_INPUT, msg)

    @staticmethod
    def invalid_product(ref: str | None = None) -> ShopError:
        if ref is None:
            return ShopError(ErrorKind.INVALID_PRODUCT, "Invalid product")
        return ShopError(ErrorKind.INVALID_PRODUCT, f"Invalid product: {ref}")

    @staticmethod
    def invalid_amount(minimum: int) -> ShopError:
        return ShopError(
            ErrorKind.INVALID_AMOUNT,
            f"Amount must be at least {minimum} minor units",
        )

    @staticmethod
    def insufficient_stock(name: str, available: int) -> ShopError:
        return ShopError(
            ErrorKind.INSUFFICIENT_STOCK, f'"{name}" only has {available} left'
        )

    @staticmethod
    def out_of_stock(name: str) -> ShopError:
        return ShopError(ErrorKind.OUT_OF_STOCK, f'"{name}" is out of stock')

    @staticmethod
    def signature_mismatch() -> ShopError:
        return ShopError(ErrorKind.SIGNATURE_MISMATCH, "Invalid signature")

    @staticmethod
    def gateway_unavailable(msg: str = "Payment gateway unavailable") -> ShopError:
        return ShopError(ErrorKind.GATEWAY_UNAVAILABLE, msg)

    @staticmethod
    def unauthorized() -> ShopError:
        return ShopError(ErrorKind.UNAUTHORIZED, "Unauthorized")

    @staticmethod
    def not_found(entity: str, ident: str) -> ShopError:
        return ShopError(ErrorKind.NOT_FOUND, f"{entity} {ident} not found")

    @staticmethod
    def invalid_transition(current: str, target: str) -> ShopError:
        return ShopError(
            ErrorKind.INVALID_TRANSITION,
            f"Cannot move order from {current} to {target}",
        )

    @staticmethod
    def conflict(msg: str) -> ShopError:
        return ShopError(ErrorKind.CONFLICT, msg)


__all__ = ("ErrorKind", "ShopError", "Errors")
