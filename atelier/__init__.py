"""
atelier — jewelry storefront backend.

    from atelier import create_app, build_container, create_database

Catalog, accounts, checkout with Razorpay-style payment settlement,
and a client-side cart store.
"""

__version__ = "0.1.0"

from atelier._types import (
    Result,
    Ok,
    Error,
    LazyCoroResult,
    ById,
    BySlug,
    ProductRef,
    parse_ref,
)
from atelier.errors import ErrorKind, ShopError, Errors
from atelier.config import Settings, get_settings
from atelier.db import create_database
from atelier.container import Container, build_container
from atelier.app import create_app

__all__ = (
    "__version__",
    "Result",
    "Ok",
    "Error",
    "LazyCoroResult",
    "ById",
    "BySlug",
    "ProductRef",
    "parse_ref",
    "ErrorKind",
    "ShopError",
    "Errors",
    "Settings",
    "get_settings",
    "create_database",
    "Container",
    "build_container",
    "create_app",
)
