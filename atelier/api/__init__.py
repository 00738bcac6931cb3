"""
HTTP API — FastAPI routers under /api.
"""

from fastapi import FastAPI

from atelier.api._accounts import router as accounts_router
from atelier.api._catalog import router as catalog_router
from atelier.api._checkout import router as checkout_router
from atelier.api._system import router as system_router
from atelier.api._errors import STATUS, install_error_handlers, unwrap

ROUTERS = (system_router, accounts_router, catalog_router, checkout_router)


def install_routes(app: FastAPI) -> None:
    for router in ROUTERS:
        app.include_router(router)
    install_error_handlers(app)


__all__ = ("ROUTERS", "STATUS", "install_routes", "install_error_handlers", "unwrap")
