"""
Error mapping — ShopError kinds to HTTP, one table.

Every failure leaves as `{"ok": false, "code": ..., "error": ...}`.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from kungfu import Result, Ok, Error

from atelier.errors import ErrorKind, ShopError

log = structlog.get_logger(__name__)

STATUS: dict[ErrorKind, int] = {
    ErrorKind.INVALID_INPUT: 400,
    ErrorKind.INVALID_PRODUCT: 400,
    ErrorKind.INVALID_AMOUNT: 400,
    ErrorKind.SIGNATURE_MISMATCH: 400,
    ErrorKind.UNAUTHORIZED: 401,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.INSUFFICIENT_STOCK: 409,
    ErrorKind.OUT_OF_STOCK: 409,
    ErrorKind.INVALID_TRANSITION: 409,
    ErrorKind.CONFLICT: 409,
    ErrorKind.GATEWAY_UNAVAILABLE: 502,
}


def unwrap[T](result: Result[T, ShopError]) -> T:
    match result:
        case Ok(value):
            return value
        case Error(e):
            raise e


def _body(code: str, message: str) -> dict[str, object]:
    return {"ok": False, "code": code, "error": message}


async def _shop_error(_: Request, exc: Exception) -> JSONResponse:
    if not isinstance(exc, ShopError):
        raise exc
    return JSONResponse(
        status_code=STATUS.get(exc.kind, 400), content=_body(exc.code, exc.message)
    )


async def _validation_error(_: Request, exc: Exception) -> JSONResponse:
    if not isinstance(exc, RequestValidationError):
        raise exc
    problems: list[str] = []
    for err in exc.errors():
        where = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        msg = str(err.get("msg", "invalid"))
        problems.append(f"{where}: {msg}" if where else msg)
    message = "; ".join(problems) or "Invalid input"
    return JSONResponse(
        status_code=400, content=_body(ErrorKind.INVALID_INPUT.name, message)
    )


async def _unexpected(request: Request, exc: Exception) -> JSONResponse:
    log.exception("http.unhandled", path=request.url.path, method=request.method)
    return JSONResponse(status_code=500, content=_body("INTERNAL", "Internal error"))


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ShopError, _shop_error)
    app.add_exception_handler(RequestValidationError, _validation_error)
    app.add_exception_handler(Exception, _unexpected)


__all__ = ("STATUS", "unwrap", "install_error_handlers")
