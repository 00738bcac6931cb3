"""Health, admin token check, public gateway key."""

from datetime import datetime, UTC
from typing import Annotated

from fastapi import APIRouter, Header

from atelier.api._codecs import HealthOut, KeyOut, OkOut
from atelier.api._deps import ContainerDep, is_admin
from atelier.errors import Errors

router = APIRouter(prefix="/api", tags=["system"])


@router.get("/health")
async def health() -> HealthOut:
    return HealthOut(time=datetime.now(UTC))


@router.get("/admin/verify")
async def admin_verify(
    container: ContainerDep,
    x_admin_token: Annotated[str | None, Header()] = None,
) -> OkOut:
    if not is_admin(container, x_admin_token):
        raise Errors.unauthorized()
    return OkOut()


@router.get("/razorpay/key")
async def gateway_key(container: ContainerDep) -> KeyOut:
    key_id = container.gateway.key_id
    if not key_id:
        raise Errors.gateway_unavailable("Razorpay key missing")
    return KeyOut(key_id=key_id)
