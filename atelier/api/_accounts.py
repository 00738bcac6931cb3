"""Registration, login, profile and the address book."""

from fastapi import APIRouter

from atelier.api._codecs import (
    AddressIn,
    AddressOut,
    AuthOut,
    LoginIn,
    OkOut,
    ProfileIn,
    ProfileOut,
    RegisterIn,
    UserOut,
)
from atelier.api._deps import ContainerDep, CurrentUser
from atelier.api._errors import unwrap

router = APIRouter(prefix="/api", tags=["accounts"])


@router.post("/auth/register")
async def register(body: RegisterIn, container: ContainerDep) -> AuthOut:
    user = unwrap(await container.accounts.register(body.to_domain()))
    return AuthOut(token=container.tokens.issue(user.id), user=UserOut.from_domain(user))


@router.post("/auth/login")
async def login(body: LoginIn, container: ContainerDep) -> AuthOut:
    user = unwrap(await container.accounts.authenticate(body.email, body.password))
    return AuthOut(token=container.tokens.issue(user.id), user=UserOut.from_domain(user))


@router.get("/me")
async def me(user_id: CurrentUser, container: ContainerDep) -> ProfileOut:
    return ProfileOut.from_profile(unwrap(await container.accounts.profile(user_id)))


@router.put("/me")
async def update_me(
    body: ProfileIn, user_id: CurrentUser, container: ContainerDep
) -> UserOut:
    user = unwrap(
        await container.accounts.update_profile(user_id, body.name, body.phone)
    )
    return UserOut.from_domain(user)


@router.get("/addresses")
async def list_addresses(
    user_id: CurrentUser, container: ContainerDep
) -> list[AddressOut]:
    return [
        AddressOut.from_domain(a) for a in await container.accounts.addresses(user_id)
    ]


@router.post("/addresses")
async def add_address(
    body: AddressIn, user_id: CurrentUser, container: ContainerDep
) -> AddressOut:
    address = unwrap(await container.accounts.add_address(user_id, body.to_domain()))
    return AddressOut.from_domain(address)


@router.put("/addresses/{address_id}")
async def update_address(
    address_id: str, body: AddressIn, user_id: CurrentUser, container: ContainerDep
) -> AddressOut:
    address = unwrap(
        await container.accounts.update_address(user_id, address_id, body.to_domain())
    )
    return AddressOut.from_domain(address)


@router.delete("/addresses/{address_id}")
async def delete_address(
    address_id: str, user_id: CurrentUser, container: ContainerDep
) -> OkOut:
    unwrap(await container.accounts.delete_address(user_id, address_id))
    return OkOut()
