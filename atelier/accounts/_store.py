"""
AccountStore — users, credentials and the address book.

Every address operation is scoped to its owner: an address that belongs to
someone else is reported as not found.
"""

from dataclasses import dataclass

import structlog
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from kungfu import Result, Ok, Error

from atelier._types import AddressId, UserId
from atelier.accounts.passwords import check_password, hash_password, ROUNDS
from atelier.db import AddressTable, UserTable
from atelier.domain import Address, User
from atelier.errors import ErrorKind, Errors, ShopError

log = structlog.get_logger(__name__)

MIN_PASSWORD = 6
MAX_PASSWORD_BYTES = 72


# ═══════════════════════════════════════════════════════════════════════════════
# Drafts
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Registration:
    name: str
    email: str
    password: str
    phone: str | None = None


@dataclass(frozen=True, slots=True)
class AddressDraft:
    full_name: str
    phone: str
    line1: str
    city: str
    state: str
    pincode: str
    line2: str | None = None
    country: str = "India"
    is_default: bool = False


@dataclass(frozen=True, slots=True)
class Profile:
    user: User
    addresses: tuple[Address, ...]


def to_user(row: UserTable) -> User:
    return User(id=row.id, email=row.email, name=row.name, phone=row.phone)


def to_address(row: AddressTable) -> Address:
    return Address(
        id=row.id,
        user_id=row.user_id,
        full_name=row.full_name,
        phone=row.phone,
        line1=row.line1,
        line2=row.line2,
        city=row.city,
        state=row.state,
        pincode=row.pincode,
        country=row.country,
        is_default=row.is_default,
    )


def _validate_address(draft: AddressDraft) -> ShopError | None:
    required = {
        "fullName": draft.full_name,
        "phone": draft.phone,
        "line1": draft.line1,
        "city": draft.city,
        "state": draft.state,
        "pincode": draft.pincode,
    }
    missing = [name for name, value in required.items() if not value.strip()]
    if missing:
        return Errors.invalid_input(f"Missing address fields: {', '.join(missing)}")
    return None


# ═══════════════════════════════════════════════════════════════════════════════
# Store
# ═══════════════════════════════════════════════════════════════════════════════


class AccountStore:
    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        hash_rounds: int = ROUNDS,
    ) -> None:
        self._session = session_factory
        self._rounds = hash_rounds

    # ───────────────────────────────────────────────────────────────────────────
    # Users
    # ───────────────────────────────────────────────────────────────────────────

    async def register(self, reg: Registration) -> Result[User, ShopError]:
        email = reg.email.strip().lower()
        if not reg.name.strip() or not email or not reg.password:
            return Error(Errors.invalid_input("name, email, password required"))
        if len(reg.password) < MIN_PASSWORD:
            return Error(
                Errors.invalid_input(
                    f"Password must be at least {MIN_PASSWORD} characters"
                )
            )
        if len(reg.password.encode()) > MAX_PASSWORD_BYTES:
            return Error(Errors.invalid_input("Password is too long"))

        password_hash = await hash_password(reg.password, self._rounds)

        async with self._session() as session:
            row = UserTable(
                email=email,
                name=reg.name.strip(),
                phone=reg.phone or None,
                password_hash=password_hash,
            )
            session.add(row)
            try:
                await session.commit()
            except IntegrityError:
                await session.rollback()
                return Error(Errors.conflict("Email already registered"))

        log.info("accounts.registered", user_id=row.id)
        return Ok(to_user(row))

    async def authenticate(self, email: str, password: str) -> Result[User, ShopError]:
        if not email.strip() or not password:
            return Error(Errors.invalid_input("email & password required"))

        async with self._session() as session:
            row = (
                await session.scalars(
                    select(UserTable).where(UserTable.email == email.strip().lower())
                )
            ).one_or_none()

        # Same answer for unknown email and wrong password.
        if row is None or not await check_password(password, row.password_hash):
            return Error(ShopError(ErrorKind.UNAUTHORIZED, "Invalid credentials"))
        return Ok(to_user(row))

    async def get_user(self, user_id: UserId) -> Result[User, ShopError]:
        async with self._session() as session:
            row = await session.get(UserTable, user_id)
            if row is None:
                return Error(Errors.not_found("User", user_id))
            return Ok(to_user(row))

    async def profile(self, user_id: UserId) -> Result[Profile, ShopError]:
        match await self.get_user(user_id):
            case Ok(user):
                addresses = await self.addresses(user_id)
                return Ok(Profile(user=user, addresses=tuple(addresses)))
            case Error(e):
                return Error(e)

    async def update_profile(
        self, user_id: UserId, name: str | None, phone: str | None
    ) -> Result[User, ShopError]:
        async with self._session() as session:
            row = await session.get(UserTable, user_id)
            if row is None:
                return Error(Errors.not_found("User", user_id))
            if name is not None and name.strip():
                row.name = name.strip()
            if phone is not None:
                row.phone = phone.strip() or None
            await session.commit()
            return Ok(to_user(row))

    # ───────────────────────────────────────────────────────────────────────────
    # Address book
    # ───────────────────────────────────────────────────────────────────────────

    async def addresses(self, user_id: UserId) -> list[Address]:
        """Default first, then newest."""
        async with self._session() as session:
            rows = (
                await session.scalars(
                    select(AddressTable)
                    .where(AddressTable.user_id == user_id)
                    .order_by(
                        AddressTable.is_default.desc(),
                        AddressTable.created_at.desc(),
                    )
                )
            ).all()
            return [to_address(row) for row in rows]

    async def add_address(
        self, user_id: UserId, draft: AddressDraft
    ) -> Result[Address, ShopError]:
        if (problem := _validate_address(draft)) is not None:
            return Error(problem)

        async with self._session() as session, session.begin():
            row = AddressTable(user_id=user_id, **_address_fields(draft))
            session.add(row)
            await session.flush()
            if row.is_default:
                await _clear_other_defaults(session, user_id, row.id)

        return Ok(to_address(row))

    async def update_address(
        self, user_id: UserId, address_id: AddressId, draft: AddressDraft
    ) -> Result[Address, ShopError]:
        if (problem := _validate_address(draft)) is not None:
            return Error(problem)

        async with self._session() as session, session.begin():
            row = await _owned_address(session, user_id, address_id)
            if row is None:
                return Error(Errors.not_found("Address", address_id))
            for field, value in _address_fields(draft).items():
                setattr(row, field, value)
            await session.flush()
            if row.is_default:
                await _clear_other_defaults(session, user_id, row.id)

        return Ok(to_address(row))

    async def delete_address(
        self, user_id: UserId, address_id: AddressId
    ) -> Result[None, ShopError]:
        async with self._session() as session, session.begin():
            row = await _owned_address(session, user_id, address_id)
            if row is None:
                return Error(Errors.not_found("Address", address_id))
            await session.delete(row)
        return Ok(None)


def _address_fields(draft: AddressDraft) -> dict[str, object]:
    return {
        "full_name": draft.full_name.strip(),
        "phone": draft.phone.strip(),
        "line1": draft.line1.strip(),
        "line2": (draft.line2 or "").strip() or None,
        "city": draft.city.strip(),
        "state": draft.state.strip(),
        "pincode": draft.pincode.strip(),
        "country": draft.country.strip() or "India",
        "is_default": draft.is_default,
    }


async def _owned_address(
    session: AsyncSession, user_id: UserId, address_id: AddressId
) -> AddressTable | None:
    return (
        await session.scalars(
            select(AddressTable).where(
                AddressTable.id == address_id,
                AddressTable.user_id == user_id,
            )
        )
    ).one_or_none()


async def _clear_other_defaults(
    session: AsyncSession, user_id: UserId, keep: AddressId
) -> None:
    await session.execute(
        update(AddressTable)
        .where(AddressTable.user_id == user_id, AddressTable.id != keep)
        .values(is_default=False)
        .execution_options(synchronize_session=False)
    )


__all__ = (
    "AccountStore",
    "Registration",
    "AddressDraft",
    "Profile",
    "to_user",
    "to_address",
)
