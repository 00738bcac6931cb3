"""bcrypt hashing, off the event loop."""

import asyncio

import bcrypt

ROUNDS = 10


def _hash(password: str, rounds: int) -> str:
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=rounds)).decode()


def _check(password: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode(), hashed.encode())
    except ValueError:
        # Malformed stored hash.
        return False


async def hash_password(password: str, rounds: int = ROUNDS) -> str:
    return await asyncio.to_thread(_hash, password, rounds)


async def check_password(password: str, hashed: str) -> bool:
    return await asyncio.to_thread(_check, password, hashed)


__all__ = ("hash_password", "check_password", "ROUNDS")
