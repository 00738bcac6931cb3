"""
Cart storage — where a serialized cart lives between sessions.
"""

from typing import Protocol


class CartStorage(Protocol):
    """
    Persistence for serialized carts.

    Implement this for a real backend (browser bridge, Redis, a table):

        class RedisCartStorage:
            def __init__(self, client: Redis) -> None:
                self.client = client

            @property
            def name(self) -> str:
                return "redis"

            async def get(self, key: str) -> str | None:
                data = await self.client.get(key)
                return data.decode() if data else None

            async def set(self, key: str, value: str) -> None:
                await self.client.set(key, value)

            async def delete(self, key: str) -> bool:
                return await self.client.delete(key) > 0
    """

    @property
    def name(self) -> str: ...

    async def get(self, key: str) -> str | None:
        """Raw payload or None when nothing is stored."""
        ...

    async def set(self, key: str, value: str) -> None: ...

    async def delete(self, key: str) -> bool:
        """Returns True if the key existed."""
        ...


class MemoryStorage:
    """In-process storage, shared by every store given the same instance."""

    def __init__(self) -> None:
        self._data: dict[str, str] = {}

    @property
    def name(self) -> str:
        return "memory"

    async def get(self, key: str) -> str | None:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        self._data[key] = value

    async def delete(self, key: str) -> bool:
        return self._data.pop(key, None) is not None


__all__ = ("CartStorage", "MemoryStorage")
