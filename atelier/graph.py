"""
Graph — typed composition over nodnod.

    from atelier import graph as G

    @G.node
    class TotalNode:
        @classmethod
        async def __compose__(cls, items: ResolvedItemsNode) -> TotalNode:
            return cls(sum(line.line_total for line in items.lines))

    total = await G.compose(TotalNode, request, ctx)

Inputs are injected by their exact runtime type, so each input passed to
compose must be an instance of the class a node asks for.
"""

from __future__ import annotations

from typing import Any, cast
from collections.abc import Callable, Coroutine

from nodnod import scalar_node as node
from nodnod import Scope, Value, EventLoopAgent, Node


class TypedScope:
    """Type-safe wrapper around nodnod.Scope."""

    __slots__ = ("_scope",)

    def __init__(self, scope: Scope | None = None, detail: str = "scope") -> None:
        self._scope = scope if scope is not None else Scope(detail=detail)

    @property
    def inner(self) -> Scope:
        return self._scope

    def inject[T](self, typ: type[T], value: T) -> TypedScope:
        self._scope.push(Value(typ, value))
        return self

    def get[T](self, typ: type[T]) -> T:
        found = self._scope.get(typ)
        if found is None:
            raise KeyError(f"{typ.__name__} not found in scope")
        return cast(T, found.value)

    async def __aenter__(self) -> TypedScope:
        await self._scope.__aenter__()
        return self

    async def __aexit__(self, *args: object) -> None:
        await self._scope.__aexit__(*args)


async def compose[T](target: type[T], *inputs: object) -> T:
    """
    Build the graph reachable from `target`, inject inputs and run it.

    Exceptions raised inside a node propagate to the caller unchanged.
    """
    agent = EventLoopAgent.build({cast(type[Node[Any, Any]], target)})

    async with TypedScope(detail=target.__name__) as scope:
        for value in inputs:
            scope.inject(cast(type[Any], type(value)), value)

        run_method = cast(
            Callable[[Scope, dict[type[Any], Scope]], Coroutine[Any, Any, None]],
            getattr(agent, "run"),
        )
        await run_method(scope.inner, {})

        return scope.get(target)


__all__ = ("node", "TypedScope", "compose")
