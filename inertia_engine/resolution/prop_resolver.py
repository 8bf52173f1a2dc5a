"""Concurrent evaluation of the selected props."""

import asyncio
import inspect
import logging
from typing import Any, Mapping

from inertia_engine.domain.constants import RESOLVABLE
from inertia_engine.domain.enums import PropKind
from inertia_engine.domain.props import Prop

logger = logging.getLogger(__name__)


async def call_resolver(resolve: Any) -> Any:
    """Invoke a sync or async resolver and return its value."""
    result = resolve()
    if inspect.isawaitable(result):
        result = await result
    return result


class PropResolver:
    """Turns selected props into their final values.

    Resolvers are gathered with ``asyncio.gather``, so awaitables returned by
    async resolvers overlap. Sync resolvers are called inline on the event
    loop thread, one after another; wrap blocking work in an ``async def``
    (for example with ``asyncio.to_thread``) to have it overlap too. The first
    failure propagates to the caller; resolvers already running are left to
    finish on their own.
    """

    async def resolve_all(self, props: Mapping[str, Prop]) -> dict[str, Any]:
        """Resolve every prop, keeping the key order of ``props``."""
        keys = list(props)
        values = await asyncio.gather(*(self._resolve_entry(key, props[key]) for key in keys))
        return dict(zip(keys, values))

    async def resolve(self, prop: Prop) -> Any:
        """Resolve a single prop to its value."""
        if prop.kind is PropKind.PLAIN:
            return prop.value
        if prop.kind is PropKind.SCROLL:
            data = await call_resolver(prop.resolve) if callable(prop.resolve) else prop.resolve
            return prop.wrap(data)
        if prop.kind in RESOLVABLE:
            return await call_resolver(prop.resolve)
        raise TypeError(f"Unknown prop kind: {prop.kind!r}")

    async def _resolve_entry(self, key: str, prop: Prop) -> Any:
        try:
            return await self.resolve(prop)
        except Exception:
            logger.debug("Resolver for prop %r raised", key)
            raise
