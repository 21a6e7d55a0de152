"""
Get-or-load cache with one in-flight load per key.

Concurrent callers asking for the same key await the same pending task,
so a dataset is fetched at most once at a time. A failed load is logged
and answered with the cache's empty default; it is not stored, so a later
call tries again.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Dict, Generic, Hashable, TypeVar

from .errors import PipelineError

logger = logging.getLogger(__name__)

K = TypeVar('K', bound=Hashable)
V = TypeVar('V')

RECOVERABLE_ERRORS = (PipelineError, OSError, ValueError)


class SingleFlightCache(Generic[K, V]):
    """
    Async cache keyed by dataset identity.

    Args:
        loader: Coroutine function producing the value for a key
        default_factory: Builds the empty value returned when a load fails
        name: Label used in log messages
    """

    def __init__(
        self,
        loader: Callable[[K], Awaitable[V]],
        default_factory: Callable[[], V],
        name: str = "cache"
    ) -> None:
        self._loader = loader
        self._default_factory = default_factory
        self._name = name
        self._values: Dict[K, V] = {}
        self._pending: Dict[K, asyncio.Task] = {}

    def __contains__(self, key: K) -> bool:
        return key in self._values

    def peek(self, key: K, default=None):
        """Cached value without loading."""
        return self._values.get(key, default)

    def keys(self):
        return list(self._values.keys())

    def clear(self) -> None:
        self._values.clear()

    async def get(self, key: K) -> V:
        """Return the cached value, loading it (once) if needed."""
        if key in self._values:
            return self._values[key]

        task = self._pending.get(key)
        if task is None:
            task = asyncio.ensure_future(self._load(key))
            self._pending[key] = task

        # A cancelled caller leaves the shared load running
        return await asyncio.shield(task)

    async def _load(self, key: K) -> V:
        try:
            value = await self._loader(key)
        except RECOVERABLE_ERRORS as e:
            logger.warning(f"[{self._name}] Failed to load {key!r}: {e}")
            return self._default_factory()
        finally:
            self._pending.pop(key, None)

        self._values[key] = value
        return value
