"""
Key-guarded asynchronous cache with single-flight fetch semantics.

Concurrency model:
- At most one fetch runs per key. Callers arriving while a fetch is in
  flight await the same task instead of issuing their own.
- Waiters are shielded: a caller that is cancelled (e.g. the user navigated
  away) stops waiting but does not cancel the shared fetch, which still
  populates the cache for later callers.
- Every fetch is bounded by a timeout. A timed-out or failed fetch stores
  nothing, so the next call retries.

Eviction:
- ``max_entries=None`` keeps every value for the process lifetime.
- An integer bound evicts the least recently used entry.
"""

import asyncio
import logging
from collections import OrderedDict
from collections.abc import Awaitable, Callable, Hashable
from typing import Generic, TypeVar

from ..errors import ResolverError, UpstreamFetchError

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class SingleFlightCache(Generic[K, V]):
    """Async map from key to value where each missing key is fetched at most once at a time."""

    def __init__(
        self,
        name: str,
        timeout: float | None = None,
        max_entries: int | None = None,
    ):
        if max_entries is not None and max_entries < 1:
            raise ValueError("max_entries must be positive or None")
        self.name = name
        self._timeout = timeout
        self._max_entries = max_entries
        self._entries: OrderedDict[K, V] = OrderedDict()
        self._inflight: dict[K, asyncio.Task[V]] = {}

    # ------------------------------------------------------------------
    # Plain access
    # ------------------------------------------------------------------

    def get(self, key: K) -> V | None:
        if key not in self._entries:
            return None
        self._entries.move_to_end(key)
        return self._entries[key]

    def put(self, key: K, value: V):
        self._entries[key] = value
        self._entries.move_to_end(key)
        if self._max_entries is not None:
            while len(self._entries) > self._max_entries:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug("%s cache evicted %r", self.name, evicted)

    def contains(self, key: K) -> bool:
        return key in self._entries

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def clear(self):
        self._entries.clear()

    @property
    def max_entries(self) -> int | None:
        return self._max_entries

    def in_flight(self, key: K) -> bool:
        return key in self._inflight

    # ------------------------------------------------------------------
    # Single-flight fetch
    # ------------------------------------------------------------------

    async def get_or_fetch(self, key: K, fetch: Callable[[], Awaitable[V]]) -> V:
        """
        Return the cached value for *key*, fetching it if absent.

        Raises UpstreamFetchError if the fetch fails or exceeds the timeout;
        the key is then left absent.
        """
        if key in self._entries:
            self._entries.move_to_end(key)
            return self._entries[key]

        task = self._inflight.get(key)
        if task is None:
            logger.debug("%s cache miss for %r, fetching", self.name, key)
            task = asyncio.ensure_future(self._run(key, fetch))
            self._inflight[key] = task
            task.add_done_callback(lambda t, k=key: self._settle(k, t))
        else:
            logger.debug("%s cache joining in-flight fetch for %r", self.name, key)

        return await asyncio.shield(task)

    def _settle(self, key: K, task: asyncio.Task):
        self._inflight.pop(key, None)
        # Retrieve the outcome so an unawaited failure is not reported as lost
        if not task.cancelled():
            task.exception()

    async def _run(self, key: K, fetch: Callable[[], Awaitable[V]]) -> V:
        try:
            if self._timeout is not None:
                value = await asyncio.wait_for(fetch(), timeout=self._timeout)
            else:
                value = await fetch()
        except asyncio.TimeoutError:
            logger.warning("%s fetch for %r timed out after %.1fs", self.name, key, self._timeout)
            raise UpstreamFetchError(
                f"{self.name} lookup for {key!r} timed out after {self._timeout}s",
                error_code="upstream.timeout",
            )
        except ResolverError:
            raise
        except Exception as e:
            logger.exception("%s fetch for %r failed: %s", self.name, key, e)
            raise UpstreamFetchError(f"{self.name} lookup for {key!r} failed: {e!s}") from e

        self.put(key, value)
        return value
