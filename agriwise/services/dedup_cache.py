import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class InFlightEntry:
    task: Optional["asyncio.Task[Any]"] = None
    waiters: int = 0


class InFlightCache:
    """Collapses concurrent calls that share a cache key into one execution.

    Entries live only while their execution runs. Once it finishes, success or
    failure, the entry is gone and the next call with the same key starts over.
    """

    def __init__(self) -> None:
        self._entries: Dict[str, InFlightEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def in_flight(self, cache_key: str) -> bool:
        return cache_key in self._entries

    async def run_deduplicated(
        self, cache_key: str, factory: Callable[[], Awaitable[T]]
    ) -> T:
        entry = self._entries.get(cache_key)
        if entry is None:
            entry = InFlightEntry()
            entry.task = asyncio.ensure_future(self._execute(cache_key, entry, factory))
            self._entries[cache_key] = entry
        else:
            logger.debug("Attaching to in-flight request %s", cache_key)

        entry.waiters += 1
        try:
            return await asyncio.shield(entry.task)
        except asyncio.CancelledError:
            # Other callers may still need the result; only the last one cancels.
            if not entry.task.done() and entry.waiters == 1:
                logger.debug("Last waiter left, cancelling request %s", cache_key)
                entry.task.cancel()
                self._evict(cache_key, entry)
            raise
        finally:
            entry.waiters -= 1

    async def _execute(
        self,
        cache_key: str,
        entry: InFlightEntry,
        factory: Callable[[], Awaitable[T]],
    ) -> T:
        try:
            return await factory()
        finally:
            # Evicted before any waiter resumes, so nobody attaches to a finished entry.
            self._evict(cache_key, entry)

    def _evict(self, cache_key: str, entry: InFlightEntry) -> None:
        if self._entries.get(cache_key) is entry:
            del self._entries[cache_key]
