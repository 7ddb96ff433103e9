# src/veloce_preload/preload/cache.py

from __future__ import annotations

"""
Preload cache.

A capacity-bounded, key-addressed store that builds expensive per-entity values
in the background before the UI asks for them:
- one load per key at a time (late callers attach to the running load),
- every load races a timeout,
- batch requests start at most batch_width loads and never queue the rest,
- completed entries are evicted oldest-inserted first once capacity is exceeded.

All state is owned by the event loop that runs the loads. Check-and-set
sequences never await in between, so they are atomic for that loop.
"""

import asyncio
import logging
import time
from collections.abc import Callable, Hashable, Iterable
from dataclasses import dataclass, replace
from typing import Any, Generic, TypeVar

from ..core.ports import Assembler
from .cancellation import CancellationToken
from .errors import AssemblyError, LoadCancelled, LoadTimeout, PreloadError
from .status import LoadState, LoadStatus

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")

DEFAULT_CAPACITY = 10
DEFAULT_BATCH_WIDTH = 3
DEFAULT_LOAD_TIMEOUT = 8.0


@dataclass(slots=True)
class CacheStats:
    hits: int = 0
    misses: int = 0
    loads_started: int = 0
    loads_completed: int = 0
    loads_failed: int = 0
    timeouts: int = 0
    evictions: int = 0
    stale_discarded: int = 0


@dataclass(slots=True, frozen=True)
class _Load:
    """In-flight load handle. The token doubles as the ownership marker for the key."""

    task: asyncio.Task[None]
    token: CancellationToken

    def cancel(self) -> None:
        self.token.cancel()
        self.task.cancel()


def _failure_reason(exc: BaseException) -> str:
    if isinstance(exc, PreloadError):
        return exc.reason
    if isinstance(exc, asyncio.CancelledError):
        return LoadCancelled.reason
    return str(exc) or exc.__class__.__name__


def _abandon(assembly: asyncio.Future[Any]) -> None:
    """Stop waiting on an assembly; retrieve its outcome so nothing is reported as unhandled."""

    def _drain(fut: asyncio.Future[Any]) -> None:
        if not fut.cancelled():
            fut.exception()

    assembly.cancel()
    assembly.add_done_callback(_drain)


class PreloadCache(Generic[K, V]):
    """
    Key -> value store with a per-key load state machine.

        not_started/absent --load--> loading --ok--> completed
                                             \\--error/timeout--> failed(reason)
        any --invalidate--> absent;  any --clear--> all absent

    Load errors never reach the caller of preload/preload_batch; they are
    recorded in status(key). Failed keys are not retried automatically.
    """

    def __init__(
        self,
        *,
        capacity: int = DEFAULT_CAPACITY,
        batch_width: int = DEFAULT_BATCH_WIDTH,
        load_timeout: float = DEFAULT_LOAD_TIMEOUT,
    ) -> None:
        if capacity < 1:
            raise ValueError("capacity must be >= 1")
        if batch_width < 1:
            raise ValueError("batch_width must be >= 1")
        if load_timeout <= 0:
            raise ValueError("load_timeout must be > 0")

        self._capacity = int(capacity)
        self._batch_width = int(batch_width)
        self._load_timeout = float(load_timeout)

        # dict preserves insertion order, which is the eviction order.
        self._entries: dict[K, V] = {}
        self._statuses: dict[K, LoadStatus] = {}
        self._inflight: dict[K, _Load] = {}
        self._stats = CacheStats()

    @classmethod
    def from_settings(cls, settings: Any) -> PreloadCache[Any, Any]:
        return cls(
            capacity=settings.preload_capacity,
            batch_width=settings.preload_batch_width,
            load_timeout=settings.preload_load_timeout_seconds,
        )

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def batch_width(self) -> int:
        return self._batch_width

    @property
    def load_timeout(self) -> float:
        return self._load_timeout

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    # ---- queries ----

    def status(self, key: K) -> LoadStatus:
        return self._statuses.get(key) or LoadStatus.not_started()

    def is_ready(self, key: K) -> bool:
        st = self._statuses.get(key)
        return st is not None and st.state == LoadState.COMPLETED and key in self._entries

    def get(self, key: K) -> V | None:
        """Completed value for key, or None."""
        if self.is_ready(key):
            return self._entries[key]
        return None

    def stats(self) -> CacheStats:
        return replace(self._stats)

    # ---- loading ----

    async def preload(self, key: K, assemble: Assembler[K, V]) -> None:
        """
        Best-effort load of one key.

        - completed: returns immediately, assembler not called
        - loading: waits for the running load to settle, no second assembly
        - otherwise: starts a load and waits for it to settle
        """
        load = self._inflight.get(key)
        if load is None:
            if self._state(key) == LoadState.COMPLETED:
                return
            load = self._start_load(key, assemble)

        # asyncio.wait neither raises the load's outcome nor cancels it when we are cancelled.
        await asyncio.wait({load.task})

    async def preload_batch(self, keys: Iterable[K], assemble: Assembler[K, V]) -> None:
        """
        Load at most batch_width eligible keys concurrently and wait for all of them.

        Eligible means not loading and not completed. Keys past the cut are dropped,
        not queued: callers re-invoke to pick up the rest.
        """
        eligible: list[K] = []
        seen: set[K] = set()
        for key in keys:
            if key in seen:
                continue
            seen.add(key)
            if self._state(key) in (LoadState.LOADING, LoadState.COMPLETED):
                continue
            eligible.append(key)

        selected = eligible[: self._batch_width]
        if len(eligible) > len(selected):
            logger.debug(
                "preload_batch: scheduling %d of %d eligible keys (batch_width=%d)",
                len(selected),
                len(eligible),
                self._batch_width,
            )
        if not selected:
            return

        await asyncio.gather(*(self.preload(key, assemble) for key in selected))

    def get_or_create(
        self,
        key: K,
        assemble: Assembler[K, V],
        placeholder: Callable[[K], V],
    ) -> V:
        """
        Return the completed value for key without suspending.

        On a miss, return placeholder(key) right away and start a background load
        (unless one is already running). The placeholder is not updated when the
        load finishes: re-query with get(key) once is_ready(key) is true.

        Must be called from code running inside the event loop.
        """
        if self.is_ready(key):
            self._stats.hits += 1
            return self._entries[key]

        self._stats.misses += 1
        value = placeholder(key)
        if key not in self._inflight:
            self._start_load(key, assemble)
        return value

    # ---- removal ----

    def invalidate(self, key: K) -> None:
        """
        Remove value and status for key. A running load for key is cancelled and,
        should it still finish, its result is discarded.
        """
        load = self._inflight.pop(key, None)
        if load is not None:
            load.cancel()
            logger.debug("invalidate: cancelled in-flight load key=%r", key)
        self._entries.pop(key, None)
        self._statuses.pop(key, None)

    def clear(self) -> None:
        inflight = list(self._inflight.values())
        self._inflight.clear()
        for load in inflight:
            load.cancel()
        self._entries.clear()
        self._statuses.clear()
        logger.debug("clear: dropped all entries, cancelled %d in-flight loads", len(inflight))

    async def drain(self) -> None:
        """Wait until every load in flight at call time has settled."""
        tasks = {load.task for load in self._inflight.values()}
        if tasks:
            await asyncio.wait(tasks)

    async def aclose(self) -> None:
        """Cancel all in-flight loads, wait for them to unwind and clear the cache."""
        tasks = [load.task for load in self._inflight.values()]
        self.clear()
        if tasks:
            await asyncio.wait(tasks)

    # ---- internals ----

    def _state(self, key: K) -> LoadState:
        st = self._statuses.get(key)
        return st.state if st is not None else LoadState.NOT_STARTED

    def _owns(self, key: K, token: CancellationToken) -> bool:
        load = self._inflight.get(key)
        return load is not None and load.token is token

    def _start_load(self, key: K, assemble: Assembler[K, V]) -> _Load:
        loop = asyncio.get_running_loop()

        # No await between the caller's check and here: status flips before any work starts.
        token = CancellationToken()
        self._statuses[key] = LoadStatus.loading()
        self._entries.pop(key, None)

        task = loop.create_task(
            self._run_load(key, assemble, token),
            name=f"preload:{key!r}",
        )
        load = _Load(task=task, token=token)
        self._inflight[key] = load
        task.add_done_callback(lambda t: self._release(key, load))

        self._stats.loads_started += 1
        logger.debug("load started key=%r", key)
        return load

    async def _run_load(self, key: K, assemble: Assembler[K, V], token: CancellationToken) -> None:
        t0 = time.monotonic()
        try:
            assembly = asyncio.ensure_future(assemble(key, token))
        except Exception as exc:
            self._record_failure(key, token, exc)
            return

        try:
            done, _ = await asyncio.wait({assembly}, timeout=self._load_timeout)
        except asyncio.CancelledError:
            token.cancel()
            _abandon(assembly)
            raise

        if not done:
            token.cancel()
            _abandon(assembly)
            self._record_failure(key, token, LoadTimeout(key, self._load_timeout))
            return

        try:
            value = assembly.result()
        except (Exception, asyncio.CancelledError) as exc:
            self._record_failure(key, token, exc)
            return

        self._commit(key, token, value, elapsed=time.monotonic() - t0)

    def _commit(self, key: K, token: CancellationToken, value: V, *, elapsed: float) -> None:
        if not self._owns(key, token):
            self._stats.stale_discarded += 1
            logger.debug("discarding result for key=%r: load no longer owns the key", key)
            return

        del self._inflight[key]
        self._entries[key] = value
        self._statuses[key] = LoadStatus.completed()
        self._stats.loads_completed += 1
        logger.debug("load completed key=%r in %.3fs", key, elapsed)
        self._cleanup_old_entries()

    def _record_failure(self, key: K, token: CancellationToken, exc: BaseException) -> None:
        if not self._owns(key, token):
            self._stats.stale_discarded += 1
            logger.debug("discarding failure for key=%r: load no longer owns the key", key)
            return

        del self._inflight[key]
        reason = _failure_reason(exc)
        self._entries.pop(key, None)
        self._statuses[key] = LoadStatus.failed(reason)
        self._stats.loads_failed += 1

        if isinstance(exc, LoadTimeout):
            self._stats.timeouts += 1
            logger.warning("load timed out key=%r after %.3fs", key, self._load_timeout)
        elif isinstance(exc, (AssemblyError, LoadCancelled, asyncio.CancelledError)):
            logger.warning("load failed key=%r reason=%s", key, reason)
        else:
            logger.error("load crashed key=%r", key, exc_info=exc)

    def _release(self, key: K, load: _Load) -> None:
        if self._inflight.get(key) is not load:
            return
        del self._inflight[key]

        # Cancelled from outside the cache while still owning the key.
        if load.task.cancelled() and self._state(key) == LoadState.LOADING:
            self._statuses[key] = LoadStatus.failed(LoadCancelled.reason)
            self._stats.loads_failed += 1
            logger.warning("load cancelled key=%r", key)

    def _cleanup_old_entries(self) -> None:
        excess = len(self._entries) - self._capacity
        if excess <= 0:
            return

        for old_key in list(self._entries)[:excess]:
            self._entries.pop(old_key, None)
            self._statuses.pop(old_key, None)
            self._stats.evictions += 1
            logger.debug("evicted key=%r", old_key)
