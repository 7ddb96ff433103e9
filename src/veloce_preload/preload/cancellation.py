# src/veloce_preload/preload/cancellation.py

from __future__ import annotations

import asyncio

from .errors import LoadCancelled


class CancellationToken:
    """
    Cooperative stop signal handed to every assembler call.

    The cache sets it when it stops waiting on a load (timeout, invalidate, clear).
    Assemblers check it between steps and release their own resources; the cache
    never waits for them to acknowledge.
    """

    __slots__ = ("_event",)

    def __init__(self) -> None:
        self._event = asyncio.Event()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        self._event.set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise LoadCancelled("load cancelled")
