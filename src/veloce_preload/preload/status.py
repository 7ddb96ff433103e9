# src/veloce_preload/preload/status.py

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class LoadState(StrEnum):
    """
    Per-key load lifecycle.

    Invariants held by the cache:
    - completed   -> a value is stored for the key
    - loading     -> no value yet, exactly one in-flight load owns the key
    - failed      -> no value stored
    - not_started -> no value stored (also reported for unknown keys)
    """

    NOT_STARTED = "not_started"
    LOADING = "loading"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(slots=True, frozen=True)
class LoadStatus:
    state: LoadState
    reason: str | None = None

    @classmethod
    def not_started(cls) -> LoadStatus:
        return cls(LoadState.NOT_STARTED)

    @classmethod
    def loading(cls) -> LoadStatus:
        return cls(LoadState.LOADING)

    @classmethod
    def completed(cls) -> LoadStatus:
        return cls(LoadState.COMPLETED)

    @classmethod
    def failed(cls, reason: str) -> LoadStatus:
        return cls(LoadState.FAILED, reason)

    def __str__(self) -> str:
        if self.state == LoadState.FAILED:
            return f"failed({self.reason})"
        return self.state.value
