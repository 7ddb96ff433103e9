# src/veloce_preload/preload/errors.py

from __future__ import annotations


class PreloadError(Exception):
    """Base class for load-time failures recorded by the preload cache."""

    reason: str = "error"


class AssemblyError(PreloadError):
    """Raised by an assembler that could not build the value for a key."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class LoadTimeout(PreloadError):
    reason = "timeout"

    def __init__(self, key: object, timeout: float) -> None:
        super().__init__(f"load for {key!r} exceeded {timeout:.3f}s")
        self.key = key
        self.timeout = timeout


class LoadCancelled(PreloadError):
    """The load was told to stop (timeout, invalidation or clear)."""

    reason = "cancelled"
