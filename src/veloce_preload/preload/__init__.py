"""
Preload cache.

Components:
- cache.py: PreloadCache (key -> value store with per-key load state machine)
- status.py: LoadState / LoadStatus
- errors.py: AssemblyError, LoadTimeout, LoadCancelled
- cancellation.py: cooperative CancellationToken passed to assemblers
"""

from .cache import CacheStats, PreloadCache
from .cancellation import CancellationToken
from .errors import AssemblyError, LoadCancelled, LoadTimeout, PreloadError
from .status import LoadState, LoadStatus

__all__ = [
    "AssemblyError",
    "CacheStats",
    "CancellationToken",
    "LoadCancelled",
    "LoadState",
    "LoadStatus",
    "LoadTimeout",
    "PreloadCache",
    "PreloadError",
]
