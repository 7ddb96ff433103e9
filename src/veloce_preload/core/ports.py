# src/veloce_preload/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the cache and the task-card assembler.

The core depends on Protocols instead of concrete implementations.
This keeps the backend, the LLM provider and the UI-side value builders
swappable and makes testing easier.
"""

from typing import TYPE_CHECKING, Awaitable, Iterable, Protocol, TypeVar

if TYPE_CHECKING:
    from ..card.card_models import CardStrategy
    from ..preload.cancellation import CancellationToken
    from ..tasks.task_models import SubTask, TaskItem

K_contra = TypeVar("K_contra", contravariant=True)
V_co = TypeVar("V_co", covariant=True)

ChatMessage = dict[str, str]
# OpenAI-style chat messages: {"role": "...", "content": "..."}.


class Assembler(Protocol[K_contra, V_co]):
    """
    Builds the value for one key.

    May raise AssemblyError. Receives the cache's cancellation token and is
    responsible for stopping its own work once the token is set.
    """

    def __call__(self, key: K_contra, token: CancellationToken) -> Awaitable[V_co]: ...


class LLMClient(Protocol):
    """Streaming chat completion client (OpenAI/OpenRouter-compatible)."""
    def stream_chat(self, messages: list[ChatMessage], system_prompt: str) -> Iterable[str]: ...


class TaskDirectory(Protocol):
    """Read side of the (external) task backend."""
    async def get_task(self, task_id: str) -> TaskItem | None: ...


class SubtaskSource(Protocol):
    async def list_subtasks(self, task_id: str) -> list[SubTask]: ...


class StrategyAdvisor(Protocol):
    """Produces a work strategy for a task. `source` is shown to the user."""

    source: str

    async def advise(self, task: TaskItem) -> CardStrategy: ...
