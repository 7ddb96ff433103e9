# src/veloce_preload/card/assembler.py

from __future__ import annotations

import asyncio
import logging

from ..core.ports import StrategyAdvisor, SubtaskSource, TaskDirectory
from ..llm.client import friendly_llm_error_message
from ..preload.cancellation import CancellationToken
from ..preload.errors import AssemblyError
from ..tasks.task_models import SubTask, TaskItem
from .card_models import OFFLINE_SOURCE, CardStrategy, DurationEstimate, TaskCardState
from .fallbacks import fallback_strategy, fallback_subtasks

logger = logging.getLogger(__name__)


class TaskCardAssembler:
    """
    Assembler for the preload cache: task id -> fully loaded TaskCardState.

    Sections (subtasks, strategy) load concurrently and degrade independently
    to offline content. Only a missing task fails the whole assembly.
    """

    def __init__(
        self,
        tasks: TaskDirectory,
        subtasks: SubtaskSource,
        advisor: StrategyAdvisor | None = None,
    ) -> None:
        self._tasks = tasks
        self._subtasks = subtasks
        self._advisor = advisor

    async def __call__(self, task_id: str, token: CancellationToken) -> TaskCardState:
        task = await self._tasks.get_task(task_id)
        if task is None:
            raise AssemblyError(f"task not found: {task_id}")
        token.raise_if_cancelled()

        (subtasks, generated, thought), (strategy, source, strategy_error) = await asyncio.gather(
            self._load_subtasks(task),
            self._load_strategy(task),
        )
        token.raise_if_cancelled()

        return TaskCardState(
            task_id=task_id,
            task=task,
            subtasks=subtasks,
            subtasks_generated=generated,
            thought_process=thought or strategy.thought_process,
            strategy=strategy,
            strategy_source=source,
            strategy_error=strategy_error,
            duration=self._estimate_duration(task, strategy, source),
            is_loaded=True,
        )

    async def _load_subtasks(self, task: TaskItem) -> tuple[list[SubTask], bool, str | None]:
        try:
            stored = await self._subtasks.list_subtasks(task.id)
        except Exception:
            logger.exception("list_subtasks failed task_id=%s; using fallback breakdown", task.id)
            stored = []

        if stored:
            return stored, False, None

        generated, thought = fallback_subtasks(task)
        return generated, True, thought

    async def _load_strategy(self, task: TaskItem) -> tuple[CardStrategy, str, str | None]:
        if self._advisor is None:
            return fallback_strategy(task), OFFLINE_SOURCE, None

        try:
            strategy = await self._advisor.advise(task)
        except Exception as e:
            logger.warning(
                "strategy advisor failed task_id=%s (%s); using offline strategy",
                task.id,
                e.__class__.__name__,
            )
            return fallback_strategy(task), OFFLINE_SOURCE, friendly_llm_error_message(e)

        return strategy, self._advisor.source, None

    @staticmethod
    def _estimate_duration(task: TaskItem, strategy: CardStrategy, source: str) -> DurationEstimate:
        if strategy.estimated_minutes and source != OFFLINE_SOURCE:
            return DurationEstimate(
                minutes=strategy.estimated_minutes,
                confidence="medium",
                reasoning=strategy.thought_process,
            )
        return DurationEstimate(
            minutes=task.task_type.suggested_minutes,
            confidence="low",
            reasoning=f"Typical length of {task.task_type.display_name} tasks",
        )
