# src/veloce_preload/tasks/task_directory.py

from __future__ import annotations

import logging
from collections.abc import Iterable

from .task_models import SubTask, TaskItem

logger = logging.getLogger(__name__)


class InMemoryTaskDirectory:
    """
    In-memory TaskDirectory + SubtaskSource.

    The real task backend is external; this adapter lets the card assembler be
    wired up locally and in tests. Subtasks are returned ordered by order_index.
    """

    def __init__(self, tasks: Iterable[TaskItem] = ()) -> None:
        self._tasks: dict[str, TaskItem] = {}
        self._subtasks: dict[str, list[SubTask]] = {}
        for task in tasks:
            self.add_task(task)

    def add_task(self, task: TaskItem) -> None:
        if not task.id or not task.id.strip():
            raise ValueError("task id is required")
        if not task.title or not task.title.strip():
            raise ValueError("task title is required")
        self._tasks[task.id] = task
        logger.debug("Task added id=%s type=%s", task.id, task.task_type.value)

    def add_subtask(self, subtask: SubTask) -> None:
        if subtask.task_id not in self._tasks:
            raise KeyError(f"unknown task: {subtask.task_id}")
        self._subtasks.setdefault(subtask.task_id, []).append(subtask)

    # ---- ports ----

    async def get_task(self, task_id: str) -> TaskItem | None:
        return self._tasks.get(task_id)

    async def list_subtasks(self, task_id: str) -> list[SubTask]:
        items = self._subtasks.get(task_id, [])
        return sorted(items, key=lambda s: s.order_index)
