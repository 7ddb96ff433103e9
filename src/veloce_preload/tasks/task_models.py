# src/veloce_preload/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class TaskType(StrEnum):
    """
    Cognitive category of a task.

    Drives the offline fallbacks (suggested duration, pattern strategy).
    """

    CREATE = "create"            # writing, coding, designing
    COMMUNICATE = "communicate"  # emails, calls, meetings
    CONSUME = "consume"          # reading, courses, videos
    COORDINATE = "coordinate"    # scheduling, organizing

    @classmethod
    def from_raw(cls, raw: str | None) -> TaskType:
        if not raw:
            return cls.COORDINATE
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return cls.COORDINATE

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @property
    def suggested_minutes(self) -> int:
        return _SUGGESTED_MINUTES[self]


_DISPLAY_NAMES = {
    TaskType.CREATE: "Create",
    TaskType.COMMUNICATE: "Communicate",
    TaskType.CONSUME: "Learn",
    TaskType.COORDINATE: "Coordinate",
}

_SUGGESTED_MINUTES = {
    TaskType.CREATE: 90,
    TaskType.COMMUNICATE: 30,
    TaskType.CONSUME: 45,
    TaskType.COORDINATE: 15,
}


class SubTaskStatus(StrEnum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


@dataclass(slots=True)
class TaskItem:
    id: str
    title: str
    task_type: TaskType = TaskType.COORDINATE
    context_notes: str | None = None
    estimated_minutes: int | None = None
    star_rating: int = 2
    scheduled_at: float | None = None


@dataclass(slots=True)
class SubTask:
    task_id: str
    title: str
    order_index: int
    estimated_minutes: int | None = None
    status: SubTaskStatus = SubTaskStatus.PENDING
    ai_reasoning: str | None = None
