# src/veloce_preload/card/card_models.py

from __future__ import annotations

from dataclasses import dataclass, field

from ..tasks.task_models import SubTask, SubTaskStatus, TaskItem

AI_SOURCE = "AI Genius"
OFFLINE_SOURCE = "Offline Analysis"


@dataclass(slots=True, frozen=True)
class CardStrategy:
    overview: str
    key_points: list[str]
    actionable_steps: list[str]
    potential_obstacles: list[str] = field(default_factory=list)
    estimated_minutes: int | None = None
    thought_process: str | None = None

    def formatted(self) -> str:
        parts = [self.overview, "", "Key Strategy Points:"]
        parts.extend(f"• {p}" for p in self.key_points)
        parts.extend(["", "Actionable Steps:"])
        parts.extend(f"{i}. {s}" for i, s in enumerate(self.actionable_steps, start=1))
        if self.potential_obstacles:
            parts.extend(["", "Watch Out For:"])
            parts.extend(f"! {o}" for o in self.potential_obstacles)
        return "\n".join(parts)

    @property
    def brief_summary(self) -> str:
        return self.overview.split(". ")[0].rstrip(".") + "."


@dataclass(slots=True, frozen=True)
class DurationEstimate:
    minutes: int
    confidence: str  # "low" | "medium" | "high"
    reasoning: str | None = None


@dataclass(slots=True)
class TaskCardState:
    """
    Everything the task detail card renders.

    A placeholder (is_loaded=False) carries only the task id; the assembler
    returns a fully loaded instance. Degraded sections are still filled in
    from offline fallbacks; their errors are kept for diagnostics.
    """

    task_id: str
    task: TaskItem | None = None
    subtasks: list[SubTask] = field(default_factory=list)
    subtasks_generated: bool = False
    thought_process: str | None = None

    strategy: CardStrategy | None = None
    strategy_source: str | None = None
    strategy_error: str | None = None

    duration: DurationEstimate | None = None
    is_loaded: bool = False

    @classmethod
    def placeholder(cls, task_id: str) -> TaskCardState:
        return cls(task_id=task_id)

    @property
    def subtask_progress(self) -> float:
        if not self.subtasks:
            return 0.0
        done = sum(1 for s in self.subtasks if s.status == SubTaskStatus.COMPLETED)
        return done / len(self.subtasks)
