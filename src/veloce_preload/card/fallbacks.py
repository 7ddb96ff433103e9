# src/veloce_preload/card/fallbacks.py

"""
Offline content for the task card.

Used when no subtasks are stored for a task, or when the strategy advisor is
unavailable or fails. Pure functions of the task, no I/O.
"""

from __future__ import annotations

from ..tasks.task_models import SubTask, TaskItem, TaskType
from .card_models import CardStrategy

# (keywords, steps as (title, minutes, reasoning), thought process)
_BREAKDOWNS: list[tuple[tuple[str, ...], list[tuple[str, int, str | None]], str]] = [
    (
        ("report", "presentation", "document"),
        [
            ("Research and gather data", 15, "Start with data collection to inform content"),
            ("Create outline/structure", 10, "Structure before detailed content"),
            ("Write main content", 25, None),
            ("Add visuals/formatting", 15, None),
            ("Review and polish", 10, None),
        ],
        "Recognized this as a document creation task: research, outline, content, visuals, review.",
    ),
    (
        ("meeting", "call"),
        [
            ("Prepare agenda points", 10, "Clear agenda ensures productive meeting"),
            ("Gather relevant materials", 10, None),
            ("Send calendar invite/reminder", 5, None),
            ("Conduct meeting", 30, None),
        ],
        "Identified as a meeting task. Breaking into preparation and execution phases.",
    ),
    (
        ("email", "reply", "respond"),
        [
            ("Review context/thread", 5, None),
            ("Draft response", 10, None),
            ("Proofread and send", 5, None),
        ],
        "Communication task identified. Simple three-step flow: review, draft, send.",
    ),
]

_GENERIC_BREAKDOWN: list[tuple[str, int, str | None]] = [
    ("Define clear objectives", 5, "Clarity on goals improves focus"),
    ("Break into actionable steps", 10, None),
    ("Execute main work", 20, None),
    ("Review and complete", 10, None),
]
_GENERIC_THOUGHT = "Created a general task breakdown following the define, plan, execute, review pattern."


def fallback_subtasks(task: TaskItem) -> tuple[list[SubTask], str]:
    """Keyword-based breakdown of a task title. Returns (subtasks, thought_process)."""
    title = (task.title or "").lower()

    steps, thought = _GENERIC_BREAKDOWN, _GENERIC_THOUGHT
    for keywords, candidate_steps, candidate_thought in _BREAKDOWNS:
        if any(k in title for k in keywords):
            steps, thought = candidate_steps, candidate_thought
            break

    subtasks = [
        SubTask(
            task_id=task.id,
            title=step_title,
            order_index=i,
            estimated_minutes=minutes,
            ai_reasoning=reasoning,
        )
        for i, (step_title, minutes, reasoning) in enumerate(steps, start=1)
    ]
    return subtasks, thought


def fallback_strategy(task: TaskItem) -> CardStrategy:
    """Pattern-based strategy for the task's type."""
    t = task.task_type
    title = task.title

    if t == TaskType.CREATE:
        overview = (
            f"Creative work like '{title}' requires sustained focus and an uninterrupted environment. "
            "Block out distractions and commit to at least 90 minutes of deep work."
        )
        key_points = [
            "Creative tasks need longer uninterrupted blocks",
            "Morning hours often yield best creative output",
            "Silence notifications and close unnecessary tabs",
            "Start with the easiest part to build momentum",
        ]
        steps = [
            "Open the relevant document/tool (30 seconds)",
            "Write just the first line or make the first mark",
            "Set a 25-minute timer and work without stopping",
            "Take a 5-minute break, then continue",
        ]
        obstacles = [
            "Perfectionism: aim for a good-enough first draft",
            "Research rabbit holes: set a research time limit",
        ]
    elif t == TaskType.COMMUNICATE:
        overview = (
            "Communication tasks benefit from clear preparation and focused execution. "
            "Prepare your key points before starting to prevent unnecessary back-and-forth."
        )
        key_points = [
            "Clarity prevents follow-up clarifications",
            "Batch similar communications together",
            "Use templates for recurring messages",
            "Set specific response windows",
        ]
        steps = [
            "List 3 key points you need to convey",
            "Draft the core message (under 5 minutes)",
            "Review for clarity and brevity",
            "Send and set a reminder for follow-up if needed",
        ]
        obstacles = [
            "Over-explaining: keep it concise",
            "Waiting for perfect timing: done is better than perfect",
        ]
    elif t == TaskType.CONSUME:
        overview = (
            f"Learning tasks like '{title}' require active engagement. "
            "Take notes and connect new ideas to existing knowledge."
        )
        key_points = [
            "Active engagement beats passive consumption",
            "Take brief notes to improve retention",
            "Connect new info to things you already know",
            "Teach someone else to solidify understanding",
        ]
        steps = [
            "Set a clear learning objective before starting",
            "Read/watch for 20 minutes with focused attention",
            "Write 3 key takeaways in your own words",
            "Identify one immediate application",
        ]
        obstacles = [
            "Information overload: limit scope",
            "Passive consumption: engage actively",
        ]
    else:
        overview = (
            f"Administrative tasks are best batched together for efficiency. "
            f"'{title}' benefits from quick, decisive action rather than overthinking."
        )
        key_points = [
            "Batch similar admin tasks together",
            "Set time limits to prevent overthinking",
            "Use checklists for recurring processes",
            "Automate or delegate when possible",
        ]
        steps = [
            "Gather all necessary information first (2 min)",
            "Make decisions quickly, most are reversible",
            "Complete the task without interruption",
            "Document any follow-up items immediately",
        ]
        obstacles = [
            "Overthinking simple decisions",
            "Context switching: batch similar tasks",
        ]

    return CardStrategy(
        overview=overview,
        key_points=key_points,
        actionable_steps=steps,
        potential_obstacles=obstacles,
        estimated_minutes=t.suggested_minutes,
        thought_process=f"Pattern-based strategy for {t.display_name} tasks (offline fallback)",
    )
