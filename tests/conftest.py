# tests/conftest.py

from __future__ import annotations

from types import SimpleNamespace

import pytest

from veloce_preload.tasks.task_directory import InMemoryTaskDirectory
from veloce_preload.tasks.task_models import SubTask, TaskItem, TaskType


@pytest.fixture()
def settings() -> SimpleNamespace:
    """
    Minimal settings object compatible with bootstrap and the LLM client.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the developer's environment / .env.
    """
    return SimpleNamespace(
        app_name="veloce-test",
        log_level="DEBUG",
        preload_capacity=4,
        preload_batch_width=2,
        preload_load_timeout_seconds=0.5,
        ai_strategy_enabled=False,
        openrouter_api_key=None,
        openrouter_base_url="https://openrouter.ai/api/v1",
        llm_models=["model-a", "model-b"],
        extra_headers={"X-Title": "veloce-test"},
        llm_connect_timeout_seconds=1.0,
        llm_read_timeout_seconds=2.0,
        llm_first_token_timeout_seconds=2.0,
    )


@pytest.fixture()
def directory() -> InMemoryTaskDirectory:
    """Task backend with one task per type; only t-report has stored subtasks."""
    d = InMemoryTaskDirectory(
        [
            TaskItem(id="t-report", title="Write quarterly report", task_type=TaskType.CREATE),
            TaskItem(id="t-call", title="Call the landlord", task_type=TaskType.COMMUNICATE),
            TaskItem(id="t-read", title="Read chapter 4", task_type=TaskType.CONSUME),
            TaskItem(id="t-misc", title="Renew parking permit", task_type=TaskType.COORDINATE),
        ]
    )
    d.add_subtask(SubTask(task_id="t-report", title="Pull sales numbers", order_index=2))
    d.add_subtask(SubTask(task_id="t-report", title="Draft outline", order_index=1))
    return d
