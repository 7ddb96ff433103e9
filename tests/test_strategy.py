# tests/test_strategy.py

from __future__ import annotations

import json

import pytest

from veloce_preload.card.card_models import AI_SOURCE, CardStrategy
from veloce_preload.card.strategy import (
    STRATEGY_SYSTEM_PROMPT,
    LLMStrategyAdvisor,
    StrategyParseError,
    parse_strategy,
)
from veloce_preload.tasks.task_models import TaskItem, TaskType

from .fakes import FakeLLMClient

_PAYLOAD = {
    "overview": "Start small. Then expand.",
    "key_points": ["Focus", " ", "Timebox"],
    "actionable_steps": ["Open the doc", "Write one line"],
    "potential_obstacles": ["Perfectionism"],
    "estimated_minutes": 40,
    "thought_process": "Short creative task.",
}


def test_parse_plain_json() -> None:
    s = parse_strategy(json.dumps(_PAYLOAD))

    assert s.overview == "Start small. Then expand."
    assert s.key_points == ["Focus", "Timebox"]
    assert s.actionable_steps == ["Open the doc", "Write one line"]
    assert s.potential_obstacles == ["Perfectionism"]
    assert s.estimated_minutes == 40
    assert s.thought_process == "Short creative task."


def test_parse_fenced_json() -> None:
    text = "```json\n" + json.dumps(_PAYLOAD) + "\n```"
    assert parse_strategy(text).estimated_minutes == 40


def test_parse_json_surrounded_by_prose() -> None:
    text = "Sure! Here is the plan:\n" + json.dumps(_PAYLOAD) + "\nGood luck."
    assert parse_strategy(text).overview == "Start small. Then expand."


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (0, 1),
        (-5, 1),
        (9999, 600),
        ("35", 35),
        ("soon", None),
        (None, None),
    ],
)
def test_estimated_minutes_are_clamped(raw, expected) -> None:
    payload = dict(_PAYLOAD, estimated_minutes=raw)
    assert parse_strategy(json.dumps(payload)).estimated_minutes == expected


def test_optional_fields_may_be_missing() -> None:
    payload = {k: _PAYLOAD[k] for k in ("overview", "key_points", "actionable_steps")}
    s = parse_strategy(json.dumps(payload))

    assert s.potential_obstacles == []
    assert s.estimated_minutes is None
    assert s.thought_process is None


@pytest.mark.parametrize(
    "text",
    [
        "",
        "no json here",
        "{not valid json}",
        "[1, 2, 3]",
        json.dumps(dict(_PAYLOAD, overview="  ")),
        json.dumps(dict(_PAYLOAD, key_points="Focus")),
        json.dumps(dict(_PAYLOAD, actionable_steps=[])),
    ],
)
def test_invalid_output_raises(text: str) -> None:
    with pytest.raises(StrategyParseError):
        parse_strategy(text)


def test_formatted_strategy_sections() -> None:
    s = CardStrategy(
        overview="Overview.",
        key_points=["a", "b"],
        actionable_steps=["first", "second"],
        potential_obstacles=["trap"],
    )

    assert s.formatted() == "\n".join(
        [
            "Overview.",
            "",
            "Key Strategy Points:",
            "• a",
            "• b",
            "",
            "Actionable Steps:",
            "1. first",
            "2. second",
            "",
            "Watch Out For:",
            "! trap",
        ]
    )


def test_formatted_omits_empty_obstacles() -> None:
    s = CardStrategy(overview="O.", key_points=["a"], actionable_steps=["b"])
    assert "Watch Out For:" not in s.formatted()


def test_brief_summary_is_first_sentence() -> None:
    s = CardStrategy(overview="Start small. Then expand.", key_points=["a"], actionable_steps=["b"])
    assert s.brief_summary == "Start small."


@pytest.mark.asyncio
async def test_llm_advisor_prompts_and_parses() -> None:
    llm = FakeLLMClient(next_text="```json\n" + json.dumps(_PAYLOAD) + "\n```", chunk_size=7)
    advisor = LLMStrategyAdvisor(llm)
    task = TaskItem(
        id="t1",
        title="Design landing page",
        task_type=TaskType.CREATE,
        context_notes="for the spring launch",
        estimated_minutes=60,
    )

    strategy = await advisor.advise(task)

    assert advisor.source == AI_SOURCE
    assert strategy.estimated_minutes == 40
    assert len(llm.calls) == 1

    messages, system_prompt = llm.calls[0]
    assert system_prompt == STRATEGY_SYSTEM_PROMPT
    assert messages[0]["role"] == "user"
    prompt = messages[0]["content"]
    assert "Task: Design landing page" in prompt
    assert "Type: Create" in prompt
    assert "Context: for the spring launch" in prompt
    assert "User estimate: 60 minutes" in prompt


@pytest.mark.asyncio
async def test_llm_advisor_propagates_parse_errors() -> None:
    advisor = LLMStrategyAdvisor(FakeLLMClient(next_text="I cannot help with that."))

    with pytest.raises(StrategyParseError):
        await advisor.advise(TaskItem(id="t1", title="Anything"))
