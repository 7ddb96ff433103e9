# src/veloce_preload/card/strategy.py

from __future__ import annotations

"""
Strategy advisors for the task card.

LLMStrategyAdvisor asks an OpenAI-compatible model for a JSON strategy.
The client streams synchronously, so the call runs in a worker thread to keep
the event loop (and the preload cache that owns it) responsive.
"""

import asyncio
import json
import logging
import re
from typing import Any

from ..core.ports import LLMClient
from ..tasks.task_models import TaskItem
from .card_models import AI_SOURCE, OFFLINE_SOURCE, CardStrategy
from .fallbacks import fallback_strategy

logger = logging.getLogger(__name__)

MAX_ESTIMATED_MINUTES = 600

STRATEGY_SYSTEM_PROMPT = """You are the strategy module of a productivity app.
Given one task, reply with a single JSON object and nothing else:
{
  "overview": "2-3 sentences describing the approach",
  "key_points": ["3-5 short bullet points"],
  "actionable_steps": ["specific next actions; the first one takes under 2 minutes"],
  "potential_obstacles": ["optional warnings"],
  "estimated_minutes": 45,
  "thought_process": "one sentence of reasoning"
}"""

_FENCE_RE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)


class StrategyParseError(ValueError):
    pass


def _task_prompt(task: TaskItem) -> str:
    lines = [
        f"Task: {task.title}",
        f"Type: {task.task_type.display_name}",
    ]
    if task.context_notes:
        lines.append(f"Context: {task.context_notes}")
    if task.estimated_minutes:
        lines.append(f"User estimate: {task.estimated_minutes} minutes")
    return "\n".join(lines)


def _str_list(raw: Any, field_name: str, *, required: bool) -> list[str]:
    if raw is None and not required:
        return []
    if not isinstance(raw, list):
        raise StrategyParseError(f"{field_name} must be a list")
    items = [str(x).strip() for x in raw if str(x).strip()]
    if required and not items:
        raise StrategyParseError(f"{field_name} is empty")
    return items


def parse_strategy(text: str) -> CardStrategy:
    """
    Parse model output into a CardStrategy.

    Accepts a bare JSON object, optionally wrapped in a ``` fence or surrounded by prose.
    """
    raw = _FENCE_RE.sub("", (text or "").strip())
    start, end = raw.find("{"), raw.rfind("}")
    if start < 0 or end <= start:
        raise StrategyParseError("no JSON object in model output")

    try:
        data = json.loads(raw[start : end + 1])
    except json.JSONDecodeError as e:
        raise StrategyParseError(f"invalid JSON: {e.msg}") from e
    if not isinstance(data, dict):
        raise StrategyParseError("strategy must be a JSON object")

    overview = str(data.get("overview") or "").strip()
    if not overview:
        raise StrategyParseError("overview is empty")

    minutes_raw = data.get("estimated_minutes")
    minutes: int | None = None
    if minutes_raw is not None:
        try:
            minutes = int(minutes_raw)
        except (TypeError, ValueError):
            minutes = None
        if minutes is not None:
            minutes = max(1, min(MAX_ESTIMATED_MINUTES, minutes))

    thought = data.get("thought_process")
    return CardStrategy(
        overview=overview,
        key_points=_str_list(data.get("key_points"), "key_points", required=True),
        actionable_steps=_str_list(data.get("actionable_steps"), "actionable_steps", required=True),
        potential_obstacles=_str_list(data.get("potential_obstacles"), "potential_obstacles", required=False),
        estimated_minutes=minutes,
        thought_process=str(thought).strip() if thought else None,
    )


class LLMStrategyAdvisor:
    source = AI_SOURCE

    def __init__(self, llm: LLMClient) -> None:
        self._llm = llm

    def _complete(self, prompt: str) -> str:
        messages = [{"role": "user", "content": prompt}]
        return "".join(self._llm.stream_chat(messages, STRATEGY_SYSTEM_PROMPT))

    async def advise(self, task: TaskItem) -> CardStrategy:
        text = await asyncio.to_thread(self._complete, _task_prompt(task))
        strategy = parse_strategy(text)
        logger.debug("AI strategy ready task_id=%s minutes=%s", task.id, strategy.estimated_minutes)
        return strategy


class OfflineStrategyAdvisor:
    """Deterministic per-type strategy, used when no LLM is configured."""

    source = OFFLINE_SOURCE

    async def advise(self, task: TaskItem) -> CardStrategy:
        return fallback_strategy(task)
