# src/veloce_preload/bootstrap.py

"""
Composition root.

- loads settings once (or takes injected ones),
- configures logging from the settings,
- builds the preload cache from the settings,
- picks the strategy advisor (LLM when configured, offline otherwise),
- wires the task-card assembler onto the task backend ports.
"""

from __future__ import annotations

import logging
from typing import Any

from .card.assembler import TaskCardAssembler
from .card.card_models import TaskCardState
from .card.strategy import LLMStrategyAdvisor, OfflineStrategyAdvisor
from .config import get_settings
from .core.ports import StrategyAdvisor, SubtaskSource, TaskDirectory
from .llm.client import OpenRouterLLMClient
from .logging_setup import setup_logging
from .preload.cache import PreloadCache

logger = logging.getLogger(__name__)


def init_logging(settings: Any = None) -> None:
    """Console level from settings.log_level, log file under settings.data_dir."""
    if settings is None:
        settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)
    if not isinstance(console_level, int):
        console_level = logging.INFO

    log_dir = getattr(settings, "data_dir", ".local/veloce")
    setup_logging(log_dir=log_dir, console_level=console_level)
    logger.info("Logging ready for %s (console=%s)", getattr(settings, "app_name", "veloce"), level_name)


def build_preload_cache(settings: Any = None) -> PreloadCache[str, TaskCardState]:
    if settings is None:
        settings = get_settings()
    cache: PreloadCache[str, TaskCardState] = PreloadCache.from_settings(settings)
    logger.info(
        "PreloadCache ready capacity=%d batch_width=%d load_timeout=%.1fs",
        cache.capacity,
        cache.batch_width,
        cache.load_timeout,
    )
    return cache


def build_strategy_advisor(settings: Any = None) -> StrategyAdvisor:
    if settings is None:
        settings = get_settings()

    if not getattr(settings, "ai_strategy_enabled", False):
        logger.info("AI strategy disabled; using offline strategies")
        return OfflineStrategyAdvisor()

    try:
        llm = OpenRouterLLMClient(settings)
    except RuntimeError as e:
        # Fallback for demos / local runs without external services.
        logger.warning("AI strategy unavailable (%s); using offline strategies", e)
        return OfflineStrategyAdvisor()

    return LLMStrategyAdvisor(llm)


def build_card_assembler(
    tasks: TaskDirectory,
    subtasks: SubtaskSource,
    *,
    settings: Any = None,
    advisor: StrategyAdvisor | None = None,
) -> TaskCardAssembler:
    if advisor is None:
        advisor = build_strategy_advisor(settings)
    return TaskCardAssembler(tasks, subtasks, advisor)
