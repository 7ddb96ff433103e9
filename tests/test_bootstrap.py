# tests/test_bootstrap.py

from __future__ import annotations

import pytest

from veloce_preload.bootstrap import build_card_assembler, build_preload_cache, build_strategy_advisor
from veloce_preload.card.card_models import OFFLINE_SOURCE
from veloce_preload.card.strategy import LLMStrategyAdvisor, OfflineStrategyAdvisor
from veloce_preload.preload.cancellation import CancellationToken

from .fakes import FakeAdvisor


def test_build_preload_cache_uses_settings(settings) -> None:
    cache = build_preload_cache(settings)

    assert cache.capacity == 4
    assert cache.batch_width == 2
    assert cache.load_timeout == 0.5
    assert len(cache) == 0


def test_advisor_is_offline_when_disabled(settings) -> None:
    settings.openrouter_api_key = "sk-test"
    settings.ai_strategy_enabled = False

    assert isinstance(build_strategy_advisor(settings), OfflineStrategyAdvisor)


def test_advisor_is_offline_without_api_key(settings) -> None:
    settings.ai_strategy_enabled = True
    settings.openrouter_api_key = None

    assert isinstance(build_strategy_advisor(settings), OfflineStrategyAdvisor)


def test_advisor_is_offline_without_models(settings) -> None:
    settings.ai_strategy_enabled = True
    settings.openrouter_api_key = "sk-test"
    settings.llm_models = []

    assert isinstance(build_strategy_advisor(settings), OfflineStrategyAdvisor)


def test_advisor_uses_llm_when_configured(settings) -> None:
    settings.ai_strategy_enabled = True
    settings.openrouter_api_key = "sk-test"

    advisor = build_strategy_advisor(settings)

    assert isinstance(advisor, LLMStrategyAdvisor)


@pytest.mark.asyncio
async def test_build_card_assembler_with_injected_advisor(settings, directory) -> None:
    advisor = FakeAdvisor(exc=RuntimeError("down"))
    assembler = build_card_assembler(directory, directory, settings=settings, advisor=advisor)

    card = await assembler("t-call", CancellationToken())

    assert advisor.calls == ["t-call"]
    assert card.strategy_source == OFFLINE_SOURCE
    assert card.strategy_error == "down"


@pytest.mark.asyncio
async def test_build_card_assembler_defaults_to_offline(settings, directory) -> None:
    assembler = build_card_assembler(directory, directory, settings=settings)

    card = await assembler("t-read", CancellationToken())

    assert card.strategy_source == OFFLINE_SOURCE
    assert card.strategy_error is None
