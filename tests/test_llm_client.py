# tests/test_llm_client.py

from __future__ import annotations

from types import SimpleNamespace

import httpx
import openai
import pytest

from veloce_preload.llm.client import OpenRouterLLMClient, friendly_llm_error_message

_REQUEST = httpx.Request("POST", "https://openrouter.test/api/v1/chat/completions")


def _chunk(text: str | None) -> SimpleNamespace:
    return SimpleNamespace(choices=[SimpleNamespace(delta=SimpleNamespace(content=text))])


class _FakeCompletions:
    """Per-model scripted responses: a list of chunks or an exception to raise."""

    def __init__(self, script: dict[str, object]) -> None:
        self.script = script
        self.calls: list[dict] = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        outcome = self.script[kwargs["model"]]
        if isinstance(outcome, Exception):
            raise outcome
        return iter(outcome)


def _client(settings, script: dict[str, object]) -> tuple[OpenRouterLLMClient, _FakeCompletions]:
    settings.openrouter_api_key = "sk-test"
    client = OpenRouterLLMClient(settings)
    completions = _FakeCompletions(script)
    client._client = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    return client, completions


def test_missing_api_key_raises(settings) -> None:
    with pytest.raises(RuntimeError, match="API key"):
        OpenRouterLLMClient(settings)


def test_streams_content_and_sends_system_prompt(settings) -> None:
    client, completions = _client(settings, {"model-a": [_chunk("Hel"), _chunk(None), _chunk("lo")]})

    out = "".join(client.stream_chat([{"role": "user", "content": "hi"}], "be brief"))

    assert out == "Hello"
    assert [c["model"] for c in completions.calls] == ["model-a"]
    messages = completions.calls[0]["messages"]
    assert messages[0] == {"role": "system", "content": "be brief"}
    assert messages[1] == {"role": "user", "content": "hi"}
    assert completions.calls[0]["extra_headers"] == {"X-Title": "veloce-test"}


def test_connection_error_falls_back_to_next_model(settings) -> None:
    client, completions = _client(
        settings,
        {
            "model-a": openai.APIConnectionError(request=_REQUEST),
            "model-b": [_chunk("ok")],
        },
    )

    assert "".join(client.stream_chat([], "sys")) == "ok"
    assert [c["model"] for c in completions.calls] == ["model-a", "model-b"]


def test_not_found_model_is_skipped_on_later_calls(settings) -> None:
    not_found = openai.NotFoundError(
        "no such model",
        response=httpx.Response(404, request=_REQUEST),
        body=None,
    )
    client, completions = _client(settings, {"model-a": not_found, "model-b": [_chunk("ok")]})

    assert "".join(client.stream_chat([], "sys")) == "ok"
    assert "".join(client.stream_chat([], "sys")) == "ok"

    assert [c["model"] for c in completions.calls] == ["model-a", "model-b", "model-b"]


def test_auth_error_fails_fast(settings) -> None:
    auth = openai.AuthenticationError(
        "bad key",
        response=httpx.Response(401, request=_REQUEST),
        body=None,
    )
    client, completions = _client(settings, {"model-a": auth, "model-b": [_chunk("ok")]})

    with pytest.raises(RuntimeError, match="authentication failed"):
        "".join(client.stream_chat([], "sys"))

    assert [c["model"] for c in completions.calls] == ["model-a"]


def test_all_models_empty_raises(settings) -> None:
    client, _ = _client(settings, {"model-a": [], "model-b": [_chunk("")]})

    with pytest.raises(RuntimeError, match="All LLM models failed"):
        "".join(client.stream_chat([], "sys"))


def test_friendly_messages_for_configuration_errors() -> None:
    assert "VELOCE_OPENROUTER_API_KEY" in friendly_llm_error_message(RuntimeError("LLM API key is not set."))
    assert "VELOCE_LLM_MODELS" in friendly_llm_error_message(RuntimeError("LLM model list is empty."))
    assert friendly_llm_error_message(ValueError()) == "LLM error."
    assert friendly_llm_error_message(RuntimeError("boom")) == "boom"
