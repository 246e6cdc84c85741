import asyncio
import json

import httpx
import pytest

from wordbook.config import Settings
from wordbook.core.llm_provider import (
    DummyLLMProvider,
    GeminiProvider,
    LLMConfigurationError,
    LLMFormatError,
    LLMMessage,
    LLMTransportError,
    build_llm_provider,
)
from wordbook.core.suggestions import (
    SUGGESTION_PROMPT,
    SuggestionFormatError,
    parse_suggestion,
    suggest_word,
)


def _gemini_reply(text):
    return {"candidates": [{"content": {"role": "model", "parts": [{"text": text}]}}]}


def _gemini(handler):
    return GeminiProvider(
        api_key="test-key",
        model="test-model",
        base_url="https://gemini.test/v1beta/",
        transport=httpx.MockTransport(handler),
    )


# ---------- parsing ----------

def test_parse_trims_and_lowercases_word():
    s = parse_suggestion("  Petrichor |  The pleasant smell of earth after rain \n")
    assert s.word == "petrichor"
    assert s.meaning == "The pleasant smell of earth after rain"


def test_parse_splits_on_first_pipe_only():
    s = parse_suggestion("either|one | or the other")
    assert s.word == "either"
    assert s.meaning == "one | or the other"


@pytest.mark.parametrize("reply", ["petrichor", "|a smell", "petrichor|", "  |  ", ""])
def test_parse_rejects_malformed_replies(reply):
    with pytest.raises(SuggestionFormatError) as info:
        parse_suggestion(reply)
    assert info.value.raw == reply


# ---------- orchestration ----------

def test_suggest_word_sends_fixed_prompt():
    provider = DummyLLMProvider("Quixotic|exceedingly idealistic")
    s = asyncio.run(suggest_word(provider))
    assert (s.word, s.meaning) == ("quixotic", "exceedingly idealistic")
    assert provider.calls == [[LLMMessage(role="user", content=SUGGESTION_PROMPT)]]
    assert "word|definition" in SUGGESTION_PROMPT


def test_suggest_word_maps_missing_text_to_format_error():
    def handler(request):
        return httpx.Response(200, json={"candidates": []})

    with pytest.raises(SuggestionFormatError):
        asyncio.run(suggest_word(_gemini(handler)))


# ---------- Gemini provider ----------

def test_gemini_request_shape_and_reply_text():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json=_gemini_reply("petrichor|smell of rain"))

    messages = [
        LLMMessage(role="system", content="be brief"),
        LLMMessage(role="user", content="a word please"),
    ]
    resp = asyncio.run(_gemini(handler).chat(messages))

    assert resp.content == "petrichor|smell of rain"
    request = seen[0]
    assert request.method == "POST"
    assert str(request.url) == "https://gemini.test/v1beta/models/test-model:generateContent"
    assert request.headers["x-goog-api-key"] == "test-key"
    body = json.loads(request.content)
    assert body["contents"] == [{"role": "user", "parts": [{"text": "a word please"}]}]
    assert body["systemInstruction"] == {"parts": [{"text": "be brief"}]}


@pytest.mark.parametrize(
    "payload",
    [
        {},
        {"candidates": [{"content": {}}]},
        {"candidates": [{"content": {"parts": []}}]},
        {"candidates": [{"content": {"parts": [{"text": 42}]}}]},
    ],
)
def test_gemini_missing_text_is_format_error(payload):
    def handler(request):
        return httpx.Response(200, json=payload)

    with pytest.raises(LLMFormatError):
        asyncio.run(_gemini(handler).chat([LLMMessage(role="user", content="hi")]))


def test_gemini_http_error_is_transport_error():
    def handler(request):
        return httpx.Response(503, json={"error": {"message": "overloaded"}})

    with pytest.raises(LLMTransportError):
        asyncio.run(_gemini(handler).chat([LLMMessage(role="user", content="hi")]))


def test_gemini_connection_error_is_transport_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(LLMTransportError):
        asyncio.run(_gemini(handler).chat([LLMMessage(role="user", content="hi")]))


def test_build_provider_requires_key():
    with pytest.raises(LLMConfigurationError):
        build_llm_provider(Settings(gemini_api_key=None))

    provider = build_llm_provider(Settings(gemini_api_key="k", gemini_model="m"))
    assert isinstance(provider, GeminiProvider)
    assert provider.endpoint.endswith("/models/m:generateContent")


def test_gemini_timeout_follows_settings():
    seen = []

    def handler(request):
        seen.append(request.extensions["timeout"])
        return httpx.Response(200, json=_gemini_reply("petrichor|smell of rain"))

    messages = [LLMMessage(role="user", content="hi")]

    asyncio.run(_gemini(handler).chat(messages))
    assert seen[-1] == httpx.Timeout(5.0).as_dict()

    provider = build_llm_provider(Settings(gemini_api_key="k", http_timeout_sec=12.0))
    provider.transport = httpx.MockTransport(handler)
    asyncio.run(provider.chat(messages))
    assert seen[-1] == httpx.Timeout(12.0).as_dict()
