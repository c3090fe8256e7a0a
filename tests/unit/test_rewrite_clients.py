"""
Tests for the LLM rewrite clients against fake transports.
"""

import asyncio
import json
from types import SimpleNamespace

import httpx
import pytest

from resume.ai import OllamaRewriteClient, OpenAIRewriteClient, UpstreamCallError
from resume.ai.prompts import RESPONSE_SCHEMA, RESPONSE_SCHEMA_NAME


def ollama_with(handler):
    return OllamaRewriteClient(base_url="http://ollama.test", transport=httpx.MockTransport(handler))


@pytest.mark.unit
def test_ollama_sends_schema_and_returns_content():
    seen = {}

    def handler(request):
        seen["path"] = request.url.path
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"message": {"role": "assistant", "content": '{"ok": true}'}})

    content = asyncio.run(ollama_with(handler).generate_structured("system", "prompt", RESPONSE_SCHEMA))

    assert content == '{"ok": true}'
    assert seen["path"] == "/api/chat"
    assert seen["body"]["format"] == RESPONSE_SCHEMA
    assert seen["body"]["stream"] is False
    assert seen["body"]["messages"][1] == {"role": "user", "content": "prompt"}


@pytest.mark.unit
def test_ollama_http_error_is_upstream_error():
    client = ollama_with(lambda request: httpx.Response(500, text="model crashed"))

    with pytest.raises(UpstreamCallError):
        asyncio.run(client.generate_structured("system", "prompt", RESPONSE_SCHEMA))


@pytest.mark.unit
def test_ollama_transport_error_is_upstream_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(UpstreamCallError):
        asyncio.run(ollama_with(handler).generate_structured("system", "prompt", RESPONSE_SCHEMA))


@pytest.mark.unit
def test_ollama_availability_check():
    up = ollama_with(lambda request: httpx.Response(200, json={"models": []}))
    assert asyncio.run(up.is_available()) is True

    def refuse(request):
        raise httpx.ConnectError("connection refused", request=request)

    assert asyncio.run(ollama_with(refuse).is_available()) is False


class FakeCompletions:
    def __init__(self, response):
        self.response = response
        self.kwargs = None

    async def create(self, **kwargs):
        self.kwargs = kwargs
        return self.response


def fake_openai(response):
    completions = FakeCompletions(response)
    return SimpleNamespace(chat=SimpleNamespace(completions=completions)), completions


@pytest.mark.unit
def test_openai_requests_strict_json_schema():
    response = SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content='{"ok": true}'))],
        usage=SimpleNamespace(prompt_tokens=10, completion_tokens=5, total_tokens=15),
    )
    sdk, completions = fake_openai(response)
    client = OpenAIRewriteClient(api_key="test", client=sdk)

    content = asyncio.run(client.generate_structured("system", "prompt", RESPONSE_SCHEMA))

    assert content == '{"ok": true}'
    response_format = completions.kwargs["response_format"]
    assert response_format["type"] == "json_schema"
    assert response_format["json_schema"]["name"] == RESPONSE_SCHEMA_NAME
    assert response_format["json_schema"]["strict"] is True
    assert completions.kwargs["model"] == "gpt-4o-mini"


@pytest.mark.unit
def test_openai_without_choices_returns_none():
    sdk, _ = fake_openai(SimpleNamespace(choices=[], usage=None))
    client = OpenAIRewriteClient(api_key="test", client=sdk)

    assert asyncio.run(client.generate_structured("system", "prompt", RESPONSE_SCHEMA)) is None
