"""Tests for HTTP-based adapters."""

import asyncio

import httpx
from openai import AsyncOpenAI

from nutritrack.adapters.openai_insight_client import OpenAIInsightClient


class _FakeResponses:
    def __init__(self, output_text: str | None) -> None:
        self.output_text = output_text
        self.last_payload: dict[str, object] | None = None

    async def create(self, **kwargs):  # type: ignore[no-untyped-def]
        self.last_payload = kwargs
        return type("Resp", (), {"output_text": self.output_text})()


class _FakeOpenAI:
    def __init__(self, output_text: str | None = "Nice balance.") -> None:
        self.responses = _FakeResponses(output_text)


def test_openai_insight_client_returns_output_text() -> None:
    fake = _FakeOpenAI()
    client = OpenAIInsightClient(client=fake)

    text = asyncio.run(
        client.complete(
            model="gpt-5.2", reasoning_effort="low", store=False, prompt="Analyze"
        )
    )

    assert text == "Nice balance."
    payload = fake.responses.last_payload
    assert payload["model"] == "gpt-5.2"
    assert payload["reasoning"] == {"effort": "low"}
    assert payload["store"] is False
    assert payload["input"][0]["content"][0] == {
        "type": "input_text",
        "text": "Analyze",
    }


def test_openai_insight_client_without_reasoning_or_text() -> None:
    fake = _FakeOpenAI(output_text=None)
    client = OpenAIInsightClient(client=fake)

    text = asyncio.run(
        client.complete(model="gpt-5.2", reasoning_effort=None, store=True, prompt="")
    )

    assert text == ""
    assert "reasoning" not in fake.responses.last_payload


def test_openai_insight_client_close_closes_http_session() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500)

    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    client = OpenAIInsightClient(
        client=AsyncOpenAI(api_key="test-key", http_client=http_client)
    )

    asyncio.run(client.close())

    assert http_client.is_closed
