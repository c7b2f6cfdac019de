"""Tests for the LUIS intent classifier."""

import httpx
import pytest
from tenacity import wait_none

from gracebot.core.exceptions import ClassificationError
from gracebot.services.intent import LuisClient

PREDICTION = {
    "query": "hi there",
    "prediction": {
        "topIntent": "Greeting",
        "intents": {"Greeting": {"score": 0.92}, "None": {"score": 0.05}},
        "entities": {"name": ["Grace"]},
    },
}


def make_client(handler) -> LuisClient:
    return LuisClient(
        endpoint="https://westus.api.cognitive.microsoft.com/",
        app_id="app-123",
        api_key="secret",
        wait=wait_none(),
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )


@pytest.mark.asyncio
async def test_classify():
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json=PREDICTION)

    client = make_client(handler)
    result = await client.classify("hi there")

    assert result.top_intent == "Greeting"
    assert result.score == pytest.approx(0.92)
    assert result.intents["None"] == pytest.approx(0.05)
    assert result.entities == {"name": ["Grace"]}

    request = requests[0]
    assert request.url.path == "/luis/prediction/v3.0/apps/app-123/slots/production/predict"
    assert request.url.params["query"] == "hi there"
    assert request.url.params["subscription-key"] == "secret"


@pytest.mark.asyncio
async def test_empty_text_skips_service():
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("should not be called")

    result = await make_client(handler).classify("  ")

    assert result.top_intent == "None"
    assert result.score == 0.0


@pytest.mark.asyncio
async def test_retries_transient_failures():
    responses = iter([httpx.Response(503), httpx.Response(429), httpx.Response(200, json=PREDICTION)])

    def handler(request: httpx.Request) -> httpx.Response:
        return next(responses)

    result = await make_client(handler).classify("hi there")

    assert result.top_intent == "Greeting"


@pytest.mark.asyncio
async def test_gives_up_after_max_attempts():
    calls = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        raise httpx.ConnectError("unreachable", request=request)

    with pytest.raises(ClassificationError) as exc_info:
        await make_client(handler).classify("hi there")

    assert calls == 3
    assert exc_info.value.details == {"provider": "luis"}


@pytest.mark.asyncio
async def test_client_error_is_not_retried():
    calls = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        return httpx.Response(401)

    with pytest.raises(ClassificationError):
        await make_client(handler).classify("hi there")

    assert calls == 1


@pytest.mark.asyncio
async def test_missing_prediction_fields():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"query": "hi"})

    result = await make_client(handler).classify("hi")

    assert result.top_intent == "None"
    assert result.score == 0.0
    assert result.entities == {}
