"""Tests for HTTP-based adapters."""

import asyncio
import json

import httpx
import pytest

from nutrition_engine.adapters.fdc_client import HttpxFdcClient
from nutrition_engine.adapters.openfoodfacts_client import HttpxOpenFoodFactsClient


def test_openfoodfacts_search_sends_query() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"count": 1, "products": [{"code": "1"}]})

    async_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    client = HttpxOpenFoodFactsClient(
        base_url="https://off.example", http_client=async_client
    )

    payload = asyncio.run(client.search_products("dried kiwi", page_size=3))

    assert payload["count"] == 1
    request = seen[0]
    assert request.method == "GET"
    assert request.url.path == "/cgi/search.pl"
    assert request.url.params["search_terms"] == "dried kiwi"
    assert request.url.params["json"] == "1"
    assert request.url.params["page_size"] == "3"


def test_openfoodfacts_raises_on_error_status() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, json={"error": "busy"})

    async_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    client = HttpxOpenFoodFactsClient(
        base_url="https://off.example", http_client=async_client
    )

    with pytest.raises(httpx.HTTPStatusError):
        asyncio.run(client.search_products("kiwi"))


def test_fdc_search_posts_generic_data_types() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "POST"
        assert request.url.path == "/fdc/v1/foods/search"
        assert request.url.params["api_key"] == "fdc-key"
        body = json.loads(request.content.decode())
        assert body == {
            "query": "apple",
            "pageSize": 5,
            "dataType": ["Foundation", "SR Legacy"],
        }
        return httpx.Response(200, json={"totalHits": 0, "foods": []})

    async_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    client = HttpxFdcClient(
        api_key="fdc-key",
        base_url="https://fdc.example/fdc/v1",
        http_client=async_client,
    )

    payload = asyncio.run(client.search_foods("apple"))

    assert payload == {"totalHits": 0, "foods": []}


def test_create_sets_user_agent() -> None:
    client = HttpxFdcClient.create(
        api_key="fdc-key",
        base_url="https://fdc.example",
        user_agent="NutritionEngine/test",
        timeout_seconds=2.5,
    )

    assert client.http_client.headers["User-Agent"] == "NutritionEngine/test"
    assert client.http_client.timeout.read == 2.5
    asyncio.run(client.close())
