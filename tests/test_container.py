"""Tests for container wiring."""

import asyncio

from nutrition_engine.containers import build_container


def test_build_container_creates_services(settings) -> None:
    container = build_container(settings)
    assert container.recommendation_service is not None
    assert container.nutrition_service.cache is container.cache
    assert container.cache.store is None
    assert container.nutrition_service.max_retries == settings.max_retries
    assert container.matcher.options.min_similarity_threshold == 50
    asyncio.run(container.close_resources())
