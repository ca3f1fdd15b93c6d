"""OpenFoodFacts search API client."""

from dataclasses import dataclass
from typing import Protocol

import httpx


class OpenFoodFactsClient(Protocol):
    """Interface for OpenFoodFacts product search."""

    async def search_products(self, term: str, page_size: int = 5) -> dict[str, object]:
        """Search products by free text and return raw API data."""


@dataclass
class HttpxOpenFoodFactsClient(OpenFoodFactsClient):
    """HTTPX-backed OpenFoodFacts client."""

    base_url: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(
        cls, base_url: str, user_agent: str, timeout_seconds: float = 10.0
    ) -> "HttpxOpenFoodFactsClient":
        """Create a client with a managed httpx session."""
        return cls(
            base_url=base_url,
            http_client=httpx.AsyncClient(
                headers={"User-Agent": user_agent}, timeout=timeout_seconds
            ),
        )

    async def search_products(self, term: str, page_size: int = 5) -> dict[str, object]:
        """Run a simple full-text product search."""
        response = await self.http_client.get(
            f"{self.base_url}/cgi/search.pl",
            params={
                "search_terms": term,
                "search_simple": 1,
                "action": "process",
                "json": 1,
                "page_size": page_size,
            },
        )
        response.raise_for_status()
        return response.json()

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
