"""USDA FoodData Central API client."""

from dataclasses import dataclass
from typing import Protocol

import httpx

DEFAULT_DATA_TYPES = ("Foundation", "SR Legacy")


class FdcClient(Protocol):
    """Interface for FoodData Central API interactions."""

    async def search_foods(self, query: str, page_size: int = 5) -> dict[str, object]:
        """Search foods by query and return raw API data."""


@dataclass
class HttpxFdcClient(FdcClient):
    """HTTPX-backed FDC client."""

    api_key: str
    base_url: str
    http_client: httpx.AsyncClient
    data_types: tuple[str, ...] = DEFAULT_DATA_TYPES

    @classmethod
    def create(
        cls,
        api_key: str,
        base_url: str,
        user_agent: str,
        timeout_seconds: float = 10.0,
    ) -> "HttpxFdcClient":
        """Create an FDC client with a managed httpx session."""
        return cls(
            api_key=api_key,
            base_url=base_url,
            http_client=httpx.AsyncClient(
                headers={"User-Agent": user_agent}, timeout=timeout_seconds
            ),
        )

    async def search_foods(self, query: str, page_size: int = 5) -> dict[str, object]:
        """Search generic (non-branded) foods by query."""
        response = await self.http_client.post(
            f"{self.base_url}/foods/search",
            params={"api_key": self.api_key},
            json={
                "query": query,
                "pageSize": page_size,
                "dataType": list(self.data_types),
            },
        )
        response.raise_for_status()
        return response.json()

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
