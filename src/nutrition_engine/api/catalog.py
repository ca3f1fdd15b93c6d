"""Catalog matching endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Query, Request

from nutrition_engine.api.models import TermRequest  # noqa: TC001

if TYPE_CHECKING:
    from nutrition_engine.containers import AppContainer

router = APIRouter(prefix="/catalog", tags=["catalog"])


@router.get("/products")
async def list_products(request: Request) -> dict[str, object]:
    """Return catalog products with their local nutrition."""
    container: AppContainer = request.app.state.container
    return {"products": container.matcher.products_with_nutrition()}


@router.get("/match")
async def match_product(
    request: Request, q: str = Query(min_length=1)
) -> dict[str, object]:
    """Return the best catalog product for a fruit query."""
    container: AppContainer = request.app.state.container
    result = container.matcher.match_fruit_to_product(q)
    return {
        "match": result,
        "is_exact_match": result.is_exact_match,
        "highlight": container.matcher.highlight_matching_pill(q),
    }


@router.get("/similar")
async def similar_products(
    request: Request, q: str = Query(min_length=1)
) -> dict[str, object]:
    """Return nutritionally similar products, best first."""
    container: AppContainer = request.app.state.container
    return {"results": container.matcher.find_similar_fruits(q)}


@router.post("/alternative")
async def best_alternative(payload: TermRequest, request: Request) -> dict[str, object]:
    """Return the best safe alternative for a fruit query."""
    container: AppContainer = request.app.state.container
    profile = payload.profile.to_domain() if payload.profile else None
    return {
        "alternative": container.matcher.get_best_alternative(
            payload.term, profile=profile
        )
    }
