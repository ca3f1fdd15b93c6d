"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Query, Request, status

from nutrition_engine.api.catalog import router as catalog_router
from nutrition_engine.api.models import (
    AnalyzeRequest,
    RequirementsRequest,
    SafetyRequest,
    TermRequest,
)
from nutrition_engine.app_logging import configure_logging
from nutrition_engine.containers import AppContainer
from nutrition_engine.errors import (
    AllSourcesFailedError,
    NutritionNotFoundError,
    ProfileValidationError,
)
from nutrition_engine.services.requirements import calculate_daily_requirements


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(catalog_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/nutrition")
    async def nutrition(request: Request, q: str = Query()) -> dict[str, object]:
        """Look up canonical nutrition for a food term."""
        state_container: AppContainer = request.app.state.container
        if not q.strip():
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail="Search term must not be empty",
            )
        try:
            result = await state_container.nutrition_service.fetch_nutrition(q)
        except NutritionNotFoundError as exc:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)
            ) from exc
        except AllSourcesFailedError as exc:
            logger.warning("Nutrition lookup unavailable for %s: %s", q, exc)
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)
            ) from exc
        return {"result": result}

    @app.post("/nutrition/analyze")
    async def analyze(payload: AnalyzeRequest, request: Request) -> dict[str, object]:
        """Analyze a record against an optional profile."""
        state_container: AppContainer = request.app.state.container
        analysis = state_container.analysis_service.analyze(
            payload.record.to_domain(),
            payload.profile.to_domain() if payload.profile else None,
            payload.options.to_domain() if payload.options else None,
        )
        return {"analysis": analysis}

    @app.post("/nutrition/safety")
    async def safety(payload: SafetyRequest, request: Request) -> dict[str, object]:
        """Return the blocking decision, risks and conservative advice."""
        state_container: AppContainer = request.app.state.container
        report = state_container.validator.get_safety_report(
            payload.record.to_domain(),
            payload.profile.to_domain() if payload.profile else None,
        )
        return {
            "report": report,
            "is_safe": report.validation.is_safe,
        }

    @app.post("/requirements")
    async def requirements(payload: RequirementsRequest) -> dict[str, object]:
        """Compute daily nutrient requirements for a profile."""
        try:
            result = calculate_daily_requirements(payload.profile.to_domain())
        except ProfileValidationError as exc:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail={"errors": exc.errors},
            ) from exc
        return {"requirements": result}

    @app.post("/recommendations")
    async def recommendations(
        payload: TermRequest, request: Request
    ) -> dict[str, object]:
        """Match, analyze and suggest alternatives for a food query."""
        state_container: AppContainer = request.app.state.container
        if not payload.term.strip():
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail="Search term must not be empty",
            )
        recommendation = await state_container.recommendation_service.recommend(
            payload.term,
            payload.profile.to_domain() if payload.profile else None,
        )
        return {"recommendation": recommendation}

    @app.get("/cache/stats")
    async def cache_stats(request: Request) -> dict[str, object]:
        """Return cache occupancy."""
        state_container: AppContainer = request.app.state.container
        return {"stats": state_container.nutrition_service.get_cache_stats()}

    @app.delete("/cache")
    async def clear_cache(request: Request) -> dict[str, str]:
        """Drop every cached nutrition entry."""
        state_container: AppContainer = request.app.state.container
        state_container.nutrition_service.clear_cache()
        return {"status": "ok"}

    return app
