"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.encoders import jsonable_encoder

from weight_dashboard.app_logging import configure_logging
from weight_dashboard.config import parse_data_source
from weight_dashboard.containers import AppContainer
from weight_dashboard.domain.dashboard import DashboardData
from weight_dashboard.services.loader import DataLoadError
from weight_dashboard.services.normalize import normalize_date


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.config.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/api/dashboard")
    async def dashboard(
        request: Request, source: str | None = None
    ) -> dict[str, object]:
        """Return every derived metric for the current data."""
        state_container: AppContainer = request.app.state.container
        data = await _get_data(state_container, _source(source))
        view = state_container.dashboard_service.build_view(
            data, state_container.today()
        )
        return jsonable_encoder(view)

    @app.post("/api/reload")
    async def reload(
        request: Request, source: str | None = None
    ) -> dict[str, object]:
        """Reload the sources; the previous data stays cached on failure."""
        state_container: AppContainer = request.app.state.container
        try:
            data = await state_container.dashboard_service.load(_source(source))
        except DataLoadError as exc:
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)
            ) from exc
        logger.info("Reloaded %s entries from %s", len(data.daily_log), data.source)
        loaded_at = state_container.dashboard_service.cache.loaded_at
        return {
            "status": "ok",
            "source": data.source,
            "entries": len(data.daily_log),
            "loaded_at": loaded_at.isoformat() if loaded_at else None,
        }

    @app.get("/api/meals/{day}")
    async def meals(day: str, request: Request) -> dict[str, object]:
        """Return the meal detail for a date."""
        state_container: AppContainer = request.app.state.container
        canonical = normalize_date(day, state_container.config.fallback_year)
        if canonical is None:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail=f"Invalid date: {day}",
            )
        await _get_data(state_container, None)
        detail = state_container.dashboard_service.meals_for_date(canonical)
        if detail is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return jsonable_encoder(detail)

    @app.get("/api/warnings")
    async def warnings(
        request: Request, source: str | None = None
    ) -> dict[str, object]:
        """Return data-completeness warnings for today."""
        state_container: AppContainer = request.app.state.container
        data = await _get_data(state_container, _source(source))
        return {
            "warnings": jsonable_encoder(
                state_container.dashboard_service.warnings(
                    data, state_container.today()
                )
            )
        }

    return app


def _source(raw: str | None) -> str | None:
    if raw is None:
        return None
    try:
        return parse_data_source(raw)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
        ) from exc


async def _get_data(container: AppContainer, source: str | None) -> DashboardData:
    try:
        return await container.dashboard_service.get_data(source)
    except DataLoadError as exc:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Failed to load data: {exc}",
        ) from exc
