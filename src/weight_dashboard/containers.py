"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import date

import httpx

from weight_dashboard.adapters.json_source import json_source_for
from weight_dashboard.adapters.sheets_client import HttpxSheetsClient, SheetsClient
from weight_dashboard.config import AppConfig, parse_data_source
from weight_dashboard.services.cache import InMemoryDashboardCache
from weight_dashboard.services.dashboard import DashboardService
from weight_dashboard.services.loader import DataLoader


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    config: AppConfig
    sheets_client: SheetsClient
    dashboard_service: DashboardService
    today: Callable[[], date]
    close_resources: Callable[[], Awaitable[None]]


def build_container(config: AppConfig | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_config = config or AppConfig()
    timeout = resolved_config.request_timeout_seconds
    sheets_client = HttpxSheetsClient.create(
        sheet_id=resolved_config.sheet_id,
        base_url=resolved_config.sheets_base_url,
        timeout=timeout,
    )
    json_http_client = httpx.AsyncClient()
    snapshot_source = json_source_for(
        resolved_config.local_data_path, json_http_client, timeout
    )
    meals_source = (
        json_source_for(resolved_config.meals_path, json_http_client, timeout)
        if resolved_config.meals_path
        else None
    )
    loader = DataLoader(
        sheets_client=sheets_client,
        snapshot_source=snapshot_source,
        meals_source=meals_source,
        input_sheet_name=resolved_config.input_sheet_name,
        settings_sheet_name=resolved_config.settings_sheet_name,
        fallback_year=resolved_config.fallback_year,
    )
    dashboard_service = DashboardService(
        loader=loader,
        cache=InMemoryDashboardCache(),
        default_source=parse_data_source(resolved_config.data_source),
    )

    async def close_resources() -> None:
        await sheets_client.close()
        await json_http_client.aclose()

    return AppContainer(
        config=resolved_config,
        sheets_client=sheets_client,
        dashboard_service=dashboard_service,
        today=date.today,
        close_resources=close_resources,
    )
