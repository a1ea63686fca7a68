"""Tests for container wiring."""

import asyncio

import pytest

from weight_dashboard.config import AppConfig
from weight_dashboard.containers import build_container


def test_build_container_creates_services(config: AppConfig) -> None:
    container = build_container(config)

    assert container.dashboard_service is not None
    assert container.dashboard_service.default_source == "sheets"
    assert container.dashboard_service.loader.meals_source is None
    assert container.today() is not None
    asyncio.run(container.close_resources())


def test_build_container_uses_configured_source() -> None:
    config = AppConfig(data_source="LOCAL", meals_path="data/meals.json")

    container = build_container(config)

    assert container.dashboard_service.default_source == "local"
    assert container.dashboard_service.loader.meals_source is not None
    asyncio.run(container.close_resources())


def test_build_container_rejects_unknown_source() -> None:
    with pytest.raises(ValueError, match="Unknown data source"):
        build_container(AppConfig(data_source="excel"))
