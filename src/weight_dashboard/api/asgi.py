"""ASGI entrypoint for the weight dashboard API."""

from weight_dashboard.api.app import create_app
from weight_dashboard.containers import build_container

app = create_app(build_container())
