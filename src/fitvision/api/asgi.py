"""ASGI entrypoint for the FitVision API."""

from fitvision.api.app import create_app
from fitvision.containers import build_container

app = create_app(build_container())
