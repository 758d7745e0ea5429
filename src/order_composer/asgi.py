from __future__ import annotations

from fastapi import FastAPI

from order_composer.adapters.inbound.web.fastapi_app import create_app
from order_composer.bootstrap import build_usecases
from order_composer.config import load_settings
from order_composer.logging_config import setup_logging


def create_asgi_app() -> FastAPI:
    settings = load_settings()
    setup_logging(settings.log_level, settings.json_logs)
    usecases = build_usecases(settings)
    return create_app(
        usecases.compose_order,
        usecases.get_order,
        usecases.list_orders,
        compose_timeout_seconds=settings.compose_timeout_seconds,
    )
