"""Logfire setup plus small helpers for structured log records.

Modules log through ``logging.getLogger(__name__)``; once Logfire is
configured it picks those records up alongside its own spans.

    logger.info("Daily reset performed", extra={"today": "2024-06-01"})
    log_kid_event(logger, "info", "streak_updated", kid_id="kid1", streak_count=3)
"""

import logging

import logfire
from fastapi import FastAPI

from kidstreak.core.config import settings


logger = logging.getLogger(__name__)


def configure_logfire() -> None:
    """Set up Logfire for this service; nothing leaves the host without a token."""
    logfire.configure(
        token=settings.logfire_token,
        service_name="kidstreak",
        service_version="0.1.0",
        environment=settings.environment,
        send_to_logfire="if-token-present",
    )
    logger.info("logfire_ready", extra={"environment": settings.environment})


def instrument_fastapi(app: FastAPI) -> None:
    """Trace every request handled by ``app``."""
    logfire.instrument_fastapi(app)
    logger.info("fastapi_instrumented")


def span(name: str) -> logfire.LogfireSpan:
    """Open a Logfire span named after the engine or service call, e.g. ``"daily_cycle.check_and_reset"``."""
    return logfire.span(name)


def log_event(target: logging.Logger, level: str, event: str, **fields: object) -> None:
    """Emit ``event`` at ``level`` with ``fields`` attached as record extras."""
    getattr(target, level.lower())(event, extra=fields)


def log_kid_event(
    target: logging.Logger,
    level: str,
    event: str,
    kid_id: str | None = None,
    **fields: object,
) -> None:
    """Same as log_event, tagging the record with ``kid_id`` when one is given."""
    if kid_id:
        fields = {"kid_id": kid_id, **fields}
    log_event(target, level, event, **fields)
