"""Logging setup and OpenTelemetry tracing."""

from app.shared.telemetry.logging import RequestIdFilter, get_logger, setup_logging
from app.shared.telemetry.telemetry import Telemetry, get_tracer

__all__ = [
    "RequestIdFilter",
    "Telemetry",
    "get_logger",
    "get_tracer",
    "setup_logging",
]
