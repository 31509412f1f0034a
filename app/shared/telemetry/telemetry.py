"""OpenTelemetry tracing for the identity service.

Spans cover inbound requests, SQL statements, Redis commands and the
outbound WeChat / Tencent Cloud calls (custom spans via get_tracer).
Exporter is chosen by TELEMETRY_EXPORTER: console, otlp or none.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.logging import LoggingInstrumentor
from opentelemetry.instrumentation.redis import RedisInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.sdk.resources import SERVICE_NAME, SERVICE_VERSION, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import (
    BatchSpanProcessor,
    ConsoleSpanExporter,
    SpanExporter,
)
from opentelemetry.sdk.trace.sampling import TraceIdRatioBased
from sqlalchemy.ext.asyncio import AsyncEngine

from app.core.config import Settings

logger = logging.getLogger(__name__)

# Probes are polled constantly; tracing them is noise.
UNTRACED_URLS = "/api/v1/health"


class Telemetry:
    """Tracer provider plus the instrumentors attached to one application."""

    def __init__(
        self,
        service_name: str,
        service_version: str,
        *,
        environment: str = "development",
        exporter: str = "console",
        otlp_endpoint: str | None = None,
        sample_rate: float = 1.0,
    ) -> None:
        self.service_name = service_name
        self.service_version = service_version
        self.environment = environment
        self.exporter = exporter
        self.otlp_endpoint = otlp_endpoint
        self.sample_rate = sample_rate
        self.tracer_provider: TracerProvider | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> Telemetry:
        return cls(
            settings.app_name,
            settings.app_version,
            environment=settings.telemetry_environment,
            exporter=settings.telemetry_exporter,
            otlp_endpoint=settings.telemetry_otlp_endpoint,
            sample_rate=settings.telemetry_sample_rate,
        )

    def _span_exporter(self) -> SpanExporter | None:
        if self.exporter == "none":
            return None
        if self.exporter == "otlp":
            if self.otlp_endpoint:
                return OTLPSpanExporter(
                    endpoint=self.otlp_endpoint,
                    insecure=self.otlp_endpoint.startswith("http://"),
                )
            logger.warning("TELEMETRY_OTLP_ENDPOINT not set; spans go to the console")
        elif self.exporter != "console":
            logger.warning("Unknown telemetry exporter %r; using console", self.exporter)
        return ConsoleSpanExporter()

    def start(self) -> bool:
        """Install the global tracer provider. Returns False if setup failed."""
        try:
            provider = TracerProvider(
                resource=Resource(
                    attributes={
                        SERVICE_NAME: self.service_name,
                        SERVICE_VERSION: self.service_version,
                        "deployment.environment": self.environment,
                    }
                ),
                sampler=TraceIdRatioBased(self.sample_rate),
            )
            exporter = self._span_exporter()
            if exporter is not None:
                provider.add_span_processor(BatchSpanProcessor(exporter))
            trace.set_tracer_provider(provider)
        except Exception:
            logger.exception("Tracing setup failed; continuing without spans")
            return False
        self.tracer_provider = provider
        logger.info(
            "Tracing started for %s (exporter=%s)", self.service_name, self.exporter
        )
        return True

    def instrument(self, app: FastAPI, engine: AsyncEngine | None = None) -> None:
        """Attach FastAPI, Redis and logging instrumentors, plus SQLAlchemy when a DB is configured."""
        if self.tracer_provider is None:
            return
        try:
            FastAPIInstrumentor.instrument_app(
                app,
                tracer_provider=self.tracer_provider,
                excluded_urls=UNTRACED_URLS,
            )
            RedisInstrumentor().instrument(tracer_provider=self.tracer_provider)
            LoggingInstrumentor().instrument(tracer_provider=self.tracer_provider)
            if engine is not None:
                SQLAlchemyInstrumentor().instrument(
                    engine=engine.sync_engine, tracer_provider=self.tracer_provider
                )
        except Exception:
            logger.exception("Instrumentation failed; tracing is partial")

    def shutdown(self) -> None:
        """Flush pending spans."""
        if self.tracer_provider is None:
            return
        try:
            self.tracer_provider.shutdown()
        except Exception:
            logger.exception("Tracer provider shutdown failed")
        self.tracer_provider = None


def get_tracer(name: str) -> trace.Tracer:
    """Tracer for custom spans around upstream calls (get_tracer(__name__))."""
    return trace.get_tracer(name)
