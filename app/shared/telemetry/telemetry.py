"""OpenTelemetry setup for the provisioning service.

Spans come from inbound FastAPI requests, saga steps (see tracing.py) and
outbound httpx calls to Supabase (GoTrue admin and PostgREST). One tracer
provider, built from Settings, covers all three.
"""

import logging

from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.httpx import HTTPXClientInstrumentor
from opentelemetry.instrumentation.logging import LoggingInstrumentor
from opentelemetry.sdk.resources import SERVICE_NAME, SERVICE_VERSION, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import (
    BatchSpanProcessor,
    ConsoleSpanExporter,
    SpanExporter,
)
from opentelemetry.sdk.trace.sampling import ParentBased, TraceIdRatioBased

from app.core.config import Settings

logger = logging.getLogger(__name__)

# Polled by probes; excluded so saga traces stay readable.
UNTRACED_URLS = "/api/v1/health"


def build_span_exporter(kind: str, otlp_endpoint: str | None = None) -> SpanExporter | None:
    """Exporter for TELEMETRY_EXPORTER ("console", "otlp" or "none").

    None means spans are recorded (trace ids still reach the logs) but not
    shipped anywhere. Anything unusable falls back to the console.
    """
    if kind == "none":
        return None
    if kind == "otlp" and otlp_endpoint:
        return OTLPSpanExporter(
            endpoint=otlp_endpoint, insecure=otlp_endpoint.startswith("http://")
        )
    if kind != "console":
        logger.warning(
            "Telemetry exporter %r unusable (endpoint=%s), using console", kind, otlp_endpoint
        )
    return ConsoleSpanExporter()


class Telemetry:
    """Process-wide tracer provider and the instrumentors attached to it."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self.tracer_provider: TracerProvider | None = None

    def start(self, app: FastAPI) -> bool:
        """Install the global tracer provider and instrument FastAPI, httpx and logging.

        Returns False when setup failed; the service then runs untraced.
        """
        settings = self.settings
        try:
            provider = TracerProvider(
                resource=Resource(
                    attributes={
                        SERVICE_NAME: settings.app_name,
                        SERVICE_VERSION: settings.app_version,
                        "deployment.environment": settings.telemetry_environment,
                    }
                ),
                sampler=ParentBased(TraceIdRatioBased(settings.telemetry_sample_rate)),
            )
            exporter = build_span_exporter(
                settings.telemetry_exporter, settings.telemetry_otlp_endpoint
            )
            if exporter is not None:
                provider.add_span_processor(BatchSpanProcessor(exporter))
            trace.set_tracer_provider(provider)

            FastAPIInstrumentor.instrument_app(
                app, tracer_provider=provider, excluded_urls=UNTRACED_URLS
            )
            HTTPXClientInstrumentor().instrument(tracer_provider=provider)
            # Adds otelTraceID/otelSpanID to records; setup_logging owns the format.
            LoggingInstrumentor().instrument(tracer_provider=provider, set_logging_format=False)
        except Exception:
            logger.exception("Telemetry setup failed; continuing without tracing")
            return False

        self.tracer_provider = provider
        logger.info(
            "Tracing %s %s (%s exporter, sample rate %.2f)",
            settings.app_name,
            settings.app_version,
            settings.telemetry_exporter,
            settings.telemetry_sample_rate,
        )
        return True

    def shutdown(self) -> None:
        """Flush pending spans and detach the outbound instrumentors."""
        if self.tracer_provider is None:
            return
        try:
            HTTPXClientInstrumentor().uninstrument()
            LoggingInstrumentor().uninstrument()
            self.tracer_provider.shutdown()
        except Exception:
            logger.exception("Error during telemetry shutdown")
        finally:
            self.tracer_provider = None
