"""Shared telemetry: logging setup, OpenTelemetry config, and tracing helpers."""

from app.shared.telemetry.logging import setup_logging
from app.shared.telemetry.telemetry import Telemetry, build_span_exporter
from app.shared.telemetry.tracing import (
    TracedOperation,
    add_span_attributes,
    add_span_event,
    get_trace_id,
    traced,
)

__all__ = [
    "setup_logging",
    "Telemetry",
    "build_span_exporter",
    "traced",
    "add_span_attributes",
    "add_span_event",
    "get_trace_id",
    "TracedOperation",
]
