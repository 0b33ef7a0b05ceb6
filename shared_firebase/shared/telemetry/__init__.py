"""Shared telemetry: logging setup, OpenTelemetry config, and tracing helpers."""

from shared_firebase.shared.telemetry.logging import setup_logging
from shared_firebase.shared.telemetry.telemetry import TelemetryConfig
from shared_firebase.shared.telemetry.tracing import (
    add_span_attributes,
    traced,
)

__all__ = [
    "setup_logging",
    "TelemetryConfig",
    "traced",
    "add_span_attributes",
]
