"""Telemetry module for OpenTelemetry instrumentation."""
from tasktrack.telemetry.instrumentation import (
    TelemetryManager,
    record_login_failure,
    record_token_rejection,
)

__all__ = [
    "TelemetryManager",
    "record_login_failure",
    "record_token_rejection",
]
