"""OpenTelemetry instrumentation setup."""

import logging

from opentelemetry import metrics, trace
from opentelemetry.exporter.otlp.proto.http.metric_exporter import OTLPMetricExporter
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import (
    ConsoleMetricExporter,
    PeriodicExportingMetricReader,
)
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
from opentelemetry.semconv.resource import ResourceAttributes

from tasktrack.config import Settings

logger = logging.getLogger(__name__)

# Instruments come from the global meter provider, which is a no-op until
# TelemetryManager.setup() installs a real one.
_meter = metrics.get_meter("tasktrack.auth")
_token_rejections = _meter.create_counter(
    "auth.token.rejections",
    description="Bearer tokens rejected, by rejection kind",
)
_login_failures = _meter.create_counter(
    "auth.login.failures",
    description="Failed login attempts",
)


def record_token_rejection(kind: str) -> None:
    """Count a rejected bearer token."""
    _token_rejections.add(1, {"kind": kind})


def record_login_failure() -> None:
    """Count a failed login attempt."""
    _login_failures.add(1)


class TelemetryManager:
    """Manages OpenTelemetry instrumentation."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.tracer_provider: TracerProvider | None = None
        self.meter_provider: MeterProvider | None = None

    def setup(self) -> None:
        """Initialize OpenTelemetry instrumentation."""
        if not self.settings.otel_enabled:
            logger.info("OpenTelemetry is disabled")
            return

        logger.info("Initializing OpenTelemetry instrumentation")

        # Create resource with service information
        resource = self._create_resource()

        self._setup_tracing(resource)
        self._setup_metrics(resource)

        logger.info("OpenTelemetry instrumentation initialized successfully")

    def _create_resource(self) -> Resource:
        """Create resource with service attributes."""
        attributes = {
            ResourceAttributes.SERVICE_NAME: self.settings.otel_service_name,
            ResourceAttributes.DEPLOYMENT_ENVIRONMENT: self.settings.environment,
        }
        attributes.update(self.settings.get_resource_attributes())

        return Resource.create(attributes)

    def _endpoint(self, signal: str) -> str:
        endpoint = self.settings.otel_exporter_otlp_endpoint.rstrip("/")
        suffix = f"/v1/{signal}"
        return endpoint if endpoint.endswith(suffix) else f"{endpoint}{suffix}"

    def _setup_tracing(self, resource: Resource) -> None:
        """Setup trace provider and exporters."""
        self.tracer_provider = TracerProvider(resource=resource)

        if self.settings.otel_traces_exporter == "otlp":
            otlp_exporter = OTLPSpanExporter(
                endpoint=self._endpoint("traces"),
                headers=self.settings.get_otlp_headers(),
            )
            self.tracer_provider.add_span_processor(BatchSpanProcessor(otlp_exporter))
            logger.info(f"OTLP trace exporter configured: {self._endpoint('traces')}")

        elif self.settings.otel_traces_exporter == "console":
            # Console exporter for debugging
            self.tracer_provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))
            logger.info("Console trace exporter configured")

        # Set as global tracer provider
        trace.set_tracer_provider(self.tracer_provider)

    def _setup_metrics(self, resource: Resource) -> None:
        """Setup meter provider and exporters."""
        if self.settings.otel_metrics_exporter == "otlp":
            otlp_exporter = OTLPMetricExporter(
                endpoint=self._endpoint("metrics"),
                headers=self.settings.get_otlp_headers(),
            )
            reader = PeriodicExportingMetricReader(otlp_exporter, export_interval_millis=60000)
            self.meter_provider = MeterProvider(resource=resource, metric_readers=[reader])
            logger.info(f"OTLP metric exporter configured: {self._endpoint('metrics')}")

        elif self.settings.otel_metrics_exporter == "console":
            reader = PeriodicExportingMetricReader(
                ConsoleMetricExporter(), export_interval_millis=60000
            )
            self.meter_provider = MeterProvider(resource=resource, metric_readers=[reader])
            logger.info("Console metric exporter configured")

        else:
            # No metrics exporter
            self.meter_provider = MeterProvider(resource=resource)

        # Set as global meter provider
        metrics.set_meter_provider(self.meter_provider)

    def shutdown(self) -> None:
        """Shutdown telemetry providers."""
        if self.tracer_provider:
            self.tracer_provider.shutdown()
        if self.meter_provider:
            self.meter_provider.shutdown()
        logger.info("OpenTelemetry shutdown complete")
