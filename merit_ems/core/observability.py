from typing import Optional

from opentelemetry import metrics, trace
from opentelemetry.exporter.otlp.proto.http.metric_exporter import OTLPMetricExporter
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import PeriodicExportingMetricReader
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

from .config import settings

SERVICE_NAME = "merit-ems-timeclock"

# Instruments are created against the global proxies, so they bind to whatever
# providers configure_observability installs later.
tracer = trace.get_tracer("merit_ems")
meter = metrics.get_meter("merit_ems")

sessions_written_counter = meter.create_counter(
    "timeclock.sessions_written", unit="1", description="Work sessions upserted by rebuilds"
)
warnings_written_counter = meter.create_counter(
    "timeclock.warnings_written", unit="1", description="Attendance warnings upserted by rebuilds"
)
payroll_records_counter = meter.create_counter(
    "payroll.records_written", unit="1", description="Payroll records upserted per period"
)

_configured = False


def _signal_url(endpoint: str, signal: str) -> str:
    return f"{endpoint.rstrip('/')}/v1/{signal}"


def configure_observability(otlp_endpoint: Optional[str] = None) -> bool:
    """Install tracer and meter providers; export over OTLP/HTTP only when an endpoint is set.

    Returns False when providers were already installed in this process.
    """
    global _configured
    if _configured:
        return False

    resource = Resource.create({"service.name": SERVICE_NAME, "deployment.env": settings.env})
    endpoint = otlp_endpoint or settings.otlp_endpoint

    tracer_provider = TracerProvider(resource=resource)
    readers = []
    if endpoint:
        tracer_provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(endpoint=_signal_url(endpoint, "traces"))))
        readers.append(PeriodicExportingMetricReader(OTLPMetricExporter(endpoint=_signal_url(endpoint, "metrics"))))

    trace.set_tracer_provider(tracer_provider)
    metrics.set_meter_provider(MeterProvider(resource=resource, metric_readers=readers))
    _configured = True
    return True
