"""
OpenTelemetry distributed tracing.

This module provides distributed tracing using OpenTelemetry with:
- Automatic FastAPI instrumentation
- OTLP exporter for trace collection
- Configurable sampling for production cost control
- Spans around view count synchronization and outbound notifications

Tracing is off unless ``TRACING_ENABLED`` is set. Without a configured
provider the OpenTelemetry API hands out no-op spans, so instrumented code
runs unchanged.

Security:
    - No PII in span attributes
    - Excluded noisy endpoints from tracing
"""

from os import uname

from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
from opentelemetry.sdk.trace.sampling import ParentBasedTraceIdRatio
from opentelemetry.trace import Tracer

from inkwell.configs import settings
from inkwell.monitoring.logging import get_logger

logger = get_logger(__name__)

SERVICE_NAME = "inkwell-backend"

EXCLUDED_URLS = [
    "/metrics",
    "/metrics/prometheus",
    "/health",
    "/favicon.ico",
]

DEFAULT_SAMPLING_RATE = 0.1

SENSITIVE_ATTRIBUTES = frozenset(
    {
        "http.request.header.authorization",
        "http.request.header.cookie",
        "http.request.body",
        "http.response.body",
        "user.email",
        "client.address",
    },
)


def get_sampling_rate() -> float:
    """
    Sampling rate between 0.0 and 1.0.

    ``OTEL_TRACES_SAMPLER_ARG`` wins; otherwise production samples 10% and
    every other environment everything.
    """
    if settings.OTEL_TRACES_SAMPLER_ARG is not None:
        return settings.OTEL_TRACES_SAMPLER_ARG
    if settings.ENVIRONMENT == "production":
        return DEFAULT_SAMPLING_RATE
    return 1.0


def configure_tracing(app: FastAPI) -> bool:
    """
    Configure OpenTelemetry tracing for the FastAPI application.

    Parameters
    ----------
    app : FastAPI
        The FastAPI application instance.

    Returns
    -------
    bool
        True if tracing was configured, False when it is disabled.

    Notes
    -----
    Spans go to ``OTEL_EXPORTER_OTLP_ENDPOINT`` when it is set, to the
    console in development, and are discarded otherwise.
    """
    if not settings.TRACING_ENABLED:
        logger.info("Tracing disabled")
        return False

    resource = Resource.create(
        {
            "service.name": SERVICE_NAME,
            "service.version": settings.VERSION,
            "deployment.environment": settings.ENVIRONMENT,
            "host.name": uname().nodename,
        },
    )
    sampling_rate = get_sampling_rate()
    provider = TracerProvider(resource=resource, sampler=ParentBasedTraceIdRatio(sampling_rate))

    endpoint = settings.OTEL_EXPORTER_OTLP_ENDPOINT
    if endpoint:
        exporter = OTLPSpanExporter(endpoint=endpoint, insecure=settings.ENVIRONMENT != "production")
        provider.add_span_processor(BatchSpanProcessor(exporter))
        logger.info("OTLP exporter configured", endpoint=endpoint)
    elif settings.ENVIRONMENT == "development":
        provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))
        logger.info("Console span exporter configured for development")
    else:
        logger.info("No OTLP endpoint configured, traces will be discarded")

    trace.set_tracer_provider(provider)
    FastAPIInstrumentor.instrument_app(
        app,
        excluded_urls=",".join(EXCLUDED_URLS),
        tracer_provider=provider,
    )
    logger.info("OpenTelemetry tracing configured", sampling_rate=sampling_rate)
    return True


def shutdown_tracing() -> None:
    """Flush pending spans on application shutdown."""
    provider = trace.get_tracer_provider()
    if isinstance(provider, TracerProvider):
        provider.shutdown()
        logger.info("OpenTelemetry tracing shutdown complete")


def get_tracer(name: str | None = None) -> Tracer:
    return trace.get_tracer(name or SERVICE_NAME)


def safe_attributes(attributes: dict[str, str | int | float | bool]) -> dict[str, str | int | float | bool]:
    """Drop attributes that may carry credentials or personal data."""
    return {key: value for key, value in attributes.items() if key.lower() not in SENSITIVE_ATTRIBUTES}


def add_span_attributes(attributes: dict[str, str | int | float | bool]) -> None:
    """Add attributes to the current span, sensitive ones filtered out."""
    span = trace.get_current_span()
    if span.is_recording():
        span.set_attributes(safe_attributes(attributes))


def get_current_trace_id() -> str | None:
    """The current trace id as hex, or None without a recording span."""
    span = trace.get_current_span()
    if not span.is_recording():
        return None
    ctx = span.get_span_context()
    return format(ctx.trace_id, "032x") if ctx.is_valid else None
