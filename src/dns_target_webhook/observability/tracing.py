"""
OpenTelemetry tracing for admission reviews.

The API server may send a W3C ``traceparent`` header with each AdmissionReview
request; the review span is parented on it so webhook latency shows up inside
the API server's own trace. Spans are exported over OTLP/gRPC.
"""

import logging
from collections.abc import Mapping

from opentelemetry import context, trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.sdk.trace.sampling import ParentBased, TraceIdRatioBased
from opentelemetry.trace import Tracer
from opentelemetry.trace.propagation.tracecontext import TraceContextTextMapPropagator

logger = logging.getLogger(__name__)

SERVICE_NAME = "dns-target-webhook"

_propagator = TraceContextTextMapPropagator()
_tracer_provider: TracerProvider | None = None


def setup_tracing(
    enabled: bool,
    endpoint: str,
    sample_rate: float = 1.0,
) -> TracerProvider | None:
    """
    Install the global tracer provider.

    Args:
        enabled: When False nothing is installed and spans are no-ops
        endpoint: OTLP gRPC collector endpoint; ``http://`` means plaintext
        sample_rate: Fraction of root traces to sample

    Returns:
        The installed provider, or None when tracing is disabled
    """
    global _tracer_provider

    if not enabled:
        logger.info("Tracing disabled")
        return None

    if _tracer_provider is not None:
        return _tracer_provider

    provider = TracerProvider(
        resource=Resource.create({"service.name": SERVICE_NAME}),
        sampler=ParentBased(root=TraceIdRatioBased(sample_rate)),
    )
    provider.add_span_processor(
        BatchSpanProcessor(
            OTLPSpanExporter(
                endpoint=endpoint, insecure=endpoint.startswith("http://")
            )
        )
    )
    trace.set_tracer_provider(provider)
    _tracer_provider = provider

    logger.info(f"Exporting admission traces to {endpoint} (sample rate {sample_rate})")
    return provider


def shutdown_tracing() -> None:
    """Flush pending spans and drop the installed provider."""
    global _tracer_provider

    if _tracer_provider is None:
        return

    _tracer_provider.shutdown()
    _tracer_provider = None


def get_tracer(name: str) -> Tracer:
    """Tracer from the global provider; a no-op until one is installed."""
    return trace.get_tracer(name)


def extract_trace_context(headers: Mapping[str, str]) -> context.Context:
    """
    Build the parent context for a review span from request headers.

    Header names are matched case-insensitively.
    """
    return _propagator.extract({key.lower(): value for key, value in headers.items()})
