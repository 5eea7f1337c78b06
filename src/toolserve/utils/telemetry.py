"""OpenTelemetry tracing helpers for toolserve.

Request dispatch and tool invocation open spans through ``get_tracer()``.
Only the OpenTelemetry API is a hard dependency; until
:func:`configure_telemetry` installs an SDK provider every span is a no-op.

Usage::

    from toolserve.utils.telemetry import get_tracer

    _tracer = get_tracer(__name__)

    with _tracer.start_as_current_span("toolserve.request") as span:
        span.set_attribute(ATTR_RPC_METHOD, "tools/call")

``toolserve serve --telemetry`` (or ``telemetry.enabled`` in the server
YAML) calls :func:`configure_telemetry` with the configured OTLP endpoint.
"""

from __future__ import annotations

import logging
from typing import Any

from opentelemetry import trace

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Semantic attribute keys used throughout toolserve instrumentation
# ---------------------------------------------------------------------------

ATTR_RPC_METHOD = "toolserve.rpc.method"
ATTR_RPC_ID = "toolserve.rpc.id"
ATTR_RPC_ERROR_CODE = "toolserve.rpc.error_code"
ATTR_TOOL_NAME = "toolserve.tool.name"

_INSTRUMENTATION_NAME = "toolserve"


def get_tracer(name: str | None = None) -> trace.Tracer:
    """Return a :class:`~opentelemetry.trace.Tracer` for *name*.

    If the OpenTelemetry SDK has not been configured the returned tracer
    is a no-op.
    """
    return trace.get_tracer(name or _INSTRUMENTATION_NAME)


def configure_telemetry(*, service_name: str = "toolserve", otlp_endpoint: str | None = None) -> None:
    """Install an SDK tracer provider for *service_name*.

    Spans are batched to the OTLP/gRPC collector at *otlp_endpoint*. Without
    an endpoint the provider still records spans (so in-process processors
    can be attached later) but nothing is exported. Spans are never written
    to stdout, which belongs to the stdio transport.

    Raises:
        ImportError: ``opentelemetry-sdk`` (or, with an endpoint,
            ``opentelemetry-exporter-otlp``) is not installed.
    """
    try:
        from opentelemetry.sdk.resources import SERVICE_NAME, Resource  # pyright: ignore[reportMissingImports]
        from opentelemetry.sdk.trace import TracerProvider  # pyright: ignore[reportMissingImports]
        from opentelemetry.sdk.trace.export import BatchSpanProcessor  # pyright: ignore[reportMissingImports]
    except ImportError as exc:
        msg = "configure_telemetry() needs opentelemetry-sdk; install toolserve[otel]"
        raise ImportError(msg) from exc

    provider = TracerProvider(resource=Resource.create({SERVICE_NAME: service_name}))
    if otlp_endpoint:
        provider.add_span_processor(BatchSpanProcessor(_otlp_exporter(otlp_endpoint)))
    else:
        logger.warning("Tracing enabled for %s without an OTLP endpoint; spans are not exported", service_name)
    trace.set_tracer_provider(provider)


def _otlp_exporter(endpoint: str) -> Any:
    try:
        from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter  # pyright: ignore[reportMissingImports]
    except ImportError as exc:
        msg = f"Exporting spans to {endpoint} needs opentelemetry-exporter-otlp; install toolserve[otel]"
        raise ImportError(msg) from exc
    return OTLPSpanExporter(endpoint=endpoint)
