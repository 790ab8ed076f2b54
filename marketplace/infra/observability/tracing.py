"""
OpenTelemetry tracing helpers for the catalog.

Only the API package is used here. Spans are no-ops until an SDK tracer
provider is installed by the deployment.
"""

from opentelemetry import trace


tracer = trace.get_tracer("marketplace.catalog")


def add_span_attributes(span: trace.Span, **attributes) -> None:
    """
    Add custom attributes to a span.

    Example:
        with tracer.start_as_current_span("catalog.reconcile") as span:
            add_span_attributes(span, product_id=42, orphans=3)
    """
    for key, value in attributes.items():
        span.set_attribute(key, str(value))
