"""OpenTelemetry spans around dispatcher operations.

Only ``opentelemetry-api`` is required. Without an SDK configured the tracer is
a no-op, and nothing here is allowed to raise into the encode/decode path.
"""

import logging
from collections.abc import Mapping, Sequence
from contextlib import contextmanager
from typing import Any, Iterator

from opentelemetry import trace
from opentelemetry.trace import Span, SpanKind, Status, StatusCode, Tracer

logger = logging.getLogger(__name__)

__all__ = ["codec_span", "get_tracer", "set_span_attributes"]

TRACER_NAME = "mimekit"
SPAN_PREFIX = "mimekit."

_SCALARS = (bool, str, bytes, int, float)


def get_tracer(name: str | None = None) -> Tracer:
    return trace.get_tracer(name or TRACER_NAME)


def _otel_value(value: Any) -> Any:
    """Return ``value`` in a form span attributes accept, or None to skip it."""
    if isinstance(value, _SCALARS):
        return value
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
        return [item for item in value if isinstance(item, _SCALARS)] or None
    return None


def set_span_attributes(span: Span, attributes: Mapping[str, Any] | None) -> None:
    """Set every attribute OpenTelemetry can represent; silently skip the rest."""
    for key, value in (attributes or {}).items():
        cleaned = _otel_value(value)
        if cleaned is None:
            continue
        try:
            span.set_attribute(key, cleaned)
        except Exception:
            logger.debug("tracing: could not set %s on span", key, exc_info=True)


def _mark_failed(span: Span, err: BaseException) -> None:
    try:
        span.record_exception(err)
        span.set_status(Status(StatusCode.ERROR, description=f"{type(err).__name__}: {err}"))
    except Exception:
        logger.exception("tracing: could not record %s on span", type(err).__name__)


@contextmanager
def codec_span(operation: str, *, attributes: Mapping[str, Any] | None = None) -> Iterator[Span]:
    """Span named ``mimekit.<operation>`` around one encode/decode call.

    Exceptions are recorded on the span and re-raised unchanged::

        with codec_span("dispatch.decode_request", attributes={"mimekit.content_type": ct}) as span:
            ...
            set_span_attributes(span, {"mimekit.sniffed": True})
    """
    name = operation if operation.startswith(SPAN_PREFIX) else SPAN_PREFIX + operation
    with get_tracer().start_as_current_span(
        name, kind=SpanKind.INTERNAL, record_exception=False, set_status_on_exception=False,
    ) as span:
        set_span_attributes(span, attributes)
        try:
            yield span
        except Exception as err:
            _mark_failed(span, err)
            raise
