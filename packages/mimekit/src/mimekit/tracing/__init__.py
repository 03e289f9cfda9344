from .tracing import codec_span, get_tracer, set_span_attributes

__all__ = ["codec_span", "get_tracer", "set_span_attributes"]
