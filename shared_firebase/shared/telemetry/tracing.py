"""Tracing decorator and span helpers for engine operations."""

import inspect
from collections.abc import Callable
from functools import wraps
from typing import Any

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

# Allowlist of argument names recorded as span attributes. Document fields
# and paths beyond these are never recorded.
_SAFE_SPAN_ATTR_KEYS = frozenset({
    "page_size", "collection_path", "source_collection", "dest_collection",
    "source_path", "dest_path", "path", "subcollections",
})

# Provider for engine spans; None means the global provider.
_tracer_provider: trace.TracerProvider | None = None


def use_tracer_provider(provider: trace.TracerProvider | None) -> None:
    """Send spans from traced functions to provider (None restores the global one)."""
    global _tracer_provider
    _tracer_provider = provider


def routed_tracer_provider() -> trace.TracerProvider | None:
    return _tracer_provider


def _set_safe_span_attrs(span: trace.Span, arguments: dict) -> None:
    """Set span attributes from bound arguments; only allowlisted names are recorded."""
    for key, value in arguments.items():
        if key in _SAFE_SPAN_ATTR_KEYS and value is not None:
            span.set_attribute(f"arg.{key}", str(value))


def traced(operation_name: str | None = None) -> Callable:
    """Decorator to run an async function inside a span.

    Arguments are bound to the function signature, so allowlisted values are
    recorded whether passed positionally or by keyword. The span status is
    set to ERROR and the exception recorded when the function raises; the
    exception always propagates.

    Args:
        operation_name: Span name (defaults to module.funcname).

    Returns:
        Decorated function.
    """

    def decorator(func: Callable) -> Callable:
        if not inspect.iscoroutinefunction(func):
            raise TypeError(f"traced() supports async functions only: {func.__qualname__}")
        span_name = operation_name or f"{func.__module__}.{func.__name__}"
        signature = inspect.signature(func)

        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            arguments = signature.bind_partial(*args, **kwargs).arguments
            tracer = trace.get_tracer(__name__, tracer_provider=_tracer_provider)
            with tracer.start_as_current_span(
                span_name, record_exception=False, set_status_on_exception=False
            ) as span:
                _set_safe_span_attrs(span, arguments)
                try:
                    result = await func(*args, **kwargs)
                except Exception as e:
                    span.set_status(Status(StatusCode.ERROR, str(e)))
                    span.record_exception(e)
                    raise
                span.set_status(Status(StatusCode.OK))
                return result

        return wrapper

    return decorator


def add_span_attributes(**attributes: str | int | float | bool) -> None:
    """Add attributes to the current span."""
    span = trace.get_current_span()
    if span and span.is_recording():
        for key, value in attributes.items():
            span.set_attribute(key, value)
