"""Span helpers for service operations.

Spans are no-ops until a tracer provider is registered (see telemetry.py).
"""

import functools
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

T = TypeVar("T")

# Only these kwarg names are copied onto spans; anything else may carry PII.
_SAFE_SPAN_ATTR_KEYS = frozenset(
    {"agency_id", "invoice_id", "package_id", "consultation_id", "membership_id", "limit", "status"}
)


def traced(
    operation_name: str | None = None,
) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """Wrap an async function in a span named operation_name (default module.func).

    Exceptions mark the span as error and are re-raised unchanged.
    """

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        span_name = operation_name or f"{func.__module__}.{func.__qualname__}"

        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            tracer = trace.get_tracer(func.__module__)
            with tracer.start_as_current_span(span_name) as span:
                for key, value in kwargs.items():
                    if key in _SAFE_SPAN_ATTR_KEYS and value is not None:
                        span.set_attribute(f"arg.{key}", str(value))
                try:
                    result = await func(*args, **kwargs)
                except Exception as e:
                    span.set_status(Status(StatusCode.ERROR, type(e).__name__))
                    span.record_exception(e)
                    raise
                span.set_status(Status(StatusCode.OK))
                return result

        return wrapper

    return decorator


def add_span_attributes(**attributes: str | int | float | bool) -> None:
    """Add attributes to the current span (no-op when not recording)."""
    span = trace.get_current_span()
    if span.is_recording():
        for key, value in attributes.items():
            span.set_attribute(key, value)
