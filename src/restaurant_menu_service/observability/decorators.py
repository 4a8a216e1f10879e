"""OpenTelemetry tracing decorators."""

import asyncio
import functools
from collections.abc import Callable, Iterable
from typing import Any, TypeVar

from opentelemetry import trace
from opentelemetry.trace import Span

# Type variable for generic function signatures
F = TypeVar("F", bound=Callable[..., Any])


def _tag_span(span: Span, service_name: str, kwargs: dict[str, Any], keys: Iterable[str]) -> None:
    span.set_attribute("service.name", service_name)
    for key in keys:
        value = kwargs.get(key)
        if value is not None:
            span.set_attribute(f"menu.{key}", str(value))


def _record_failure(span: Span, error: Exception) -> None:
    span.set_attribute("success", False)
    span.set_attribute("error.type", type(error).__name__)
    span.set_attribute("error.message", str(error))
    span.record_exception(error)


def traced(
    span_name: str | None = None,
    service_name: str = "menu-svc",
    record_args: Iterable[str] = (),
) -> Callable[[F], F]:
    """Decorator to add OpenTelemetry tracing to a function.

    Creates a new span for the decorated function with automatic error tracking.
    Async functions are supported. Keyword arguments named in ``record_args``
    are attached to the span as ``menu.<name>`` attributes.

    Args:
        span_name: Name for the span (defaults to function name if not provided)
        service_name: Service name for span attributes
        record_args: Keyword argument names to copy onto the span

    Returns:
        Decorated function with tracing

    Example:
        @traced("find_allergen_ingredients", record_args=("menu_item_id",))
        async def find_allergen_ingredients(menu_item_id: str, allergen_id: str) -> AllergenReport:
            ...
    """
    keys = tuple(record_args)

    def decorator(func: F) -> F:
        name = span_name or func.__name__
        tracer = trace.get_tracer(service_name)

        @functools.wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
            with tracer.start_as_current_span(name) as span:
                _tag_span(span, service_name, kwargs, keys)
                try:
                    result = await func(*args, **kwargs)
                except Exception as e:
                    _record_failure(span, e)
                    raise
                span.set_attribute("success", True)
                return result

        @functools.wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            with tracer.start_as_current_span(name) as span:
                _tag_span(span, service_name, kwargs, keys)
                try:
                    result = func(*args, **kwargs)
                except Exception as e:
                    _record_failure(span, e)
                    raise
                span.set_attribute("success", True)
                return result

        if asyncio.iscoroutinefunction(func):
            return async_wrapper  # type: ignore
        return sync_wrapper  # type: ignore

    return decorator
