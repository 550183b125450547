"""
Tracing Utilities

A decorator that wraps a coroutine in a span, and a helper that marks a
span as failed.
"""

from __future__ import annotations

import functools
import inspect
from collections.abc import Mapping
from typing import Any, Callable, TypeVar

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

from src.common.telemetry.setup import get_tracer

F = TypeVar("F", bound=Callable[..., Any])


def trace_async(
    name: str | None = None,
    arguments: Mapping[str, str] | None = None,
) -> Callable[[F], F]:
    """
    Run an async function inside a span named ``name`` (the function name by default).

    Args:
        name: Span name
        arguments: Call argument name -> span attribute name; each listed
            argument is recorded on the span

    Example:
        @trace_async("knowledge.get_character", arguments={"character_id": "knowledge.character_id"})
        async def get_character(self, character_id: int) -> CharacterRecord:
            ...
    """

    def decorator(func: F) -> F:
        span_name = name or func.__qualname__
        signature = inspect.signature(func)

        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            with get_tracer(func.__module__).start_as_current_span(span_name) as span:
                if arguments:
                    bound = signature.bind_partial(*args, **kwargs).arguments
                    for arg_name, attribute in arguments.items():
                        if arg_name in bound:
                            span.set_attribute(attribute, bound[arg_name])
                try:
                    return await func(*args, **kwargs)
                except Exception as e:
                    record_exception(e, span)
                    raise

        return wrapper  # type: ignore[return-value]

    return decorator


def record_exception(exception: Exception, span: Any = None) -> None:
    """Record ``exception`` on ``span`` (the current span if None) and set ERROR status."""
    span = span or trace.get_current_span()
    if span.is_recording():
        span.record_exception(exception)
        span.set_status(Status(StatusCode.ERROR, str(exception)))
