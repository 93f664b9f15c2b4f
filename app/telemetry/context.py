"""
Active trace context for one logical unit of work.

The context lives in a ContextVar, so it follows the logical unit rather than
the worker servicing it: every asyncio task runs in its own copy of the
context, and ``TraceContextCarrier.run`` executes a callable in a fresh empty
context for thread-pool work. Telemetry operations also accept an explicit
``TraceContext`` handle that overrides the ambient value.
"""

import contextvars
from typing import Any, Callable, Optional, TypeVar

from pydantic import BaseModel, ConfigDict

T = TypeVar("T")


class TraceContext(BaseModel):
    """Immutable handle on the active span of a logical unit of work"""

    model_config = ConfigDict(frozen=True)

    trace_id: str
    span_id: str
    start_time_ms: Optional[int] = None


_active_context: contextvars.ContextVar[Optional[TraceContext]] = contextvars.ContextVar(
    "telemetry_trace_context", default=None
)


class TraceContextCarrier:
    """Reads and writes the active TraceContext of the current logical unit"""

    def __init__(self, var: contextvars.ContextVar = _active_context):
        self._var = var

    def set(self, trace_id: str, span_id: str, start_time_ms: Optional[int]) -> TraceContext:
        context = TraceContext(trace_id=trace_id, span_id=span_id, start_time_ms=start_time_ms)
        self._var.set(context)
        return context

    def get(self) -> Optional[TraceContext]:
        return self._var.get()

    def clear(self) -> None:
        self._var.set(None)

    def propagate(self, trace_id: str, span_id: str) -> TraceContext:
        """
        Adopt a trace/span pair supplied by an upstream caller.

        The start time of the current context, if any, is kept.
        """
        current = self._var.get()
        start_time_ms = current.start_time_ms if current is not None else None
        return self.set(trace_id, span_id, start_time_ms)

    def run(self, fn: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        """Run ``fn`` in a fresh context so nothing it sets outlives the call"""
        return contextvars.Context().run(fn, *args, **kwargs)

    def resolve(self, context: Optional[TraceContext] = None) -> Optional[TraceContext]:
        """Explicit handle if given, else the ambient one"""
        return context if context is not None else self._var.get()


# Process-wide carrier instance
trace_context = TraceContextCarrier()


def get_trace_id() -> Optional[str]:
    """Get the trace ID of the current logical unit, if a trace is active"""
    active = trace_context.get()
    return active.trace_id if active is not None else None


def get_span_id() -> Optional[str]:
    """Get the active span ID of the current logical unit, if a trace is active"""
    active = trace_context.get()
    return active.span_id if active is not None else None
