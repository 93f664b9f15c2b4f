"""
Telemetry Client
Span lifecycle, dependency-call spans and log events for the telemetry collector.

Every public method is best-effort: missing trace context turns the call into
a no-op and no exception raised while building or emitting an event reaches
the caller.
"""

import time
from contextlib import contextmanager
from typing import Iterator, Optional

from app.core.logger import logger
from app.telemetry.context import TraceContext, TraceContextCarrier, trace_context
from app.telemetry.emitter import EventEmitter
from app.telemetry.ids import new_span_id, new_trace_id
from app.telemetry.models import EventStatus, EventType, TelemetryEvent


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


class TelemetryClient:
    """Client-side tracing instrumentation for one service"""

    def __init__(
        self,
        service_name: str,
        emitter: EventEmitter,
        carrier: TraceContextCarrier = trace_context,
    ):
        if not service_name:
            raise ValueError("service_name is required")
        self.service_name = service_name
        self.emitter = emitter
        self.carrier = carrier

    def start_trace(
        self,
        operation: str,
        http_method: Optional[str] = None,
        http_url: Optional[str] = None,
        user_id: Optional[str] = None,
        trace_id: Optional[str] = None,
    ) -> str:
        """
        Open the root span of a logical unit of work.

        Args:
            operation: Logical name of the work unit (e.g. "createProduct")
            http_method: HTTP method when the unit is an HTTP request
            http_url: Request path or URL
            user_id: Caller identity, "" when unknown
            trace_id: Trace id received from an upstream service; a new one is
                generated when omitted

        Returns:
            The trace id, for propagation to downstream services
        """
        trace_id = trace_id or new_trace_id()
        span_id = new_span_id()

        self._emit(
            trace_id=trace_id,
            span_id=span_id,
            operation=operation,
            event_type=EventType.SPAN,
            status=EventStatus.SUCCESS,
            http_method=http_method,
            http_url=http_url,
            user_id=user_id if user_id is not None else "",
        )

        self.carrier.set(trace_id, span_id, _now_ms())
        return trace_id

    def finish_trace(
        self,
        operation: str,
        http_status_code: int,
        error_message: Optional[str] = None,
        context: Optional[TraceContext] = None,
    ) -> None:
        """
        Close the active span and clear the trace context.

        A no-op when no trace is active. The ambient context is cleared even
        when building or emitting the completion event fails, unless
        ``context`` names a different span than the ambient one.
        """
        active = self.carrier.resolve(context)
        if active is None:
            return

        try:
            duration_ms = 0
            if active.start_time_ms is not None:
                duration_ms = max(0, _now_ms() - active.start_time_ms)

            self._emit(
                trace_id=active.trace_id,
                span_id=active.span_id,
                operation=f"{operation}_complete",
                event_type=EventType.SPAN,
                duration_ms=duration_ms,
                status=EventStatus.from_status_code(http_status_code),
                http_status_code=http_status_code,
                error_message=error_message if error_message is not None else "",
            )
        finally:
            if self.carrier.get() == active:
                self.carrier.clear()

    def record_service_call(
        self,
        target_service: str,
        operation: str,
        http_method: str,
        url: str,
        duration_ms: int,
        status_code: int,
        context: Optional[TraceContext] = None,
    ) -> None:
        """
        Record an outbound call to another service as a child span of the
        active span. Dropped when no trace is active.
        """
        active = self.carrier.resolve(context)
        if active is None:
            return

        self._emit(
            trace_id=active.trace_id,
            span_id=new_span_id(),
            parent_span_id=active.span_id,
            operation=f"{target_service}_{operation}",
            event_type=EventType.SPAN,
            duration_ms=max(0, duration_ms),
            status=EventStatus.from_status_code(status_code),
            http_method=http_method,
            http_url=url,
            http_status_code=status_code,
            metadata=f"Outbound call to {target_service}",
        )

    def log_event(
        self,
        message: str,
        level: str = "INFO",
        context: Optional[TraceContext] = None,
    ) -> None:
        """Attach a log message to the active trace. Dropped when no trace is active."""
        active = self.carrier.resolve(context)
        if active is None:
            return

        self._emit(
            trace_id=active.trace_id,
            span_id=active.span_id,
            operation=f"log_{level.lower()}",
            event_type=EventType.LOG,
            status=EventStatus.SUCCESS,
            metadata=message,
        )

    def propagate(self, trace_id: str, span_id: str) -> TraceContext:
        """Continue a trace started by an upstream caller"""
        return self.carrier.propagate(trace_id, span_id)

    @contextmanager
    def trace(
        self,
        operation: str,
        http_method: Optional[str] = None,
        http_url: Optional[str] = None,
        user_id: Optional[str] = None,
        trace_id: Optional[str] = None,
    ) -> Iterator[TraceContext]:
        """
        Scoped span: started on entry, always finished on exit.

        Finishes with 200 on normal exit and with 500 plus the exception text
        when the block raises; the exception is re-raised. A trace that was
        active on entry is active again on exit.
        """
        previous = self.carrier.get()
        self.start_trace(operation, http_method, http_url, user_id, trace_id)
        active = self.carrier.get()
        try:
            yield active
        except BaseException as e:
            self.finish_trace(operation, 500, str(e) or type(e).__name__, context=active)
            raise
        else:
            self.finish_trace(operation, 200, context=active)
        finally:
            if previous is not None:
                self.carrier.set(previous.trace_id, previous.span_id, previous.start_time_ms)

    def _emit(self, **fields) -> None:
        try:
            event = TelemetryEvent(service_name=self.service_name, **fields)
            self.emitter.emit(event)
        except Exception as e:
            logger.warning(
                f"Failed to emit telemetry event: {str(e)}",
                metadata={"event": "telemetry_emit_error", "operation": fields.get("operation"), "error": str(e)}
            )
