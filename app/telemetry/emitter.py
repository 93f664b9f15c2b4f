"""
Telemetry Event Emitter
Ships event records to the telemetry collector from a background sender thread.

``emit`` only serializes the event and appends it to a bounded buffer, so the
calling request never waits on the collector. When the buffer is full the
oldest pending event is dropped. Delivery failures are logged and discarded;
nothing is retried.
"""

import threading
import time
from collections import deque
from typing import Any, Deque, Dict, Optional, Protocol

import httpx

from app.core.logger import logger
from app.telemetry.models import TelemetryEvent


class CollectorTransport(Protocol):
    """Delivers one serialized event record to the collector"""

    def send(self, payload: Dict[str, Any]) -> None: ...

    def close(self) -> None: ...


class HttpCollectorTransport:
    """POSTs event records to the collector's events endpoint"""

    def __init__(self, events_url: str, timeout: float = 5.0, client: Optional[httpx.Client] = None):
        self.events_url = events_url
        self._client = client or httpx.Client(
            timeout=timeout,
            headers={"Content-Type": "application/json"},
        )

    def send(self, payload: Dict[str, Any]) -> None:
        try:
            response = self._client.post(self.events_url, json=payload)
        except httpx.TimeoutException:
            logger.warning(
                "Timeout sending telemetry event",
                metadata={
                    "event": "telemetry_send_timeout",
                    "collectorUrl": self.events_url,
                    "operation": payload.get("operation"),
                }
            )
            return
        except httpx.HTTPError as e:
            logger.warning(
                f"Failed to send telemetry: {str(e)}",
                metadata={
                    "event": "telemetry_send_error",
                    "collectorUrl": self.events_url,
                    "operation": payload.get("operation"),
                    "error": str(e),
                }
            )
            return

        if not response.is_success:
            logger.warning(
                f"Telemetry collector rejected event: {response.status_code}",
                metadata={
                    "event": "telemetry_send_rejected",
                    "collectorUrl": self.events_url,
                    "statusCode": response.status_code,
                    "operation": payload.get("operation"),
                }
            )

    def close(self) -> None:
        self._client.close()


class NullTransport:
    """Discards events; used when telemetry is disabled"""

    def send(self, payload: Dict[str, Any]) -> None:
        pass

    def close(self) -> None:
        pass


class EventEmitter:
    """
    Fire-and-forget dispatcher for telemetry events.

    One daemon thread drains a bounded buffer into the transport. ``emit``
    never blocks on the network and never raises.
    """

    def __init__(self, transport: CollectorTransport, buffer_size: int = 1000):
        if buffer_size < 1:
            raise ValueError("buffer_size must be at least 1")
        self.transport = transport
        self.buffer_size = buffer_size
        self.dropped_count = 0
        self._buffer: Deque[Dict[str, Any]] = deque()
        self._condition = threading.Condition()
        self._in_flight = 0
        self._closed = False
        self._sender: Optional[threading.Thread] = None

    def emit(self, event: TelemetryEvent) -> None:
        """Queue ``event`` for delivery and return immediately"""
        try:
            payload = event.to_payload()
            with self._condition:
                if self._closed:
                    return
                if len(self._buffer) >= self.buffer_size:
                    dropped = self._buffer.popleft()
                    self.dropped_count += 1
                    logger.debug(
                        "Telemetry buffer full, dropped oldest event",
                        metadata={
                            "event": "telemetry_event_dropped",
                            "operation": dropped.get("operation"),
                            "droppedCount": self.dropped_count,
                        }
                    )
                self._buffer.append(payload)
                self._ensure_sender()
                self._condition.notify_all()
        except Exception as e:
            logger.warning(
                f"Failed to queue telemetry event: {str(e)}",
                metadata={"event": "telemetry_emit_error", "error": str(e)}
            )

    @property
    def pending(self) -> int:
        """Events queued or being sent"""
        with self._condition:
            return len(self._buffer) + self._in_flight

    def flush(self, timeout: float = 5.0) -> bool:
        """Wait until every queued event was handed to the transport"""
        deadline = time.monotonic() + timeout
        with self._condition:
            while self._buffer or self._in_flight:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    return False
                self._condition.wait(remaining)
        return True

    def close(self, timeout: float = 5.0) -> None:
        """Flush pending events, stop the sender thread and close the transport"""
        self.flush(timeout)
        with self._condition:
            self._closed = True
            if self._buffer:
                # Not delivered within the timeout; the transport is about to close
                discarded = len(self._buffer)
                self._buffer.clear()
                self.dropped_count += discarded
                logger.warning(
                    f"Discarded {discarded} undelivered telemetry events on close",
                    metadata={"event": "telemetry_events_discarded", "droppedCount": self.dropped_count}
                )
            self._condition.notify_all()
            sender = self._sender
        if sender is not None:
            sender.join(timeout)
        try:
            self.transport.close()
        except Exception as e:
            logger.warning(
                f"Failed to close telemetry transport: {str(e)}",
                metadata={"event": "telemetry_close_error", "error": str(e)}
            )

    def _ensure_sender(self) -> None:
        # Caller holds self._condition
        if self._sender is None or not self._sender.is_alive():
            self._sender = threading.Thread(
                target=self._drain, name="telemetry-sender", daemon=True
            )
            self._sender.start()

    def _drain(self) -> None:
        while True:
            with self._condition:
                while not self._buffer and not self._closed:
                    self._condition.wait()
                if not self._buffer:
                    return
                payload = self._buffer.popleft()
                self._in_flight += 1

            try:
                self.transport.send(payload)
            except Exception as e:
                logger.warning(
                    f"Failed to send telemetry: {str(e)}",
                    metadata={
                        "event": "telemetry_send_error",
                        "operation": payload.get("operation"),
                        "error": str(e),
                    }
                )
            finally:
                with self._condition:
                    self._in_flight -= 1
                    self._condition.notify_all()
