"""Tests for the background event emitter and collector transports"""
import threading
import time

import httpx
import pytest

from app.telemetry.emitter import EventEmitter, HttpCollectorTransport, NullTransport
from app.telemetry.models import EventStatus, EventType, TelemetryEvent


def make_event(operation="op", **fields):
    return TelemetryEvent(
        trace_id="trace_" + "a" * 32,
        span_id="span_" + "b" * 16,
        service_name="product-service",
        operation=operation,
        event_type=EventType.SPAN,
        **fields,
    )


class BlockingTransport:
    """Holds the sender thread until released"""

    def __init__(self):
        self.release = threading.Event()
        self.started = threading.Event()
        self.payloads = []

    def send(self, payload):
        self.started.set()
        self.release.wait(timeout=5.0)
        self.payloads.append(payload)

    def close(self):
        pass


class ExplodingTransport:
    def __init__(self):
        self.calls = 0

    def send(self, payload):
        self.calls += 1
        raise ConnectionError("collector unreachable")

    def close(self):
        raise RuntimeError("close failed")


class TestTelemetryEventPayload:

    def test_payload_uses_camel_case_and_omits_unset_fields(self):
        payload = make_event(http_method="GET", duration_ms=12).to_payload()

        assert payload["traceId"] == "trace_" + "a" * 32
        assert payload["eventType"] == "SPAN"
        assert payload["status"] == "SUCCESS"
        assert payload["httpMethod"] == "GET"
        assert payload["durationMs"] == 12
        assert "parentSpanId" not in payload
        assert "httpStatusCode" not in payload
        assert isinstance(payload["timestamp"], str)

    def test_status_from_status_code(self):
        assert EventStatus.from_status_code(200) is EventStatus.SUCCESS
        assert EventStatus.from_status_code(400) is EventStatus.ERROR
        assert EventStatus.from_status_code(503) is EventStatus.ERROR


class TestEventEmitter:

    def test_delivers_events_in_background(self, emitter, transport):
        emitter.emit(make_event("first"))
        emitter.emit(make_event("second"))

        assert emitter.flush(timeout=2.0)
        assert [p["operation"] for p in transport.payloads] == ["first", "second"]
        assert emitter.pending == 0

    def test_emit_does_not_wait_for_delivery(self):
        transport = BlockingTransport()
        emitter = EventEmitter(transport, buffer_size=10)

        started = time.monotonic()
        emitter.emit(make_event())
        assert time.monotonic() - started < 0.5

        assert transport.started.wait(timeout=2.0)
        assert transport.payloads == []
        transport.release.set()
        emitter.close(timeout=2.0)
        assert len(transport.payloads) == 1

    def test_full_buffer_drops_oldest(self):
        transport = BlockingTransport()
        emitter = EventEmitter(transport, buffer_size=2)

        emitter.emit(make_event("in-flight"))
        assert transport.started.wait(timeout=2.0)
        for name in ("one", "two", "three", "four"):
            emitter.emit(make_event(name))

        assert emitter.dropped_count == 2
        transport.release.set()
        assert emitter.flush(timeout=2.0)
        assert [p["operation"] for p in transport.payloads] == ["in-flight", "three", "four"]
        emitter.close(timeout=1.0)

    def test_transport_failures_are_swallowed(self):
        transport = ExplodingTransport()
        emitter = EventEmitter(transport, buffer_size=10)

        emitter.emit(make_event("a"))
        emitter.emit(make_event("b"))

        assert emitter.flush(timeout=2.0)
        assert transport.calls == 2
        emitter.close(timeout=1.0)

    def test_emit_after_close_is_ignored(self, transport):
        emitter = EventEmitter(transport, buffer_size=10)
        emitter.close(timeout=1.0)

        emitter.emit(make_event())

        assert emitter.pending == 0
        assert transport.payloads == []
        assert transport.closed

    def test_close_discards_events_left_after_flush_timeout(self):
        transport = BlockingTransport()
        emitter = EventEmitter(transport, buffer_size=10)

        emitter.emit(make_event("in-flight"))
        assert transport.started.wait(timeout=2.0)
        emitter.emit(make_event("queued-1"))
        emitter.emit(make_event("queued-2"))

        emitter.close(timeout=0.1)

        assert emitter.dropped_count == 2
        transport.release.set()
        emitter._sender.join(timeout=2.0)
        assert not emitter._sender.is_alive()
        assert [p["operation"] for p in transport.payloads] == ["in-flight"]

    def test_rejects_empty_buffer(self, transport):
        with pytest.raises(ValueError):
            EventEmitter(transport, buffer_size=0)


class TestHttpCollectorTransport:

    def _transport(self, handler):
        client = httpx.Client(transport=httpx.MockTransport(handler))
        return HttpCollectorTransport("http://collector:8086/api/telemetry/events", client=client)

    def test_posts_json_payload(self):
        requests = []

        def handler(request):
            requests.append(request)
            return httpx.Response(200)

        transport = self._transport(handler)
        transport.send(make_event().to_payload())

        [request] = requests
        assert request.method == "POST"
        assert str(request.url) == "http://collector:8086/api/telemetry/events"
        assert b'"traceId"' in request.content

    def test_rejected_event_is_not_raised(self):
        transport = self._transport(lambda request: httpx.Response(500, text="boom"))

        transport.send(make_event().to_payload())

    def test_connection_error_is_not_raised(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        transport = self._transport(handler)
        transport.send(make_event().to_payload())

    def test_timeout_is_not_raised(self):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        transport = self._transport(handler)
        transport.send(make_event().to_payload())


def test_null_transport_discards():
    transport = NullTransport()
    transport.send({"operation": "ignored"})
    transport.close()
