"""
Telemetry package: trace identifiers, active trace context, span lifecycle and
asynchronous delivery of events to the telemetry collector.
"""

from typing import Optional

from app.core.config import config
from app.core.logger import logger
from app.telemetry.client import TelemetryClient
from app.telemetry.context import TraceContext, get_span_id, get_trace_id, trace_context
from app.telemetry.emitter import EventEmitter, HttpCollectorTransport, NullTransport

# Global client instance
_telemetry_client: Optional[TelemetryClient] = None


def create_telemetry_client() -> TelemetryClient:
    """Build a client from the service configuration"""
    if config.telemetry_enabled:
        transport = HttpCollectorTransport(
            config.telemetry_events_url,
            timeout=config.telemetry_timeout_seconds,
        )
    else:
        transport = NullTransport()

    emitter = EventEmitter(transport, buffer_size=config.telemetry_buffer_size)

    logger.info(
        "Telemetry client initialized",
        metadata={
            "event": "telemetry_client_init",
            "enabled": config.telemetry_enabled,
            "collectorUrl": config.telemetry_events_url,
            "bufferSize": config.telemetry_buffer_size,
        }
    )
    return TelemetryClient(config.service_name, emitter)


def get_telemetry_client() -> TelemetryClient:
    """
    Get the global telemetry client instance.
    Creates a new instance if one doesn't exist.
    """
    global _telemetry_client
    if _telemetry_client is None:
        _telemetry_client = create_telemetry_client()
    return _telemetry_client


def set_telemetry_client(client: Optional[TelemetryClient]) -> None:
    """Replace the global telemetry client"""
    global _telemetry_client
    _telemetry_client = client


def shutdown_telemetry(timeout: float = 5.0) -> None:
    """Deliver pending events and release the collector connection"""
    global _telemetry_client
    if _telemetry_client is not None:
        _telemetry_client.emitter.close(timeout)
        _telemetry_client = None


__all__ = [
    "TelemetryClient",
    "TraceContext",
    "trace_context",
    "get_trace_id",
    "get_span_id",
    "get_telemetry_client",
    "set_telemetry_client",
    "shutdown_telemetry",
]
