"""Shared test fixtures"""
import os

# Configuration is read at import time; the service name has no default
os.environ.setdefault("SERVICE_NAME", "product-service")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("TELEMETRY_SERVICE_URL", "http://127.0.0.1:9")

import threading
from datetime import datetime, timezone
from typing import Any, Dict, List

import pytest
from bson import ObjectId
from unittest.mock import AsyncMock

from app.telemetry import set_telemetry_client
from app.telemetry.client import TelemetryClient
from app.telemetry.context import trace_context
from app.telemetry.emitter import EventEmitter


class RecordingTransport:
    """Collector transport that keeps every payload it receives"""

    def __init__(self):
        self.payloads: List[Dict[str, Any]] = []
        self.closed = False
        self._lock = threading.Lock()

    def send(self, payload: Dict[str, Any]) -> None:
        with self._lock:
            self.payloads.append(payload)

    def close(self) -> None:
        self.closed = True


@pytest.fixture(autouse=True)
def clean_trace_context():
    """Every test starts and ends without an active trace"""
    trace_context.clear()
    yield
    trace_context.clear()


@pytest.fixture
def transport():
    return RecordingTransport()


@pytest.fixture
def emitter(transport):
    emitter = EventEmitter(transport, buffer_size=100)
    yield emitter
    emitter.close(timeout=1.0)


@pytest.fixture
def telemetry(emitter):
    """Telemetry client delivering into the recording transport"""
    return TelemetryClient("product-service", emitter)


@pytest.fixture
def sent(transport, emitter):
    """Flush the emitter and return the payloads delivered so far"""
    def _sent() -> List[Dict[str, Any]]:
        assert emitter.flush(timeout=2.0)
        return list(transport.payloads)
    return _sent


@pytest.fixture
def global_telemetry(telemetry):
    """Install the recording client as the process-wide telemetry client"""
    set_telemetry_client(telemetry)
    yield telemetry
    set_telemetry_client(None)


@pytest.fixture
def mock_collection():
    """Mock MongoDB collection for testing"""
    return AsyncMock()


@pytest.fixture
def mock_product_doc():
    """Mock product document from MongoDB"""
    return {
        "_id": ObjectId("507f1f77bcf86cd799439011"),
        "name": "Gaming Laptop Pro",
        "description": "High-performance gaming laptop with RTX 4080",
        "price": 1299.99,
        "stock_quantity": 15,
        "category": "Electronics",
        "image_url": None,
        "sku": "TECH-LAPTOP-001",
        "created_at": datetime.now(timezone.utc),
        "updated_at": datetime.now(timezone.utc),
    }
