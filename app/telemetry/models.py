"""
Event records shipped to the telemetry collector
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def utc_now():
    """Helper function for Pydantic default_factory to get current UTC time"""
    return datetime.now(timezone.utc)


class EventType(str, Enum):
    SPAN = "SPAN"
    LOG = "LOG"


class EventStatus(str, Enum):
    SUCCESS = "SUCCESS"
    ERROR = "ERROR"

    @classmethod
    def from_status_code(cls, status_code: int) -> "EventStatus":
        """HTTP status codes of 400 and above are errors"""
        return cls.ERROR if status_code >= 400 else cls.SUCCESS


class TelemetryEvent(BaseModel):
    """One SPAN or LOG event record, serialized with camelCase keys"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    trace_id: str
    span_id: str
    parent_span_id: Optional[str] = None
    service_name: str
    operation: str
    event_type: EventType
    timestamp: datetime = Field(default_factory=utc_now)
    status: EventStatus = EventStatus.SUCCESS
    duration_ms: Optional[int] = Field(default=None, ge=0)
    http_method: Optional[str] = None
    http_url: Optional[str] = None
    http_status_code: Optional[int] = None
    user_id: Optional[str] = None
    error_message: Optional[str] = None
    metadata: Optional[str] = None

    def to_payload(self) -> Dict[str, Any]:
        """JSON-ready body for the collector; unset optional fields are omitted"""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
