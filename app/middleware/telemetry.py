"""
Request tracing middleware
Opens a telemetry span for every inbound request and always closes it.
"""

from typing import Optional

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from app.core.config import config
from app.telemetry.client import TelemetryClient
from app.telemetry.ids import is_trace_id


class TelemetryMiddleware(BaseHTTPMiddleware):
    """
    Telemetry Middleware

    - Continues the caller's trace when a valid trace id header is present,
      otherwise starts a new trace
    - Stores the trace id in request state
    - Finishes the span with the response status code, or 500 when the
      application raises
    - Returns the trace id in the response headers
    """

    def __init__(self, app, client: Optional[TelemetryClient] = None):
        super().__init__(app)
        self._client = client

    @property
    def client(self) -> TelemetryClient:
        if self._client is not None:
            return self._client
        from app.telemetry import get_telemetry_client
        return get_telemetry_client()

    async def dispatch(self, request: Request, call_next):
        client = self.client
        operation = f"{request.method} {request.url.path}"

        inbound_trace_id = request.headers.get(config.trace_id_header)
        trace_id = client.start_trace(
            operation,
            http_method=request.method,
            http_url=request.url.path,
            user_id=request.headers.get(config.user_id_header, ""),
            trace_id=inbound_trace_id if is_trace_id(inbound_trace_id) else None,
        )
        request.state.trace_id = trace_id

        try:
            response = await call_next(request)
        except BaseException as e:
            client.finish_trace(operation, 500, str(e) or type(e).__name__)
            raise

        client.finish_trace(operation, response.status_code)
        response.headers[config.trace_id_header] = trace_id
        return response
