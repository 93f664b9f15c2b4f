"""
Service Communication Helper with trace propagation
Use this for making HTTP requests to other microservices: the active trace id
is forwarded and every call is recorded as a dependency span.
"""

import time
from typing import Any, Dict, Optional

import httpx

from app.core.config import config
from app.core.logger import logger
from app.telemetry import get_telemetry_client
from app.telemetry.client import TelemetryClient
from app.telemetry.context import get_trace_id

SLOW_CALL_THRESHOLD_MS = 1000


class ServiceClient:
    """HTTP client for inter-service communication with dependency tracing"""

    def __init__(
        self,
        target_service: str,
        base_url: str,
        timeout: float = 5.0,
        telemetry: Optional[TelemetryClient] = None,
    ):
        self.target_service = target_service
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._telemetry = telemetry

    @property
    def telemetry(self) -> TelemetryClient:
        return self._telemetry or get_telemetry_client()

    def _get_headers(self, additional_headers: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        """Create headers carrying the active trace id"""
        headers = {"Content-Type": "application/json"}

        trace_id = get_trace_id()
        if trace_id:
            headers[config.trace_id_header] = trace_id

        if additional_headers:
            headers.update(additional_headers)
        return headers

    async def request(
        self,
        method: str,
        endpoint: str,
        data: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        **kwargs,
    ) -> httpx.Response:
        """
        Call ``endpoint`` on the target service and record the call.

        Transport errors are recorded with status 503 and re-raised.
        """
        url = f"{self.base_url}{endpoint}"
        operation = f"{method.lower()}_{endpoint.strip('/').replace('/', '_') or 'root'}"
        started = time.perf_counter()
        status_code = 503

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.request(
                    method.upper(),
                    url,
                    json=data,
                    headers=self._get_headers(headers),
                    **kwargs,
                )
            status_code = response.status_code
            return response
        except httpx.HTTPError as e:
            logger.error(
                f"Call to {self.target_service} failed: {str(e)}",
                metadata={
                    "event": "service_call_error",
                    "target_service": self.target_service,
                    "method": method.upper(),
                    "url": url,
                    "error": str(e),
                }
            )
            raise
        finally:
            duration_ms = int((time.perf_counter() - started) * 1000)
            # Log performance if slow
            if duration_ms > SLOW_CALL_THRESHOLD_MS:
                logger.performance(
                    f"Slow call to {self.target_service}: {method.upper()} {endpoint}",
                    duration_ms=duration_ms,
                    threshold_ms=SLOW_CALL_THRESHOLD_MS,
                    metadata={"target_service": self.target_service, "url": url, "status_code": status_code},
                )
            self.telemetry.record_service_call(
                self.target_service,
                operation,
                method.upper(),
                url,
                duration_ms,
                status_code,
            )

    async def get(self, endpoint: str, headers: Optional[Dict[str, str]] = None, **kwargs) -> httpx.Response:
        """Make a traced GET request"""
        return await self.request("GET", endpoint, headers=headers, **kwargs)

    async def post(
        self,
        endpoint: str,
        data: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        **kwargs,
    ) -> httpx.Response:
        """Make a traced POST request"""
        return await self.request("POST", endpoint, data=data, headers=headers, **kwargs)

    async def put(
        self,
        endpoint: str,
        data: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        **kwargs,
    ) -> httpx.Response:
        """Make a traced PUT request"""
        return await self.request("PUT", endpoint, data=data, headers=headers, **kwargs)

    async def delete(self, endpoint: str, headers: Optional[Dict[str, str]] = None, **kwargs) -> httpx.Response:
        """Make a traced DELETE request"""
        return await self.request("DELETE", endpoint, headers=headers, **kwargs)
