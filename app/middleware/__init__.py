"""
Middleware modules for the Product Service
"""

from .telemetry import TelemetryMiddleware

__all__ = ["TelemetryMiddleware"]
