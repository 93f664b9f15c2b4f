"""
Clients Package
External service clients for inter-service communication.
"""

from .service_client import ServiceClient

__all__ = ["ServiceClient"]
