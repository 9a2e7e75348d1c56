"""
Core module for ColorTagWeb.

Contains fundamental infrastructure components:
- exceptions: Custom exception hierarchy
- api_client: HTTP client for the remote order/log store
- memory_backend: In-memory store with the same interface (development)
"""

from .exceptions import (
    ColorTagError,
    RemoteServiceError,
    RemoteTimeoutError,
    OrderValidationError,
    OrderNotFoundError,
    EmptySelectionError,
)
from .api_client import OrderServiceClient
from .memory_backend import InMemoryOrderService

__all__ = [
    "ColorTagError",
    "RemoteServiceError",
    "RemoteTimeoutError",
    "OrderValidationError",
    "OrderNotFoundError",
    "EmptySelectionError",
    "OrderServiceClient",
    "InMemoryOrderService",
]
