"""
Custom exceptions for ColorTagWeb.

Exception Hierarchy:
    ColorTagError (base)
    ├── RemoteServiceError    - Order/log store call failed (runtime, graceful)
    │   └── RemoteTimeoutError - Store did not answer in time
    ├── OrderValidationError  - Order payload rejected before persistence
    ├── OrderNotFoundError    - Order id not present in the order store
    └── EmptySelectionError   - Batch print started with nothing selected

Usage:
    None of these are fatal. Every failure belongs to one user action; the
    routes turn them into JSON notices and prior state stays intact.
"""

from typing import Optional, Dict, Any


class ColorTagError(Exception):
    """
    Base exception for all ColorTagWeb errors.

    All custom exceptions inherit from this class, allowing callers to catch
    all application-specific errors with a single except clause if needed.
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        """
        Initialize the exception.

        Args:
            message: Human-readable error message
            details: Optional dictionary with additional context for debugging
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class RemoteServiceError(ColorTagError):
    """
    A call to the remote order/log store failed.

    Covers transport errors, HTTP error statuses, undecodable responses and
    explicit ``success: false`` answers. The operation that issued the call
    is aborted and no local state is changed.
    """

    def __init__(self, operation: str, message: str, details: Optional[Dict[str, Any]] = None):
        error_details = dict(details or {})
        error_details["operation"] = operation
        super().__init__(message, error_details)
        self.operation = operation


class RemoteTimeoutError(RemoteServiceError):
    """The remote store did not answer within ORDER_SERVICE_TIMEOUT."""

    def __init__(self, operation: str, timeout_seconds: float):
        message = f"Order service {operation} timed out after {timeout_seconds:.1f}s"
        super().__init__(operation, message, {"timeout_seconds": timeout_seconds})
        self.timeout_seconds = timeout_seconds


class OrderValidationError(ColorTagError):
    """An order payload failed validation (missing field, kind change, ...)."""

    def __init__(self, field: str, message: str):
        super().__init__(message, {"field": field})
        self.field = field


class OrderNotFoundError(ColorTagError):
    """The order id is not in the order store (deleted or never loaded)."""

    def __init__(self, order_id: str):
        super().__init__(f"Order not found: {order_id}", {"order_id": order_id})
        self.order_id = order_id


class EmptySelectionError(ColorTagError):
    """Batch print requested while the selection set is empty."""

    def __init__(self, message: str = "Select at least one order to print"):
        super().__init__(message)
