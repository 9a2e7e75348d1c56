"""
HTTP client for the remote order/log store.

The store is a spreadsheet-backed web app exposing named functions. Every
call is a POST of ``{"function": <name>, "args": [...]}``; the answer is
JSON. Mutations answer ``{"success": bool, "message": str}``, reads answer
the records themselves.

    getAllOrders()              -> [order, ...]
    addOrder(order)             -> {"success": ..., "id": ...}
    addOrdersBulk([order, ...]) -> {"success": ..., "count": ...}
    updateOrder(order)          -> {"success": ...}
    deleteOrder(id)             -> {"success": ...}
    logPrintAction(entry)       -> {"success": ...}
    getPrintHistory()           -> [entry, ...]

All failures (transport, HTTP status, bad JSON, ``success: false``) raise
RemoteServiceError so callers can abort an operation without touching
local state.

THREAD SAFETY:
    httpx.Client is safe to share between Flask request threads; one
    OrderServiceClient is created per application.

Usage:
    client = OrderServiceClient(url, timeout_seconds=15.0)
    orders = client.list_orders()
    client.append_print_log(entry.to_dict())
"""

from __future__ import annotations

import logging
from typing import Dict, Any, List, Optional

import httpx

from .exceptions import RemoteServiceError, RemoteTimeoutError


class OrderServiceClient:
    """
    RPC-style client for the order/log store.

    Records are passed and returned as dictionaries in the store's field
    format; conversion to models happens in the services layer.
    """

    def __init__(
        self,
        base_url: str,
        timeout_seconds: float = 15.0,
        token: str = "",
        logger: Optional[logging.Logger] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """
        Initialize the client.

        Args:
            base_url: Web app endpoint
            timeout_seconds: Per-call timeout
            token: Optional bearer token
            logger: Logger instance (creates default if not provided)
            transport: Optional httpx transport (tests use httpx.MockTransport)

        Raises:
            ValueError: If base_url is empty
        """
        if not base_url:
            raise ValueError("base_url is required - set ORDER_SERVICE_URL")

        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"

        self._base_url = base_url
        self._timeout = timeout_seconds
        self._logger = logger or logging.getLogger("color_tag_web.core.api_client")
        # Apps Script deployments answer through a redirect
        self._client = httpx.Client(
            timeout=timeout_seconds,
            headers=headers,
            follow_redirects=True,
            transport=transport,
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    def close(self) -> None:
        """Close the underlying HTTP connection pool."""
        self._client.close()

    def __enter__(self) -> "OrderServiceClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # =========================================================================
    # ORDERS
    # =========================================================================

    def list_orders(self) -> List[Dict[str, Any]]:
        """Fetch every order (no pagination)."""
        return self._call_list("getAllOrders")

    def create_order(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Create one order. The store sets totalPrinted=0 and status=New."""
        return self._call_mutation("addOrder", payload)

    def create_orders_bulk(self, payloads: List[Dict[str, Any]]) -> Dict[str, Any]:
        """Create several orders in one call."""
        return self._call_mutation("addOrdersBulk", payloads)

    def update_order(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Update the order identified by payload['id']."""
        return self._call_mutation("updateOrder", payload)

    def delete_order(self, order_id: str) -> Dict[str, Any]:
        """Delete one order."""
        return self._call_mutation("deleteOrder", order_id)

    # =========================================================================
    # PRINT LOG
    # =========================================================================

    def append_print_log(self, entry: Dict[str, Any]) -> Dict[str, Any]:
        """
        Append one confirmed ticket print to the log.

        The store also bumps the order's totalPrinted, so a later
        getAllOrders agrees with the local count.
        """
        return self._call_mutation("logPrintAction", entry)

    def list_print_history(self) -> List[Dict[str, Any]]:
        """Fetch the print log (read-only)."""
        return self._call_list("getPrintHistory")

    # =========================================================================
    # TRANSPORT
    # =========================================================================

    def _call(self, function: str, *args: Any) -> Any:
        """
        POST one function call and return the decoded JSON body.

        Raises:
            RemoteTimeoutError: If the store does not answer in time
            RemoteServiceError: On any other transport or protocol failure
        """
        self._logger.debug(f"Calling {function} ({len(args)} arg(s))")

        try:
            response = self._client.post(
                self._base_url,
                json={"function": function, "args": list(args)},
            )
        except httpx.TimeoutException:
            self._logger.error(f"{function} timed out after {self._timeout:.1f}s")
            raise RemoteTimeoutError(function, self._timeout)
        except httpx.HTTPError as e:
            self._logger.error(f"{function} failed: {e}")
            raise RemoteServiceError(function, f"Order service unreachable: {e}")

        if response.is_error:
            self._logger.error(f"{function} returned HTTP {response.status_code}")
            raise RemoteServiceError(
                function,
                f"Order service returned HTTP {response.status_code}",
                {"status_code": response.status_code},
            )

        try:
            body = response.json()
        except ValueError as e:
            self._logger.error(f"Invalid JSON from {function}: {e}")
            raise RemoteServiceError(function, f"Invalid JSON from order service: {e}")

        if isinstance(body, dict) and body.get("error"):
            raise RemoteServiceError(function, str(body["error"]))

        return body

    def _call_list(self, function: str) -> List[Dict[str, Any]]:
        body = self._call(function)
        if not isinstance(body, list):
            raise RemoteServiceError(
                function,
                f"Expected a list from {function}, got {type(body).__name__}",
            )
        self._logger.debug(f"{function} returned {len(body)} record(s)")
        return body

    def _call_mutation(self, function: str, *args: Any) -> Dict[str, Any]:
        body = self._call(function, *args)
        if not isinstance(body, dict):
            raise RemoteServiceError(
                function,
                f"Expected an object from {function}, got {type(body).__name__}",
            )
        if body.get("success") is False:
            message = body.get("message") or f"{function} was rejected"
            self._logger.warning(f"{function} rejected: {message}")
            raise RemoteServiceError(function, str(message))
        return body
