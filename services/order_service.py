"""
Order maintenance service.

Creates, updates, deletes and bulk-imports orders through the remote store,
then reloads the full order list into the session's OrderStore. Responses
from the store are never merged; the reload is the single source of truth.

Failure policy:
    Any RemoteServiceError aborts the operation before local state changes
    and propagates to the route, which reports it as a non-fatal notice.
    A delete that succeeded remotely is not reported as failed when only the
    reload after it fails.
"""

from __future__ import annotations

from typing import Dict, Any, List, Optional

from core.exceptions import (
    ColorTagError,
    OrderNotFoundError,
    OrderValidationError,
    RemoteServiceError,
)
from logging_config import get_logger
from models.order import Order, OrderKind, clamp_color_count
from models.print_log import PrintLogEntry
from modules.bulk_import import parse_import_text
from modules.sanitize import sanitize_text
from .print_session import PrintSession


# Module logger
logger = get_logger(__name__)

# Constants
MAX_FIELD_LENGTH = 200
MAX_NOTE_LENGTH = 1000
REQUIRED_FIELDS = (
    ("code", "Code is required"),
    ("customer", "Customer is required"),
    ("productName", "Product name is required"),
)
TEXT_FIELDS = ("code", "customer", "productName", "colorNames", "printer", "dateInput", "shelf")


def build_order_payload(
    data: Dict[str, Any],
    kind: OrderKind,
    order_id: Optional[str] = None,
    require_fields: bool = True,
) -> Dict[str, Any]:
    """
    Turn user input into a create/update payload for the remote store.

    Text is sanitized, the color count clamped to [1, 7]. totalPrinted and
    status are left out: the store initializes them on create and keeps
    them on update.

    Raises:
        OrderValidationError: If a required field is empty
    """
    payload: Dict[str, Any] = {"type": kind.value}
    for key in TEXT_FIELDS:
        payload[key] = sanitize_text(data.get(key), MAX_FIELD_LENGTH)
    payload["note"] = sanitize_text(data.get("note"), MAX_NOTE_LENGTH)
    payload["colors"] = clamp_color_count(data.get("colors"))

    if require_fields:
        for key, message in REQUIRED_FIELDS:
            if not payload[key]:
                raise OrderValidationError(key, message)

    if order_id:
        payload["id"] = order_id
    return payload


class OrderService:
    """
    Order CRUD against the remote store.

    Attributes:
        session: PrintSession whose OrderStore is kept in sync
    """

    def __init__(
        self,
        session: PrintSession,
        backend,
        default_sheet_printer: str = "Máy in 7 màu",
        default_roll_printer: str = "TG300",
    ):
        """
        Initialize order service.

        Args:
            session: Application print session
            backend: OrderServiceClient or InMemoryOrderService
            default_sheet_printer: Import default for sheet orders
            default_roll_printer: Import default for roll orders
        """
        self.session = session
        self._backend = backend
        self._default_printers = {
            OrderKind.SHEET: default_sheet_printer,
            OrderKind.ROLL: default_roll_printer,
        }

    def reload(self) -> List[Order]:
        """
        Repopulate the OrderStore from the remote store.

        Records that cannot be read (no id, unknown type) are skipped.
        """
        records = self._backend.list_orders()

        orders = []
        for record in records:
            try:
                orders.append(Order.from_dict(record))
            except ColorTagError as e:
                logger.warning(f"Skipping unreadable order record: {e}")

        self.session.order_store.replace_all(orders)
        logger.info(f"Loaded {len(orders)} order(s)")
        return orders

    def save_order(
        self,
        data: Dict[str, Any],
        kind: OrderKind,
        order_id: Optional[str] = None,
    ) -> Optional[str]:
        """
        Create (no ``order_id``) or update an order, then reload.

        Args:
            data: Order fields in the store's naming (code, productName, ...)
            kind: Module of a new order; must match an existing order's kind
            order_id: Order to update

        Returns:
            Order id (None if the store did not report one for a new order)

        Raises:
            OrderNotFoundError: Updating an order that is not loaded
            OrderValidationError: Missing field or attempted kind change
            RemoteServiceError: Store call failed
        """
        if order_id:
            existing = self.session.order_store.get(order_id)
            if existing is None:
                raise OrderNotFoundError(order_id)
            if kind is not existing.kind:
                raise OrderValidationError("type", "Order type cannot be changed")

            payload = build_order_payload(data, existing.kind, order_id=order_id)
            self._backend.update_order(payload)
            logger.info(f"Order {order_id} updated ({payload['code']})")
        else:
            payload = build_order_payload(data, kind)
            response = self._backend.create_order(payload)
            order_id = response.get("id")
            logger.info(f"Order created ({payload['code']}, {kind.value})")

        self.reload()
        return str(order_id) if order_id is not None else None

    def delete_order(self, order_id: str) -> bool:
        """
        Delete an order remotely, then forget it locally and reload.

        The id leaves the selection set, so it cannot be batch printed.

        Returns:
            False if the delete went through but the follow-up reload failed

        Raises:
            RemoteServiceError: The delete itself failed; nothing changed
        """
        self._backend.delete_order(order_id)
        self.session.forget_order(order_id)
        logger.info(f"Order {order_id} deleted")

        try:
            self.reload()
        except RemoteServiceError as e:
            logger.warning(f"Reload after deleting order {order_id} failed: {e}")
            return False
        return True

    def import_orders(self, text: str, kind: OrderKind) -> int:
        """
        Bulk-create orders from pasted spreadsheet rows.

        Returns:
            Number of orders sent to the store (0 for blank text, no call made)
        """
        records = parse_import_text(text, kind, self._default_printers[kind])
        if not records:
            return 0

        payloads = [
            build_order_payload(record, kind, require_fields=False)
            for record in records
        ]
        self._backend.create_orders_bulk(payloads)
        logger.info(f"Imported {len(payloads)} {kind.value} order(s)")

        self.reload()
        return len(payloads)

    def print_history(self) -> List[PrintLogEntry]:
        """Read the print log. Unreadable rows are skipped."""
        entries = []
        for record in self._backend.list_print_history():
            try:
                entries.append(PrintLogEntry.from_dict(record))
            except ColorTagError as e:
                logger.warning(f"Skipping unreadable print log row: {e}")
        return entries
