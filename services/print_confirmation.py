"""
Print confirmation workflow.

Confirming a ticket means "this color tag came off the printer". The
confirmation is written to the remote print log FIRST; only when the store
accepts it does the local order get printed_count += 1 and its
PRINT_CONFIRMED status transition. A failed append leaves local state
exactly as it was, because printed_count is the shop floor's audit trail.

Flow:
    1. Look up the ticket: hidden, outside the order's expansion, or order
       gone from the store -> no-op (nothing sent, nothing changed)
    2. Append PrintLogEntry to the remote store (blocking)
    3. OrderStore.apply_confirmation(order_id)

Thread Safety:
    Confirmations for the same order are serialized with a per-order lock,
    so concurrent requests never lose an increment. Confirming the same
    ticket twice is legitimate (a reprint) and counts twice.
    Locks of orders that left the store are dropped on a later confirmation.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Dict, Any, Callable, Optional

from logging_config import get_logger, get_order_logger
from models.order import Order
from models.print_log import PrintLogEntry
from modules.ticket_rules import is_valid_color_index
from .print_session import PrintSession


# Module logger
logger = get_logger(__name__)


class ConfirmationOutcome(Enum):
    """What a confirm() call did."""

    CONFIRMED = "confirmed"
    """Logged remotely and counted locally."""

    HIDDEN = "hidden"
    """Ticket is excluded from the run; nothing done."""

    OUT_OF_RANGE = "out_of_range"
    """Order does not expand to this color index; nothing done."""

    UNKNOWN_ORDER = "unknown_order"
    """Order is no longer in the store; nothing done."""


@dataclass
class ConfirmationResult:
    """Result of one confirm() call."""

    outcome: ConfirmationOutcome
    order_id: str
    color_index: int
    order: Optional[Order] = None
    """Updated order (CONFIRMED only)."""

    entry: Optional[PrintLogEntry] = None
    """Log entry sent to the store (CONFIRMED only)."""

    @property
    def confirmed(self) -> bool:
        return self.outcome is ConfirmationOutcome.CONFIRMED

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "outcome": self.outcome.value,
            "orderId": self.order_id,
            "colorIndex": self.color_index,
        }
        if self.order is not None:
            data["printedCount"] = self.order.printed_count
            data["status"] = self.order.status.value
        return data


class PrintConfirmationService:
    """
    Records confirmed ticket prints.

    Attributes:
        session: PrintSession holding the order store and visibility set
    """

    def __init__(
        self,
        session: PrintSession,
        backend,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Initialize confirmation service.

        Args:
            session: Application print session
            backend: OrderServiceClient or InMemoryOrderService
            clock: Optional callable returning the current UTC time (tests)
        """
        self.session = session
        self._backend = backend
        self._clock = clock

        self._order_locks: Dict[str, threading.Lock] = {}
        self._locks_lock = threading.Lock()

    def _lock_for(self, order_id: str) -> threading.Lock:
        with self._locks_lock:
            self._prune_locks()
            lock = self._order_locks.get(order_id)
            if lock is None:
                lock = threading.Lock()
                self._order_locks[order_id] = lock
            return lock

    def _prune_locks(self) -> None:
        """Drop idle locks of orders that left the store. Caller holds _locks_lock."""
        for order_id, lock in list(self._order_locks.items()):
            if order_id not in self.session.order_store and not lock.locked():
                del self._order_locks[order_id]

    def confirm(self, order, color_index: int, operator: str) -> ConfirmationResult:
        """
        Confirm that ticket ``color_index`` of ``order`` was printed.

        Args:
            order: Staged FrozenOrder (or Order) the ticket was rendered from
            color_index: 1-based color index of the ticket
            operator: Who confirmed the print

        Returns:
            ConfirmationResult; non-CONFIRMED outcomes changed nothing

        Raises:
            RemoteServiceError: Log append failed; local state unchanged
        """
        order_logger = get_order_logger(order.id)

        if self.session.is_ticket_hidden(order.id, color_index):
            order_logger.debug(f"Ticket {color_index} is hidden, not confirming")
            return ConfirmationResult(ConfirmationOutcome.HIDDEN, order.id, color_index)

        if not is_valid_color_index(order, color_index):
            order_logger.warning(
                f"Ticket {color_index} outside order expansion "
                f"({order.kind.value}, {order.color_count} colors), ignoring"
            )
            return ConfirmationResult(ConfirmationOutcome.OUT_OF_RANGE, order.id, color_index)

        with self._lock_for(order.id):
            if order.id not in self.session.order_store:
                order_logger.warning("Order no longer loaded, ignoring confirmation")
                return ConfirmationResult(ConfirmationOutcome.UNKNOWN_ORDER, order.id, color_index)

            entry = PrintLogEntry.record(
                order_id=order.id,
                color_index=color_index,
                product_name=order.product_name,
                operator=operator,
                kind=order.kind,
                now=self._clock() if self._clock else None,
            )

            # Phase 1: remote append. Raises before anything local changes.
            self._backend.append_print_log(entry.to_dict())

            # Phase 2: local mutation
            updated = self.session.order_store.apply_confirmation(order.id)

        if updated is None:
            # Deleted between the check and the append; the log entry stands
            order_logger.warning("Order vanished after logging, local count not updated")
            return ConfirmationResult(
                ConfirmationOutcome.UNKNOWN_ORDER, order.id, color_index, entry=entry
            )

        order_logger.info(
            f"Ticket {color_index} confirmed by {operator}: "
            f"printed={updated.printed_count}, status={updated.status.value}"
        )
        return ConfirmationResult(
            ConfirmationOutcome.CONFIRMED, order.id, color_index, order=updated, entry=entry
        )
