"""
Print session state.

One PrintSession holds everything the shop-floor workflow mutates:

    current_kind   module being worked on (sheet / roll)
    order_store    local copy of all orders
    selection      orders marked for a batch print
    queue          frozen snapshots staged for the current print run
    visibility     tickets excluded from the current print run

The app factory creates one and stores it in app.config["PRINT_SESSION"];
services receive it explicitly.

Thread Safety:
    Flask handles requests on worker threads. Every operation that touches
    the selection, queue or visibility set holds the session's RLock, so
    each user action is applied as one step.
"""

from __future__ import annotations

import threading
from typing import Dict, Any, List, Optional

from core.exceptions import EmptySelectionError, OrderNotFoundError
from logging_config import get_logger
from models.order import FrozenOrder, Order, OrderKind
from modules.ticket_rules import expand_tickets
from .order_store import OrderStore
from .print_queue import PrintQueue, SelectionSet, TicketVisibilitySet


# Module logger
logger = get_logger(__name__)


class PrintSession:
    """Application state for the order list and print run."""

    def __init__(
        self,
        order_store: Optional[OrderStore] = None,
        current_kind: OrderKind = OrderKind.SHEET,
    ):
        self.current_kind = current_kind
        self.order_store = order_store or OrderStore()
        self.selection = SelectionSet()
        self.queue = PrintQueue()
        self.visibility = TicketVisibilitySet()
        self._lock = threading.RLock()

    # =========================================================================
    # MODULE & SELECTION
    # =========================================================================

    def switch_module(self, kind: OrderKind) -> None:
        """Work on another module. Selections never span modules."""
        with self._lock:
            if kind is not self.current_kind:
                logger.info(f"Switching module {self.current_kind.value} -> {kind.value}")
            self.current_kind = kind
            self.selection.clear()

    def visible_orders(self) -> List[Order]:
        """Orders of the current module, in load order."""
        return self.order_store.list_orders(self.current_kind)

    def toggle_selection(self, order_id: str) -> bool:
        """
        Select or deselect one order.

        Returns:
            True if the order is selected after the call

        Raises:
            OrderNotFoundError: If the order is not in the store
        """
        with self._lock:
            if order_id not in self.order_store:
                raise OrderNotFoundError(order_id)
            return self.selection.toggle(order_id)

    def clear_selection(self) -> None:
        with self._lock:
            self.selection.clear()

    def forget_order(self, order_id: str) -> None:
        """Drop a deleted order from the selection and the store."""
        with self._lock:
            self.selection.discard(order_id)
            self.order_store.remove(order_id)

    # =========================================================================
    # STAGING
    # =========================================================================

    def start_batch(self) -> List[FrozenOrder]:
        """
        Stage every selected order for a print run.

        Orders are staged in store order. Visibility and selection are reset.

        Raises:
            EmptySelectionError: If nothing is selected
        """
        with self._lock:
            if len(self.selection) == 0:
                raise EmptySelectionError()

            selected = [
                order for order in self.order_store.list_orders()
                if order.id in self.selection
            ]
            self._stage(selected)
            self.selection.clear()
            logger.info(f"Batch print staged with {len(selected)} order(s)")
            return self.queue.orders()

    def start_single(self, order_id: str) -> FrozenOrder:
        """
        Stage one order for a print run.

        Raises:
            OrderNotFoundError: If the order is not in the store
        """
        with self._lock:
            order = self.order_store.get(order_id)
            if order is None:
                raise OrderNotFoundError(order_id)
            self._stage([order])
            logger.info(f"Single print staged for order {order_id}")
            return self.queue.orders()[0]

    def _stage(self, orders: List[Order]) -> None:
        self.queue.stage(orders)
        # Empty exclusion set: every ticket of the new run is included
        self.visibility.clear()

    def queued_order(self, order_id: str) -> Optional[FrozenOrder]:
        with self._lock:
            return self.queue.get(order_id)

    # =========================================================================
    # TICKETS
    # =========================================================================

    def toggle_ticket(self, order_id: str, color_index: int) -> bool:
        """
        Include or exclude one ticket of the current run.

        Returns:
            True if the ticket is hidden after the call
        """
        with self._lock:
            hidden = self.visibility.toggle(order_id, color_index)
        logger.debug(f"Ticket {order_id}:{color_index} hidden={hidden}")
        return hidden

    def is_ticket_hidden(self, order_id: str, color_index: int) -> bool:
        with self._lock:
            return self.visibility.is_hidden(order_id, color_index)

    def render_queue(self) -> List[Dict[str, Any]]:
        """
        Expand the staged orders into tickets.

        Returns:
            One entry per staged order with its snapshot, the live printed
            count from the store (None if the order was deleted) and its
            tickets.
        """
        with self._lock:
            rendered = []
            for snapshot in self.queue.orders():
                live = self.order_store.get(snapshot.id)
                tickets = expand_tickets(snapshot, self.visibility.is_hidden)
                rendered.append({
                    "order": snapshot.to_dict(),
                    "printedCount": live.printed_count if live else None,
                    "tickets": [ticket.to_dict() for ticket in tickets],
                })
            return rendered
