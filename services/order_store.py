"""
In-memory order store.

Holds the application's copy of every order. It is repopulated from the
remote store after each create/update/delete and mutated locally only by
a confirmed ticket print.

Thread Safety:
    - All operations take a threading.Lock
    - Every order handed out is a copy; callers never see live records
"""

from __future__ import annotations

import threading
from typing import Dict, Iterable, List, Optional

from logging_config import get_logger
from models.order import Order, OrderKind, StatusEvent, next_status


# Module logger
logger = get_logger(__name__)


class OrderStore:
    """Ordered collection of orders keyed by id."""

    def __init__(self, orders: Optional[Iterable[Order]] = None):
        self._orders: Dict[str, Order] = {}
        self._lock = threading.Lock()
        if orders is not None:
            self.replace_all(orders)

    def replace_all(self, orders: Iterable[Order]) -> int:
        """
        Replace the whole collection with a fresh snapshot.

        Returns:
            Number of orders now held
        """
        fresh = {order.id: order.copy() for order in orders}
        with self._lock:
            self._orders = fresh
            count = len(self._orders)
        logger.debug(f"Order store repopulated with {count} order(s)")
        return count

    def get(self, order_id: str) -> Optional[Order]:
        with self._lock:
            order = self._orders.get(order_id)
            return order.copy() if order else None

    def contains(self, order_id: str) -> bool:
        with self._lock:
            return order_id in self._orders

    def __contains__(self, order_id: str) -> bool:
        return self.contains(order_id)

    def __len__(self) -> int:
        with self._lock:
            return len(self._orders)

    def list_orders(self, kind: Optional[OrderKind] = None) -> List[Order]:
        """All orders (optionally one module's), in load order."""
        with self._lock:
            return [
                order.copy()
                for order in self._orders.values()
                if kind is None or order.kind is kind
            ]

    def remove(self, order_id: str) -> bool:
        """Drop an order. Returns False if it was not present."""
        with self._lock:
            return self._orders.pop(order_id, None) is not None

    def apply_status_event(self, order_id: str, event: StatusEvent) -> Optional[Order]:
        """
        Move an order through the status transition function.

        Returns:
            Updated copy, or None if the order is not in the store
        """
        with self._lock:
            order = self._orders.get(order_id)
            if order is None:
                return None
            previous = order.status
            order.status = next_status(previous, event)
            updated = order.copy()

        if previous is not updated.status:
            logger.info(
                f"Order {order_id} status {previous.value} -> {updated.status.value}"
            )
        return updated

    def apply_confirmation(self, order_id: str) -> Optional[Order]:
        """
        Record one confirmed ticket print: printed_count += 1 and the
        PRINT_CONFIRMED status transition, as one step.

        Returns:
            Updated copy, or None if the order is not in the store
        """
        with self._lock:
            order = self._orders.get(order_id)
            if order is None:
                return None
            order.printed_count += 1
            order.status = next_status(order.status, StatusEvent.PRINT_CONFIRMED)
            return order.copy()
