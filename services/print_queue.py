"""
Selection set, print queue and ticket visibility set.

    SelectionSet          orders marked for a batch print
    PrintQueue            frozen snapshots of the orders staged for a run
    TicketVisibilitySet   tickets excluded from the current run

None of these talk to the remote store; PrintSession wires them together.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Set

from models.order import FrozenOrder, Order
from models.ticket import TicketKey


class SelectionSet:
    """Order ids marked for batch printing."""

    def __init__(self):
        self._ids: Set[str] = set()

    def toggle(self, order_id: str) -> bool:
        """
        Flip membership of ``order_id``.

        Returns:
            True if the order is selected after the call
        """
        if order_id in self._ids:
            self._ids.discard(order_id)
            return False
        self._ids.add(order_id)
        return True

    def discard(self, order_id: str) -> None:
        self._ids.discard(order_id)

    def clear(self) -> None:
        self._ids.clear()

    def ids(self) -> Set[str]:
        return set(self._ids)

    def __contains__(self, order_id: str) -> bool:
        return order_id in self._ids

    def __len__(self) -> int:
        return len(self._ids)


class PrintQueue:
    """
    Orders staged for a print run.

    Holds FrozenOrder snapshots, so edits to an order after staging do not
    reach a run in progress. Order of the staged list is kept as given.
    """

    def __init__(self):
        self._orders: List[FrozenOrder] = []

    def stage(self, orders: Iterable[Order]) -> None:
        """Replace the queue with snapshots of ``orders``."""
        self._orders = [order.freeze() for order in orders]

    def stage_single(self, order: Order) -> None:
        self.stage([order])

    def orders(self) -> List[FrozenOrder]:
        return list(self._orders)

    def get(self, order_id: str) -> Optional[FrozenOrder]:
        for order in self._orders:
            if order.id == order_id:
                return order
        return None

    def clear(self) -> None:
        self._orders = []

    @property
    def is_empty(self) -> bool:
        return not self._orders

    def __len__(self) -> int:
        return len(self._orders)


class TicketVisibilitySet:
    """
    Tickets excluded from the current print run.

    Stores exclusions keyed by (order_id, color_index): an empty set means
    every ticket is included.
    """

    def __init__(self):
        self._hidden: Set[TicketKey] = set()

    def toggle(self, order_id: str, color_index: int) -> bool:
        """
        Flip the exclusion flag of one ticket.

        Returns:
            True if the ticket is hidden after the call
        """
        key = (order_id, color_index)
        if key in self._hidden:
            self._hidden.discard(key)
            return False
        self._hidden.add(key)
        return True

    def is_hidden(self, order_id: str, color_index: int) -> bool:
        return (order_id, color_index) in self._hidden

    def clear(self) -> None:
        self._hidden.clear()

    def __len__(self) -> int:
        return len(self._hidden)
