"""
Ticket model.

A ticket is one physical color tag. It is derived from an order every time
the print queue is rendered and is never persisted.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Any, Tuple


TicketKey = Tuple[str, int]
"""(order_id, color_index) - identifies a ticket within a print run."""


@dataclass(frozen=True)
class Ticket:
    """One color tag of a staged order."""

    order_id: str
    color_index: int
    """1-based color number printed large on the tag."""

    color_label: str
    """Human label for the color, e.g. 'Đỏ' or 'COLOR 3'."""

    hidden: bool = False
    """Excluded from the current print run (still shown, cannot be confirmed)."""

    @property
    def key(self) -> TicketKey:
        return (self.order_id, self.color_index)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "orderId": self.order_id,
            "colorIndex": self.color_index,
            "colorLabel": self.color_label,
            "hidden": self.hidden,
        }
