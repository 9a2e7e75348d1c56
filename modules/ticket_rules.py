"""
Ticket expansion rules.

Maps an order to the ordered list of color tags it prints as:

    sheet order, 3 colors  ->  tickets 1, 2, 3
    roll order, 5 colors   ->  ticket 1

Everything here is pure. Works on Order and FrozenOrder alike (only
``id``, ``kind``, ``color_count`` and ``color_names`` are read).
"""

from functools import lru_cache
from typing import Callable, List, Optional, Tuple

from models.order import MAX_COLORS, MIN_COLORS, OrderKind, clamp_color_count
from models.ticket import Ticket

__all__ = [
    "MIN_COLORS",
    "MAX_COLORS",
    "SYNTHETIC_LABEL",
    "clamp_color_count",
    "color_label",
    "expand_tickets",
    "is_valid_color_index",
    "ticket_indexes",
]

SYNTHETIC_LABEL = "COLOR {index}"


def ticket_indexes(order) -> List[int]:
    """Color indexes the order prints, ascending."""
    if order.kind is OrderKind.ROLL:
        return [1]
    return list(range(1, order.color_count + 1))


def is_valid_color_index(order, color_index: int) -> bool:
    """True if the order expands to a ticket with this index."""
    if order.kind is OrderKind.ROLL:
        return color_index == 1
    return 1 <= color_index <= order.color_count


@lru_cache(maxsize=512)
def _split_color_names(color_names: str) -> Tuple[str, ...]:
    if not color_names:
        return ()
    return tuple(part.strip() for part in color_names.split(","))


def color_label(color_names: str, color_index: int) -> str:
    """
    Resolve the label printed on ticket ``color_index``.

    Uses the matching comma-separated name when there is a non-empty one,
    otherwise "COLOR {n}". Only the missing tail falls back:

        color_label("Đỏ, Xanh", 2) -> "Xanh"
        color_label("Đỏ, Xanh", 3) -> "COLOR 3"
    """
    parts = _split_color_names(color_names or "")
    if 1 <= color_index <= len(parts) and parts[color_index - 1]:
        return parts[color_index - 1]
    return SYNTHETIC_LABEL.format(index=color_index)


def expand_tickets(
    order,
    is_hidden: Optional[Callable[[str, int], bool]] = None,
) -> List[Ticket]:
    """
    Expand an order into its tickets.

    Args:
        order: Order or FrozenOrder
        is_hidden: Optional lookup (order_id, color_index) -> bool, usually
            TicketVisibilitySet.is_hidden

    Returns:
        Tickets in ascending color index order
    """
    tickets = []
    for index in ticket_indexes(order):
        hidden = bool(is_hidden(order.id, index)) if is_hidden else False
        tickets.append(
            Ticket(
                order_id=order.id,
                color_index=index,
                color_label=color_label(order.color_names, index),
                hidden=hidden,
            )
        )
    return tickets
