"""
Data models for ColorTagWeb.

This module contains the dataclasses for:
- Order: A production job (mutable, owned by the OrderStore)
- FrozenOrder: Immutable snapshot held by the print queue
- PrintLogEntry: One confirmed ticket print
- Ticket: One derived color tag (never persisted)
"""

from .order import (
    MAX_COLORS,
    MIN_COLORS,
    FrozenOrder,
    Order,
    OrderKind,
    OrderStatus,
    StatusEvent,
    clamp_color_count,
    next_status,
)
from .print_log import PrintLogEntry
from .ticket import Ticket, TicketKey

__all__ = [
    # Order models
    "Order",
    "FrozenOrder",
    "OrderKind",
    "OrderStatus",
    "StatusEvent",
    "next_status",
    "clamp_color_count",
    "MIN_COLORS",
    "MAX_COLORS",
    # Print models
    "PrintLogEntry",
    "Ticket",
    "TicketKey",
]
