"""
Services layer for ColorTagWeb.

This module contains the business logic services:
- OrderStore: Local copy of all orders
- SelectionSet / PrintQueue / TicketVisibilitySet: Print run state
- PrintSession: Application state tying the above together
- OrderService: Order CRUD and bulk import against the remote store
- PrintConfirmationService: Two-phase ticket print confirmation

Request Model:
    Flask request threads share one PrintSession. The session serializes
    set/queue mutations; confirmations are serialized per order.
"""

from .order_store import OrderStore
from .print_queue import PrintQueue, SelectionSet, TicketVisibilitySet
from .print_session import PrintSession
from .order_service import OrderService, build_order_payload
from .print_confirmation import (
    ConfirmationOutcome,
    ConfirmationResult,
    PrintConfirmationService,
)

__all__ = [
    "OrderStore",
    "PrintQueue",
    "SelectionSet",
    "TicketVisibilitySet",
    "PrintSession",
    "OrderService",
    "build_order_payload",
    "ConfirmationOutcome",
    "ConfirmationResult",
    "PrintConfirmationService",
]
