"""
Unit tests for the print confirmation workflow.

The remote store is a MagicMock so every call (or its absence) can be
asserted.
"""

import threading
import pytest
from datetime import datetime, timezone
from unittest.mock import MagicMock

from core.exceptions import RemoteServiceError, RemoteTimeoutError
from models.order import Order, OrderKind, OrderStatus
from services.order_store import OrderStore
from services.print_confirmation import ConfirmationOutcome, PrintConfirmationService
from services.print_session import PrintSession


FIXED_NOW = datetime(2026, 10, 19, 9, 0, tzinfo=timezone.utc)


# Fixtures

@pytest.fixture
def session():
    store = OrderStore([
        Order(id="A", kind=OrderKind.SHEET, code="A-1", product_name="Thùng A",
              color_count=3, color_names="Đỏ, Xanh"),
        Order(id="R", kind=OrderKind.ROLL, code="TG300", product_name="Cuộn R",
              color_count=5, printed_count=4, status=OrderStatus.PRINTING),
    ])
    session = PrintSession(order_store=store)
    session.toggle_selection("A")
    session.toggle_selection("R")
    session.start_batch()
    return session


@pytest.fixture
def backend():
    mock_backend = MagicMock()
    mock_backend.append_print_log.return_value = {"success": True}
    return mock_backend


@pytest.fixture
def service(session, backend):
    return PrintConfirmationService(session, backend, clock=lambda: FIXED_NOW)


# Tests

class TestConfirm:

    def test_visible_ticket_counts_once_and_starts_printing(self, session, service, backend):
        order = session.queued_order("A")

        result = service.confirm(order, 2, "lan")

        assert result.outcome is ConfirmationOutcome.CONFIRMED
        stored = session.order_store.get("A")
        assert stored.printed_count == 1
        assert stored.status is OrderStatus.PRINTING
        backend.append_print_log.assert_called_once_with({
            "orderId": "A",
            "colorIndex": 2,
            "productName": "Thùng A",
            "timestamp": FIXED_NOW.isoformat(),
            "user": "lan",
            "type": "sheet",
        })

    def test_printing_order_stays_printing(self, session, service):
        result = service.confirm(session.queued_order("R"), 1, "lan")

        assert result.confirmed
        assert result.order.printed_count == 5
        assert result.order.status is OrderStatus.PRINTING

    def test_same_ticket_twice_counts_twice(self, session, service, backend):
        order = session.queued_order("A")

        service.confirm(order, 1, "lan")
        service.confirm(order, 1, "lan")

        assert session.order_store.get("A").printed_count == 2
        assert backend.append_print_log.call_count == 2

    def test_hidden_ticket_is_noop(self, session, service, backend):
        session.toggle_ticket("A", 3)

        result = service.confirm(session.queued_order("A"), 3, "lan")

        assert result.outcome is ConfirmationOutcome.HIDDEN
        assert session.order_store.get("A").printed_count == 0
        backend.append_print_log.assert_not_called()

    def test_out_of_range_index_is_noop(self, session, service, backend):
        result = service.confirm(session.queued_order("A"), 4, "lan")

        assert result.outcome is ConfirmationOutcome.OUT_OF_RANGE
        backend.append_print_log.assert_not_called()

    def test_roll_order_only_has_first_ticket(self, session, service, backend):
        result = service.confirm(session.queued_order("R"), 2, "lan")

        assert result.outcome is ConfirmationOutcome.OUT_OF_RANGE
        assert session.order_store.get("R").printed_count == 4
        backend.append_print_log.assert_not_called()

    def test_deleted_order_is_noop(self, session, service, backend):
        order = session.queued_order("A")
        session.forget_order("A")

        result = service.confirm(order, 1, "lan")

        assert result.outcome is ConfirmationOutcome.UNKNOWN_ORDER
        backend.append_print_log.assert_not_called()

    @pytest.mark.parametrize("error", [
        RemoteServiceError("logPrintAction", "Service unavailable"),
        RemoteTimeoutError("logPrintAction", 15.0),
    ])
    def test_remote_failure_leaves_state_unchanged(self, session, service, backend, error):
        backend.append_print_log.side_effect = error

        with pytest.raises(RemoteServiceError):
            service.confirm(session.queued_order("A"), 1, "lan")

        stored = session.order_store.get("A")
        assert stored.printed_count == 0
        assert stored.status is OrderStatus.NEW

    def test_confirmation_after_failure_still_works(self, session, service, backend):
        backend.append_print_log.side_effect = [
            RemoteServiceError("logPrintAction", "Service unavailable"),
            {"success": True},
        ]
        order = session.queued_order("A")

        with pytest.raises(RemoteServiceError):
            service.confirm(order, 1, "lan")
        result = service.confirm(order, 1, "lan")

        assert result.confirmed
        assert session.order_store.get("A").printed_count == 1

    def test_result_to_dict(self, session, service):
        result = service.confirm(session.queued_order("A"), 1, "lan")

        assert result.to_dict() == {
            "outcome": "confirmed",
            "orderId": "A",
            "colorIndex": 1,
            "printedCount": 1,
            "status": "Printing",
        }

    def test_concurrent_confirmations_do_not_lose_counts(self, session, service):
        order = session.queued_order("A")
        threads = [
            threading.Thread(target=service.confirm, args=(order, 1 + i % 3, "lan"))
            for i in range(20)
        ]

        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert session.order_store.get("A").printed_count == 20

    def test_locks_of_removed_orders_are_dropped(self, session, service):
        service.confirm(session.queued_order("A"), 1, "lan")
        session.forget_order("A")

        service.confirm(session.queued_order("R"), 1, "lan")

        assert set(service._order_locks) == {"R"}
