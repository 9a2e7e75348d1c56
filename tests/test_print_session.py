"""
Unit tests for the order store, selection / queue / visibility sets and the
print session that ties them together.
"""

import pytest

from core.exceptions import EmptySelectionError, OrderNotFoundError
from models.order import Order, OrderKind, OrderStatus, StatusEvent
from modules.ticket_rules import ticket_indexes
from services.order_store import OrderStore
from services.print_queue import PrintQueue, SelectionSet, TicketVisibilitySet
from services.print_session import PrintSession


# Fixtures

@pytest.fixture
def orders():
    return [
        Order(id="A", kind=OrderKind.SHEET, code="A-1", product_name="Thùng A",
              color_count=3, color_names="Đỏ, Xanh"),
        Order(id="B", kind=OrderKind.SHEET, code="B-1", product_name="Thùng B",
              color_count=2),
        Order(id="R", kind=OrderKind.ROLL, code="TG300", product_name="Cuộn R",
              color_count=5),
    ]


@pytest.fixture
def store(orders):
    return OrderStore(orders)


@pytest.fixture
def session(store):
    return PrintSession(order_store=store)


# OrderStore

class TestOrderStore:

    def test_list_by_kind_keeps_load_order(self, store):
        assert [o.id for o in store.list_orders(OrderKind.SHEET)] == ["A", "B"]
        assert [o.id for o in store.list_orders(OrderKind.ROLL)] == ["R"]

    def test_returned_orders_are_copies(self, store):
        order = store.get("A")
        order.printed_count = 99

        assert store.get("A").printed_count == 0

    def test_apply_confirmation_counts_and_transitions(self, store):
        updated = store.apply_confirmation("A")

        assert updated.printed_count == 1
        assert updated.status is OrderStatus.PRINTING

        again = store.apply_confirmation("A")
        assert again.printed_count == 2
        assert again.status is OrderStatus.PRINTING

    def test_apply_confirmation_unknown_order(self, store):
        assert store.apply_confirmation("missing") is None

    def test_status_event_hook_marks_done(self, store):
        updated = store.apply_status_event("B", StatusEvent.MARKED_DONE)

        assert updated.status is OrderStatus.DONE
        assert store.get("B").status is OrderStatus.DONE

    def test_replace_all_drops_old_orders(self, store):
        store.replace_all([Order(id="Z", kind=OrderKind.SHEET)])

        assert "A" not in store
        assert len(store) == 1


# Sets

class TestSelectionSet:

    def test_toggle_flips_membership(self):
        selection = SelectionSet()

        assert selection.toggle("A") is True
        assert "A" in selection
        assert selection.toggle("A") is False
        assert "A" not in selection

    def test_clear(self):
        selection = SelectionSet()
        selection.toggle("A")
        selection.toggle("B")

        selection.clear()

        assert len(selection) == 0


class TestTicketVisibilitySet:

    def test_toggle_twice_restores_state(self):
        visibility = TicketVisibilitySet()

        assert visibility.toggle("A", 2) is True
        assert visibility.is_hidden("A", 2)
        assert visibility.toggle("A", 2) is False
        assert not visibility.is_hidden("A", 2)

    def test_keys_are_per_order_and_index(self):
        visibility = TicketVisibilitySet()
        visibility.toggle("1-1", 2)

        assert not visibility.is_hidden("1", 12)
        assert not visibility.is_hidden("1-12", 1)


class TestPrintQueue:

    def test_stage_keeps_input_order(self, orders):
        queue = PrintQueue()
        queue.stage([orders[1], orders[0]])

        assert [o.id for o in queue.orders()] == ["B", "A"]

    def test_staged_snapshot_ignores_store_edits(self, orders):
        queue = PrintQueue()
        queue.stage_single(orders[0])

        orders[0].color_count = 7
        orders[0].product_name = "Edited"

        staged = queue.get("A")
        assert staged.color_count == 3
        assert staged.product_name == "Thùng A"


# PrintSession

class TestPrintSession:

    def test_toggle_selection_requires_loaded_order(self, session):
        with pytest.raises(OrderNotFoundError):
            session.toggle_selection("deleted")

    def test_forgotten_order_cannot_be_reselected(self, session):
        session.toggle_selection("A")

        session.forget_order("A")

        assert "A" not in session.selection
        with pytest.raises(OrderNotFoundError):
            session.toggle_selection("A")

    def test_switch_module_clears_selection(self, session):
        session.toggle_selection("A")

        session.switch_module(OrderKind.ROLL)

        assert len(session.selection) == 0
        assert [o.id for o in session.visible_orders()] == ["R"]

    def test_batch_with_empty_selection_rejected(self, session):
        with pytest.raises(EmptySelectionError):
            session.start_batch()

    def test_batch_stages_selected_in_store_order(self, session):
        session.toggle_selection("B")
        session.toggle_selection("A")

        staged = session.start_batch()

        assert [o.id for o in staged] == ["A", "B"]
        assert len(session.selection) == 0

    def test_staging_resets_every_ticket_to_visible(self, session):
        session.start_single("A")
        session.toggle_ticket("A", 1)
        session.toggle_ticket("A", 3)
        session.toggle_selection("A")
        session.toggle_selection("B")

        staged = session.start_batch()

        for order in staged:
            for index in ticket_indexes(order):
                assert not session.is_ticket_hidden(order.id, index)

    def test_single_print_resets_visibility(self, session):
        session.start_single("A")
        session.toggle_ticket("A", 2)

        session.start_single("A")

        assert not session.is_ticket_hidden("A", 2)

    def test_single_print_unknown_order(self, session):
        with pytest.raises(OrderNotFoundError):
            session.start_single("nope")

    def test_render_queue_expands_tickets(self, session):
        session.toggle_selection("A")
        session.toggle_selection("R")
        session.start_batch()
        session.toggle_ticket("A", 2)

        rendered = session.render_queue()

        assert [entry["order"]["id"] for entry in rendered] == ["A", "R"]
        sheet_tickets = rendered[0]["tickets"]
        assert [t["colorLabel"] for t in sheet_tickets] == ["Đỏ", "Xanh", "COLOR 3"]
        assert [t["hidden"] for t in sheet_tickets] == [False, True, False]
        assert len(rendered[1]["tickets"]) == 1
        assert rendered[0]["printedCount"] == 0

    def test_render_queue_reports_deleted_order(self, session):
        session.start_single("B")
        session.forget_order("B")

        rendered = session.render_queue()

        assert rendered[0]["printedCount"] is None
        assert len(rendered[0]["tickets"]) == 2
