"""
Unit tests for the order service and bulk import parsing.

Uses the in-memory store for end-to-end flows and a MagicMock store where
the exact calls matter.
"""

import pytest
from datetime import date
from unittest.mock import MagicMock

from core.exceptions import OrderNotFoundError, OrderValidationError, RemoteServiceError
from core.memory_backend import InMemoryOrderService, SAMPLE_ORDERS
from models.order import OrderKind, OrderStatus
from modules.bulk_import import parse_import_text
from modules.ticket_rules import color_label
from services.order_service import OrderService, build_order_payload
from services.print_session import PrintSession


# Fixtures

@pytest.fixture
def backend():
    return InMemoryOrderService(seed=True)


@pytest.fixture
def session():
    return PrintSession()


@pytest.fixture
def order_service(session, backend):
    service = OrderService(session, backend)
    service.reload()
    return service


@pytest.fixture
def new_order_data():
    return {
        "code": "0C86GSK99",
        "customer": "VNM",
        "productName": "Thùng SĐ 24 lon",
        "colors": 9,
        "colorNames": "Đỏ, Vàng",
        "printer": "Máy in 6 màu",
        "shelf": "B-02",
        "dateInput": "2026-10-19",
        "note": "<b>gấp</b>",
    }


# Payload building

class TestBuildOrderPayload:

    def test_clamps_and_sanitizes(self, new_order_data):
        payload = build_order_payload(new_order_data, OrderKind.SHEET)

        assert payload["colors"] == 7
        assert payload["note"] == "gấp"
        assert payload["type"] == "sheet"

    def test_plain_text_keeps_ampersands_and_brackets(self, new_order_data):
        new_order_data["customer"] = "P&G"
        new_order_data["productName"] = "Thùng <5kg> A&B"

        payload = build_order_payload(new_order_data, OrderKind.SHEET)

        assert payload["customer"] == "P&G"
        assert payload["productName"] == "Thùng <5kg> A&B"

    def test_zero_colors_becomes_one(self, new_order_data):
        new_order_data["colors"] = 0

        assert build_order_payload(new_order_data, OrderKind.SHEET)["colors"] == 1

    def test_server_owned_fields_omitted(self, new_order_data):
        new_order_data["totalPrinted"] = 50
        new_order_data["status"] = "Done"

        payload = build_order_payload(new_order_data, OrderKind.SHEET, order_id="1")

        assert "totalPrinted" not in payload
        assert "status" not in payload
        assert payload["id"] == "1"

    @pytest.mark.parametrize("field", ["code", "customer", "productName"])
    def test_required_fields(self, new_order_data, field):
        new_order_data[field] = "   "

        with pytest.raises(OrderValidationError) as exc_info:
            build_order_payload(new_order_data, OrderKind.SHEET)

        assert exc_info.value.field == field


# Service flows

class TestOrderService:

    def test_reload_populates_store(self, order_service, session):
        assert [o.id for o in session.order_store.list_orders()] == ["1", "2"]

    def test_reload_skips_unreadable_records(self, session):
        records = SAMPLE_ORDERS + [{"id": "", "type": "sheet"}, {"id": "9", "type": "label"}]
        service = OrderService(session, InMemoryOrderService(orders=records))

        orders = service.reload()

        assert [o.id for o in orders] == ["1", "2"]

    def test_create_order_starts_new_with_clamped_colors(self, order_service, session, new_order_data):
        order_id = order_service.save_order(new_order_data, OrderKind.SHEET)

        created = session.order_store.get(order_id)
        assert created.color_count == 7
        assert created.printed_count == 0
        assert created.status is OrderStatus.NEW
        assert created.kind is OrderKind.SHEET

    def test_saved_color_names_print_as_typed(self, order_service, session, new_order_data):
        new_order_data["customer"] = "P&G"
        new_order_data["colorNames"] = "Đỏ & Cam, Xanh"

        order_id = order_service.save_order(new_order_data, OrderKind.SHEET)

        saved = session.order_store.get(order_id)
        assert saved.customer == "P&G"
        assert color_label(saved.color_names, 1) == "Đỏ & Cam"
        assert color_label(saved.color_names, 2) == "Xanh"

    def test_update_keeps_printed_count(self, order_service, session, backend, new_order_data):
        backend.append_print_log({"orderId": "1", "colorIndex": 1})
        order_service.reload()

        order_service.save_order(new_order_data, OrderKind.SHEET, order_id="1")

        updated = session.order_store.get("1")
        assert updated.code == "0C86GSK99"
        assert updated.printed_count == 1
        assert updated.status is OrderStatus.PRINTING

    def test_update_cannot_change_kind(self, order_service, new_order_data):
        with pytest.raises(OrderValidationError):
            order_service.save_order(new_order_data, OrderKind.ROLL, order_id="1")

    def test_update_unknown_order(self, order_service, new_order_data):
        with pytest.raises(OrderNotFoundError):
            order_service.save_order(new_order_data, OrderKind.SHEET, order_id="404")

    def test_delete_removes_from_selection(self, order_service, session):
        session.toggle_selection("1")

        order_service.delete_order("1")

        assert "1" not in session.selection
        assert "1" not in session.order_store
        with pytest.raises(OrderNotFoundError):
            session.toggle_selection("1")

    def test_failed_delete_keeps_selection(self, session):
        backend = MagicMock()
        backend.list_orders.return_value = SAMPLE_ORDERS
        backend.delete_order.side_effect = RemoteServiceError("deleteOrder", "offline")
        service = OrderService(session, backend)
        service.reload()
        session.toggle_selection("1")

        with pytest.raises(RemoteServiceError):
            service.delete_order("1")

        assert "1" in session.selection
        assert "1" in session.order_store

    def test_delete_survives_failed_reload(self, session):
        backend = MagicMock()
        backend.list_orders.side_effect = [
            SAMPLE_ORDERS,
            RemoteServiceError("getAllOrders", "offline"),
        ]
        service = OrderService(session, backend)
        service.reload()
        session.toggle_selection("1")

        reloaded = service.delete_order("1")

        assert reloaded is False
        backend.delete_order.assert_called_once_with("1")
        assert "1" not in session.selection
        assert "1" not in session.order_store

    def test_failed_create_does_not_reload(self, session, new_order_data):
        backend = MagicMock()
        backend.create_order.side_effect = RemoteServiceError("addOrder", "offline")
        service = OrderService(session, backend)

        with pytest.raises(RemoteServiceError):
            service.save_order(new_order_data, OrderKind.SHEET)

        backend.list_orders.assert_not_called()

    def test_import_creates_orders_in_module(self, order_service, session):
        text = "R-100\tCase Bia\tHVN\t4\tCyan, Black\n" \
               "R-101\tCase Nước\tSAB\n" \
               "incomplete row\n"

        count = order_service.import_orders(text, OrderKind.ROLL)

        assert count == 2
        rolls = session.order_store.list_orders(OrderKind.ROLL)
        assert [o.code for o in rolls] == ["TG300", "R-100", "R-101"]
        assert rolls[1].printer == "TG300"
        assert rolls[2].color_count == 1

    def test_blank_import_makes_no_call(self, session):
        backend = MagicMock()
        service = OrderService(session, backend)

        assert service.import_orders("   \n", OrderKind.SHEET) == 0
        backend.create_orders_bulk.assert_not_called()

    def test_print_history(self, order_service, backend):
        backend.append_print_log({"orderId": "2", "colorIndex": 1, "productName": "Case",
                                  "user": "lan", "type": "roll"})

        entries = order_service.print_history()

        assert len(entries) == 1
        assert entries[0].order_id == "2"
        assert entries[0].kind is OrderKind.ROLL


# Bulk import parsing

class TestParseImportText:

    def test_defaults_for_missing_columns(self):
        records = parse_import_text(
            "S-1\tThùng A\tVNM",
            OrderKind.SHEET,
            default_printer="Máy in 7 màu",
            today=date(2026, 10, 19),
        )

        assert records == [{
            "type": "sheet",
            "code": "S-1",
            "productName": "Thùng A",
            "customer": "VNM",
            "colors": 1,
            "colorNames": "",
            "printer": "Máy in 7 màu",
            "shelf": "",
            "dateInput": "2026-10-19",
        }]

    def test_full_row(self):
        row = "S-2\tThùng B\tVNM\t3\tĐỏ, Xanh, Vàng\tMáy Offset\tA-07\t2026-01-05"

        record = parse_import_text(row, OrderKind.SHEET, "Máy in 7 màu")[0]

        assert record["colors"] == "3"
        assert record["printer"] == "Máy Offset"
        assert record["shelf"] == "A-07"
        assert record["dateInput"] == "2026-01-05"

    def test_rows_with_fewer_than_three_columns_skipped(self):
        text = "S-1\tThùng A\nS-2\tThùng B\tVNM\r\n"

        records = parse_import_text(text, OrderKind.SHEET, "Máy in 7 màu")

        assert [r["code"] for r in records] == ["S-2"]
        assert records[0]["customer"] == "VNM"
