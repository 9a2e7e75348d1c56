"""
Order routes.

Handles:
- /orders            list (current module) and create
- /orders/<id>       update and delete
- /orders/reload     re-read everything from the remote store
- /orders/import     bulk import of pasted spreadsheet rows
- /module/<kind>     switch between the sheet and roll modules

Store failures raise RemoteServiceError, which the app-level handler
turns into a 502 notice.
"""

from flask import Blueprint, current_app, request

from logging_config import get_logger
from models.order import OrderKind


# Module logger
logger = get_logger(__name__)

orders_bp = Blueprint("orders", __name__)


def _order_view(order, session) -> dict:
    data = order.to_dict()
    data["selected"] = order.id in session.selection
    return data


@orders_bp.route("/orders", methods=["GET"])
def list_orders():
    """Orders of the current module, with their selection state."""
    session = current_app.config["PRINT_SESSION"]
    orders = session.visible_orders()
    return {
        "module": session.current_kind.value,
        "orders": [_order_view(order, session) for order in orders],
    }


@orders_bp.route("/orders/reload", methods=["POST"])
def reload_orders():
    """Re-read the full order list from the remote store."""
    order_service = current_app.config["ORDER_SERVICE"]
    orders = order_service.reload()
    return {"success": True, "count": len(orders)}


@orders_bp.route("/orders", methods=["POST"])
def create_order():
    """Create an order in the current module (or the one named by 'type')."""
    session = current_app.config["PRINT_SESSION"]
    order_service = current_app.config["ORDER_SERVICE"]

    data = request.get_json(silent=True) or {}
    kind = OrderKind.parse(data["type"]) if data.get("type") else session.current_kind

    order_id = order_service.save_order(data, kind)
    return {"success": True, "id": order_id}, 201


@orders_bp.route("/orders/<order_id>", methods=["PUT"])
def update_order(order_id: str):
    """Update an order. Its type cannot change."""
    order_service = current_app.config["ORDER_SERVICE"]
    session = current_app.config["PRINT_SESSION"]

    data = request.get_json(silent=True) or {}
    existing = session.order_store.get(order_id)
    if data.get("type"):
        kind = OrderKind.parse(data["type"])
    elif existing is not None:
        kind = existing.kind
    else:
        kind = session.current_kind

    order_service.save_order(data, kind, order_id=order_id)
    return {"success": True, "id": order_id}


@orders_bp.route("/orders/<order_id>", methods=["DELETE"])
def delete_order(order_id: str):
    """
    Delete an order and drop it from the selection.

    ``reloaded`` is False when the delete went through but the order list
    could not be re-read; POST /orders/reload retries.
    """
    order_service = current_app.config["ORDER_SERVICE"]
    reloaded = order_service.delete_order(order_id)
    return {"success": True, "reloaded": reloaded}


@orders_bp.route("/orders/import", methods=["POST"])
def import_orders():
    """
    Bulk import tab-delimited rows into the current module.

    Accepts JSON {"text": "..."} or a raw text body.
    """
    session = current_app.config["PRINT_SESSION"]
    order_service = current_app.config["ORDER_SERVICE"]

    data = request.get_json(silent=True)
    if isinstance(data, dict):
        text = data.get("text", "")
    else:
        text = request.get_data(as_text=True)

    count = order_service.import_orders(text, session.current_kind)
    return {"success": True, "count": count}


@orders_bp.route("/module/<kind>", methods=["POST"])
def switch_module(kind: str):
    """Switch to the sheet or roll module; clears the selection."""
    session = current_app.config["PRINT_SESSION"]
    session.switch_module(OrderKind.parse(kind))
    return {"module": session.current_kind.value}
