"""
Print run routes.

Handles:
- /selection/...                      mark orders for a batch print
- /print/batch, /print/single/<id>    stage a print run
- /print/queue                        staged orders expanded into tickets
- /print/tickets/<id>/<n>/toggle      include / exclude one ticket
- /print/tickets/<id>/<n>/confirm     confirm one ticket came off the printer
"""

from flask import Blueprint, current_app, request

from logging_config import get_logger
from services.print_confirmation import ConfirmationOutcome, ConfirmationResult


# Module logger
logger = get_logger(__name__)

printing_bp = Blueprint("printing", __name__)


def _current_operator() -> str:
    operator = (request.headers.get("X-Operator") or "").strip()
    return operator or current_app.config.get("DEFAULT_OPERATOR", "operator")


@printing_bp.route("/selection/<order_id>/toggle", methods=["POST"])
def toggle_selection(order_id: str):
    session = current_app.config["PRINT_SESSION"]
    selected = session.toggle_selection(order_id)
    return {"orderId": order_id, "selected": selected, "count": len(session.selection)}


@printing_bp.route("/selection/clear", methods=["POST"])
def clear_selection():
    session = current_app.config["PRINT_SESSION"]
    session.clear_selection()
    return {"count": 0}


@printing_bp.route("/print/batch", methods=["POST"])
def start_batch():
    """Stage every selected order; all tickets start included."""
    session = current_app.config["PRINT_SESSION"]
    staged = session.start_batch()
    return {"queued": [order.id for order in staged], "queue": session.render_queue()}


@printing_bp.route("/print/single/<order_id>", methods=["POST"])
def start_single(order_id: str):
    """Stage one order on its own."""
    session = current_app.config["PRINT_SESSION"]
    session.start_single(order_id)
    return {"queued": [order_id], "queue": session.render_queue()}


@printing_bp.route("/print/queue", methods=["GET"])
def view_queue():
    session = current_app.config["PRINT_SESSION"]
    return {"queue": session.render_queue()}


@printing_bp.route("/print/tickets/<order_id>/<int:color_index>/toggle", methods=["POST"])
def toggle_ticket(order_id: str, color_index: int):
    session = current_app.config["PRINT_SESSION"]
    hidden = session.toggle_ticket(order_id, color_index)
    return {"orderId": order_id, "colorIndex": color_index, "hidden": hidden}


@printing_bp.route("/print/tickets/<order_id>/<int:color_index>/confirm", methods=["POST"])
def confirm_ticket(order_id: str, color_index: int):
    """
    Confirm one ticket.

    The ticket must belong to an order in the current print run. Hidden or
    stale tickets are a no-op reported through 'outcome'; a failed log
    append is a 502 notice and nothing is counted.
    """
    session = current_app.config["PRINT_SESSION"]
    confirmation_service = current_app.config["CONFIRMATION_SERVICE"]

    snapshot = session.queued_order(order_id)
    if snapshot is None:
        logger.warning(f"Confirm for order {order_id} which is not in the print run")
        result = ConfirmationResult(ConfirmationOutcome.UNKNOWN_ORDER, order_id, color_index)
        return result.to_dict()

    result = confirmation_service.confirm(snapshot, color_index, _current_operator())
    return result.to_dict()
