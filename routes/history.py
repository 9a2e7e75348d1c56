"""
History route.

Read-only view of the remote print log.
"""

from flask import Blueprint, current_app

history_bp = Blueprint("history", __name__)


@history_bp.route("/history", methods=["GET"])
def history():
    """Print log entries as stored remotely (newest first)."""
    order_service = current_app.config["ORDER_SERVICE"]
    entries = order_service.print_history()
    return {"entries": [entry.to_dict() for entry in entries]}
