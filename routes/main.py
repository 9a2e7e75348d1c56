"""
Main route (session summary).

Landing endpoint reporting which module is active and how much is
selected / staged.
"""

from flask import Blueprint, current_app

main_bp = Blueprint("main", __name__)


@main_bp.route("/", methods=["GET"])
def index():
    """Summary of the current print session."""
    session = current_app.config["PRINT_SESSION"]
    return {
        "module": session.current_kind.value,
        "orders": len(session.visible_orders()),
        "selected": sorted(session.selection.ids()),
        "queued": len(session.queue),
    }
