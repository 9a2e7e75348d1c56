"""
API routes.

Handles:
- /health - Health check endpoint
"""

from flask import Blueprint, current_app

from core.api_client import OrderServiceClient


api_bp = Blueprint("api", __name__)


@api_bp.route("/health", methods=["GET"])
def health():
    """Health check endpoint with service status."""
    health_status = {
        "status": "ok",
        "environment": current_app.config.get("ENVIRONMENT", "unknown"),
        "checks": {}
    }

    backend = current_app.config.get("ORDER_BACKEND")
    if isinstance(backend, OrderServiceClient):
        health_status["checks"]["order_service"] = "remote"
    elif backend is not None:
        health_status["checks"]["order_service"] = "in_memory"
    else:
        health_status["checks"]["order_service"] = "not_configured"
        health_status["status"] = "degraded"

    session = current_app.config.get("PRINT_SESSION")
    if session is not None:
        health_status["checks"]["orders_loaded"] = len(session.order_store)
    else:
        health_status["checks"]["orders_loaded"] = 0
        health_status["status"] = "degraded"

    status_code = 200 if health_status["status"] == "ok" else 503
    return health_status, status_code
