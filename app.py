"""
ColorTagWeb - Flask Application Entry Point.

This is a slim app factory that:
1. Loads configuration and sets up logging
2. Connects to the remote order/log store (or the in-memory dev store)
3. Creates the print session and the services working on it
4. Loads the order list
5. Registers route blueprints and JSON error handlers

ARCHITECTURE:
    Request threads (Flask)
    └── share ONE PrintSession (app.config["PRINT_SESSION"])
        ├── OrderStore          local copy of all orders
        ├── SelectionSet        orders marked for batch print
        ├── PrintQueue          frozen snapshots of the staged run
        └── TicketVisibilitySet tickets excluded from the run

    OrderService              CRUD + bulk import, reloads after each write
    PrintConfirmationService  log remotely first, then count locally
"""

from __future__ import annotations

import atexit
import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask
from werkzeug.exceptions import HTTPException

from logging_config import setup_logging, get_logger
from core.api_client import OrderServiceClient
from core.exceptions import (
    ColorTagError,
    EmptySelectionError,
    OrderNotFoundError,
    OrderValidationError,
    RemoteServiceError,
)
from core.memory_backend import InMemoryOrderService
from services.order_service import OrderService
from services.print_confirmation import PrintConfirmationService
from services.print_session import PrintSession
from routes import register_blueprints


# Module logger (configured after setup_logging)
logger = get_logger(__name__)


def _get_base_path() -> Path:
    """
    Get the base path for the application.

    In PyInstaller bundle: Returns the directory containing the executable
    In development: Returns the directory containing app.py
    """
    if getattr(sys, 'frozen', False):
        return Path(sys.executable).parent
    else:
        return Path(__file__).parent


def _create_backend(app: Flask):
    """
    Build the order/log store client from configuration.

    Without ORDER_SERVICE_URL the in-memory store is used; in production
    that is a configuration error.
    """
    url = app.config.get("ORDER_SERVICE_URL")
    if url:
        logger.info(f"Using remote order service at {url}")
        return OrderServiceClient(
            url,
            timeout_seconds=app.config.get("ORDER_SERVICE_TIMEOUT", 15.0),
            token=app.config.get("ORDER_SERVICE_TOKEN", ""),
            logger=get_logger("core.api_client"),
        )

    if app.config.get("ENVIRONMENT") == "production":
        raise RuntimeError("ORDER_SERVICE_URL must be set in production")

    logger.warning("ORDER_SERVICE_URL not set - using in-memory order store")
    return InMemoryOrderService(seed=app.config.get("SEED_SAMPLE_ORDERS", False))


def create_app(config_object: str = "config.Config", backend=None) -> Flask:
    """
    Application factory - creates and configures Flask app.

    Args:
        config_object: Import path of the configuration class
        backend: Optional order/log store (tests pass InMemoryOrderService
            or a mock); built from configuration when omitted

    Returns:
        Configured Flask application
    """
    # Use override=True so .env file always takes precedence over shell environment
    base_path = _get_base_path()
    env_file = base_path / '.env'
    if env_file.exists():
        load_dotenv(env_file, override=True)
    else:
        load_dotenv(override=True)

    app = Flask(__name__)
    app.config.from_object(config_object)

    # Configure logging
    log_level = logging.DEBUG if app.config.get("DEBUG") else logging.INFO
    enable_file_logging = app.config.get("ENVIRONMENT") == "production"

    root_logger = setup_logging(
        log_level=log_level,
        enable_file_logging=enable_file_logging
    )

    app.logger.handlers = root_logger.handlers
    app.logger.setLevel(log_level)

    logger.info(f"Starting ColorTagWeb in {app.config.get('ENVIRONMENT')} mode")

    # =========================================================================
    # SERVICES INITIALIZATION
    # =========================================================================

    if backend is None:
        backend = _create_backend(app)
    app.config["ORDER_BACKEND"] = backend

    session = PrintSession()
    app.config["PRINT_SESSION"] = session

    order_service = OrderService(
        session,
        backend,
        default_sheet_printer=app.config.get("DEFAULT_SHEET_PRINTER", "Máy in 7 màu"),
        default_roll_printer=app.config.get("DEFAULT_ROLL_PRINTER", "TG300"),
    )
    app.config["ORDER_SERVICE"] = order_service
    app.config["CONFIRMATION_SERVICE"] = PrintConfirmationService(session, backend)

    # Initial load. A store outage is not fatal: /orders/reload retries.
    try:
        order_service.reload()
    except RemoteServiceError as e:
        logger.warning(f"Initial order load failed: {e}")

    # =========================================================================
    # CLEANUP REGISTRATION
    # =========================================================================

    if isinstance(backend, OrderServiceClient):
        def cleanup():
            """Close the order service connection pool on shutdown."""
            logger.info("Shutting down...")
            backend.close()
            logger.info("Shutdown complete")

        atexit.register(cleanup)

    # =========================================================================
    # REGISTER BLUEPRINTS
    # =========================================================================

    register_blueprints(app)

    # =========================================================================
    # ERROR HANDLERS
    # =========================================================================

    def _error_response(error: ColorTagError, status_code: int):
        return {
            "success": False,
            "error": type(error).__name__,
            "message": error.message,
            "details": error.details,
        }, status_code

    @app.errorhandler(OrderValidationError)
    def handle_validation_error(e):
        return _error_response(e, 400)

    @app.errorhandler(EmptySelectionError)
    def handle_empty_selection(e):
        return _error_response(e, 400)

    @app.errorhandler(OrderNotFoundError)
    def handle_order_not_found(e):
        return _error_response(e, 404)

    @app.errorhandler(RemoteServiceError)
    def handle_remote_error(e):
        logger.warning(f"Order service call failed: {e}")
        return _error_response(e, 502)

    @app.errorhandler(ColorTagError)
    def handle_app_error(e):
        logger.error(f"Unhandled application error: {e}", exc_info=True)
        return _error_response(e, 500)

    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        return {"success": False, "error": e.name, "message": e.description}, e.code

    logger.info("Application initialized successfully")
    return app


if __name__ == "__main__":
    app = create_app()
    debug_mode = os.environ.get("FLASK_DEBUG", "1") == "1"
    app.run(debug=debug_mode)
