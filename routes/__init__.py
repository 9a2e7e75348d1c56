"""
Flask route blueprints for ColorTagWeb.

This module contains all route handlers organized by functionality:
- main: Session summary
- orders: Order list, create/update/delete, bulk import, module switch
- printing: Selection, print run staging, ticket visibility, confirmation
- history: Print log
- api: Health check

Each blueprint is registered with the Flask app in create_app().
"""

from .main import main_bp
from .orders import orders_bp
from .printing import printing_bp
from .history import history_bp
from .api import api_bp

__all__ = [
    "main_bp",
    "orders_bp",
    "printing_bp",
    "history_bp",
    "api_bp",
]


def register_blueprints(app):
    """
    Register all blueprints with the Flask app.

    Args:
        app: Flask application instance
    """
    app.register_blueprint(main_bp)
    app.register_blueprint(orders_bp)
    app.register_blueprint(printing_bp)
    app.register_blueprint(history_bp)
    app.register_blueprint(api_bp)
