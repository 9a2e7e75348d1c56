"""
Configuration for ColorTagWeb.

Orders and the print log live in a remote store (a Google Apps Script
web app). When ORDER_SERVICE_URL is empty the app falls back to an
in-memory store, which is only meant for local development.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env file early so environment variables are available for Config class
load_dotenv(override=True)

# Base directory (where this file lives)
BASE_DIR = Path(__file__).resolve().parent


class Config:
    """Default configuration for the Flask application."""

    # Flask settings
    SECRET_KEY = os.environ.get("FLASK_SECRET_KEY", "dev-secret-key")
    ENVIRONMENT = os.environ.get("FLASK_ENV", "development")

    # Debug mode
    DEBUG = os.environ.get("FLASK_DEBUG", "1") == "1"

    # ==========================================================================
    # Remote order store
    # ==========================================================================
    # ORDER_SERVICE_URL: deployed web app endpoint (POST, JSON body)
    # ORDER_SERVICE_TIMEOUT: seconds before a remote call is abandoned
    # ORDER_SERVICE_TOKEN: optional bearer token sent with every call
    # ==========================================================================
    ORDER_SERVICE_URL = os.environ.get("ORDER_SERVICE_URL", "")
    ORDER_SERVICE_TIMEOUT = float(os.environ.get("ORDER_SERVICE_TIMEOUT", "15"))
    ORDER_SERVICE_TOKEN = os.environ.get("ORDER_SERVICE_TOKEN", "")

    # Seed the in-memory store with sample orders (development only)
    SEED_SAMPLE_ORDERS = os.environ.get("SEED_SAMPLE_ORDERS", "1") == "1"

    # ==========================================================================
    # Shop floor defaults
    # ==========================================================================
    # DEFAULT_OPERATOR is recorded in the print log when the request does not
    # carry an X-Operator header.
    DEFAULT_OPERATOR = os.environ.get("DEFAULT_OPERATOR", "operator")

    # Printer used by bulk import when a row leaves the printer column empty
    DEFAULT_SHEET_PRINTER = os.environ.get("DEFAULT_SHEET_PRINTER", "Máy in 7 màu")
    DEFAULT_ROLL_PRINTER = os.environ.get("DEFAULT_ROLL_PRINTER", "TG300")


class ProductionConfig(Config):
    """Production configuration."""
    DEBUG = False
    TESTING = False
    SEED_SAMPLE_ORDERS = False
    SESSION_COOKIE_SECURE = True
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'


class DevelopmentConfig(Config):
    """Development configuration."""
    DEBUG = True
    TESTING = False


class TestingConfig(Config):
    """Testing configuration."""
    DEBUG = False
    TESTING = True
    ENVIRONMENT = "testing"
    ORDER_SERVICE_URL = ""
    SEED_SAMPLE_ORDERS = False
