"""
Centralized logging configuration for ColorTagWeb.

Flask serves requests on worker threads, so every log line carries the
name of the thread that produced it. Confirmations for different orders
interleave in the shared log; lines written through an order logger are
tagged with the order id so one order's trail can be grepped out.

Features:
    - Thread name and order tag in every log message
    - Console output (always enabled)
    - Rotating file logs (optional, for production)
    - Separate error log for ERROR/CRITICAL messages
    - get_logger / get_order_logger with consistent naming

Log Format:
    2026-10-19 10:15:30 [INFO    ] [MainThread] color_tag_web.app - Starting ColorTagWeb
    2026-10-19 10:15:31 [INFO    ] [Thread-3 (process_request_thread)] [order 1] color_tag_web.order.1 - Ticket 2 confirmed

Usage:
    from logging_config import setup_logging, get_logger, get_order_logger

    setup_logging(log_level=logging.INFO, enable_file_logging=True)

    logger = get_logger(__name__)
    order_logger = get_order_logger("0C86GSK14")
"""

import logging
import sys
import threading
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional


APP_LOGGER_NAME = "color_tag_web"
ORDER_LOGGER_PREFIX = f"{APP_LOGGER_NAME}.order."

LOG_FORMAT = "%(asctime)s [%(levelname)-8s] [%(thread_name)s] %(order_tag)s%(name)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 5


# =============================================================================
# CONTEXT FILTER
# =============================================================================

class ThreadContextFilter(logging.Filter):
    """
    Annotates every record with the request thread and the order it concerns.

    Adds:
        - thread_name: Name of the thread that logged the record
        - order_tag: "[order <id>] " for records from an order logger, else ""
    """

    def filter(self, record: logging.LogRecord) -> bool:
        record.thread_name = threading.current_thread().name

        if record.name.startswith(ORDER_LOGGER_PREFIX):
            record.order_tag = f"[order {record.name[len(ORDER_LOGGER_PREFIX):]}] "
        else:
            record.order_tag = ""

        return True


# =============================================================================
# LOGGING SETUP
# =============================================================================

def _rotating_handler(
    path: Path,
    level: int,
    formatter: logging.Formatter,
    context_filter: logging.Filter,
) -> RotatingFileHandler:
    handler = RotatingFileHandler(
        filename=path,
        maxBytes=LOG_FILE_MAX_BYTES,
        backupCount=LOG_FILE_BACKUPS,
        encoding="utf-8"
    )
    handler.setLevel(level)
    handler.setFormatter(formatter)
    handler.addFilter(context_filter)
    return handler


def setup_logging(
    app_name: str = APP_LOGGER_NAME,
    log_level: int = logging.INFO,
    log_dir: Optional[Path] = None,
    enable_file_logging: bool = True,
) -> logging.Logger:
    """
    Configure application logging.

    Console output is always on. With ``enable_file_logging`` the app log
    and an ERROR-only log are written to rotating files in ``log_dir``
    (default: ./logs next to this file).

    Safe to call more than once: the app factory runs per test.

    Returns:
        Configured root logger of the application namespace
    """
    logger = logging.getLogger(app_name)
    logger.setLevel(log_level)
    logger.propagate = False
    logger.handlers.clear()

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
    context_filter = ThreadContextFilter()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    console_handler.addFilter(context_filter)
    logger.addHandler(console_handler)

    if enable_file_logging:
        if log_dir is None:
            log_dir = Path(__file__).parent / "logs"
        log_dir.mkdir(parents=True, exist_ok=True)

        app_log_file = log_dir / f"{app_name}.log"
        logger.addHandler(_rotating_handler(app_log_file, log_level, formatter, context_filter))
        logger.addHandler(_rotating_handler(
            log_dir / f"{app_name}_error.log", logging.ERROR, formatter, context_filter
        ))

        logger.info(f"File logging enabled: {app_log_file}")

    logger.info(f"Logging configured at level {logging.getLevelName(log_level)}")
    return logger


# =============================================================================
# LOGGER FACTORY FUNCTIONS
# =============================================================================

def get_logger(name: str) -> logging.Logger:
    """
    Get a child logger in the application namespace.

    ``get_logger("services.order_store")`` -> "color_tag_web.services.order_store"
    """
    if not name.startswith(APP_LOGGER_NAME):
        name = f"{APP_LOGGER_NAME}.{name}"

    return logging.getLogger(name)


def get_order_logger(order_id: str) -> logging.Logger:
    """Logger for one order's confirmation trail ("color_tag_web.order.<id>")."""
    return logging.getLogger(f"{ORDER_LOGGER_PREFIX}{order_id}")
