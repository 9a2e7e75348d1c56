"""Helper modules for the ColorTagWeb application."""

__all__ = [
    "bulk_import",
    "sanitize",
    "ticket_rules",
]
