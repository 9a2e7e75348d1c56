"""
Print log data models.

The print log is append-only and owned by the remote store. The
application appends one entry per confirmed ticket and reads the log
back for the history view; it never edits or deletes entries.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, Any, Optional

from .order import OrderKind


@dataclass(frozen=True)
class PrintLogEntry:
    """One confirmed ticket print."""

    order_id: str
    """Order the ticket belongs to."""

    color_index: int
    """Which color ticket was printed (1-based)."""

    product_name: str
    """Product name at the time of printing."""

    timestamp: str
    """ISO-8601 UTC timestamp."""

    operator: str
    """Who confirmed the print."""

    kind: OrderKind

    id: Optional[str] = None
    """Log row id, assigned by the remote store."""

    @classmethod
    def record(
        cls,
        order_id: str,
        color_index: int,
        product_name: str,
        operator: str,
        kind: OrderKind,
        now: Optional[datetime] = None,
    ) -> "PrintLogEntry":
        """Build a new entry stamped with the current UTC time."""
        now = now or datetime.now(timezone.utc)
        return cls(
            order_id=order_id,
            color_index=color_index,
            product_name=product_name,
            timestamp=now.isoformat(),
            operator=operator,
            kind=kind,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the remote store's record format."""
        data = {
            "orderId": self.order_id,
            "colorIndex": self.color_index,
            "productName": self.product_name,
            "timestamp": self.timestamp,
            "user": self.operator,
            "type": self.kind.value,
        }
        if self.id is not None:
            data["id"] = self.id
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PrintLogEntry":
        """Create from a remote store record."""
        try:
            color_index = int(float(data.get("colorIndex") or 0))
        except (TypeError, ValueError):
            color_index = 0

        log_id = data.get("id")
        return cls(
            order_id=str(data.get("orderId") or ""),
            color_index=color_index,
            product_name=str(data.get("productName") or ""),
            timestamp=str(data.get("timestamp") or ""),
            operator=str(data.get("user") or ""),
            kind=OrderKind.parse(data.get("type") or OrderKind.SHEET.value),
            id=str(log_id) if log_id not in (None, "") else None,
        )
