"""
Order data models.

An order is one production job on the shop floor. It is stored remotely;
the application keeps a local copy in the OrderStore and stages frozen
snapshots of it in the print queue.

Lifecycle:
    NEW --(first confirmed ticket)--> PRINTING
    any --(marked done, external)--> DONE

Thread Safety:
    - Order is mutable and owned exclusively by the OrderStore
    - Use Order.freeze() to create the immutable snapshot held by the queue
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, Any

from core.exceptions import OrderValidationError


MIN_COLORS = 1
MAX_COLORS = 7


class OrderKind(Enum):
    """
    Production module an order belongs to.

    Fixed at creation. Decides how many tickets the order expands into.
    """

    SHEET = "sheet"
    """Printed as one ticket per color."""

    ROLL = "roll"
    """Printed as a single ticket regardless of color count."""

    @classmethod
    def parse(cls, value: Any) -> "OrderKind":
        """Parse a wire value ('sheet' / 'roll'), case-insensitive."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise OrderValidationError("type", f"Unknown order type: {value!r}")


class OrderStatus(Enum):
    """Production status of an order."""

    NEW = "New"
    """No ticket has been confirmed yet."""

    PRINTING = "Printing"
    """At least one ticket has been confirmed."""

    DONE = "Done"
    """Finished. Set outside the print workflow."""

    @classmethod
    def parse(cls, value: Any) -> "OrderStatus":
        """Parse a wire value; unknown or empty values read as NEW."""
        if isinstance(value, cls):
            return value
        for status in cls:
            if status.value.lower() == str(value or "").strip().lower():
                return status
        return cls.NEW


class StatusEvent(Enum):
    """Events that move an order between statuses."""

    PRINT_CONFIRMED = "print_confirmed"
    MARKED_DONE = "marked_done"


def next_status(current: OrderStatus, event: StatusEvent) -> OrderStatus:
    """
    Status transition function.

    Total over every (status, event) pair. Nothing leads back to NEW, and a
    confirmation never moves a DONE order back to PRINTING.
    """
    if event is StatusEvent.MARKED_DONE:
        return OrderStatus.DONE

    if event is StatusEvent.PRINT_CONFIRMED:
        if current is OrderStatus.NEW:
            return OrderStatus.PRINTING
        if current is OrderStatus.PRINTING:
            return OrderStatus.PRINTING
        if current is OrderStatus.DONE:
            return OrderStatus.DONE

    raise ValueError(f"Unhandled status transition: {current} on {event}")


def clamp_color_count(value: Any) -> int:
    """
    Normalize a color count into [MIN_COLORS, MAX_COLORS].

    Out-of-range values are clamped, not rejected. Anything that is not a
    number (None, "", "abc") reads as MIN_COLORS.
    """
    try:
        count = int(float(value))
    except (TypeError, ValueError):
        count = 0

    if count < MIN_COLORS:
        # Zero and garbage both mean "one color"
        return MIN_COLORS
    if count > MAX_COLORS:
        return MAX_COLORS
    return count


def _order_record(order) -> Dict[str, Any]:
    """Record in the remote store's field naming, for Order and FrozenOrder."""
    return {
        "id": order.id,
        "type": order.kind.value,
        "code": order.code,
        "customer": order.customer,
        "productName": order.product_name,
        "colors": order.color_count,
        "colorNames": order.color_names,
        "printer": order.printer,
        "dateInput": order.date_input,
        "shelf": order.shelf,
        "note": order.note,
        "totalPrinted": order.printed_count,
        "status": order.status.value,
    }


@dataclass
class Order:
    """
    A production job as held by the OrderStore.

    ``printed_count`` only changes through the print confirmation workflow.
    ``kind`` never changes after creation.
    """

    id: str
    """Identifier assigned by the remote store."""

    kind: OrderKind
    """Sheet or roll module."""

    code: str = ""
    """Product / job code printed on the ticket."""

    customer: str = ""

    product_name: str = ""

    color_count: int = MIN_COLORS
    """Number of colors, always within [1, 7]."""

    color_names: str = ""
    """Comma-separated color labels; may list fewer names than color_count."""

    printer: str = ""

    date_input: str = ""
    """Intake date (ISO date string)."""

    shelf: str = ""
    """Shelf position for sheet orders, stock-in order for roll orders."""

    note: str = ""

    printed_count: int = 0
    """Cumulative confirmed ticket prints."""

    status: OrderStatus = OrderStatus.NEW

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the remote store's record format."""
        return _order_record(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Order":
        """
        Create Order from a remote store record.

        Spreadsheet-backed stores hand back numbers as strings or floats,
        so numeric fields are coerced here.

        Raises:
            OrderValidationError: If the record has no id or an unknown type
        """
        order_id = str(data.get("id") or "").strip()
        if not order_id:
            raise OrderValidationError("id", "Order record has no id")

        try:
            printed = max(0, int(float(data.get("totalPrinted") or 0)))
        except (TypeError, ValueError):
            printed = 0

        return cls(
            id=order_id,
            kind=OrderKind.parse(data.get("type", OrderKind.SHEET.value)),
            code=str(data.get("code") or ""),
            customer=str(data.get("customer") or ""),
            product_name=str(data.get("productName") or ""),
            color_count=clamp_color_count(data.get("colors")),
            color_names=str(data.get("colorNames") or ""),
            printer=str(data.get("printer") or ""),
            date_input=str(data.get("dateInput") or ""),
            shelf=str(data.get("shelf") or ""),
            note=str(data.get("note") or ""),
            printed_count=printed,
            status=OrderStatus.parse(data.get("status")),
        )

    def copy(self) -> "Order":
        """Shallow copy; every field is immutable so this is a full copy."""
        return replace(self)

    def freeze(self) -> "FrozenOrder":
        """
        Create an immutable snapshot of this order.

        The print queue holds these, so edits made to the order after a
        print run is staged do not change the run until it is re-staged.
        """
        return FrozenOrder(
            id=self.id,
            kind=self.kind,
            code=self.code,
            customer=self.customer,
            product_name=self.product_name,
            color_count=self.color_count,
            color_names=self.color_names,
            printer=self.printer,
            date_input=self.date_input,
            shelf=self.shelf,
            note=self.note,
            printed_count=self.printed_count,
            status=self.status,
        )


@dataclass(frozen=True)
class FrozenOrder:
    """
    Immutable snapshot of an order, taken when a print run is staged.

    ``printed_count`` and ``status`` are the values at staging time; the
    live values stay in the OrderStore.
    """

    id: str
    kind: OrderKind
    code: str
    customer: str
    product_name: str
    color_count: int
    color_names: str
    printer: str
    date_input: str
    shelf: str
    note: str
    printed_count: int
    status: OrderStatus

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the remote store's record format."""
        return _order_record(self)
