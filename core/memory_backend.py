"""
In-memory order/log store for local development and tests.

Speaks the same interface as OrderServiceClient (dictionaries in the
store's field format) so services cannot tell the two apart. Data lives
only as long as the process.
"""

from __future__ import annotations

import threading
import uuid
from copy import deepcopy
from datetime import datetime, timezone
from typing import Dict, Any, List, Optional

from .exceptions import RemoteServiceError


SAMPLE_ORDERS: List[Dict[str, Any]] = [
    {
        "id": "1",
        "type": "sheet",
        "code": "0C86GSK14",
        "customer": "VNM",
        "productName": "Q1SX05: Thùng SĐ NSPN Xanh 380g (N002-TV)",
        "colors": 2,
        "colorNames": "Đỏ, Xanh Dương",
        "printer": "Máy in 7 màu",
        "dateInput": "2025-08-01",
        "shelf": "A-01",
        "note": "",
        "totalPrinted": 0,
        "status": "New",
    },
    {
        "id": "2",
        "type": "roll",
        "code": "TG300",
        "customer": "HVN",
        "productName": "Case WA Can TIGER 24x330ml SLK VN (261214B-11)",
        "colors": 5,
        "colorNames": "Cyan, Magenta, Yellow, Black, White",
        "printer": "TG300",
        "dateInput": "2025-10-01",
        "shelf": "1",
        "note": "",
        "totalPrinted": 0,
        "status": "New",
    },
]

# Fields a create/update payload may not set
_SERVER_OWNED_FIELDS = ("id", "totalPrinted", "status")


class InMemoryOrderService:
    """Process-local stand-in for the remote order/log store."""

    def __init__(self, seed: bool = False, orders: Optional[List[Dict[str, Any]]] = None):
        self._lock = threading.Lock()
        self._orders: List[Dict[str, Any]] = deepcopy(orders if orders is not None else [])
        self._logs: List[Dict[str, Any]] = []
        if seed and orders is None:
            self._orders = deepcopy(SAMPLE_ORDERS)

    # =========================================================================
    # ORDERS
    # =========================================================================

    def list_orders(self) -> List[Dict[str, Any]]:
        with self._lock:
            return deepcopy(self._orders)

    def create_order(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        with self._lock:
            order_id = self._insert(payload)
        return {"success": True, "message": "Order created", "id": order_id}

    def create_orders_bulk(self, payloads: List[Dict[str, Any]]) -> Dict[str, Any]:
        with self._lock:
            for payload in payloads:
                self._insert(payload)
        return {"success": True, "message": "Orders imported", "count": len(payloads)}

    def update_order(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        order_id = str(payload.get("id") or "")
        with self._lock:
            record = self._find(order_id)
            if record is None:
                raise RemoteServiceError("updateOrder", f"Order not found: {order_id}")
            for key, value in payload.items():
                if key not in _SERVER_OWNED_FIELDS:
                    record[key] = value
        return {"success": True, "message": "Order updated"}

    def delete_order(self, order_id: str) -> Dict[str, Any]:
        with self._lock:
            record = self._find(order_id)
            if record is None:
                raise RemoteServiceError("deleteOrder", f"Order not found: {order_id}")
            self._orders.remove(record)
        return {"success": True, "message": "Order deleted"}

    # =========================================================================
    # PRINT LOG
    # =========================================================================

    def append_print_log(self, entry: Dict[str, Any]) -> Dict[str, Any]:
        order_id = str(entry.get("orderId") or "")
        with self._lock:
            record = self._find(order_id)
            if record is None:
                raise RemoteServiceError("logPrintAction", f"Order not found: {order_id}")

            log = dict(entry)
            log["id"] = str(uuid.uuid4())
            log.setdefault("timestamp", datetime.now(timezone.utc).isoformat())
            self._logs.append(log)

            record["totalPrinted"] = int(record.get("totalPrinted") or 0) + 1
            if record.get("status") in (None, "", "New"):
                record["status"] = "Printing"
        return {"success": True}

    def list_print_history(self) -> List[Dict[str, Any]]:
        with self._lock:
            # Newest first, like the history sheet
            return deepcopy(list(reversed(self._logs)))

    # =========================================================================
    # HELPERS (caller holds the lock)
    # =========================================================================

    def _find(self, order_id: str) -> Optional[Dict[str, Any]]:
        for record in self._orders:
            if str(record.get("id")) == order_id:
                return record
        return None

    def _insert(self, payload: Dict[str, Any]) -> str:
        record = {k: v for k, v in payload.items() if k not in _SERVER_OWNED_FIELDS}
        record["id"] = str(uuid.uuid4())
        record["totalPrinted"] = 0
        record["status"] = "New"
        self._orders.append(record)
        return record["id"]
