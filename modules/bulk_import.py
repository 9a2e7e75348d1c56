"""
Bulk import of orders pasted from a spreadsheet.

Rows are separated by newlines and columns by tabs, in this order:

    code | productName | customer | colors | colorNames | printer | shelf | dateInput

Only the first three columns are required; rows with fewer are skipped.
The result is a list of raw order records (remote field names). Cleanup and
color count clamping happen when OrderService turns them into payloads.
"""

from datetime import date
from typing import Dict, Any, List, Optional

from logging_config import get_logger
from models.order import OrderKind


# Module logger
logger = get_logger(__name__)

IMPORT_COLUMNS = (
    "code",
    "productName",
    "customer",
    "colors",
    "colorNames",
    "printer",
    "shelf",
    "dateInput",
)
MIN_IMPORT_COLUMNS = 3


def parse_import_text(
    text: str,
    kind: OrderKind,
    default_printer: str,
    today: Optional[date] = None,
) -> List[Dict[str, Any]]:
    """
    Parse tab-delimited rows into order records for ``kind``.

    Args:
        text: Pasted rows
        kind: Module the rows are imported into
        default_printer: Printer used when the printer column is empty
        today: Intake date used when the date column is empty

    Returns:
        One record per usable row, input order preserved
    """
    if not text or not text.strip():
        return []

    today = today or date.today()
    records = []

    for line_number, row in enumerate(text.strip().split("\n"), start=1):
        cols = row.rstrip("\r").split("\t")
        if len(cols) < MIN_IMPORT_COLUMNS:
            logger.debug(f"Skipping import line {line_number}: {len(cols)} columns")
            continue

        values = dict(zip(IMPORT_COLUMNS, cols))
        records.append({
            "type": kind.value,
            "code": values.get("code", ""),
            "productName": values.get("productName", ""),
            "customer": values.get("customer", ""),
            "colors": values.get("colors") or 1,
            "colorNames": values.get("colorNames", ""),
            "printer": values.get("printer") or default_printer,
            "shelf": values.get("shelf", ""),
            "dateInput": values.get("dateInput") or today.isoformat(),
        })

    logger.info(f"Parsed {len(records)} {kind.value} order(s) from import text")
    return records
