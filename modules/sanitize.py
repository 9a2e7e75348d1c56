"""Text cleanup for user-entered order fields."""

import html
from typing import Any, Optional

import bleach


def sanitize_text(text: Any, max_length: Optional[int] = None) -> str:
    """
    Strip whitespace and any markup from a user-supplied value.

    The result is stored as plain text and printed on tickets, so the
    entities bleach escapes ("&amp;", "&lt;") are turned back into the
    characters the user typed.
    """
    if text is None:
        return ""
    text = str(text).strip()
    if not text:
        return ""
    text = html.unescape(bleach.clean(text, tags=[], strip=True)).strip()
    if max_length and len(text) > max_length:
        text = text[:max_length]
    return text
