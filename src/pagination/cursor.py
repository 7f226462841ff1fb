"""Opaque keyset cursors.

A cursor records the sort key ``(created_at, id)`` of the last record on a
page. Results are ordered by ``created_at DESC, id DESC``, so the next page
starts strictly after that key.
"""

import base64
import binascii
import json
from datetime import datetime
from typing import Any, Dict, Tuple

from src.exceptions import InvalidCursorError


def encode_cursor(created_at: datetime, record_id: str) -> str:
    """
    Encode a keyset position into an opaque cursor.

    Args:
        created_at: Creation timestamp of the last delivered record.
        record_id: Id of the last delivered record.

    Returns:
        URL-safe cursor string.
    """
    payload = json.dumps({"c": created_at.isoformat(), "id": str(record_id)}, separators=(",", ":"))
    return base64.urlsafe_b64encode(payload.encode("utf-8")).decode("ascii").rstrip("=")


def decode_cursor(cursor: str) -> Tuple[datetime, str]:
    """
    Decode a cursor produced by ``encode_cursor``.

    Raises:
        InvalidCursorError: If the cursor is malformed.
    """
    if not isinstance(cursor, str) or not cursor:
        raise InvalidCursorError("Cursor must be a non-empty string")

    padded = cursor + "=" * (-len(cursor) % 4)
    try:
        payload: Dict[str, Any] = json.loads(base64.urlsafe_b64decode(padded.encode("ascii")))
        created_at = datetime.fromisoformat(payload["c"])
        record_id = payload["id"]
    except (binascii.Error, UnicodeError, ValueError, KeyError, TypeError) as e:
        raise InvalidCursorError(f"Invalid cursor: {cursor!r}") from e

    if not isinstance(record_id, str) or not record_id:
        raise InvalidCursorError(f"Invalid cursor: {cursor!r}")
    return created_at, record_id


def cursor_for_record(record: Dict[str, Any]) -> str:
    """Build the cursor that resumes after ``record``."""
    created_at = record["created_at"]
    if isinstance(created_at, str):
        created_at = datetime.fromisoformat(created_at)
    return encode_cursor(created_at, record["id"])
