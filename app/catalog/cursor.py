"""Opaque page cursors.

A cursor names the last record of the page that minted it by its sort-key value
and id, so continuation is a keyset comparison rather than a live store handle.
It also carries the sort order and a fingerprint of the filter it was minted
under; reusing it with a different sort or filter raises ``InvalidCursor``.

Wire form: unpadded URL-safe base64 of ``[sort, scope, key, id]`` as JSON.
"""

import base64
import binascii
import json
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel

from app.catalog.schemas import SortOrder, WebsiteFilter
from app.errors import InvalidCursor
from app.services.normalizer import to_datetime

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def sort_value(raw: Mapping[str, Any], sort: SortOrder) -> datetime | int:
    """Comparable sort key of a raw record, as the store orders it."""
    if sort is SortOrder.POPULAR:
        views = raw.get("views")
        return views if isinstance(views, int) and not isinstance(views, bool) else 0
    return to_datetime(raw.get("uploadedAt")) or _EPOCH


class PageCursor(BaseModel):
    sort: SortOrder
    scope: str
    key: str | int
    id: str

    model_config = {"frozen": True}

    @classmethod
    def after(cls, raw: Mapping[str, Any], sort: SortOrder, flt: WebsiteFilter) -> "PageCursor":
        """Cursor positioned after ``raw`` in the (sort, filter) ordering."""
        value = sort_value(raw, sort)
        key = value.astimezone(timezone.utc).isoformat() if isinstance(value, datetime) else value
        return cls(sort=sort, scope=flt.fingerprint(), key=key, id=str(raw["id"]))

    @property
    def key_value(self) -> datetime | int:
        """``key`` in the comparable form ``sort_value`` produces."""
        if self.sort is SortOrder.POPULAR:
            return int(self.key)
        return to_datetime(self.key) or _EPOCH

    def encode(self) -> str:
        payload = json.dumps([self.sort.value, self.scope, self.key, self.id], separators=(",", ":"))
        return base64.urlsafe_b64encode(payload.encode()).rstrip(b"=").decode()

    @classmethod
    def decode(cls, token: str, sort: SortOrder, flt: WebsiteFilter) -> "PageCursor":
        """Parse ``token`` and check it belongs to ``(sort, flt)``."""
        try:
            padded = token + "=" * (-len(token) % 4)
            sort_name, scope, key, record_id = json.loads(base64.urlsafe_b64decode(padded.encode()))
            cursor = cls(sort=SortOrder(sort_name), scope=scope, key=key, id=record_id)
        except (binascii.Error, UnicodeDecodeError, ValueError, TypeError) as e:
            raise InvalidCursor(f"Malformed cursor: {str(e)[:100]}") from e

        if cursor.sort is not sort:
            raise InvalidCursor(f"Cursor was issued for sort={cursor.sort.value}, not {sort.value}")
        if cursor.scope != flt.fingerprint():
            raise InvalidCursor("Cursor was issued for a different filter")
        if sort is SortOrder.POPULAR and not isinstance(cursor.key, int):
            raise InvalidCursor("Cursor key does not match sort order")
        if sort is SortOrder.LATEST and to_datetime(cursor.key) is None:
            raise InvalidCursor("Cursor key does not match sort order")
        return cursor
