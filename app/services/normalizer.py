"""Read-model normalization for raw website records.

The store hands back records whose fields are not uniform: timestamps arrive as
``datetime`` objects, Firestore-style ``{"seconds", "nanoseconds"}`` wrappers or
ISO strings, and ``builtWith`` is sometimes a bare string and sometimes a list.
Everything in this module is pure; inputs are never mutated.
"""

import logging
from collections.abc import Callable, Mapping
from datetime import date, datetime, timezone
from typing import Any

from app.catalog.schemas import WebsiteEntry

logger = logging.getLogger(__name__)

_MAX_UNWRAP_DEPTH = 5
_SECONDS_KEYS = (
    frozenset({"seconds", "nanoseconds"}),
    frozenset({"_seconds", "_nanoseconds"}),
)


def format_iso(dt: datetime) -> str:
    """Render as UTC with millisecond precision and a ``Z`` suffix."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def now_iso() -> str:
    return format_iso(datetime.now(timezone.utc))


def is_store_timestamp(value: Any) -> bool:
    """True for values that represent a point in time in store-native form."""
    if isinstance(value, (datetime, date)):
        return True
    if isinstance(value, Mapping):
        keys = frozenset(value.keys())
        return any(keys <= allowed and ("seconds" in keys or "_seconds" in keys) for allowed in _SECONDS_KEYS)
    if isinstance(value, (str, bytes, int, float, list, tuple)) or value is None:
        return False
    return (
        callable(getattr(value, "to_datetime", None))
        or callable(getattr(value, "ToDatetime", None))
        or isinstance(getattr(value, "seconds", None), (int, float))
    )


def to_datetime(value: Any, _depth: int = 0) -> datetime | None:
    """Unwrap a timestamp-like value into an aware ``datetime``, or None."""
    if value is None or _depth > _MAX_UNWRAP_DEPTH:
        return None
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            return None
        return to_datetime(parsed, _depth + 1)

    for method_name in ("to_datetime", "ToDatetime"):
        method = getattr(value, method_name, None)
        if callable(method):
            return to_datetime(method(), _depth + 1)

    if isinstance(value, Mapping):
        seconds = value.get("seconds", value.get("_seconds"))
        nanos = value.get("nanoseconds", value.get("_nanoseconds", 0))
    else:
        seconds = getattr(value, "seconds", None)
        nanos = getattr(value, "nanoseconds", getattr(value, "nanos", 0))

    if isinstance(seconds, bool) or not isinstance(seconds, (int, float)):
        return None
    try:
        return datetime.fromtimestamp(seconds + (nanos or 0) / 1e9, tz=timezone.utc)
    except (OverflowError, OSError, ValueError, TypeError):
        return None


def normalize_timestamp(value: Any) -> str:
    """Convert a store timestamp, date or ISO string to an ISO-8601 string.

    Absent or unrecognized values yield the current time.
    """
    dt = to_datetime(value)
    if dt is None:
        if value not in (None, ""):
            logger.debug("Unrecognized timestamp, using now | value=%r", value)
        return now_iso()
    return format_iso(dt)


def normalize_record(raw: Any) -> Any:
    """Return a copy of ``raw`` with every timestamp leaf replaced by its ISO string."""
    if is_store_timestamp(raw):
        return normalize_timestamp(raw)
    if isinstance(raw, Mapping):
        return {key: normalize_record(value) for key, value in raw.items()}
    if isinstance(raw, (list, tuple)):
        return [normalize_record(item) for item in raw]
    return raw


def normalize_tag(value: str | None) -> str:
    """Comparison form of a tag. Never use the result for display."""
    return (value or "").strip().lower()


def as_list(value: Any) -> list[str]:
    """Coerce a scalar-or-list tag field into a list of non-blank strings."""
    if value is None:
        return []
    if isinstance(value, str):
        return [value] if value.strip() else []
    if isinstance(value, (list, tuple)):
        return [item for item in value if isinstance(item, str) and item.strip()]
    return []


def _as_views(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    try:
        views = int(value or 0)
    except (TypeError, ValueError):
        return 0
    return max(views, 0)


def to_entry(raw: Mapping[str, Any], resolve_media: Callable[[str], str]) -> WebsiteEntry:
    """Build the read model for one raw store record."""
    data = normalize_record(raw)
    name = data.get("name")
    return WebsiteEntry(
        id=str(data.get("id", "")),
        name=str(name) if name else "Untitled",
        videoUrl=resolve_media(data.get("videoUrl") or ""),
        url=data.get("url") or "#",
        builtWith=as_list(data.get("builtWith")),
        categories=as_list(data.get("categories")),
        uploadedAt=normalize_timestamp(data.get("uploadedAt")),
        views=_as_views(data.get("views")),
    )
