"""In-process ``WebsiteStore`` used for demo mode and tests."""

import copy
from datetime import datetime

from app.catalog.cursor import sort_value
from app.errors import StoreUnavailable, WebsiteNotFound
from app.services.normalizer import as_list, normalize_tag
from app.store.base import RawRecord, StoreQuery, WebsiteStore


class MemoryWebsiteStore(WebsiteStore):
    """Holds raw records in a dict and answers queries with store semantics.

    ``calls`` counts every store round-trip; setting ``fail`` makes each call
    raise ``StoreUnavailable``.
    """

    name = "memory"

    def __init__(self, records: list[RawRecord] | None = None):
        self._records: dict[str, RawRecord] = {}
        self.calls = 0
        self.fail = False
        for record in records or []:
            self.add(record)

    def add(self, record: RawRecord) -> None:
        self._records[str(record["id"])] = copy.deepcopy(record)

    def _round_trip(self) -> None:
        self.calls += 1
        if self.fail:
            raise StoreUnavailable("memory store is set to fail")

    async def query(self, q: StoreQuery) -> list[RawRecord]:
        self._round_trip()
        rows = list(self._records.values())

        if q.category:
            wanted = normalize_tag(q.category)
            rows = [r for r in rows if any(normalize_tag(c) == wanted for c in as_list(r.get("categories")))]
        if q.framework:
            wanted = normalize_tag(q.framework)
            rows = [r for r in rows if any(normalize_tag(f) == wanted for f in as_list(r.get("builtWith")))]

        def key(r: RawRecord):
            return (sort_value(r, q.sort), str(r["id"]))

        rows.sort(key=key, reverse=True)
        if q.after is not None:
            boundary = (q.after.key_value, q.after.id)
            rows = [r for r in rows if key(r) < boundary]

        return [copy.deepcopy(r) for r in rows[: q.limit]]

    async def get_one(self, website_id: str) -> RawRecord | None:
        self._round_trip()
        record = self._records.get(website_id)
        return copy.deepcopy(record) if record is not None else None

    async def increment_views(self, website_id: str, viewed_at: datetime) -> None:
        self._round_trip()
        record = self._records.get(website_id)
        if record is None:
            raise WebsiteNotFound(website_id)
        views = record.get("views")
        record["views"] = (views if isinstance(views, int) else 0) + 1
        record["lastViewed"] = viewed_at
