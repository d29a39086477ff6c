"""Document store contract for the ``websites`` collection.

The query service sees the store only through this interface: an ordered,
filtered, keyset-paginated read, a single-record fetch and a view-counter
increment. Adapters raise ``StoreUnavailable`` for any transport or database
failure; an empty result is not a failure.

Raw records are plain dicts keyed by the stored field names
(``id``, ``name``, ``videoUrl``, ``url``, ``builtWith``, ``categories``,
``uploadedAt``, ``views``) with values in store-native form.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any

from pydantic import BaseModel

from app.catalog.cursor import PageCursor
from app.catalog.schemas import SortOrder

RawRecord = dict[str, Any]


class StoreQuery(BaseModel):
    sort: SortOrder = SortOrder.LATEST
    category: str | None = None
    framework: str | None = None
    after: PageCursor | None = None
    limit: int = 7

    @property
    def order_by(self) -> str:
        return self.sort.field


class WebsiteStore(ABC):
    """Read/update access to stored website records."""

    name = "abstract"

    @abstractmethod
    async def query(self, q: StoreQuery) -> list[RawRecord]:
        """Records ordered by ``q.sort`` descending (id descending on ties)."""

    @abstractmethod
    async def get_one(self, website_id: str) -> RawRecord | None:
        """The record for ``website_id``, or None if absent."""

    @abstractmethod
    async def increment_views(self, website_id: str, viewed_at: datetime) -> None:
        """Add 1 to ``views`` and set ``lastViewed``."""

    async def close(self) -> None:
        return None
