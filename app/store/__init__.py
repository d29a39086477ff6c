"""Document store adapters.

PostgreSQL when DATABASE_URL is set; otherwise the in-memory store seeded with
demo records.
"""

import logging

from app.config import settings
from app.store.base import RawRecord, StoreQuery, WebsiteStore
from app.store.memory import MemoryWebsiteStore

logger = logging.getLogger(__name__)

__all__ = ["RawRecord", "StoreQuery", "WebsiteStore", "MemoryWebsiteStore", "create_store"]


def create_store(database_url: str | None = None) -> WebsiteStore:
    url = settings.database_url if database_url is None else database_url
    if not url:
        from app.catalog.demo_data import get_demo_records

        logger.info("No DATABASE_URL | using in-memory demo store")
        return MemoryWebsiteStore(get_demo_records())

    from app.store.sql import SqlWebsiteStore

    return SqlWebsiteStore(url)
