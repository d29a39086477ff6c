"""PostgreSQL ``WebsiteStore`` on SQLAlchemy async.

Tag filters run store-side against JSONB columns and compare
``lower(btrim(tag))``, so ``"AI "`` and ``"ai"`` both match ``AI``.
``built_with`` may be a JSON string or a JSON array; both are matched.
"""

import logging
import time
from datetime import datetime

from sqlalchemy import Select, case, func, select, tuple_, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from app.catalog.schemas import SortOrder
from app.config import settings
from app.database import close_db, create_engine, create_session_factory, init_db
from app.errors import StoreUnavailable, WebsiteNotFound
from app.models.website import Website
from app.services.normalizer import normalize_tag
from app.store.base import RawRecord, StoreQuery, WebsiteStore

logger = logging.getLogger(__name__)

_DB_ERRORS = (SQLAlchemyError, OSError, TimeoutError)


def tag_match(column, value: str):
    """EXISTS clause: some element of ``column`` equals ``value`` after normalization."""
    as_array = case(
        (func.jsonb_typeof(column) == "array", column),
        (func.jsonb_typeof(column) == "string", func.jsonb_build_array(column)),
        else_=func.jsonb_build_array(),
    )
    tags = func.jsonb_array_elements_text(as_array).table_valued("value").alias("tag")
    return select(1).select_from(tags).where(func.lower(func.btrim(tags.c.value)) == normalize_tag(value)).exists()


def build_query(q: StoreQuery) -> Select:
    """Translate a ``StoreQuery`` into an ordered keyset SELECT."""
    sort_col = Website.views if q.sort is SortOrder.POPULAR else Website.uploaded_at
    stmt = select(Website)

    if q.category:
        stmt = stmt.where(tag_match(Website.categories, q.category))
    if q.framework:
        stmt = stmt.where(tag_match(Website.built_with, q.framework))
    if q.after is not None:
        stmt = stmt.where(tuple_(sort_col, Website.id) < tuple_(q.after.key_value, q.after.id))

    return stmt.order_by(sort_col.desc(), Website.id.desc()).limit(q.limit)


class SqlWebsiteStore(WebsiteStore):
    """Async PostgreSQL store. Create tables with ``init()`` on startup."""

    name = "postgres"

    def __init__(self, database_url: str | None = None, engine: AsyncEngine | None = None):
        self.engine = engine or create_engine(database_url or settings.database_url)
        self.session_factory = create_session_factory(self.engine)

    async def init(self) -> bool:
        return await init_db(self.engine)

    async def query(self, q: StoreQuery) -> list[RawRecord]:
        start = time.monotonic()
        try:
            async with self.session_factory() as session:
                result = await session.scalars(build_query(q))
                rows = [website.to_record() for website in result]
        except _DB_ERRORS as e:
            elapsed_ms = int((time.monotonic() - start) * 1000)
            logger.error("Store query error | sort=%s | %dms | %s", q.sort.value, elapsed_ms, str(e)[:200])
            raise StoreUnavailable(str(e)[:200]) from e

        elapsed_ms = int((time.monotonic() - start) * 1000)
        logger.info(
            "Store query OK | sort=%s | category=%s | framework=%s | rows=%d | %dms",
            q.sort.value, q.category, q.framework, len(rows), elapsed_ms,
        )
        return rows

    async def get_one(self, website_id: str) -> RawRecord | None:
        try:
            async with self.session_factory() as session:
                website = await session.get(Website, website_id)
        except _DB_ERRORS as e:
            logger.error("Store get error | id=%s | %s", website_id, str(e)[:200])
            raise StoreUnavailable(str(e)[:200]) from e
        return website.to_record() if website is not None else None

    async def increment_views(self, website_id: str, viewed_at: datetime) -> None:
        stmt = (
            update(Website)
            .where(Website.id == website_id)
            .values(views=Website.views + 1, last_viewed=viewed_at)
        )
        try:
            async with self.session_factory() as session:
                result = await session.execute(stmt)
                await session.commit()
        except _DB_ERRORS as e:
            raise StoreUnavailable(str(e)[:200]) from e
        if result.rowcount == 0:
            raise WebsiteNotFound(website_id)

    async def close(self) -> None:
        await close_db(self.engine)
