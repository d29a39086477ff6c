"""Catalog query service: the data-access layer behind every read.

Responsibilities:
  - Build ordered, filtered, cursor-paginated store queries
  - Check the result cache before hitting the store, fill it after
  - Normalize raw records and resolve CDN URLs on the way out
  - Degrade to empty results when the store is unavailable
  - Count canonical tags over a bounded sample of recent records
"""

import logging
from collections.abc import Iterable, Mapping
from datetime import datetime, timezone
from typing import Any
from urllib.parse import quote

from app.catalog.cursor import PageCursor
from app.catalog.schemas import (
    AdjacentWebsites,
    CatalogSection,
    CategoryCount,
    SitemapEntry,
    SortOrder,
    WebsiteEntry,
    WebsiteFilter,
    WebsitePage,
)
from app.config import settings
from app.errors import StoreUnavailable, WebsiteLookupFailed, WebsiteNotFound
from app.services.cache import CacheKey, ResultCache
from app.services.cdn import CdnResolver
from app.services.normalizer import as_list, normalize_tag, normalize_timestamp, now_iso, to_entry
from app.store.base import StoreQuery, WebsiteStore
from app.utils.vocabulary import CATEGORIES, FRAMEWORKS, SECTIONS, tag_slug

logger = logging.getLogger(__name__)


class WebsiteService:
    """Read/paginate/count operations over the ``websites`` collection."""

    def __init__(
        self,
        store: WebsiteStore,
        cache: ResultCache | None = None,
        resolver: CdnResolver | None = None,
    ):
        self.store = store
        self.cache = cache or ResultCache(ttl=settings.cache_ttl_seconds, maxsize=settings.cache_max_entries)
        self.resolver = resolver or CdnResolver()

    # ═══════════════ PAGES ═══════════════

    async def list_page(
        self,
        sort: SortOrder = SortOrder.LATEST,
        flt: WebsiteFilter | None = None,
        cursor: str | None = None,
        page_size: int | None = None,
    ) -> WebsitePage:
        """One page of websites plus the cursor for the next one.

        Raises ``InvalidCursor`` if ``cursor`` was minted for another sort or
        filter. Store failures yield an empty page.
        """
        flt = flt or WebsiteFilter()
        if page_size is None:
            page_size = settings.default_page_size
        if page_size < 1:
            raise ValueError(f"page_size must be >= 1, got {page_size}")

        after = PageCursor.decode(cursor, sort, flt) if cursor else None
        key = CacheKey(
            operation="list_page",
            sort=sort.value,
            category=normalize_tag(flt.category) or None,
            framework=normalize_tag(flt.framework) or None,
            cursor=cursor,
            page_size=page_size,
        )
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        query = StoreQuery(
            sort=sort,
            category=flt.category,
            framework=flt.framework,
            after=after,
            limit=page_size + 1,
        )
        try:
            records = await self.store.query(query)
        except StoreUnavailable as e:
            logger.error(
                "list_page failed | sort=%s | category=%s | framework=%s | %s",
                sort.value, flt.category, flt.framework, str(e)[:200],
            )
            return WebsitePage()

        has_more = len(records) > page_size
        records = records[:page_size]
        page = WebsitePage(
            items=[to_entry(record, self.resolver) for record in records],
            nextCursor=PageCursor.after(records[-1], sort, flt).encode() if has_more else None,
            hasMore=has_more,
        )
        self.cache.set(key, page)
        logger.info(
            "Page served | sort=%s | category=%s | framework=%s | items=%d | has_more=%s",
            sort.value, flt.category, flt.framework, len(page.items), has_more,
        )
        return page

    async def list_by_category(
        self,
        category: str,
        sort: SortOrder = SortOrder.LATEST,
        cursor: str | None = None,
        page_size: int | None = None,
    ) -> WebsitePage:
        return await self.list_page(sort, WebsiteFilter(category=category), cursor, page_size)

    async def list_by_framework(
        self,
        framework: str,
        sort: SortOrder = SortOrder.LATEST,
        cursor: str | None = None,
        page_size: int | None = None,
    ) -> WebsitePage:
        return await self.list_page(sort, WebsiteFilter(framework=framework), cursor, page_size)

    # ═══════════════ DETAIL ═══════════════

    async def get_by_id(self, website_id: str) -> WebsiteEntry:
        """Raises ``WebsiteNotFound`` or ``WebsiteLookupFailed``."""
        try:
            record = await self.store.get_one(website_id)
        except StoreUnavailable as e:
            logger.error("get_by_id failed | id=%s | %s", website_id, str(e)[:200])
            raise WebsiteLookupFailed(str(e)) from e

        if record is None:
            raise WebsiteNotFound(website_id)
        return to_entry({"id": website_id, **record}, self.resolver)

    async def get_adjacent(self, website_id: str, sort: SortOrder = SortOrder.LATEST) -> AdjacentWebsites:
        """Neighbours of ``website_id`` within the first window of ``sort``.

        ``prev`` is the older / less popular neighbour, ``next`` the newer /
        more popular one.
        """
        page = await self.list_page(sort, page_size=settings.adjacent_window)
        items = page.items
        index = next((i for i, item in enumerate(items) if item.id == website_id), None)
        if index is None:
            return AdjacentWebsites()
        return AdjacentWebsites(
            prev=items[index + 1] if index + 1 < len(items) else None,
            next=items[index - 1] if index > 0 else None,
        )

    async def increment_views(self, website_id: str) -> None:
        """Best-effort view counter bump; never raises."""
        try:
            await self.store.increment_views(website_id, datetime.now(timezone.utc))
            logger.debug("View counted | id=%s", website_id)
        except Exception as e:
            logger.warning("View increment failed | id=%s | %s", website_id, str(e)[:200])

    # ═══════════════ COUNTS ═══════════════

    async def category_counts(self) -> list[CategoryCount]:
        return await self._tag_counts("category_counts", CATEGORIES, "categories")

    async def framework_counts(self) -> list[CategoryCount]:
        return await self._tag_counts("framework_counts", FRAMEWORKS, "builtWith")

    async def _tag_counts(self, operation: str, vocabulary: list[str], field: str) -> list[CategoryCount]:
        sample_size = settings.counts_sample_size
        key = CacheKey(operation=operation, page_size=sample_size)
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        try:
            records = await self.store.query(StoreQuery(sort=SortOrder.LATEST, limit=sample_size))
        except StoreUnavailable as e:
            logger.error("%s failed | %s", operation, str(e)[:200])
            return []

        counts = count_tags(records, vocabulary, field)
        self.cache.set(key, counts)
        logger.info("Tag counts | op=%s | sampled=%d | non_zero=%d", operation, len(records), sum(1 for c in counts if c.count))
        return counts

    async def catalog_sections(self) -> list[CatalogSection]:
        """Browse sections with the tags that have at least one sampled website."""
        by_kind = {
            "category": {c.name: c.count for c in await self.category_counts()},
            "framework": {c.name: c.count for c in await self.framework_counts()},
        }
        sections = []
        for title, kind, names in SECTIONS:
            counts = by_kind[kind]
            items = [CategoryCount(name=name, count=counts[name]) for name in names if counts.get(name, 0) > 0]
            items.sort(key=lambda c: (-c.count, c.name.casefold()))
            if items:
                sections.append(CatalogSection(title=title, items=items))
        return sections

    # ═══════════════ SITEMAP ═══════════════

    async def sitemap_entries(self) -> list[SitemapEntry]:
        base_url = settings.site_url.rstrip("/")
        now = now_iso()
        entries = [SitemapEntry(url=base_url, lastModified=now, changeFrequency="daily", priority=1.0)]

        try:
            records = await self.store.query(StoreQuery(sort=SortOrder.LATEST, limit=settings.sitemap_max_entries))
        except StoreUnavailable as e:
            logger.error("Sitemap website listing failed | %s", str(e)[:200])
            records = []

        entries.extend(
            SitemapEntry(
                url=f"{base_url}/website/{quote(str(record['id']), safe='')}",
                lastModified=normalize_timestamp(record.get("uploadedAt")),
                changeFrequency="weekly",
                priority=0.6,
            )
            for record in records
        )
        entries.extend(
            SitemapEntry(url=f"{base_url}/category/{tag_slug(name)}", lastModified=now, priority=0.8)
            for name in CATEGORIES
        )
        entries.extend(
            SitemapEntry(url=f"{base_url}/framework/{tag_slug(name)}", lastModified=now, priority=0.7)
            for name in FRAMEWORKS
        )
        return entries


def count_tags(records: Iterable[Mapping[str, Any]], vocabulary: list[str], field: str) -> list[CategoryCount]:
    """Per canonical tag, the number of records whose ``field`` carries it.

    Matching is trim/case-insensitive; a record counts once per tag. Every
    vocabulary entry is returned, zero counts included, sorted by name.
    """
    canonical: dict[str, str] = {}
    for name in vocabulary:
        canonical.setdefault(normalize_tag(name), name)
    counts = {name: 0 for name in canonical.values()}

    for record in records:
        matched = {canonical[tag] for tag in map(normalize_tag, as_list(record.get(field))) if tag in canonical}
        for name in matched:
            counts[name] += 1

    return sorted(
        (CategoryCount(name=name, count=count) for name, count in counts.items()),
        key=lambda c: (c.name.casefold(), c.name),
    )
