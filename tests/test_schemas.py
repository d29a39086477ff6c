"""Tests for catalog Pydantic schemas."""

from app.catalog.schemas import (
    AdjacentWebsites,
    CategoryCount,
    SitemapEntry,
    SortOrder,
    WebsiteEntry,
    WebsiteFilter,
    WebsitePage,
)


class TestSortOrder:
    def test_values(self):
        assert SortOrder("latest") is SortOrder.LATEST
        assert SortOrder("popular") is SortOrder.POPULAR

    def test_field(self):
        assert SortOrder.LATEST.field == "uploadedAt"
        assert SortOrder.POPULAR.field == "views"


class TestWebsiteFilter:
    def test_blank_means_no_filter(self):
        flt = WebsiteFilter(category="   ", framework="")
        assert flt.category is None
        assert flt.framework is None

    def test_values_trimmed(self):
        assert WebsiteFilter(category=" AI ").category == "AI"

    def test_fingerprint_case_insensitive(self):
        assert WebsiteFilter(category="AI").fingerprint() == WebsiteFilter(category=" ai").fingerprint()

    def test_fingerprint_distinguishes_fields(self):
        assert WebsiteFilter(category="React").fingerprint() != WebsiteFilter(framework="React").fingerprint()


class TestReadModel:
    def test_entry_defaults(self):
        entry = WebsiteEntry(id="x")
        assert entry.name == "Untitled"
        assert entry.url == "#"
        assert entry.builtWith == []
        assert entry.views == 0

    def test_entry_camel_case_keys(self):
        data = WebsiteEntry(id="x").model_dump()
        assert set(data) == {"id", "name", "videoUrl", "url", "builtWith", "categories", "uploadedAt", "views"}

    def test_empty_page(self):
        page = WebsitePage()
        assert page.model_dump() == {"items": [], "nextCursor": None, "hasMore": False}

    def test_adjacent_defaults(self):
        assert AdjacentWebsites().model_dump() == {"prev": None, "next": None}

    def test_category_count(self):
        assert CategoryCount(name="AI").count == 0

    def test_sitemap_entry_defaults(self):
        entry = SitemapEntry(url="https://gridrr.com", lastModified="2025-01-01T00:00:00.000Z")
        assert entry.changeFrequency == "weekly"
        assert entry.priority == 0.5
