"""Pydantic models for the catalog read model and API responses.

Field names follow the front-end's camelCase contract.
"""

from __future__ import annotations

import hashlib
import json
from enum import Enum

from pydantic import BaseModel, Field, field_validator


class SortOrder(str, Enum):
    LATEST = "latest"
    POPULAR = "popular"

    @property
    def field(self) -> str:
        """Store field the order is applied to."""
        return "views" if self is SortOrder.POPULAR else "uploadedAt"


class WebsiteFilter(BaseModel):
    """Optional store-side filters for a page read. Blank values mean no filter."""
    category: str | None = None
    framework: str | None = None

    @field_validator("category", "framework")
    @classmethod
    def _blank_to_none(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.strip() or None

    def fingerprint(self) -> str:
        """Case-insensitive, delimiter-free digest of the filter values."""
        normalized = json.dumps([(self.category or "").lower(), (self.framework or "").lower()], ensure_ascii=False)
        return hashlib.sha256(normalized.encode()).hexdigest()[:16]


# ═══════════════ READ MODEL ═══════════════

class WebsiteEntry(BaseModel):
    """One showcased website, normalized."""
    id: str
    name: str = "Untitled"
    videoUrl: str = ""
    url: str = "#"
    builtWith: list[str] = Field(default_factory=list)
    categories: list[str] = Field(default_factory=list)
    uploadedAt: str = ""
    views: int = 0


class WebsitePage(BaseModel):
    items: list[WebsiteEntry] = Field(default_factory=list)
    nextCursor: str | None = None
    hasMore: bool = False


class AdjacentWebsites(BaseModel):
    prev: WebsiteEntry | None = None
    next: WebsiteEntry | None = None


class CategoryCount(BaseModel):
    name: str
    count: int = 0


class CatalogSection(BaseModel):
    """Browse-page group: only tags with at least one sampled website."""
    title: str
    items: list[CategoryCount] = Field(default_factory=list)


class SitemapEntry(BaseModel):
    url: str
    lastModified: str
    changeFrequency: str = "weekly"
    priority: float = 0.5
