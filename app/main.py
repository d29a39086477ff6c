"""Gridrr catalog backend, FastAPI application entry point.

Serves the home feed, category/framework browsing and detail reads as JSON
for the front-end.
"""

import logging
import time
from collections.abc import Callable
from contextlib import asynccontextmanager

from fastapi import BackgroundTasks, FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.catalog.schemas import SortOrder, WebsiteFilter
from app.catalog.service import WebsiteService
from app.config import settings
from app.errors import InvalidCursor, WebsiteLookupFailed, WebsiteNotFound
from app.store import create_store
from app.utils.vocabulary import CATEGORIES, FRAMEWORKS, resolve_tag

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
)
logger = logging.getLogger("gridrr")


# ═══════════════ RATE LIMITER ═══════════════

class RateLimiter:
    """Fixed-window rate limiter by IP."""

    def __init__(self, max_requests: int, window_seconds: int = 60, timer: Callable[[], float] = time.monotonic):
        self.max_requests = max_requests
        self.window = window_seconds
        self.timer = timer
        self._hits: dict[str, list[float]] = {}

    def is_limited(self, ip: str) -> bool:
        now = self.timer()
        window_start = now - self.window
        # Drop IPs whose newest hit has left the window
        for stale_ip in [k for k, hits in self._hits.items() if hits[-1] <= window_start]:
            del self._hits[stale_ip]

        hits = [t for t in self._hits.get(ip, []) if t > window_start]
        if len(hits) >= self.max_requests:
            self._hits[ip] = hits
            return True
        hits.append(now)
        self._hits[ip] = hits
        return False

    def __len__(self) -> int:
        return len(self._hits)


rate_limiter = RateLimiter(settings.rate_limit_per_minute)
store = create_store()
catalog = WebsiteService(store)


# ═══════════════ LIFESPAN ═══════════════

@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Gridrr backend starting | demo_mode=%s | store=%s", settings.is_demo_mode, store.name)

    # Create tables (graceful degradation if the database is unavailable)
    init = getattr(store, "init", None)
    if init is not None:
        db_ok = await init()
        logger.info("Database: %s", "connected" if db_ok else "unavailable (reads will return empty results)")

    yield

    await store.close()
    logger.info("Gridrr backend shutting down")


# ═══════════════ APP ═══════════════

app = FastAPI(
    title="Gridrr API",
    description="Curated directory of website design examples",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type"],
)


def _client_ip(request: Request) -> str:
    client_ip = request.headers.get("x-forwarded-for", "").split(",")[0].strip()
    if not client_ip:
        client_ip = request.client.host if request.client else "unknown"
    return client_ip


async def _page_response(
    sort: SortOrder,
    flt: WebsiteFilter,
    cursor: str | None,
    limit: int | None,
) -> JSONResponse:
    try:
        page = await catalog.list_page(sort, flt, cursor, limit)
    except InvalidCursor as e:
        return JSONResponse(status_code=400, content={"error": str(e)})
    return JSONResponse(content=page.model_dump())


# ═══════════════ ENDPOINTS ═══════════════

@app.get("/health")
async def health():
    return {
        "status": "ok",
        "demo_mode": settings.is_demo_mode,
        "store": store.name,
    }


@app.get("/api/websites")
async def list_websites(
    sort: SortOrder = SortOrder.LATEST,
    category: str | None = None,
    framework: str | None = None,
    cursor: str | None = None,
    limit: int | None = Query(default=None, ge=1, le=settings.max_page_size),
):
    """Home feed: one page, optionally filtered by category and/or framework."""
    return await _page_response(sort, WebsiteFilter(category=category, framework=framework), cursor, limit)


@app.get("/api/websites/{website_id}")
async def get_website(website_id: str):
    try:
        entry = await catalog.get_by_id(website_id)
    except WebsiteNotFound:
        return JSONResponse(status_code=404, content={"error": "Website not found"})
    except WebsiteLookupFailed:
        return JSONResponse(status_code=503, content={"error": "Website could not be loaded. Please try again later."})
    return JSONResponse(content=entry.model_dump())


@app.get("/api/websites/{website_id}/adjacent")
async def get_adjacent_websites(website_id: str, sort: SortOrder = SortOrder.LATEST):
    adjacent = await catalog.get_adjacent(website_id, sort)
    return JSONResponse(content=adjacent.model_dump())


@app.post("/api/websites/{website_id}/views", status_code=202)
async def count_view(website_id: str, request: Request, background_tasks: BackgroundTasks):
    """Fire-and-forget view counter increment."""
    client_ip = _client_ip(request)
    if rate_limiter.is_limited(client_ip):
        return JSONResponse(status_code=429, content={"error": "Too many requests. Please wait a minute."})

    background_tasks.add_task(catalog.increment_views, website_id)
    return {"status": "accepted"}


@app.get("/api/categories/counts")
async def category_counts():
    counts = await catalog.category_counts()
    return JSONResponse(content=[c.model_dump() for c in counts])


@app.get("/api/frameworks/counts")
async def framework_counts():
    counts = await catalog.framework_counts()
    return JSONResponse(content=[c.model_dump() for c in counts])


@app.get("/api/categories/sections")
async def catalog_sections():
    sections = await catalog.catalog_sections()
    return JSONResponse(content=[s.model_dump() for s in sections])


@app.get("/api/categories/{slug}/websites")
async def category_websites(
    slug: str,
    sort: SortOrder = SortOrder.LATEST,
    cursor: str | None = None,
    limit: int | None = Query(default=None, ge=1, le=settings.max_page_size),
):
    category = resolve_tag(slug, CATEGORIES)
    if not category:
        return JSONResponse(status_code=400, content={"error": "Unknown category."})
    logger.info("Category browse | slug=%s | category=%s", slug, category)
    return await _page_response(sort, WebsiteFilter(category=category), cursor, limit)


@app.get("/api/frameworks/{slug}/websites")
async def framework_websites(
    slug: str,
    sort: SortOrder = SortOrder.LATEST,
    cursor: str | None = None,
    limit: int | None = Query(default=None, ge=1, le=settings.max_page_size),
):
    framework = resolve_tag(slug, FRAMEWORKS)
    if not framework:
        return JSONResponse(status_code=400, content={"error": "Unknown framework."})
    logger.info("Framework browse | slug=%s | framework=%s", slug, framework)
    return await _page_response(sort, WebsiteFilter(framework=framework), cursor, limit)


@app.get("/api/sitemap")
async def sitemap():
    entries = await catalog.sitemap_entries()
    return JSONResponse(content=[e.model_dump() for e in entries])
