"""API tests against the FastAPI app on the in-memory demo store."""

import pytest
from httpx import ASGITransport, AsyncClient

from app.main import RateLimiter, app


@pytest.fixture
async def client():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


class TestHealthEndpoint:
    @pytest.mark.asyncio
    async def test_health(self, client):
        resp = await client.get("/health")
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "ok"
        assert data["demo_mode"] is True
        assert data["store"] == "memory"


class TestWebsitesEndpoint:
    @pytest.mark.asyncio
    async def test_first_page(self, client):
        resp = await client.get("/api/websites")
        assert resp.status_code == 200
        data = resp.json()
        assert [w["id"] for w in data["items"]] == [
            "linear-app", "vercel-home", "stripe-press", "raycast", "arc-browser", "perplexity",
        ]
        assert data["hasMore"] is True
        assert data["nextCursor"]

    @pytest.mark.asyncio
    async def test_follow_cursor(self, client):
        first = (await client.get("/api/websites")).json()
        resp = await client.get("/api/websites", params={"cursor": first["nextCursor"]})
        data = resp.json()
        assert [w["id"] for w in data["items"]] == ["aesop", "framer-site", "notion-calendar", "untitled-draft"]
        assert data["hasMore"] is False
        assert data["nextCursor"] is None

    @pytest.mark.asyncio
    async def test_popular_with_limit(self, client):
        resp = await client.get("/api/websites", params={"sort": "popular", "limit": 3})
        data = resp.json()
        assert len(data["items"]) == 3
        views = [w["views"] for w in data["items"]]
        assert views == sorted(views, reverse=True)

    @pytest.mark.asyncio
    async def test_filter_params(self, client):
        resp = await client.get("/api/websites", params={"category": "AI", "framework": "next.js"})
        assert [w["id"] for w in resp.json()["items"]] == ["perplexity"]

    @pytest.mark.asyncio
    async def test_invalid_cursor(self, client):
        resp = await client.get("/api/websites", params={"cursor": "garbage"})
        assert resp.status_code == 400
        assert "error" in resp.json()

    @pytest.mark.asyncio
    async def test_cursor_for_other_sort(self, client):
        first = (await client.get("/api/websites")).json()
        resp = await client.get("/api/websites", params={"sort": "popular", "cursor": first["nextCursor"]})
        assert resp.status_code == 400

    @pytest.mark.asyncio
    @pytest.mark.parametrize("params", [{"limit": 0}, {"limit": 101}, {"sort": "oldest"}])
    async def test_invalid_params(self, client, params):
        resp = await client.get("/api/websites", params=params)
        assert resp.status_code == 422


class TestWebsiteDetail:
    @pytest.mark.asyncio
    async def test_normalized_detail(self, client):
        resp = await client.get("/api/websites/vercel-home")
        assert resp.status_code == 200
        data = resp.json()
        assert data["builtWith"] == ["Next.Js"]
        assert data["uploadedAt"] == "2025-03-03T11:06:40.000Z"
        assert data["videoUrl"] == "https://cdn.gridrr.com/videos/vercel.mp4"

    @pytest.mark.asyncio
    async def test_defaults(self, client):
        data = (await client.get("/api/websites/untitled-draft")).json()
        assert data["name"] == "Untitled"
        assert data["url"] == "#"
        assert data["videoUrl"] == ""
        assert data["views"] == 0

    @pytest.mark.asyncio
    async def test_delivery_url_passthrough(self, client):
        data = (await client.get("/api/websites/framer-site")).json()
        assert data["videoUrl"] == "https://cdn.gridrr.com/videos/framer.mp4"

    @pytest.mark.asyncio
    async def test_not_found(self, client):
        resp = await client.get("/api/websites/does-not-exist")
        assert resp.status_code == 404
        assert resp.json() == {"error": "Website not found"}

    @pytest.mark.asyncio
    async def test_adjacent(self, client):
        data = (await client.get("/api/websites/stripe-press/adjacent")).json()
        assert data["prev"]["id"] == "raycast"
        assert data["next"]["id"] == "vercel-home"

    @pytest.mark.asyncio
    async def test_adjacent_unknown(self, client):
        data = (await client.get("/api/websites/does-not-exist/adjacent")).json()
        assert data == {"prev": None, "next": None}


class TestViews:
    @pytest.mark.asyncio
    async def test_count_view(self, client):
        before = (await client.get("/api/websites/aesop")).json()["views"]
        resp = await client.post("/api/websites/aesop/views")
        assert resp.status_code == 202
        assert resp.json() == {"status": "accepted"}
        after = (await client.get("/api/websites/aesop")).json()["views"]
        assert after == before + 1

    @pytest.mark.asyncio
    async def test_unknown_id_still_accepted(self, client):
        resp = await client.post("/api/websites/does-not-exist/views")
        assert resp.status_code == 202

    def test_rate_limiter(self):
        limiter = RateLimiter(max_requests=2)
        assert limiter.is_limited("1.2.3.4") is False
        assert limiter.is_limited("1.2.3.4") is False
        assert limiter.is_limited("1.2.3.4") is True
        assert limiter.is_limited("5.6.7.8") is False

    def test_rate_limit_resets_after_window(self, clock):
        limiter = RateLimiter(max_requests=1, window_seconds=60, timer=clock)
        assert limiter.is_limited("1.2.3.4") is False
        assert limiter.is_limited("1.2.3.4") is True
        clock.advance(60)
        assert limiter.is_limited("1.2.3.4") is False

    def test_rate_limiter_forgets_idle_clients(self, clock):
        limiter = RateLimiter(max_requests=5, window_seconds=60, timer=clock)
        limiter.is_limited("1.2.3.4")
        limiter.is_limited("5.6.7.8")
        assert len(limiter) == 2
        clock.advance(61)
        limiter.is_limited("9.9.9.9")
        assert len(limiter) == 1


class TestBrowseEndpoints:
    @pytest.mark.asyncio
    async def test_category_slug(self, client):
        resp = await client.get("/api/categories/dark-mode/websites")
        assert resp.status_code == 200
        assert [w["id"] for w in resp.json()["items"]] == ["linear-app", "vercel-home", "raycast"]

    @pytest.mark.asyncio
    async def test_framework_slug(self, client):
        resp = await client.get("/api/frameworks/next-js/websites")
        assert [w["id"] for w in resp.json()["items"]] == ["linear-app", "vercel-home", "perplexity"]

    @pytest.mark.asyncio
    async def test_blank_slug(self, client):
        resp = await client.get("/api/categories/---/websites")
        assert resp.status_code == 400

    @pytest.mark.asyncio
    async def test_category_counts(self, client):
        data = (await client.get("/api/categories/counts")).json()
        counts = {c["name"]: c["count"] for c in data}
        assert counts["AI"] == 2
        assert counts["Dark Mode"] == 3
        assert counts["Legal"] == 0

    @pytest.mark.asyncio
    async def test_framework_counts(self, client):
        data = (await client.get("/api/frameworks/counts")).json()
        counts = {c["name"]: c["count"] for c in data}
        assert counts["React"] == 3
        assert counts["Next.Js"] == 3

    @pytest.mark.asyncio
    async def test_sections(self, client):
        data = (await client.get("/api/categories/sections")).json()
        assert data[0]["title"] == "Frameworks"
        assert all(item["count"] > 0 for section in data for item in section["items"])

    @pytest.mark.asyncio
    async def test_sitemap(self, client):
        data = (await client.get("/api/sitemap")).json()
        urls = [e["url"] for e in data]
        assert urls[0] == "https://gridrr.com"
        assert "https://gridrr.com/website/linear-app" in urls
        assert "https://gridrr.com/category/ui-ux" in urls
