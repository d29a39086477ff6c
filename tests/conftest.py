"""Shared test fixtures and configuration."""

import os
from datetime import datetime, timezone

import pytest

# Run against the in-memory demo store (no real database)
os.environ["DATABASE_URL"] = ""

from app.catalog.service import WebsiteService  # noqa: E402
from app.services.cache import ResultCache  # noqa: E402
from app.services.cdn import CdnResolver  # noqa: E402
from app.store.memory import MemoryWebsiteStore  # noqa: E402


class FakeClock:
    """Monotonic timer the tests can move forward."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def _video(name: str) -> str:
    return f"https://firebasestorage.googleapis.com/v0/b/demo.appspot.com/o/videos%2F{name}.mp4?alt=media"


def make_record(website_id: str, uploaded_at, views: int, categories, built_with) -> dict:
    return {
        "id": website_id,
        "name": website_id.title(),
        "videoUrl": _video(website_id),
        "url": f"https://{website_id}.example.com",
        "builtWith": built_with,
        "categories": categories,
        "uploadedAt": uploaded_at,
        "views": views,
    }


@pytest.fixture
def sample_records():
    """Seven records, newest first; mixed timestamp and builtWith shapes.

    Latest order:  alpha bravo charlie delta echo foxtrot golf
    Popular order: golf delta bravo charlie alpha echo foxtrot
    (delta and bravo tie on views; id descending puts delta first)
    """
    return [
        make_record("alpha", datetime(2025, 1, 7, tzinfo=timezone.utc), 10, ["SaaS", "AI"], "React"),
        make_record("bravo", datetime(2025, 1, 6, tzinfo=timezone.utc), 50, ["ai "], ["React", "Vue"]),
        make_record("charlie", datetime(2025, 1, 5, tzinfo=timezone.utc), 30, ["Fashion"], "Vue"),
        make_record("delta", datetime(2025, 1, 4, tzinfo=timezone.utc), 50, ["Dark Mode"], None),
        make_record("echo", {"seconds": 1735862400, "nanoseconds": 0}, 5, ["fashion", "Minimal"], ["Next.Js"]),
        make_record("foxtrot", "2025-01-02T00:00:00Z", 0, [], "react"),
        make_record("golf", datetime(2025, 1, 1, tzinfo=timezone.utc), 70, ["AI"], ["Svelte"]),
    ]


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(sample_records):
    return MemoryWebsiteStore(sample_records)


@pytest.fixture
def service(store, clock):
    return WebsiteService(
        store,
        cache=ResultCache(ttl=60, maxsize=128, timer=clock),
        resolver=CdnResolver(host="cdn.gridrr.com"),
    )
