#!/usr/bin/env python3
"""Store and API verification script — run against a real database.

Usage:
  1. Set DATABASE_URL in .env (leave empty to check the demo store)
  2. Run: python scripts/verify_store.py [--api http://localhost:8000]

Steps:
  Step 1: Verify .env configuration
  Step 2: Fetch the first page (latest and popular)
  Step 3: Follow the cursor to page two
  Step 4: Fetch one website by id
  Step 5: Compute category counts
  Step 6: Probe a running API (only with --api)
"""

import argparse
import asyncio
import os
import sys

import httpx

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


def step_header(n: int, title: str) -> None:
    print(f"\n{'='*60}")
    print(f"  Step {n}: {title}")
    print(f"{'='*60}\n")


def ok(msg: str) -> None:
    print(f"  ✅ {msg}")


def fail(msg: str) -> None:
    print(f"  ❌ {msg}")


def info(msg: str) -> None:
    print(f"  ℹ️  {msg}")


async def step1_verify_env():
    step_header(1, "Verify .env Configuration")
    from app.config import settings

    if settings.database_url:
        ok(f"DATABASE_URL: set ({settings.database_url.split('@')[-1]})")
    else:
        info("DATABASE_URL: not set — checking the in-memory demo store")

    ok(f"CDN host: {settings.cdn_host}")
    ok(f"Cache TTL: {settings.cache_ttl_seconds}s (max {settings.cache_max_entries} entries)")
    ok(f"Demo mode: {settings.is_demo_mode}")
    return True


async def step2_first_page(catalog):
    step_header(2, "First Page")
    from app.catalog.schemas import SortOrder

    passed = True
    for sort in SortOrder:
        page = await catalog.list_page(sort)
        if page.items:
            ok(f"{sort.value}: {len(page.items)} items | has_more={page.hasMore}")
            for item in page.items[:3]:
                print(f"    - [{item.id}] {item.name[:50]} | views={item.views} | {item.uploadedAt}")
        else:
            fail(f"{sort.value}: no items — check connectivity and that the websites table is populated")
            passed = False
    return passed


async def step3_second_page(catalog):
    step_header(3, "Cursor Continuation")
    first = await catalog.list_page()
    if not first.hasMore:
        info("Only one page of data — nothing to continue")
        return True

    second = await catalog.list_page(cursor=first.nextCursor)
    overlap = {w.id for w in first.items} & {w.id for w in second.items}
    if second.items and not overlap:
        ok(f"Page two: {len(second.items)} items, no overlap with page one")
        return True
    fail(f"Page two returned {len(second.items)} items, overlap={sorted(overlap)}")
    return False


async def step4_detail(catalog):
    step_header(4, "Website Detail")
    page = await catalog.list_page(page_size=1)
    if not page.items:
        fail("No website to look up")
        return False

    from app.errors import CatalogError

    try:
        entry = await catalog.get_by_id(page.items[0].id)
    except CatalogError as e:
        fail(f"Lookup failed: {str(e)[:200]}")
        return False
    ok(f"{entry.name} | builtWith={entry.builtWith} | categories={entry.categories}")
    ok(f"Video: {entry.videoUrl or '(none)'}")
    return True


async def step5_counts(catalog):
    step_header(5, "Category Counts")
    counts = await catalog.category_counts()
    non_zero = [c for c in counts if c.count]
    if counts:
        ok(f"{len(counts)} canonical categories, {len(non_zero)} with websites")
        for c in sorted(non_zero, key=lambda c: -c.count)[:5]:
            print(f"    - {c.name}: {c.count}")
        return True
    fail("No counts returned")
    return False


async def step6_api(base_url: str):
    step_header(6, f"Running API at {base_url}")
    try:
        async with httpx.AsyncClient(base_url=base_url, timeout=10) as client:
            health = await client.get("/health")
            websites = await client.get("/api/websites", params={"limit": 3})
    except httpx.HTTPError as e:
        fail(f"API unreachable: {str(e)[:200]}")
        return False

    if health.status_code == 200 and websites.status_code == 200:
        ok(f"Health: {health.json()}")
        ok(f"/api/websites: {len(websites.json()['items'])} items")
        return True
    fail(f"Health status={health.status_code} | websites status={websites.status_code}")
    return False


async def main():
    parser = argparse.ArgumentParser(description="Verify the catalog store and API")
    parser.add_argument("--api", help="Base URL of a running API to probe")
    args = parser.parse_args()

    print("\n🎞️  Gridrr Backend — Store Verification")
    print("=" * 60)

    from app.catalog.service import WebsiteService
    from app.store import create_store

    store = create_store()
    init = getattr(store, "init", None)
    if init is not None:
        await init()
    catalog = WebsiteService(store)

    results = {}
    try:
        results[1] = await step1_verify_env()
        results[2] = await step2_first_page(catalog)
        results[3] = await step3_second_page(catalog)
        results[4] = await step4_detail(catalog)
        results[5] = await step5_counts(catalog)
        if args.api:
            results[6] = await step6_api(args.api)
    finally:
        await store.close()

    # Summary
    print(f"\n{'='*60}")
    print("  SUMMARY")
    print(f"{'='*60}")
    for step_n, passed in sorted(results.items()):
        status = "✅ PASS" if passed else "❌ FAIL"
        print(f"  Step {step_n}: {status}")

    total_passed = sum(1 for v in results.values() if v)
    total = len(results)
    print(f"\n  {total_passed}/{total} steps passed")
    print(f"{'='*60}\n")

    sys.exit(0 if all(results.values()) else 1)


if __name__ == "__main__":
    asyncio.run(main())
