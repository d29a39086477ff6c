"""Demo records served from the in-memory store when no DATABASE_URL is set.

The records deliberately mix stored shapes: ``builtWith`` as a string or a
list, timestamps as datetimes, ``{"seconds", "nanoseconds"}`` wrappers and ISO
strings, tags with stray casing and whitespace.
"""

from datetime import datetime, timezone

_BUCKET = "https://firebasestorage.googleapis.com/v0/b/gridrr-demo.appspot.com/o"


def _video(name: str) -> str:
    return f"{_BUCKET}/videos%2F{name}?alt=media"


def get_demo_records() -> list[dict]:
    """Fresh list of raw records; callers may mutate it."""
    return [
        {
            "id": "linear-app",
            "name": "Linear",
            "videoUrl": _video("linear.mp4"),
            "url": "https://linear.app",
            "builtWith": ["React", "Next.Js"],
            "categories": ["SaaS", "Dark Mode", "Landing Page"],
            "uploadedAt": datetime(2025, 3, 12, 9, 30, tzinfo=timezone.utc),
            "views": 412,
        },
        {
            "id": "vercel-home",
            "name": "Vercel",
            "videoUrl": _video("vercel.mp4"),
            "url": "https://vercel.com",
            "builtWith": "Next.Js",
            "categories": ["Technology", "dark mode", "Minimal"],
            "uploadedAt": {"seconds": 1741000000, "nanoseconds": 0},
            "views": 389,
        },
        {
            "id": "stripe-press",
            "name": "Stripe Press",
            "videoUrl": _video("stripe-press.mp4"),
            "url": "https://press.stripe.com",
            "builtWith": ["Three.js", "WebGL"],
            "categories": ["3D", "Typography", "Creative"],
            "uploadedAt": "2025-02-20T14:00:00.000Z",
            "views": 275,
        },
        {
            "id": "raycast",
            "name": "Raycast",
            "videoUrl": _video("raycast.mp4"),
            "url": "https://raycast.com",
            "builtWith": "React",
            "categories": ["AI", "Dark Mode", "Web App"],
            "uploadedAt": datetime(2025, 2, 2, 18, 45, tzinfo=timezone.utc),
            "views": 198,
        },
        {
            "id": "arc-browser",
            "name": "Arc",
            "videoUrl": _video("arc.mp4"),
            "url": "https://arc.net",
            "builtWith": ["Webflow"],
            "categories": ["Playful", "Gradient", "Landing Page"],
            "uploadedAt": {"_seconds": 1737500000, "_nanoseconds": 500000000},
            "views": 341,
        },
        {
            "id": "perplexity",
            "name": "Perplexity",
            "videoUrl": _video("perplexity.mp4"),
            "url": "https://perplexity.ai",
            "builtWith": "Next.Js",
            "categories": ["ai ", "Minimal"],
            "uploadedAt": datetime(2025, 1, 10, 8, 0, tzinfo=timezone.utc),
            "views": 157,
        },
        {
            "id": "aesop",
            "name": "Aesop",
            "videoUrl": _video("aesop.mp4"),
            "url": "https://aesop.com",
            "builtWith": ["Gatsby", "Tailwind CSS"],
            "categories": ["Beauty", "E-commerce", "Elegant"],
            "uploadedAt": "2024-12-18T11:20:00Z",
            "views": 96,
        },
        {
            "id": "framer-site",
            "name": "Framer",
            "videoUrl": "https://cdn.gridrr.com/videos/framer.mp4",
            "url": "https://framer.com",
            "builtWith": "Framer",
            "categories": ["Design", "Motion", "Bold"],
            "uploadedAt": datetime(2024, 11, 30, 16, 5, tzinfo=timezone.utc),
            "views": 233,
        },
        {
            "id": "notion-calendar",
            "name": "Notion Calendar",
            "videoUrl": _video("notion-calendar.mp4"),
            "url": "https://calendar.notion.so",
            "builtWith": ["React", "Framer Motion"],
            "categories": ["Technology", "Light Mode", "Web App"],
            "uploadedAt": {"seconds": 1730000000, "nanoseconds": 0},
            "views": 120,
        },
        {
            "id": "untitled-draft",
            "videoUrl": "",
            "builtWith": None,
            "categories": [],
            "uploadedAt": datetime(2024, 10, 1, 12, 0, tzinfo=timezone.utc),
        },
    ]
