"""Canonical tag vocabulary for categories, styles and frameworks.

Adding a tag means adding it here; stored records may use any casing or
surrounding whitespace and are matched against these display names.
"""

import re

# Business & industries
INDUSTRIES = [
    "SaaS", "E-commerce", "Finance", "Healthcare", "Education",
    "Technology", "Marketing", "Design", "Startup", "Agency",
    "Nonprofit", "Real Estate", "Food & Beverage", "Fitness",
    "Travel", "Entertainment", "Media", "Consulting", "Legal",
    "Manufacturing", "Retail", "Fashion", "Beauty",
    "Home Services", "Automotive", "AI", "UI/UX",
]

# Website types
WEBSITE_TYPES = [
    "Landing Page", "Dashboard", "Mobile App", "Web App", "Blog",
    "Portfolio", "Personal", "Docs", "Marketing", "Pricing",
    "Auth", "Onboarding", "Careers", "Contact", "About",
    "Case Studies", "Help Center", "Knowledge Base", "Status Page",
    "Blog Platform", "Checkout", "Booking", "Directory",
    "Newsletter", "Community",
]

# Design styles
DESIGN_STYLES = [
    "Minimal", "Bold", "Dark Mode", "Light Mode", "Gradient",
    "3D", "Motion", "Illustration", "Photography", "Typography",
    "Neumorphism", "Glassmorphism", "Brutalist", "Vintage", "Modern",
    "Retro", "Futuristic", "Playful", "Corporate", "Elegant",
    "Hand-drawn", "Geometric", "Abstract", "Creative",
]

FRAMEWORKS = [
    # Component frameworks
    "React", "Vue", "Angular", "Svelte", "SolidJS",
    # Meta-frameworks
    "Next.Js", "Nuxt", "Gatsby", "Remix", "SvelteKit", "Astro", "Qwik",
    # State management
    "Redux", "Zustand", "Jotai", "Recoil", "MobX",
    # Styling
    "Tailwind CSS", "Emotion", "Styled Components", "CSS Modules",
    "Sass", "Less", "PostCSS", "UnoCSS",
    # Animation
    "Framer Motion", "GSAP", "Framer", "Motion One",
    # 3D & WebGL
    "Three.js", "WebGL", "React Three Fiber", "Drei",
    # UI libraries
    "Chakra UI", "MUI", "Headless UI", "Radix UI", "Shadcn UI",
    # Build tools
    "Vite", "Webpack", "Rollup", "Parcel", "Snowpack",
    # Other tools
    "Alpine.js", "Stimulus", "Webflow", "Figma", "Storybook",
]


def _unique(names: list[str]) -> list[str]:
    seen = set()
    result = []
    for name in names:
        if name not in seen:
            seen.add(name)
            result.append(name)
    return result


CATEGORIES = _unique(INDUSTRIES + WEBSITE_TYPES + DESIGN_STYLES)

# (title, kind, items): kind says which count set the items are looked up in
SECTIONS = [
    ("Frameworks", "framework", FRAMEWORKS),
    ("Business & Industries", "category", INDUSTRIES),
    ("Website Types", "category", WEBSITE_TYPES),
    ("Design Styles", "category", DESIGN_STYLES),
]


def tag_key(value: str) -> str:
    """Lower-case alphanumerics only; ``Next.js`` and ``nextjs`` share a key."""
    return re.sub(r"[^a-z0-9]", "", value.lower())


def tag_slug(name: str) -> str:
    """URL path segment for a tag: ``UI/UX`` -> ``ui-ux``."""
    return re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")


def resolve_tag(value: str, vocabulary: list[str]) -> str:
    """Map URL input to a canonical display name, or de-slug it if unknown."""
    key = tag_key(value)
    if key:
        for name in vocabulary:
            if tag_key(name) == key:
                return name
    return value.replace("-", " ").strip()
