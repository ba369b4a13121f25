"""URL-safe slugs for stores, products and categories."""

import re

_INVALID = re.compile(r"[^a-z0-9\-_]")
_DASHES = re.compile(r"-+")


def slugify(name: str) -> str:
    slug = _DASHES.sub("-", _INVALID.sub("-", (name or "").strip().lower())).strip("-")
    return slug or "item"


def unique_slug(name: str, exists) -> str:
    """First of ``slug``, ``slug-1``, ``slug-2``... for which ``exists(slug)`` is false."""
    base = slugify(name)
    candidate = base
    counter = 1
    while exists(candidate):
        candidate = f"{base}-{counter}"
        counter += 1
    return candidate
