"""Slug generation for heading anchors and URL paths"""

import re
from collections.abc import Iterable


FALLBACK_SLUG = "section"

_TAG_RE = re.compile(r'<[^>]*>')
_MARKUP_RE = re.compile(r'[*_`~]+')
_SEPARATOR_RE = re.compile(r'[\s._/\\]+')
_INVALID_RE = re.compile(r'[^a-z0-9-]')


def slugify(text: str | None) -> str:
    """Convert text to a lowercase, hyphen-separated URL-safe slug.

    Never returns an empty string: text with no usable characters maps to
    FALLBACK_SLUG.
    """
    text = (text or '').lower()
    text = _TAG_RE.sub('', text)
    text = _MARKUP_RE.sub(' ', text)
    text = _SEPARATOR_RE.sub('-', text)
    text = _INVALID_RE.sub('', text)
    text = re.sub(r'-+', '-', text).strip('-')
    return text or FALLBACK_SLUG


def unique(base: str, seen: frozenset[str] = frozenset()) -> tuple[str, frozenset[str]]:
    """Return (id, updated_seen) where id is base or the first free base-N.

    Must be called in document order so suffix numbering is reproducible.
    """
    candidate = base
    n = 0
    while candidate in seen:
        n += 1
        candidate = f"{base}-{n}"
    return candidate, seen | {candidate}


def unique_ids(bases: Iterable[str]) -> list[str]:
    """Deduplicate a sequence of base slugs in order (base, base-1, base-2, ...)."""
    seen: frozenset[str] = frozenset()
    ids = []
    for base in bases:
        slug, seen = unique(base, seen)
        ids.append(slug)
    return ids
