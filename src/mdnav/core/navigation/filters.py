"""Metadata filters and sorts over resolved navigation pages.

Every filter treats an empty or None value as "no filter" and returns the
input unchanged. Pages without resolved metadata never match a filter.
"""

from collections.abc import Iterable
from typing import Literal, Optional

from pydantic import BaseModel, Field

from mdnav.core.metadata.resolver import PRIORITY_RANK
from mdnav.core.models import PageNode


SortOrder = Literal["asc", "desc"]

UNRANKED = len(PRIORITY_RANK)
EARLIEST_DATE = "1900-01-01"
LAST_CATEGORY = "zzz"


class FilterOptions(BaseModel):
    status:   Optional[str] = None
    category: Optional[str] = None
    priority: Optional[str] = None
    author:   Optional[str] = None
    tags:     list[str] = Field(default_factory=list)


class AvailableFilters(BaseModel):
    """Distinct sorted values present in a page list, for filter dropdowns."""
    statuses:   list[str] = Field(default_factory=list)
    categories: list[str] = Field(default_factory=list)
    priorities: list[str] = Field(default_factory=list)
    authors:    list[str] = Field(default_factory=list)
    tags:       list[str] = Field(default_factory=list)


def _field_equals(pages: list[PageNode], name: str, value: Optional[str]) -> list[PageNode]:
    if not value:
        return pages
    return [p for p in pages if p.metadata and getattr(p.metadata, name) == value]


def filter_by_status(pages: list[PageNode], status: Optional[str]) -> list[PageNode]:
    return _field_equals(pages, "status", status)


def filter_by_category(pages: list[PageNode], category: Optional[str]) -> list[PageNode]:
    return _field_equals(pages, "category", category)


def filter_by_category_case_insensitive(pages: list[PageNode], category: Optional[str]) -> list[PageNode]:
    if not category:
        return pages
    target = category.lower()
    return [p for p in pages if p.metadata and p.metadata.category.lower() == target]


def filter_by_priority(pages: list[PageNode], priority: Optional[str]) -> list[PageNode]:
    return _field_equals(pages, "priority", priority)


def filter_by_author(pages: list[PageNode], author: Optional[str]) -> list[PageNode]:
    return _field_equals(pages, "author", author)


def filter_by_tags(pages: list[PageNode], tags: Optional[Iterable[str]]) -> list[PageNode]:
    """Pages carrying any of tags (OR)."""
    wanted = set(tags or ())
    if not wanted:
        return pages
    return [p for p in pages if p.metadata and wanted.intersection(p.metadata.tags)]


def apply_filters(pages: list[PageNode], options: FilterOptions) -> list[PageNode]:
    """Apply every non-empty filter in options (AND across fields)."""
    pages = filter_by_status(pages, options.status)
    pages = filter_by_category(pages, options.category)
    pages = filter_by_priority(pages, options.priority)
    pages = filter_by_author(pages, options.author)
    return filter_by_tags(pages, options.tags)


def _ordered(pages: list[PageNode], key, order: SortOrder) -> list[PageNode]:
    result = sorted(pages, key=key)
    return result[::-1] if order == "desc" else result


def sort_by_priority(pages: list[PageNode], order: SortOrder = "asc") -> list[PageNode]:
    """high, medium, low; pages without metadata go last."""
    return _ordered(pages, lambda p: PRIORITY_RANK[p.metadata.priority] if p.metadata else UNRANKED, order)


def sort_by_title(pages: list[PageNode], order: SortOrder = "asc") -> list[PageNode]:
    return _ordered(pages, lambda p: p.title, order)


def sort_by_date(pages: list[PageNode], order: SortOrder = "desc") -> list[PageNode]:
    """Newest first by default; missing dates sort as the earliest."""
    return _ordered(pages, lambda p: (p.metadata and p.metadata.last_modified) or EARLIEST_DATE, order)


def sort_by_category(pages: list[PageNode], order: SortOrder = "asc") -> list[PageNode]:
    return _ordered(pages, lambda p: p.metadata.category if p.metadata else LAST_CATEGORY, order)


def extract_filter_options(pages: list[PageNode]) -> AvailableFilters:
    metadata = [p.metadata for p in pages if p.metadata]

    def distinct(name: str) -> list[str]:
        return sorted({v for m in metadata if (v := getattr(m, name))})

    return AvailableFilters(
        statuses=distinct("status"),
        categories=distinct("category"),
        priorities=distinct("priority"),
        authors=distinct("author"),
        tags=sorted({t for m in metadata for t in m.tags if t}),
    )


def group_by_category(pages: list[PageNode]) -> dict[str, list[PageNode]]:
    """Pages keyed by resolved category, in input order; bare pages are left out."""
    groups: dict[str, list[PageNode]] = {}
    for page in pages:
        if page.metadata:
            groups.setdefault(page.metadata.category, []).append(page)
    return groups
