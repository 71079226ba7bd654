"""Navigation tree assembly, breadcrumbs, category filtering, and title/tag search"""

import logging
from collections.abc import Iterator, Mapping
from typing import Any, Optional

from mdnav.core.metadata.resolver import hybrid_metadata_resolution
from mdnav.core.metadata.rules import DEFAULT_RULES, InferenceRules
from mdnav.core.models import (
    Breadcrumb,
    CategoryEntry,
    CategoryNode,
    FileRecord,
    GroupNode,
    NavigationTree,
    PageNode,
    ResolvedMetadata,
    ScanResult,
    SubGroupNode,
)
from mdnav.core.navigation.grouping import convert_groups_to_nav_structure, group_files_by_metadata
from mdnav.core.navigation.paths import file_path_to_url_path, title_to_slug
from mdnav.core.scan import ROOT_CATEGORIES, sort_files
from mdnav.core.utils.text import humanize


logger = logging.getLogger(__name__)

HOME = Breadcrumb(title="Home", path="/")

SECTION_TITLES = {
    "dev":  "Developer Documentation",
    "user": "User Guide",
    "api":  "API Reference",
}


def page_node(file: FileRecord, metadata: Optional[ResolvedMetadata] = None) -> PageNode:
    return PageNode(title=file.title, path=file_path_to_url_path(file.path), file=file, metadata=metadata)


def sort_by_priority(files: list[FileRecord]) -> list[FileRecord]:
    """Stable sort by numeric priority only; ties keep their input order."""
    return sorted(files, key=lambda f: f.priority)


def _category_children(
    entry: CategoryEntry,
    grouped_category: Optional[str],
    rules: InferenceRules,
    ) -> list[GroupNode | PageNode]:
    files = sort_files(entry.files)
    if grouped_category and entry.key == grouped_category:
        grouped = group_files_by_metadata(files, entry.key, grouped_category)
        return convert_groups_to_nav_structure(grouped, entry.key, rules=rules)
    return [page_node(f, hybrid_metadata_resolution(f.raw_frontmatter, f.path, rules)) for f in files]


def _is_root(file: FileRecord, scan_result: ScanResult) -> bool:
    return file.category in ROOT_CATEGORIES or file.category not in scan_result.categories


def build_navigation(
    scan_result: ScanResult,
    grouped_category: Optional[str] = None,
    rules: InferenceRules = DEFAULT_RULES,
    ) -> NavigationTree:
    """Assemble categories (sorted by title) and root files into a NavigationTree.

    Root files are those in the root or uncategorized category and any file
    whose category has no entry in scan_result.categories.

    Files inside a category or at the root are sorted by (priority, title).
    When grouped_category names a category, its files are nested into
    collapsible groups instead of a flat list.
    """
    categories = [
        CategoryNode(
            title=entry.title,
            category=entry.key,
            path=entry.path,
            children=_category_children(entry, grouped_category, rules),
        )
        for entry in scan_result.categories.values()
    ]
    categories.sort(key=lambda c: c.title)

    root_files = [
        page_node(f, hybrid_metadata_resolution(f.raw_frontmatter, f.path, rules))
        for f in sort_files([f for f in scan_result.files if _is_root(f, scan_result)])
    ]
    nav = NavigationTree(categories=categories, root_files=root_files)
    nav.total_files = sum(1 for _ in iter_pages(nav))
    logger.debug("Built navigation: %d categories, %d pages", len(categories), nav.total_files)
    return nav


def _pages_under(nodes: list) -> Iterator[PageNode]:
    for node in nodes:
        if isinstance(node, PageNode):
            yield node
        elif isinstance(node, (CategoryNode, GroupNode, SubGroupNode)):
            yield from _pages_under(node.children)


def iter_pages(nav: NavigationTree) -> Iterator[PageNode]:
    """Every page leaf: root files first, then categories in order, depth-first."""
    yield from nav.root_files
    yield from _pages_under(nav.categories)


def path_titles(nav: NavigationTree) -> dict[str, str]:
    """URL path -> display title for every category and page in nav."""
    titles = {c.path: c.title for c in nav.categories}
    for page in iter_pages(nav):
        titles.setdefault(page.path, page.title)
    return titles


def build_breadcrumbs(
    item: Any,
    titles: Optional[Mapping[str, str]] = None,
    nav: Optional[NavigationTree] = None,
    ) -> list[Breadcrumb]:
    """Home followed by one crumb per path segment, ending with item's own title.

    Intermediate titles come from titles, or from path_titles(nav) when only
    the tree is given, then the well-known section names, then the humanized
    segment.
    """
    if titles is None:
        titles = path_titles(nav) if nav is not None else {}
    segments = [s for s in item.path.strip("/").split("/") if s]
    crumbs = [HOME]
    for i, segment in enumerate(segments):
        path = "/" + "/".join(segments[:i + 1])
        if i == len(segments) - 1:
            title = item.title
        else:
            title = titles.get(path) or SECTION_TITLES.get(segment) or humanize(segment)
        crumbs.append(Breadcrumb(title=title, path=path))
    return crumbs


def filter_by_category(nav: NavigationTree, key: str) -> NavigationTree:
    """A tree holding only the category with the given key; root files are dropped."""
    kept = [c for c in nav.categories if c.category == key]
    return NavigationTree(categories=kept, total_files=sum(1 for _ in _pages_under(kept)))


def _page_tags(page: PageNode) -> list[str]:
    if page.metadata:
        return page.metadata.tags
    return list(page.file.tags)


def search_navigation(nav: NavigationTree, query: str) -> list[PageNode]:
    """Pages whose title or any tag contains query, case-insensitively; root files first."""
    needle = (query or "").strip().lower()
    if not needle:
        return []
    return [
        page for page in iter_pages(nav)
        if needle in page.title.lower() or any(needle in t.lower() for t in _page_tags(page))
    ]
