"""Grouping of a flat category file list into collapsible group / sub-group navigation.

Only one designated category is grouped; every other category keeps its flat
file list untouched.
"""

from collections.abc import Iterable

from mdnav.core.metadata.resolver import (
    determine_group,
    hybrid_metadata_resolution,
    infer_sub_group_from_filename,
    priority_rank,
    valid_string,
)
from mdnav.core.metadata.rules import DEFAULT_RULES, InferenceRules
from mdnav.core.models import FileRecord, GroupNode, PageNode, ResolvedMetadata, SubGroupNode
from mdnav.core.navigation.paths import file_path_to_url_path
from mdnav.core.utils.text import capitalize_first, humanize


GROUPED_CATEGORY = "build"

DEFAULT_STYLE = {"icon": "hero-document", "icon_color": "text-gray-600", "default_expanded": False}
GROUP_STYLES: dict[str, dict] = {
    "done":     {"icon": "hero-check-circle",              "icon_color": "text-green-600",  "default_expanded": False},
    "strategy": {"icon": "hero-document-magnifying-glass", "icon_color": "text-blue-600",   "default_expanded": False},
    "todo":     {"icon": "hero-clipboard-document-list",   "icon_color": "text-orange-600", "default_expanded": True},
}


def group_style(key: str) -> dict:
    """Icon, colour and expansion default for a group key; unknown keys get DEFAULT_STYLE."""
    return GROUP_STYLES.get(key, DEFAULT_STYLE)


def group_files_by_metadata(
    files: list[FileRecord],
    category: str,
    grouped_category: str = GROUPED_CATEGORY,
    ) -> dict[str, list[FileRecord]] | list[FileRecord]:
    """Partition files by resolved group for the grouped category; passthrough otherwise.

    Group keys keep first-seen order and files keep their input order.
    """
    if category != grouped_category:
        return files
    grouped: dict[str, list[FileRecord]] = {}
    for f in files:
        grouped.setdefault(determine_group(f.path, f.raw_frontmatter), []).append(f)
    return grouped


def page_sort_key(page: PageNode) -> tuple[int, str]:
    """(priority rank, title) for pages carrying resolved metadata."""
    priority = page.metadata.priority if page.metadata else None
    return priority_rank(priority), page.title


def _page(file: FileRecord, metadata: ResolvedMetadata) -> PageNode:
    return PageNode(title=metadata.title, path=file_path_to_url_path(file.path), file=file, metadata=metadata)


def _sub_group_of(file: FileRecord, infer: bool, rules: InferenceRules) -> str | None:
    explicit = valid_string(file.raw_frontmatter.get("sub_group"))
    if explicit or not infer:
        return explicit
    return infer_sub_group_from_filename(file.path, rules)


def _group_children(
    files: Iterable[FileRecord],
    infer_sub_groups: bool,
    rules: InferenceRules,
    ) -> list[SubGroupNode | PageNode]:
    direct: list[PageNode] = []
    nested: dict[str, list[PageNode]] = {}
    for f in files:
        page = _page(f, hybrid_metadata_resolution(f.raw_frontmatter, f.path, rules))
        sub_group = _sub_group_of(f, infer_sub_groups, rules)
        if sub_group:
            nested.setdefault(sub_group, []).append(page)
        else:
            direct.append(page)

    sub_nodes = [
        SubGroupNode(
            title=humanize(key),
            sub_group=key,
            children=sorted(pages, key=page_sort_key),
        )
        for key, pages in nested.items()
    ]
    sub_nodes.sort(key=lambda n: n.title)
    return [*sub_nodes, *sorted(direct, key=page_sort_key)]


def make_group_node(key: str, children: list[SubGroupNode | PageNode], category: str) -> GroupNode:
    """Wrap children in a GroupNode with the sidebar UI metadata for key.

    item_count and the ARIA label count direct children; a sub-group counts once.
    """
    style = group_style(key)
    title = capitalize_first(key)
    count = len(children)
    return GroupNode(
        title=title,
        group=key,
        children=children,
        icon=style["icon"],
        icon_color=style["icon_color"],
        css_class=f"nav-group nav-group-{key}",
        header_class=f"nav-group-header nav-group-header-{key}",
        state_key=f"{category}_group_{key}",
        default_expanded=style["default_expanded"],
        aria_label=f"{title} group, collapsible section with {count} item{'' if count == 1 else 's'}",
        aria_expanded=style["default_expanded"],
        item_count=count,
    )


def convert_groups_to_nav_structure(
    grouped: dict[str, list[FileRecord]],
    category: str = GROUPED_CATEGORY,
    infer_sub_groups: bool = False,
    rules: InferenceRules = DEFAULT_RULES,
    ) -> list[GroupNode]:
    """Build one GroupNode per group key, sorted by title.

    Files with a frontmatter sub_group are nested under a SubGroupNode; with
    infer_sub_groups the filename keyword rules supply missing sub-groups too.
    """
    if not grouped:
        return []
    nodes = [
        make_group_node(key, _group_children(files, infer_sub_groups, rules), category)
        for key, files in grouped.items()
    ]
    return sorted(nodes, key=lambda n: n.title)
