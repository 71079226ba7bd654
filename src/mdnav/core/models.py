"""Data models for the scan, navigation, and table-of-contents pipeline"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


Status = Literal["live", "archived"]
Priority = Literal["high", "medium", "low"]

DEFAULT_FILE_PRIORITY = 999


class FileRecord(BaseModel):
    """One scanned markdown document. Immutable once created."""
    model_config = ConfigDict(frozen=True)

    path: str                       # POSIX path relative to the content root
    title: str
    category: str
    priority: int = DEFAULT_FILE_PRIORITY
    tags: tuple[str, ...] = ()
    raw_frontmatter: dict[str, Any] = Field(default_factory=dict)
    body: str = Field(default="", exclude=True)   # left out of JSON dumps


class CategoryEntry(BaseModel):
    """A top-level content directory and the files it holds."""
    key: str
    title: str
    path: str
    files: list[FileRecord] = Field(default_factory=list)


class ScanResult(BaseModel):
    categories: dict[str, CategoryEntry] = Field(default_factory=dict)
    files: list[FileRecord] = Field(default_factory=list)


class ResolvedMetadata(BaseModel):
    """Fully resolved metadata; every field holds a valid, normalized value."""
    title: str
    group: str
    sub_group: Optional[str] = None
    status: Status = "live"
    priority: Priority = "medium"
    category: str = "general"
    tags: list[str] = Field(default_factory=list)
    author: Optional[str] = None
    last_modified: Optional[str] = None


# --- navigation ---

class KeyboardShortcuts(BaseModel):
    toggle: str = "Enter"
    focus_first: str = "ArrowDown"
    focus_parent: str = "ArrowUp"


class MobileBehavior(BaseModel):
    collapse_on_mobile: bool = True
    show_item_count: bool = True


class PageNode(BaseModel):
    """Leaf node referencing one FileRecord."""
    type: Literal["page"] = "page"
    title: str
    path: str                       # URL path, e.g. /dev/setup
    file: FileRecord
    metadata: Optional[ResolvedMetadata] = None


class SubGroupNode(BaseModel):
    type: Literal["sub_group"] = "sub_group"
    title: str
    sub_group: str
    collapsible: bool = True
    default_expanded: bool = False
    children: list[PageNode] = Field(default_factory=list)


class GroupNode(BaseModel):
    """Collapsible group of pages with the UI metadata the sidebar needs."""
    type: Literal["group"] = "group"
    title: str
    group: str
    collapsible: bool = True
    children: list[Union[SubGroupNode, PageNode]] = Field(default_factory=list)
    icon: str
    icon_color: str
    css_class: str
    header_class: str
    state_key: str
    default_expanded: bool
    aria_label: str
    aria_expanded: bool
    item_count: int
    keyboard_shortcuts: KeyboardShortcuts = Field(default_factory=KeyboardShortcuts)
    mobile_behavior: MobileBehavior = Field(default_factory=MobileBehavior)


class CategoryNode(BaseModel):
    type: Literal["category"] = "category"
    title: str
    category: str
    path: str
    children: list[Union[GroupNode, PageNode]] = Field(default_factory=list)


NavigationNode = Annotated[
    Union[CategoryNode, GroupNode, SubGroupNode, PageNode],
    Field(discriminator="type"),
]


class NavigationTree(BaseModel):
    categories: list[CategoryNode] = Field(default_factory=list)
    root_files: list[PageNode] = Field(default_factory=list)
    total_files: int = 0


class Breadcrumb(BaseModel):
    title: str
    path: str


# --- table of contents ---

class Heading(BaseModel):
    """A document heading; children is only populated inside a TOC tree."""
    level: int = Field(ge=1, le=6)
    text: str
    id: str
    display_text: Optional[str] = None
    line: Optional[int] = None
    children: list["Heading"] = Field(default_factory=list)

    @property
    def label(self) -> str:
        """Text shown in a rendered TOC."""
        return self.display_text or self.text


class TocResult(BaseModel):
    headings: list[Heading] = Field(default_factory=list)
    tree: list[Heading] = Field(default_factory=list)
    flat: list[Heading] = Field(default_factory=list)


class ProcessedDocument(BaseModel):
    """Result of one document run; instances are shared through the result cache and are read-only."""
    model_config = ConfigDict(frozen=True)

    html: str
    toc: TocResult
    metadata: dict[str, Any] = Field(default_factory=dict)
    assets: dict[str, str] = Field(default_factory=dict)


@dataclass
class TocContext:
    """Data handed to a caller-supplied TOC template; not persisted."""
    headings: list[Heading]
    tree:     list[Heading]
    title:    str


TocTemplate = Callable[[TocContext], str]
