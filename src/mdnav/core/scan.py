"""File discovery, frontmatter extraction, and FileRecord construction"""

import logging
import re
from pathlib import Path
from typing import Any

import yaml

from mdnav.core.metadata.resolver import normalize_tags, valid_string
from mdnav.core.models import DEFAULT_FILE_PRIORITY, CategoryEntry, FileRecord, ScanResult
from mdnav.core.utils.text import humanize


logger = logging.getLogger(__name__)

FRONTMATTER_RE = re.compile(r'\A---[ \t]*\r?\n(?:(.*?)\r?\n)?---[ \t]*(?:\r?\n|\Z)', re.DOTALL)
MD_EXTENSIONS = {'.md', '.mdx'}
ROOT_CATEGORY = "root"
UNCATEGORIZED = "uncategorized"
ROOT_CATEGORIES = frozenset({ROOT_CATEGORY, UNCATEGORIZED})   # listed with the root pages, never as a category
INDEX_STEM = "index"


def split_frontmatter(text: str) -> tuple[dict[str, Any], str]:
    """Return (frontmatter_dict, body) with the YAML header removed.

    Malformed YAML or a header that is not a mapping yields an empty dict;
    the header block is still stripped from the body.
    """
    m = FRONTMATTER_RE.match(text or '')
    if not m:
        return {}, text or ''
    body = text[m.end():]
    try:
        fm = yaml.safe_load(m.group(1) or '') or {}
    except yaml.YAMLError as e:
        logger.warning("Invalid YAML frontmatter, using no metadata: %s", e)
        return {}, body
    if not isinstance(fm, dict):
        logger.warning("Frontmatter is a %s, not a mapping; ignoring it", type(fm).__name__)
        return {}, body
    return {str(k): v for k, v in fm.items()}, body


def discover_files(path: Path) -> list[Path]:
    """Return sorted .md/.mdx files under path, or [path] if a single file."""
    if path.is_file():
        return [path] if path.suffix in MD_EXTENSIONS else []
    return sorted(p for p in path.rglob('*') if p.is_file() and p.suffix in MD_EXTENSIONS)


def category_for(rel_path: str) -> str:
    """Top-level directory of a relative path, or 'root' for files at the top."""
    parts = Path(rel_path).parts
    return parts[0] if len(parts) > 1 else ROOT_CATEGORY


def _file_priority(value: Any) -> int:
    if isinstance(value, bool):
        return DEFAULT_FILE_PRIORITY
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().lstrip('-').isdigit():
        return int(value.strip())
    return DEFAULT_FILE_PRIORITY


def build_record(rel_path: str, text: str) -> FileRecord:
    """Split frontmatter from text and fill FileRecord fields with path-derived defaults."""
    frontmatter, body = split_frontmatter(text)
    return FileRecord(
        path=rel_path,
        title=valid_string(frontmatter.get('title')) or humanize(Path(rel_path).stem),
        category=valid_string(frontmatter.get('category')) or category_for(rel_path),
        priority=_file_priority(frontmatter.get('priority')),
        tags=tuple(normalize_tags(frontmatter.get('tags')) or ()),
        raw_frontmatter=frontmatter,
        body=body,
    )


def read_document(root: Path, path: Path) -> FileRecord | None:
    """Read one document into a FileRecord; unreadable files are logged and skipped."""
    rel_path = path.relative_to(root).as_posix()
    try:
        text = path.read_text(encoding='utf-8')
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Skipping unreadable document %s: %s", path, e)
        return None
    return build_record(rel_path, text)


def sort_files(files: list[FileRecord]) -> list[FileRecord]:
    """Stable sort by numeric priority, then title."""
    return sorted(files, key=lambda f: (f.priority, f.title))


def build_categories(files: list[FileRecord]) -> dict[str, CategoryEntry]:
    """Group files into categories; an index.md in a category supplies its title."""
    by_key: dict[str, list[FileRecord]] = {}
    for f in files:
        by_key.setdefault(f.category, []).append(f)

    categories = {}
    for key, members in by_key.items():
        if key in ROOT_CATEGORIES:
            continue
        index = next((f for f in members if Path(f.path).stem == INDEX_STEM), None)
        categories[key] = CategoryEntry(
            key=key,
            title=index.title if index else humanize(key),
            path=f"/{key}",
            files=sort_files(members),
        )
    return categories


def scan_directory(root: Path) -> ScanResult:
    """Walk root and return every document plus the categories they form."""
    root = Path(root)
    if not root.exists():
        logger.warning("Content directory %s does not exist", root)
        return ScanResult()

    base = root if root.is_dir() else root.parent
    records = (read_document(base, p) for p in discover_files(root))
    files = sort_files([r for r in records if r is not None])
    logger.info("Scanned %d document(s) under %s", len(files), root)
    return ScanResult(categories=build_categories(files), files=files)
