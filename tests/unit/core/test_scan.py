"""Unit tests for core/scan.py"""

import logging

import pytest
from pydantic import ValidationError

from mdnav.core.scan import (
    build_categories,
    build_record,
    category_for,
    discover_files,
    scan_directory,
    split_frontmatter,
)


def test_split_frontmatter_parses_yaml():
    """A leading --- block is parsed and removed from the body."""
    fm, body = split_frontmatter("---\ntitle: Hello\ntags: [a, b]\n---\n# Body\n")
    assert fm == {"title": "Hello", "tags": ["a", "b"]}
    assert body == "# Body\n"


def test_split_frontmatter_absent():
    """Text without frontmatter is returned unchanged."""
    assert split_frontmatter("# Just a heading\n") == ({}, "# Just a heading\n")


def test_split_frontmatter_empty_block():
    """An empty --- block yields no metadata."""
    assert split_frontmatter("---\n---\nBody\n") == ({}, "Body\n")


def test_split_frontmatter_malformed_yaml(caplog):
    """Malformed YAML degrades to an empty map and logs a warning."""
    with caplog.at_level(logging.WARNING, logger="mdnav.core.scan"):
        fm, body = split_frontmatter("---\ntitle: [unclosed\n---\nBody\n")
    assert fm == {}
    assert body == "Body\n"
    assert "Invalid YAML frontmatter" in caplog.text


def test_split_frontmatter_non_mapping():
    """A YAML list header is ignored."""
    fm, body = split_frontmatter("---\n- a\n- b\n---\nBody\n")
    assert fm == {}
    assert body == "Body\n"


@pytest.mark.parametrize("path,expected", [
    ("index.md", "root"),
    ("dev/setup.md", "dev"),
    ("dev/guides/deep.md", "dev"),
])
def test_category_for(path, expected):
    """The top-level directory is the category; top-level files are 'root'."""
    assert category_for(path) == expected


def test_build_record_defaults():
    """Title and category default from the path; priority defaults to 999."""
    record = build_record("dev/getting-started.md", "# Hi\n")
    assert record.title == "Getting Started"
    assert record.category == "dev"
    assert record.priority == 999
    assert record.tags == ()
    assert record.body == "# Hi\n"


@pytest.mark.parametrize("raw,expected", [("3", 3), ("'7'", 7), ("abc", 999), ("true", 999)])
def test_build_record_priority(raw, expected):
    """Numeric priorities (or numeric strings) are kept; others use the default."""
    record = build_record("a.md", f"---\npriority: {raw}\n---\n")
    assert record.priority == expected


def test_build_record_is_frozen():
    """FileRecords cannot be modified after creation."""
    record = build_record("a.md", "")
    with pytest.raises(ValidationError):
        record.title = "changed"


def test_discover_files_filters_extensions(tmp_path):
    """Only .md and .mdx files are discovered, sorted."""
    (tmp_path / "b.md").write_text("")
    (tmp_path / "a.mdx").write_text("")
    (tmp_path / "c.txt").write_text("")
    assert [p.name for p in discover_files(tmp_path)] == ["a.mdx", "b.md"]


def test_scan_directory(content_dir):
    """Categories come from directories; index.md supplies the category title."""
    result = scan_directory(content_dir)
    assert set(result.categories) == {"dev", "build"}
    dev = result.categories["dev"]
    assert dev.title == "Developer Guide"
    assert dev.path == "/dev"
    assert [f.path for f in dev.files] == ["dev/setup.md", "dev/index.md", "dev/testing.md"]
    assert result.categories["build"].title == "Build"
    assert len(result.files) == 7


def test_scan_directory_skips_unreadable(tmp_path, caplog):
    """Files that are not valid UTF-8 are logged and skipped."""
    (tmp_path / "good.md").write_text("# Good\n")
    (tmp_path / "bad.md").write_bytes(b"\xff\xfe\x00bad")
    with caplog.at_level(logging.WARNING, logger="mdnav.core.scan"):
        result = scan_directory(tmp_path)
    assert [f.path for f in result.files] == ["good.md"]
    assert "Skipping unreadable document" in caplog.text


def test_scan_directory_missing_root(tmp_path):
    """A missing root yields an empty result."""
    result = scan_directory(tmp_path / "nope")
    assert result.files == []
    assert result.categories == {}


def test_build_categories_skips_root_and_uncategorized():
    """Root and uncategorized files never form a category entry."""
    files = [
        build_record("index.md", "# Home\n"),
        build_record("notes/loose.md", "---\ncategory: uncategorized\n---\n"),
        build_record("guide/a.md", "# A\n"),
    ]
    assert list(build_categories(files)) == ["guide"]
