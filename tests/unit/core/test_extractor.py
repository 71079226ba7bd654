"""Unit tests for core/toc/extractor.py"""

import pytest

from mdnav.core.models import Heading
from mdnav.core.toc.extractor import (
    build_toc_tree,
    clean_heading_text,
    extract_all_headings,
    extract_headings,
    extract_toc,
    flatten_tree,
    set_heading_ids,
)


def _h(level: int, text: str) -> Heading:
    return Heading(level=level, text=text, id=text.lower())


@pytest.mark.parametrize("use_ast", [True, False])
def test_extract_headings_skips_fenced_code(sample_md, use_ast):
    """Heading-like lines inside fenced code are not headings."""
    texts = [h.text for h in extract_headings(sample_md, use_ast=use_ast)]
    assert "not a heading" not in texts
    assert texts == ["Title", "Install", "From source", "Install", "Usage"]


@pytest.mark.parametrize("use_ast", [True, False])
def test_extract_headings_ids(sample_md, use_ast):
    """Duplicates get -1 suffixes and explicit ids override slugs."""
    ids = [h.id for h in extract_headings(sample_md, use_ast=use_ast)]
    assert ids == ["title", "install", "source", "install-1", "usage"]


@pytest.mark.parametrize("use_ast", [True, False])
def test_extract_headings_display_text(sample_md, use_ast):
    """A data-toc attribute supplies display_text while text stays literal."""
    usage = extract_headings(sample_md, use_ast=use_ast)[-1]
    assert usage.text == "Usage"
    assert usage.display_text == "How to use"
    assert usage.label == "How to use"


def test_extract_headings_from_tokens(sample_md, sample_tokens):
    """A pre-parsed token stream gives the same headings as raw markdown."""
    from_tokens = extract_headings(None, tokens=sample_tokens)
    assert [h.id for h in from_tokens] == [h.id for h in extract_headings(sample_md)]


def test_extract_headings_source_lines():
    """Headings carry their 1-based source line."""
    headings = extract_headings("# One\n\ntext\n\n## Two\n")
    assert [h.line for h in headings] == [1, 5]


@pytest.mark.parametrize("markdown", ["", None, "just a paragraph\n"])
def test_extract_headings_empty(markdown):
    """Empty or heading-free input returns []."""
    assert extract_headings(markdown) == []


def test_extract_headings_level_filter():
    """Only headings within [min_level, max_level] are returned."""
    md = "# A\n## B\n### C\n#### D\n##### E\n"
    assert [h.text for h in extract_headings(md)] == ["A", "B", "C", "D"]
    assert [h.text for h in extract_headings(md, min_level=2, max_level=3)] == ["B", "C"]


def test_ids_assigned_before_level_filter():
    """Suffix numbering counts headings outside the requested levels too."""
    md = "# Notes\n\n### Notes\n"
    headings = extract_headings(md, min_level=3, max_level=3)
    assert [h.id for h in headings] == ["notes-1"]


def test_extract_all_headings_strips_inline_markup():
    """Emphasis, code and links are reduced to their text."""
    md = "## **Bold** and `code` with [a link](http://x.test)\n"
    assert extract_all_headings(md)[0].text == "Bold and code with a link"


@pytest.mark.parametrize("use_ast", [True, False])
def test_component_syntax_kept_as_text(use_ast):
    """<.component> syntax survives in heading text."""
    heading = extract_all_headings("## Using <.form> here\n", use_ast=use_ast)[0]
    assert heading.text == "Using <.form> here"


def test_clean_heading_text():
    """HTML tags are removed but <.component> tags are kept."""
    assert clean_heading_text("*Hi* <span>there</span> <.btn>") == "Hi there <.btn>"


def test_build_toc_tree_nests_by_level():
    """[1 Title, 2 A, 3 A.1, 2 B] gives one root with children A and B."""
    tree = build_toc_tree([_h(1, "Title"), _h(2, "A"), _h(3, "A.1"), _h(2, "B")])
    assert len(tree) == 1
    root = tree[0]
    assert root.text == "Title"
    assert [c.text for c in root.children] == ["A", "B"]
    assert [c.text for c in root.children[0].children] == ["A.1"]


def test_build_toc_tree_tolerates_skipped_levels():
    """Levels [1, 3, 2] put both the 3 and the 2 directly under the 1."""
    tree = build_toc_tree([_h(1, "Root"), _h(3, "Deep"), _h(2, "Mid")])
    assert [c.text for c in tree[0].children] == ["Deep", "Mid"]
    assert all(not c.children for c in tree[0].children)


def test_build_toc_tree_multiple_roots():
    """A heading with no shallower predecessor starts a new root."""
    tree = build_toc_tree([_h(2, "A"), _h(3, "A.1"), _h(1, "B"), _h(2, "B.1")])
    assert [r.text for r in tree] == ["A", "B"]


def test_build_toc_tree_does_not_mutate_input():
    """Input headings keep empty children."""
    headings = [_h(1, "A"), _h(2, "B")]
    build_toc_tree(headings)
    assert headings[0].children == []


def test_flatten_tree_is_preorder():
    """flatten_tree returns nodes in document order without children."""
    tree = build_toc_tree([_h(1, "A"), _h(2, "B"), _h(3, "C"), _h(2, "D")])
    flat = flatten_tree(tree)
    assert [h.text for h in flat] == ["A", "B", "C", "D"]
    assert all(h.children == [] for h in flat)


def test_extract_toc_composes_parts():
    """extract_toc returns headings, tree and flat views of one extraction."""
    toc = extract_toc("# Title\n## A\n### A.1\n## B\n")
    assert [h.text for h in toc.headings] == ["Title", "A", "A.1", "B"]
    assert len(toc.tree) == 1
    assert [h.id for h in toc.flat] == [h.id for h in toc.headings]


def test_set_heading_ids_writes_unique_ids(parser):
    """Every non-empty heading token gets its extracted id; empty headings keep none."""
    tokens = parser.parse("## Step\n\n##\n\n## Step {#step}\n")
    headings = set_heading_ids(tokens)
    opens = [t for t in tokens if t.type == "heading_open"]
    assert [h.id for h in headings] == ["step", "step-1"]
    assert [t.attrGet("id") for t in opens] == ["step", None, "step-1"]
