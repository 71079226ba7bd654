"""Heading extraction and table-of-contents tree construction.

Headings come from markdown-it tokens when available (the same token stream
the renderer produced) and from a line scanner otherwise. Ids are made unique
across every heading of the document, in document order, before level
filtering, so they always agree with the ids injected into the rendered HTML.
"""

import logging
import re
from dataclasses import dataclass

from mdnav.core.models import Heading, TocResult
from mdnav.core.render import make_parser
from mdnav.core.utils.attrs import DISPLAY_TEXT_KEY, parse_attr_block
from mdnav.core.utils.slug import slugify, unique
from mdnav.core.utils.tokens import heading_level, source_line


logger = logging.getLogger(__name__)

DEFAULT_MIN_LEVEL = 1
DEFAULT_MAX_LEVEL = 4

ATX_HEADING_RE = re.compile(r'^ {0,3}(#{1,6})[ \t]+(.+?)(?:[ \t]+#+)?[ \t]*$')
FENCE_RE = re.compile(r'^ {0,3}(`{3,}|~{3,})')

_INLINE_MARKUP = [
    (re.compile(r'!\[([^\]]*)\]\([^)]*\)'), r'\1'),       # images -> alt text
    (re.compile(r'\[([^\]]+)\]\([^)]*\)'), r'\1'),        # links -> label
    (re.compile(r'\*\*(.+?)\*\*'), r'\1'),
    (re.compile(r'(?<!\w)__(.+?)__(?!\w)'), r'\1'),
    (re.compile(r'\*(.+?)\*'), r'\1'),
    (re.compile(r'(?<!\w)_(.+?)_(?!\w)'), r'\1'),
    (re.compile(r'~~(.+?)~~'), r'\1'),
    (re.compile(r'`([^`]+)`'), r'\1'),
    (re.compile(r'</?(?!\.)[A-Za-z][^>]*>'), ''),          # html tags, but not <.component>
]


@dataclass
class _RawHeading:
    level: int
    text: str
    explicit_id: str | None
    display_text: str | None
    line: int | None
    index: int | None = None   # position of the heading_open token


def clean_heading_text(text: str) -> str:
    """Strip inline emphasis, code, link and HTML markup; keep <.component> syntax as text."""
    for pattern, repl in _INLINE_MARKUP:
        text = pattern.sub(repl, text)
    return ' '.join(text.split())


# --- text path ---

def _headings_from_text(markdown: str) -> list[_RawHeading]:
    """Scan lines for ATX headings, skipping fenced code blocks."""
    found = []
    fence: str | None = None
    for lineno, line in enumerate(markdown.splitlines(), start=1):
        m = FENCE_RE.match(line)
        if m:
            marker = m.group(1)
            if fence is None:
                fence = marker
            elif marker[0] == fence[0] and len(marker) >= len(fence):
                fence = None
            continue
        if fence is not None:
            continue

        m = ATX_HEADING_RE.match(line)
        if not m:
            continue
        block = parse_attr_block(m.group(2))
        text = clean_heading_text(block.text)
        if not text:
            continue
        found.append(_RawHeading(len(m.group(1)), text, block.id, block.display_text, lineno))
    return found


# --- token (AST) path ---

def _inline_text(inline) -> str:
    parts = []
    for child in inline.children or []:
        if child.type in ('text', 'code_inline'):
            parts.append(child.content)
        elif child.type in ('softbreak', 'hardbreak'):
            parts.append(' ')
        elif child.type == 'html_inline' and child.content.startswith(('<.', '</.')):
            parts.append(child.content)
    return ''.join(parts)


def _headings_from_tokens(tokens: list) -> list[_RawHeading]:
    found = []
    for i, tok in enumerate(tokens):
        level = heading_level(tok)
        if level is None or i + 1 >= len(tokens):
            continue
        block = parse_attr_block(_inline_text(tokens[i + 1]))
        text = ' '.join(block.text.split())
        if not text:
            continue
        found.append(_RawHeading(
            level=level,
            text=text,
            explicit_id=block.id or tok.attrGet('id'),
            display_text=block.display_text or tok.attrGet(DISPLAY_TEXT_KEY),
            line=source_line(tok),
            index=i,
        ))
    return found


def _assign_ids(raw: list[_RawHeading]) -> list[Heading]:
    """Give every heading a document-unique id (base, base-1, base-2, ... in order)."""
    seen: frozenset[str] = frozenset()
    headings = []
    for h in raw:
        hid, seen = unique(h.explicit_id or slugify(h.text), seen)
        headings.append(Heading(
            level=h.level, text=h.text, id=hid, display_text=h.display_text, line=h.line,
        ))
    return headings


def set_heading_ids(tokens: list) -> list[Heading]:
    """Extract every heading from tokens and write its unique id onto the heading_open token.

    Headings with no text are not extracted and their tokens are left as they are.
    """
    raw = _headings_from_tokens(tokens)
    headings = _assign_ids(raw)
    for r, h in zip(raw, headings):
        tokens[r.index].attrSet('id', h.id)
    return headings


def extract_all_headings(
    markdown: str | None,
    tokens: list | None = None,
    use_ast: bool = True,
    ) -> list[Heading]:
    """Every heading (levels 1-6) with unique ids; [] for empty input."""
    if tokens is not None:
        return _assign_ids(_headings_from_tokens(tokens))
    if not markdown:
        return []
    if use_ast:
        try:
            return _assign_ids(_headings_from_tokens(make_parser().parse(markdown)))
        except Exception as e:
            logger.warning("Token parse failed, falling back to text scan: %s", e)
    return _assign_ids(_headings_from_text(markdown))


def filter_levels(headings: list[Heading], min_level: int, max_level: int) -> list[Heading]:
    return [h for h in headings if min_level <= h.level <= max_level]


def extract_headings(
    markdown: str | None,
    min_level: int = DEFAULT_MIN_LEVEL,
    max_level: int = DEFAULT_MAX_LEVEL,
    tokens: list | None = None,
    use_ast: bool = True,
    ) -> list[Heading]:
    """Ordered headings within [min_level, max_level]. Never raises."""
    return filter_levels(extract_all_headings(markdown, tokens, use_ast), min_level, max_level)


def build_toc_tree(headings: list[Heading]) -> list[Heading]:
    """Nest headings by level in one pass.

    A heading becomes a child of the nearest preceding heading with a smaller
    level; skipped levels are tolerated and no placeholder nodes are created.
    """
    roots: list[Heading] = []
    stack: list[Heading] = []
    for h in headings:
        node = h.model_copy(update={'children': []})
        while stack and stack[-1].level >= node.level:
            stack.pop()
        (stack[-1].children if stack else roots).append(node)
        stack.append(node)
    return roots


def flatten_tree(tree: list[Heading]) -> list[Heading]:
    """Pre-order traversal of a TOC tree, children dropped."""
    flat = []
    for node in tree:
        flat.append(node.model_copy(update={'children': []}))
        flat.extend(flatten_tree(node.children))
    return flat


def extract_toc(
    markdown: str | None,
    min_level: int = DEFAULT_MIN_LEVEL,
    max_level: int = DEFAULT_MAX_LEVEL,
    tokens: list | None = None,
    use_ast: bool = True,
    ) -> TocResult:
    """Headings, their nested tree, and a flat pre-order list."""
    headings = extract_headings(markdown, min_level, max_level, tokens, use_ast)
    tree = build_toc_tree(headings)
    return TocResult(headings=headings, tree=tree, flat=flatten_tree(tree))
