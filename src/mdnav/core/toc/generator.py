"""Document processing: render markdown, inject heading anchors, and resolve TOC placeholders.

Per document the steps run in a fixed order: frontmatter split, parse,
heading extraction from the parsed tokens (ids are written back onto the
heading tokens), HTML rendering, anchor links, placeholder resolution.
Heading ids in the HTML and links in the TOC come from the same extraction
run and therefore always agree.
"""

import logging
import re
from html import unescape
from typing import Any, Optional

from pydantic import BaseModel, Field

from mdnav.core.cache import NullCache, ResultCache
from mdnav.core.errors import DocumentProcessingError
from mdnav.core.metadata.resolver import valid_string
from mdnav.core.models import Heading, ProcessedDocument, TocContext, TocResult, TocTemplate
from mdnav.core.render import MarkdownItRenderer, Renderer
from mdnav.core.scan import split_frontmatter
from mdnav.core.toc import html as toc_html
from mdnav.core.toc.extractor import (
    DEFAULT_MAX_LEVEL,
    DEFAULT_MIN_LEVEL,
    build_toc_tree,
    extract_all_headings,
    filter_levels,
    flatten_tree,
    set_heading_ids,
)
from mdnav.core.utils.hashing import content_key
from mdnav.core.utils.slug import slugify, unique


logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Table of Contents"

HEADING_TAG_RE = re.compile(r'<h([1-6])(\s[^>]*)?>(.*?)</h\1\s*>', re.IGNORECASE | re.DOTALL)
PROTECTED_RE = re.compile(r'<pre\b.*?</pre\s*>|<code\b.*?</code\s*>', re.IGNORECASE | re.DOTALL)
ID_ATTR_RE = re.compile(r'''\sid\s*=\s*(?:"([^"]*)"|'([^']*)')''', re.IGNORECASE)
TAG_RE = re.compile(r'<[^>]*>')
FIRST_H1_RE = re.compile(r'<h1\b[^>]*>.*?</h1\s*>', re.IGNORECASE | re.DOTALL)

# A marker may arrive as a bare html block or wrapped in a paragraph by the renderer.
BASIC_MARKER_RE = re.compile(r'(?:<p>\s*)?<!--\s*TOC\s*-->(?:\s*</p>)?')
INLINE_MARKER_RE = re.compile(r'(?:<p>\s*)?<!--\s*TOC\s+inline\s*-->(?:\s*</p>)?')
SIDEBAR_MARKER_RE = re.compile(r'(?:<p>\s*)?<!--\s*TOC\s+sidebar\s*-->(?:\s*</p>)?')
DIRECTIVE_RE = re.compile(r'(?:<p>\s*)?\[TOC((?:\s+[\w-]+=(?:&quot;.*?&quot;|"[^"]*"|\'[^\']*\'|[^\s\]]+))*)\s*\](?:\s*</p>)?')
DIRECTIVE_ATTR_RE = re.compile(r'''([\w-]+)=(?:"([^"]*)"|'([^']*)'|([^\s"']+))''')
ALL_MARKERS = (BASIC_MARKER_RE, INLINE_MARKER_RE, SIDEBAR_MARKER_RE, DIRECTIVE_RE)


class TocOptions(BaseModel):
    """Per-call TOC settings; frontmatter toc, toc_title and toc_max_level override them."""
    min_level:     int = Field(default=DEFAULT_MIN_LEVEL, ge=1, le=6)
    max_level:     int = Field(default=DEFAULT_MAX_LEVEL, ge=1, le=6)
    title:         str = DEFAULT_TITLE
    toc:           bool = Field(default=True, description="False removes TOC markers without rendering a TOC")
    add_links:     bool = Field(default=True, description="Append an anchor link to each heading")
    auto_inject:   bool = Field(default=False, description="Insert the TOC after the first <h1> when no marker exists")
    collapsible:   bool = False
    smooth_scroll: bool = False
    toc_template:  Optional[TocTemplate] = Field(default=None, exclude=True)

    def cache_fields(self) -> dict[str, Any]:
        """Canonical, hashable view of the options; a template is named by its qualified name."""
        data = self.model_dump()
        tpl = self.toc_template
        data["toc_template"] = f"{tpl.__module__}.{tpl.__qualname__}" if tpl else None
        return data


def merge_frontmatter_options(options: TocOptions, frontmatter: dict[str, Any]) -> TocOptions:
    """Apply valid frontmatter toc / toc_title / toc_max_level values over options."""
    update: dict[str, Any] = {}
    if isinstance(frontmatter.get("toc"), bool):
        update["toc"] = frontmatter["toc"]
    if title := valid_string(frontmatter.get("toc_title")):
        update["title"] = title
    max_level = frontmatter.get("toc_max_level")
    if isinstance(max_level, int) and not isinstance(max_level, bool) and 1 <= max_level <= 6:
        update["max_level"] = max_level
    elif max_level is not None:
        logger.debug("Ignoring invalid toc_max_level=%r", max_level)
    return options.model_copy(update=update) if update else options


# --- anchors ---

def _protected_spans(html: str) -> list[tuple[int, int]]:
    return [m.span() for m in PROTECTED_RE.finditer(html)]


def _inside(pos: int, spans: list[tuple[int, int]]) -> bool:
    return any(start <= pos < end for start, end in spans)


def _existing_id(attrs: str) -> str | None:
    m = ID_ATTR_RE.search(attrs or '')
    return (m.group(1) or m.group(2)) if m else None


def _with_id(attrs: str, heading_id: str) -> str:
    attrs = attrs or ''
    if ID_ATTR_RE.search(attrs):
        return ID_ATTR_RE.sub(f' id="{heading_id}"', attrs, count=1)
    return f' id="{heading_id}"{attrs}'


def _plain(text: str) -> str:
    return ' '.join(TAG_RE.sub('', text).split())


def _pairs(heading: Heading, level: int, existing_id: str | None, text: str) -> bool:
    if heading.level != level:
        return False
    return existing_id == heading.id or _plain(heading.text) == text


def inject_anchors(html: str, headings: list[Heading], add_links: bool = False) -> str:
    """Set id attributes on rendered heading tags, in document order.

    A heading tag is paired with the next extracted heading (every level, as
    returned by extract_all_headings) when the levels agree and the tag
    already carries that heading's id or shows the same text. Tags inside
    <pre> or <code> are left alone. An unpaired tag, such as raw HTML or an
    empty markdown heading, keeps its own id or gets a fresh slug that does
    not collide with any extracted id.
    """
    spans = _protected_spans(html)
    seen = frozenset(h.id for h in headings)
    pending = list(headings)
    out = []
    last = 0
    for m in HEADING_TAG_RE.finditer(html):
        if _inside(m.start(), spans):
            continue
        level, attrs, content = int(m.group(1)), m.group(2) or '', m.group(3)
        text = _plain(unescape(TAG_RE.sub('', content)))
        existing = _existing_id(attrs)
        if pending and _pairs(pending[0], level, existing, text):
            heading = pending.pop(0)
            heading_id, label = heading.id, heading.text
        else:
            heading_id = existing
            if heading_id is None:
                heading_id, seen = unique(slugify(text), seen)
            label = text
        link = toc_html.anchor_link(heading_id, label) if add_links else ''
        out.append(html[last:m.start()])
        out.append(f'<h{level}{_with_id(attrs, heading_id)}>{content}{link}</h{level}>')
        last = m.end()
    out.append(html[last:])
    return ''.join(out)


# --- placeholders ---

def _replace_first(pattern: re.Pattern, html: str, render) -> tuple[str, bool]:
    """Replace the first match of pattern outside code blocks with render(match)."""
    spans = _protected_spans(html)
    for m in pattern.finditer(html):
        if not _inside(m.start(), spans):
            return html[:m.start()] + render(m) + html[m.end():], True
    return html, False


def _remove_markers(html: str) -> str:
    for pattern in ALL_MARKERS:
        found = True
        while found:
            html, found = _replace_first(pattern, html, lambda m: '')
    return html


def _directive_attrs(raw: str) -> dict[str, str]:
    return {k: dq or sq or bare for k, dq, sq, bare in DIRECTIVE_ATTR_RE.findall(unescape(raw or ''))}


def render_toc(toc: TocResult, options: TocOptions) -> str:
    """Default TOC markup, or the caller's template output when one is set."""
    if options.toc_template is not None:
        return options.toc_template(TocContext(headings=toc.headings, tree=toc.tree, title=options.title))
    return toc_html.default_toc(toc.tree, options.title, options.collapsible)


def _after_first_h1(html: str, fragment: str) -> str:
    spans = _protected_spans(html)
    for m in FIRST_H1_RE.finditer(html):
        if not _inside(m.start(), spans):
            return f"{html[:m.end()]}\n{fragment}{html[m.end():]}"
    return f"{fragment}\n{html}"


def inject_toc(html: str, toc: TocResult, options: TocOptions) -> str:
    """Replace the first occurrence of each TOC marker type with its TOC variant.

    With toc disabled, or nothing to list, markers are removed instead.
    """
    if not options.toc or not toc.headings:
        return _remove_markers(html)

    def directive(m: re.Match) -> str:
        attrs = _directive_attrs(m.group(1))
        return toc_html.directive_container(
            render_toc(toc, options),
            attrs.get("position", "inline"),
            attrs.get("sticky") == "true",
        )

    html, basic = _replace_first(BASIC_MARKER_RE, html, lambda m: render_toc(toc, options))
    html, inline = _replace_first(INLINE_MARKER_RE, html, lambda m: toc_html.inline_toc(toc.tree, options.title))
    html, sidebar = _replace_first(SIDEBAR_MARKER_RE, html, lambda m: toc_html.sidebar_toc(toc.tree))
    html, custom = _replace_first(DIRECTIVE_RE, html, directive)

    if options.auto_inject and not (basic or inline or sidebar or custom):
        html = _after_first_h1(html, render_toc(toc, options))
    return html


def build_toc(headings: list[Heading], options: TocOptions) -> TocResult:
    selected = filter_levels(headings, options.min_level, options.max_level)
    tree = build_toc_tree(selected)
    return TocResult(headings=selected, tree=tree, flat=flatten_tree(tree))


class TocGenerator:
    """Turns markdown documents into HTML with anchors and tables of contents.

    Safe to share between threads: the only shared state is the result cache,
    which handles its own locking.
    """

    def __init__(self, renderer: Renderer = None, cache: ResultCache = None):
        self.renderer = renderer if renderer is not None else MarkdownItRenderer()
        self.cache = cache if cache is not None else NullCache()

    def _key(self, markdown: str, options: TocOptions, html: str | None = None) -> str:
        fields = options.cache_fields()
        fields["renderer"] = f"{type(self.renderer).__qualname__}:{getattr(self.renderer, 'preset', '')}"
        if html is not None:
            fields["html"] = html
        return content_key(markdown, fields)

    def _finish(
        self,
        html: str,
        headings: list[Heading],
        frontmatter: dict[str, Any],
        options: TocOptions,
        ) -> ProcessedDocument:
        html = inject_anchors(html, headings, options.add_links)
        toc = build_toc(headings, options)
        html = inject_toc(html, toc, options)
        if options.smooth_scroll:
            html = toc_html.smooth_scroll_wrapper(html)
        return ProcessedDocument(
            html=html,
            toc=toc,
            metadata=frontmatter,
            assets=toc_html.assets(options.smooth_scroll),
        )

    def process_document(self, markdown: str | None, options: TocOptions = None) -> ProcessedDocument:
        """Render markdown and return {html, toc, metadata, assets}.

        Raises DocumentProcessingError when the renderer fails; bad frontmatter
        only means no metadata.
        """
        markdown = markdown or ''
        options = options or TocOptions()
        key = self._key(markdown, options)
        if (cached := self.cache.get(key)) is not None:
            return cached

        frontmatter, body = split_frontmatter(markdown)
        options = merge_frontmatter_options(options, frontmatter)
        found: list[list[Heading]] = []
        try:
            rendered = self.renderer.render(body, lambda tokens: found.append(set_heading_ids(tokens)))
        except Exception as e:
            raise DocumentProcessingError(f"Renderer failed: {e}") from e

        headings = found[-1] if found else extract_all_headings(body, tokens=rendered.tokens)
        result = self._finish(rendered.html, headings, frontmatter, options)
        self.cache.put(key, result)
        return result

    def process_html(self, html: str, markdown: str | None, options: TocOptions = None) -> ProcessedDocument:
        """Same as process_document for HTML the caller already rendered from markdown."""
        markdown = markdown or ''
        options = options or TocOptions()
        key = self._key(markdown, options, html)
        if (cached := self.cache.get(key)) is not None:
            return cached

        frontmatter, body = split_frontmatter(markdown)
        options = merge_frontmatter_options(options, frontmatter)
        result = self._finish(html or '', extract_all_headings(body), frontmatter, options)
        self.cache.put(key, result)
        return result
