"""Markdown-to-HTML renderer collaborator built on markdown-it"""

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Optional, Protocol

from markdown_it import MarkdownIt
from markdown_it.rules_core import StateCore

from mdnav.core.utils.attrs import parse_attr_block
from mdnav.core.utils.tokens import heading_level


DEFAULT_PRESET = 'gfm-like'


@dataclass
class RenderResult:
    html: str
    tokens: list | None = field(default=None, repr=False)   # markdown-it tokens, when available


TokenHook = Callable[[list], None]


class Renderer(Protocol):
    def render(self, markdown: str, prepare: Optional[TokenHook] = None) -> RenderResult: ...


def _heading_attrs_rule(state: StateCore) -> None:
    """Move a trailing {#id .class key="value"} block onto the heading tag."""
    tokens = state.tokens
    for i, tok in enumerate(tokens):
        if heading_level(tok) is None or i + 1 >= len(tokens):
            continue
        inline = tokens[i + 1]
        children = inline.children or []
        last = children[-1] if children else None
        if last is None or last.type != 'text':
            continue
        block = parse_attr_block(last.content, allow_empty_text=True)
        if block.text == last.content:
            continue

        last.content = block.text
        inline.content = parse_attr_block(inline.content).text
        if block.id:
            tok.attrSet('id', block.id)
        if block.classes:
            tok.attrSet('class', ' '.join(block.classes))
        for key, value in block.attrs.items():
            tok.attrSet(key, value)


def make_parser(preset: str = DEFAULT_PRESET) -> MarkdownIt:
    """Build a MarkdownIt instance for the given preset name, with heading attribute support."""
    md = MarkdownIt(preset, options_update={"linkify": False})
    md.core.ruler.push('heading_attrs', _heading_attrs_rule)
    return md


class MarkdownItRenderer:
    """Renderer returning both HTML and the token stream it was rendered from.

    Slug ids are not assigned here. A caller passes prepare to edit the
    parsed tokens (the TOC generator writes heading ids) before they are
    turned into HTML.
    """

    def __init__(self, preset: str = DEFAULT_PRESET):
        self.preset = preset
        self._md = make_parser(preset)

    def render(self, markdown: str, prepare: Optional[TokenHook] = None) -> RenderResult:
        tokens = self._md.parse(markdown)
        if prepare is not None:
            prepare(tokens)
        html = self._md.renderer.render(tokens, self._md.options, {})
        return RenderResult(html=html, tokens=tokens)
