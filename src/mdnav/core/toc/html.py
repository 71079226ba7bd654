"""HTML fragments for rendered tables of contents and heading anchor links"""

from html import escape

from mdnav.core.models import Heading


SIDEBAR_TITLE = "On This Page"

ANCHOR_ICON = (
    '<svg class="anchor-icon" viewBox="0 0 16 16" width="16" height="16" aria-hidden="true">'
    '<path d="M4 9h1v1H4c-1.5 0-3-1.69-3-3.5S2.55 3 4 3h4c1.45 0 3 1.69 3 3.5 0 1.41-.91 2.72-2 '
    '3.25V8.59c.58-.45 1-1.27 1-2.09C10 5.22 8.98 4 8 4H4c-.98 0-2 1.22-2 2.5S3 9 4 9zm9-3h-1v1h1c1 '
    '0 2 1.22 2 2.5S13.98 12 13 12H9c-.98 0-2-1.22-2-2.5 0-.83.42-1.64 1-2.09V6.25c-1.09.53-2 '
    '1.84-2 3.25C6 11.31 7.55 13 9 13h4c1.45 0 3-1.69 3-3.5S14.5 6 13 6z"></path></svg>'
)

SMOOTH_SCROLL_JS = """\
function smoothScrollToSection(sectionId) {
  const element = document.getElementById(sectionId);
  if (element) {
    element.scrollIntoView({ behavior: 'smooth', block: 'start' });
  }
}
"""


def render_items(tree: list[Heading]) -> str:
    """Nested <li> items for a TOC tree, one link per heading."""
    items = []
    for node in tree:
        children = f"<ul>{render_items(node.children)}</ul>" if node.children else ""
        items.append(
            f'<li class="toc-item" data-level="{node.level}">'
            f'<a href="#{escape(node.id)}">{escape(node.label)}</a>{children}</li>'
        )
    return "\n".join(items)


def default_toc(tree: list[Heading], title: str, collapsible: bool = False) -> str:
    collapsible_attr = ' data-collapsible="true"' if collapsible else ""
    toggle = '<button class="toc-toggle" type="button">Toggle</button>' if collapsible else ""
    return (
        f'<nav class="table-of-contents"{collapsible_attr}>'
        f'<h2 class="toc-title">{escape(title)}</h2>{toggle}'
        f'<ul class="toc-list">\n{render_items(tree)}\n</ul></nav>'
    )


def inline_toc(tree: list[Heading], title: str) -> str:
    return (
        '<div class="inline-toc"><details>'
        f'<summary>{escape(title)}</summary>'
        f'<ul>\n{render_items(tree)}\n</ul></details></div>'
    )


def sidebar_toc(tree: list[Heading]) -> str:
    return (
        '<aside class="sidebar-toc"><nav>'
        f'<h3>{SIDEBAR_TITLE}</h3>'
        f'<ul>\n{render_items(tree)}\n</ul></nav></aside>'
    )


def directive_container(inner: str, position: str, sticky: bool) -> str:
    """Wrapper emitted for a [TOC position=... sticky=...] directive."""
    sticky_attr = ' data-toc-sticky="true"' if sticky else ""
    return f'<div class="toc-container" data-toc-position="{escape(position)}"{sticky_attr}>{inner}</div>'


def anchor_link(heading_id: str, text: str) -> str:
    return (
        f'<a href="#{escape(heading_id)}" class="anchor-link" '
        f'aria-label="Link to {escape(text)}">{ANCHOR_ICON}</a>'
    )


def smooth_scroll_wrapper(html: str) -> str:
    return f'<div data-smooth-scroll="true">{html}</div>'


def assets(smooth_scroll: bool) -> dict[str, str]:
    return {"js": SMOOTH_SCROLL_JS if smooth_scroll else "", "css": ""}
