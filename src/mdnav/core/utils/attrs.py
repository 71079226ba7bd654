"""Parsing of trailing heading attribute blocks: ## Title {#id .class key="value"}"""

import re
from dataclasses import dataclass, field


ATTR_BLOCK_RE = re.compile(r'^(.*?)[ \t]*\{([^{}]*)\}[ \t]*$', re.DOTALL)
ATTR_RE = re.compile(r'''#([\w-]+)|\.([\w-]+)|([\w-]+)=(?:"([^"]*)"|'([^']*)'|([^\s"']+))''')

DISPLAY_TEXT_KEY = "data-toc"


@dataclass
class AttrBlock:
    text:    str                                   # heading text with the block removed
    id:      str | None = None
    classes: list[str] = field(default_factory=list)
    attrs:   dict[str, str] = field(default_factory=dict)

    @property
    def display_text(self) -> str | None:
        return self.attrs.get(DISPLAY_TEXT_KEY)


def parse_attr_block(text: str, allow_empty_text: bool = False) -> AttrBlock:
    """Split a trailing {...} attribute block off heading text.

    Braces whose content is not made entirely of #id, .class and key=value
    items are ordinary text and are left in place.
    """
    m = ATTR_BLOCK_RE.match(text)
    if not m or not (allow_empty_text or m.group(1).strip()):
        return AttrBlock(text=text)
    inner = m.group(2)
    if not inner.strip() or ATTR_RE.sub('', inner).strip():
        return AttrBlock(text=text)

    block = AttrBlock(text=m.group(1).rstrip())
    for id_, cls, key, dq, sq, bare in ATTR_RE.findall(inner):
        if id_:
            block.id = id_
        elif cls:
            block.classes.append(cls)
        elif key:
            block.attrs[key] = dq or sq or bare
    return block
