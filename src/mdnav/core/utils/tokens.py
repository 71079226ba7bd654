"""Shared markdown-it token utilities"""


def heading_level(token) -> int | None:
    """Return the heading level (1-6) for a heading_open token, else None."""
    if token.type == 'heading_open' and token.tag and token.tag[0] == 'h' and token.tag[1:].isdigit():
        return int(token.tag[1:])
    return None


def source_line(token) -> int | None:
    """Return the 1-based source line of a block token, if markdown-it mapped it."""
    if token.map:
        return token.map[0] + 1
    return None
