"""URL path and slug helpers for navigation entries"""

from pathlib import PurePosixPath

from mdnav.core.utils.slug import slugify


INDEX_STEM = "index"


def file_path_to_url_path(file_path: str) -> str:
    """Map a content-relative file path to its URL path.

    >>> file_path_to_url_path("dev/setup.md")
    '/dev/setup'
    >>> file_path_to_url_path("dev/index.md")
    '/dev'
    >>> file_path_to_url_path("index.md")
    '/'
    """
    p = PurePosixPath(file_path.replace("\\", "/").strip("/"))
    p = p.with_suffix("") if p.suffix else p
    parts = [s for s in p.parts if s not in ("", ".")]
    if parts and parts[-1] == INDEX_STEM:
        parts = parts[:-1]
    return "/" + "/".join(parts)


def title_to_slug(title: str) -> str:
    return slugify(title)
