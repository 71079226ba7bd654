"""Small text helpers shared by the scanner and navigation builders"""

import re


def humanize(name: str) -> str:
    """Turn a file or directory name into a title ('getting-started_guide' -> 'Getting Started Guide')."""
    words = re.split(r'[-_\s]+', name.strip())
    return ' '.join(w[:1].upper() + w[1:] for w in words if w)


def capitalize_first(key: str) -> str:
    """Upper-case only the first character of key ('done' -> 'Done')."""
    return key[:1].upper() + key[1:]
