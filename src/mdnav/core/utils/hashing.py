"""SHA-256 content hashing for result cache keys"""

import hashlib
import json
from typing import Any


def sha256(content: str) -> str:
    """Return hex-encoded SHA-256 hash of content."""
    return hashlib.sha256(content.encode("utf-8")).hexdigest()


def content_key(content: str, options: dict[str, Any]) -> str:
    """Hash content together with a canonical JSON rendering of options."""
    canonical = json.dumps(options, sort_keys=True, default=str, separators=(",", ":"))
    return sha256(f"{canonical}\n{content}")
