"""Hybrid metadata resolution: explicit frontmatter, then filename inference, then defaults.

Every field goes through one validate-or-fallback step. A frontmatter value
is accepted only when it has the right type and is non-empty after trimming;
anything else falls through to the filename rules in mdnav.core.metadata.rules
and finally to a fixed default. Resolution never raises.
"""

import logging
import re
from collections.abc import Callable, Mapping
from datetime import date
from pathlib import PurePosixPath
from typing import Any, Optional

from mdnav.core.metadata.rules import DEFAULT_RULES, InferenceRules, all_matches, first_match
from mdnav.core.models import Priority, ResolvedMetadata, Status
from mdnav.core.utils.text import humanize


logger = logging.getLogger(__name__)

DEFAULT_GROUP = "other"
DEFAULT_STATUS: Status = "live"
DEFAULT_PRIORITY: Priority = "medium"
DEFAULT_CATEGORY = "general"
DEFAULT_TITLE = "Untitled"

PRIORITY_SYNONYMS: dict[str, Priority] = {
    "high": "high", "critical": "high", "urgent": "high",
    "medium": "medium", "med": "medium", "normal": "medium",
    "low": "low", "minor": "low",
}
STATUS_SYNONYMS: dict[str, Status] = {
    "live": "live", "active": "live", "published": "live", "current": "live",
    "archived": "archived", "archive": "archived", "inactive": "archived",
    "deprecated": "archived", "old": "archived",
}
PRIORITY_RANK: dict[str, int] = {"high": 0, "medium": 1, "low": 2}

GROUP_SEPARATOR_RE = re.compile(r"[^\w-]+")


# --- field validators: raw frontmatter value -> normalized value or None ---

def valid_string(value: Any) -> str | None:
    """Return value trimmed if it is a non-blank string, else None."""
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def group_token(text: str) -> str:
    """Lower-case text with each run of characters other than letters, digits, '-' and '_' turned into one '_'.

    >>> group_token(" In Progress ")
    'in_progress'
    """
    return GROUP_SEPARATOR_RE.sub("_", text.strip().lower()).strip("_-")


def normalize_group(value: Any) -> str | None:
    """A single lower-case token usable in CSS classes and state keys; None when nothing is left."""
    group = valid_string(value)
    return (group_token(group) or None) if group else None


def normalize_priority(value: Any) -> Priority | None:
    """Map a priority or one of its synonyms (case-insensitive) to high/medium/low."""
    if isinstance(value, str):
        return PRIORITY_SYNONYMS.get(value.strip().lower())
    return None


def normalize_status(value: Any) -> Status | None:
    """Map a status or one of its synonyms (case-insensitive) to live/archived."""
    if isinstance(value, str):
        return STATUS_SYNONYMS.get(value.strip().lower())
    return None


def normalize_tags(value: Any) -> list[str] | None:
    """Accept a list of strings or a single string; drop non-string and blank entries."""
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list):
        return None
    return list(dict.fromkeys(t.strip() for t in value if isinstance(t, str) and t.strip()))


def normalize_date(value: Any) -> str | None:
    if isinstance(value, date):
        return value.isoformat()
    return valid_string(value)


def _explicit(frontmatter: Mapping, key: str, validator: Callable[[Any], Any], path: Any) -> Any:
    """Validated frontmatter value for key, or None (logged when a present value is rejected)."""
    raw = frontmatter.get(key)
    value = validator(raw)
    if value is None and raw is not None:
        logger.debug("Ignoring invalid %r=%r in %s; falling back", key, raw, path)
    return value


# --- filename inference ---

def _stem(file_path: Any) -> str:
    """File name without its extension; '' for empty, None, or non-string paths."""
    if not isinstance(file_path, str) or not file_path.strip():
        return ""
    name = PurePosixPath(file_path.strip().replace("\\", "/")).name
    suffix = PurePosixPath(name).suffix
    return name[:-len(suffix)] if suffix else name


def infer_group_from_filename(file_path: Any) -> str:
    """Prefix before the first underscore, lower-cased; 'other' when there is none.

    >>> infer_group_from_filename("done_phase_1_summary.md")
    'done'
    >>> infer_group_from_filename("index.md")
    'other'
    """
    stem = _stem(file_path)
    if "_" in stem and not stem.startswith("_"):
        return group_token(stem.split("_", 1)[0]) or DEFAULT_GROUP
    return DEFAULT_GROUP


def infer_sub_group_from_filename(file_path: Any, rules: InferenceRules = DEFAULT_RULES) -> str | None:
    """First matching sub-group keyword rule; None leaves the page directly under its group."""
    stem = _stem(file_path)
    return first_match(rules.sub_group, stem) if stem else None


def infer_category_from_filename(file_path: Any, rules: InferenceRules = DEFAULT_RULES) -> str:
    stem = _stem(file_path)
    return (first_match(rules.category, stem) if stem else None) or DEFAULT_CATEGORY


def infer_priority_from_filename(file_path: Any, rules: InferenceRules = DEFAULT_RULES) -> Priority | None:
    stem = _stem(file_path)
    return normalize_priority(first_match(rules.priority, stem)) if stem else None


def infer_status_from_filename(file_path: Any, rules: InferenceRules = DEFAULT_RULES) -> Status | None:
    stem = _stem(file_path)
    return normalize_status(first_match(rules.status, stem)) if stem else None


def infer_title_from_filename(file_path: Any) -> str:
    """Humanized file name with the group prefix removed ('done_phase_8_summary' -> 'Phase 8 Summary')."""
    stem = _stem(file_path)
    if "_" in stem and not stem.startswith("_"):
        rest = stem.split("_", 1)[1]
        stem = rest or stem
    return humanize(stem) or DEFAULT_TITLE


def infer_tags_from_filename(
    file_path: Any,
    group: str,
    sub_group: Optional[str] = None,
    rules: InferenceRules = DEFAULT_RULES,
    ) -> list[str]:
    """Group, sub-group, then every keyword tag detected in the file name."""
    stem = _stem(file_path)
    tags = [group]
    if sub_group:
        tags.append(sub_group)
    if stem:
        tags.extend(all_matches(rules.tags, stem))
    return list(dict.fromkeys(tags))


def infer_metadata_from_filename(file_path: Any, rules: InferenceRules = DEFAULT_RULES) -> ResolvedMetadata:
    """Metadata derived from the file name alone, with defaults where no rule applies."""
    group = infer_group_from_filename(file_path)
    sub_group = infer_sub_group_from_filename(file_path, rules)
    return ResolvedMetadata(
        title=infer_title_from_filename(file_path),
        group=group,
        sub_group=sub_group,
        status=infer_status_from_filename(file_path, rules) or DEFAULT_STATUS,
        priority=infer_priority_from_filename(file_path, rules) or DEFAULT_PRIORITY,
        category=infer_category_from_filename(file_path, rules),
        tags=infer_tags_from_filename(file_path, group, sub_group, rules),
    )


# --- hybrid resolution ---

def _as_mapping(frontmatter: Any) -> Mapping:
    return frontmatter if isinstance(frontmatter, Mapping) else {}


def determine_group(file_path: Any, frontmatter: Any = None) -> str:
    """Explicit frontmatter group when valid, otherwise the filename prefix.

    >>> determine_group("done_something.md", {"group": 123})
    'done'
    """
    explicit = _explicit(_as_mapping(frontmatter), "group", normalize_group, file_path)
    return explicit or infer_group_from_filename(file_path)


def hybrid_metadata_resolution(
    frontmatter: Any,
    file_path: Any,
    rules: InferenceRules = DEFAULT_RULES,
    ) -> ResolvedMetadata:
    """Resolve every metadata field as explicit -> inferred -> default."""
    fm = _as_mapping(frontmatter)
    inferred = infer_metadata_from_filename(file_path, rules)

    group = _explicit(fm, "group", normalize_group, file_path) or inferred.group
    sub_group = _explicit(fm, "sub_group", valid_string, file_path) or inferred.sub_group
    explicit_tags = _explicit(fm, "tags", normalize_tags, file_path) or []
    inferred_tags = infer_tags_from_filename(file_path, group, sub_group, rules)

    return ResolvedMetadata(
        title=_explicit(fm, "title", valid_string, file_path) or inferred.title,
        group=group,
        sub_group=sub_group,
        status=_explicit(fm, "status", normalize_status, file_path) or inferred.status,
        priority=_explicit(fm, "priority", normalize_priority, file_path) or inferred.priority,
        category=_explicit(fm, "category", valid_string, file_path) or inferred.category,
        tags=list(dict.fromkeys(explicit_tags + inferred_tags)),
        author=_explicit(fm, "author", valid_string, file_path),
        last_modified=_explicit(fm, "last_modified", normalize_date, file_path),
    )


def priority_rank(priority: Any) -> int:
    """Sort rank for a priority value (high=0, medium=1, low=2); unknown values rank as medium."""
    return PRIORITY_RANK.get(normalize_priority(priority) or DEFAULT_PRIORITY)
