"""Filename inference rules: ordered keyword tables for sub-group, category, tags, priority, status.

Each table is an ordered list of KeywordRule. Single-valued fields take the
first matching rule; tags take every match. Tables are plain data so they can
be replaced from config.yaml without touching the resolution order.
"""

import re
from typing import Literal

from pydantic import BaseModel, Field


class KeywordRule(BaseModel):
    """Map a filename to value when any keyword occurs in it."""
    value: str
    keywords: list[str]
    match: Literal["substring", "token"] = "substring"

    def matches(self, name: str) -> bool:
        if self.match == "token":
            tokens = set(filename_tokens(name))
            return any(k in tokens for k in self.keywords)
        return any(k in name for k in self.keywords)


def filename_tokens(name: str) -> list[str]:
    """Split a lower-cased file stem on underscores, hyphens, and whitespace."""
    return [t for t in re.split(r'[_\-\s]+', name.lower()) if t]


def first_match(rules: list[KeywordRule], name: str) -> str | None:
    """Value of the first rule matching name, else None."""
    name = name.lower()
    return next((r.value for r in rules if r.matches(name)), None)


def all_matches(rules: list[KeywordRule], name: str) -> list[str]:
    """Values of every rule matching name, in table order, without duplicates."""
    name = name.lower()
    return list(dict.fromkeys(r.value for r in rules if r.matches(name)))


def _default_sub_groups() -> list[KeywordRule]:
    return [
        KeywordRule(value="phases",        keywords=["phase"]),
        KeywordRule(value="admin",         keywords=["admin"]),
        KeywordRule(value="security",      keywords=["security", "auth"]),
        KeywordRule(value="docs",          keywords=["docs", "documentation"]),
        KeywordRule(value="architecture",  keywords=["architecture"]),
        KeywordRule(value="architecture",  keywords=["arch"], match="token"),
        KeywordRule(value="planning",      keywords=["action_plan"]),
        KeywordRule(value="testing",       keywords=["test"]),
        KeywordRule(value="applicability", keywords=["applicability"]),
    ]


def _default_categories() -> list[KeywordRule]:
    return [
        KeywordRule(value="security",       keywords=["security", "auth"]),
        KeywordRule(value="admin",          keywords=["admin"]),
        KeywordRule(value="docs",           keywords=["docs", "documentation"]),
        KeywordRule(value="implementation", keywords=["phase", "implementation"]),
        KeywordRule(value="analysis",       keywords=["strategy", "analysis", "appraisal", "audit"]),
        KeywordRule(value="planning",       keywords=["plan", "planning"]),
        KeywordRule(value="testing",        keywords=["test", "execution"]),
    ]


def _default_tags() -> list[KeywordRule]:
    return [
        KeywordRule(value="phases",         keywords=["phase"]),
        KeywordRule(value="admin",          keywords=["admin"]),
        KeywordRule(value="security",       keywords=["security", "auth"]),
        KeywordRule(value="documentation",  keywords=["docs", "documentation"]),
        KeywordRule(value="implementation", keywords=["implementation"]),
        KeywordRule(value="analysis",       keywords=["analysis", "audit", "appraisal"]),
        KeywordRule(value="planning",       keywords=["plan"]),
        KeywordRule(value="testing",        keywords=["test"]),
    ]


def _default_priorities() -> list[KeywordRule]:
    return [
        KeywordRule(value="high", keywords=["urgent", "critical"], match="token"),
        KeywordRule(value="low",  keywords=["minor", "low"],       match="token"),
    ]


def _default_statuses() -> list[KeywordRule]:
    return [KeywordRule(value="archived", keywords=["archive"])]


class InferenceRules(BaseModel):
    """All keyword tables used by filename inference."""
    sub_group: list[KeywordRule] = Field(default_factory=_default_sub_groups)
    category:  list[KeywordRule] = Field(default_factory=_default_categories)
    tags:      list[KeywordRule] = Field(default_factory=_default_tags)
    priority:  list[KeywordRule] = Field(default_factory=_default_priorities)
    status:    list[KeywordRule] = Field(default_factory=_default_statuses)


DEFAULT_RULES = InferenceRules()
