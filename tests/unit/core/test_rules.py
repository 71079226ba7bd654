"""Unit tests for core/metadata/rules.py"""

import pytest

from mdnav.core.metadata.resolver import infer_sub_group_from_filename
from mdnav.core.metadata.rules import (
    DEFAULT_RULES,
    InferenceRules,
    KeywordRule,
    all_matches,
    filename_tokens,
    first_match,
)


def test_filename_tokens_splits_on_separators():
    """Underscores, hyphens and whitespace separate tokens."""
    assert filename_tokens("Done_phase-1 notes") == ["done", "phase", "1", "notes"]


def test_substring_rule_matches_inside_words():
    """Substring rules match anywhere in the name."""
    rule = KeywordRule(value="testing", keywords=["test"])
    assert rule.matches("done_integration_tests")


def test_token_rule_needs_whole_token():
    """Token rules only match a whole underscore-delimited token."""
    rule = KeywordRule(value="architecture", keywords=["arch"], match="token")
    assert rule.matches("todo_arch_review")
    assert not rule.matches("done_search")


def test_first_match_respects_table_order():
    """The earliest matching rule wins."""
    rules = [
        KeywordRule(value="first", keywords=["a"]),
        KeywordRule(value="second", keywords=["ab"]),
    ]
    assert first_match(rules, "AB") == "first"
    assert first_match(rules, "zzz") is None


def test_all_matches_deduplicates():
    """Every matching value is returned once, in table order."""
    rules = [
        KeywordRule(value="x", keywords=["a"]),
        KeywordRule(value="y", keywords=["b"]),
        KeywordRule(value="x", keywords=["c"]),
    ]
    assert all_matches(rules, "abc") == ["x", "y"]


@pytest.mark.parametrize("path,expected", [
    ("done_phase1.md", "phases"),
    ("done_admin.md", "admin"),
    ("todo_auth_flow.md", "security"),
    ("todo_arch_review.md", "architecture"),
    ("todo_action_plan.md", "planning"),
    ("done_search.md", None),
])
def test_default_sub_group_table(path, expected):
    """The default table maps filename keywords to sub-groups."""
    assert infer_sub_group_from_filename(path, DEFAULT_RULES) == expected


def test_custom_rules_replace_a_table():
    """A custom table changes inference without touching resolution order."""
    rules = InferenceRules(sub_group=[KeywordRule(value="ops", keywords=["deploy"])])
    assert infer_sub_group_from_filename("todo_deploy_notes.md", rules) == "ops"
    assert infer_sub_group_from_filename("done_phase1.md", rules) is None
    assert rules.category == DEFAULT_RULES.category


def test_rules_load_from_plain_data():
    """Rule tables validate from config-style dictionaries."""
    rules = InferenceRules.model_validate({"status": [{"value": "archived", "keywords": ["legacy"]}]})
    assert first_match(rules.status, "legacy_api") == "archived"
