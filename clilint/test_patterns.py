#!/usr/bin/env python3
"""
Test suite for pattern matchers.

Tests the static and regex matchers, the matcher registry, and the
fail-closed behaviour for unknown pattern types.
"""

import pytest

from clilint.challenge import Challenge
from clilint.lint_config import Pattern
from clilint.patterns import (
    PATTERN_MATCHERS,
    match_regex,
    match_static,
    matches,
    register_matcher,
)


# ============================================================================
# static
# ============================================================================

def test_static_requirements_case_insensitive():
    challenge = Challenge(requirements=("Welcome",))
    assert match_static(challenge, ["welcome"], "requirements") is True


def test_static_requirements_no_match():
    challenge = Challenge(requirements=("intro",))
    assert match_static(challenge, ["welcome"], "requirements") is False


def test_static_requirements_empty():
    assert match_static(Challenge(), ["welcome"], "requirements") is False


def test_static_tags_exact_match():
    challenge = Challenge(tags=("easy", "web"))
    assert match_static(challenge, ["easy", "medium"], "tags") is True


def test_static_tags_case_sensitive():
    """Tags compare exactly, unlike requirements."""
    challenge = Challenge(tags=("Easy",))
    assert match_static(challenge, ["easy"], "tags") is False


# ============================================================================
# regex (substring on author)
# ============================================================================

def test_regex_matches_author_substring():
    challenge = Challenge(author="alice_and_bob")
    assert match_regex(challenge, ["bob"], "requirements") is True


def test_regex_strips_trailing_wildcard_and_whitespace():
    challenge = Challenge(author="Alice")
    assert match_regex(challenge, ["  alice* "], "requirements") is False
    assert match_regex(challenge, [" alice *"], "requirements") is True


def test_regex_is_case_insensitive():
    challenge = Challenge(author="alice")
    assert match_regex(challenge, ["ALICE*"], "requirements") is True


def test_regex_no_match():
    challenge = Challenge(author="carol")
    assert match_regex(challenge, ["alice*", "bob*"], "requirements") is False


def test_regex_is_not_a_regular_expression():
    """Metacharacters are compared literally."""
    challenge = Challenge(author="alice")
    assert match_regex(challenge, ["a.*e"], "requirements") is False


# ============================================================================
# Registry
# ============================================================================

def test_matches_dispatches_by_type():
    challenge = Challenge(author="alice", requirements=("welcome",))

    assert matches(challenge, Pattern("static", ("welcome",)), "requirements") is True
    assert matches(challenge, Pattern("regex", ("alice*",)), "requirements") is True


def test_unknown_pattern_type_fails_closed():
    challenge = Challenge(requirements=("welcome",))
    assert matches(challenge, Pattern("glob", ("welcome",)), "requirements") is False


@pytest.fixture
def restore_registry():
    saved = dict(PATTERN_MATCHERS)
    yield
    PATTERN_MATCHERS.clear()
    PATTERN_MATCHERS.update(saved)


def test_register_matcher_adds_pattern_type(restore_registry):
    @register_matcher("category")
    def match_category(challenge, values, field):
        return challenge.category in values

    challenge = Challenge(category="web")

    assert PATTERN_MATCHERS["category"] is match_category
    assert matches(challenge, Pattern("category", ("web", "pwn")), "requirements") is True
    assert matches(challenge, Pattern("category", ("pwn",)), "requirements") is False
