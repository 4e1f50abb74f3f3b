"""
Pattern Matchers for Lint Rules

A pattern in lintrc.yaml names a matcher type and lists the values it checks:

    - type: static
      values: [welcome]

Supported Matchers:
- static: a value equals an entry of the field the rule governs
  (exact for tags, case-insensitive for requirements)
- regex: a value, with any trailing "*" removed, is a case-insensitive
  substring of the challenge author

Unknown matcher types never match. New types are added with register_matcher
and need no change in the rule evaluator.
"""

from typing import Callable, Dict, Sequence

from clilint.challenge import Challenge
from clilint.lint_config import Pattern


FIELD_TAGS = "tags"
FIELD_REQUIREMENTS = "requirements"

Matcher = Callable[[Challenge, Sequence[str], str], bool]


def match_static(challenge: Challenge, values: Sequence[str], field: str) -> bool:
    """
    Check whether any value appears in the governed field.

    Args:
        challenge: Parsed challenge
        values: Pattern values
        field: "tags" or "requirements"

    Returns:
        True if at least one value matches an entry of the field

    Example:
        >>> match_static(Challenge(requirements=("Welcome",)), ["welcome"], "requirements")
        True
    """
    entries = getattr(challenge, field, ())

    if field == FIELD_REQUIREMENTS:
        wanted = {value.casefold() for value in values}
        return any(entry.casefold() in wanted for entry in entries)

    return any(entry in values for entry in entries)


def match_regex(challenge: Challenge, values: Sequence[str], field: str) -> bool:
    """
    Check whether any normalised value is contained in the author name.

    Despite the name this is a substring test, not a regular expression:
    "alice*" matches authors "Alice" and "alice_and_bob".
    """
    author = challenge.author.lower()

    for value in values:
        needle = value.removesuffix("*").strip().lower()
        if needle in author:
            return True
    return False


# Matcher registry mapping pattern types to implementations
PATTERN_MATCHERS: Dict[str, Matcher] = {
    'static': match_static,
    'regex': match_regex,
}


def register_matcher(pattern_type: str) -> Callable[[Matcher], Matcher]:
    """
    Decorator registering a matcher under pattern_type.

    Example:
        >>> @register_matcher("category")
        ... def match_category(challenge, values, field):
        ...     return challenge.category in values
    """
    def decorator(func: Matcher) -> Matcher:
        PATTERN_MATCHERS[pattern_type] = func
        return func
    return decorator


def matches(challenge: Challenge, pattern: Pattern, field: str) -> bool:
    """
    Evaluate one pattern against a challenge.

    Args:
        challenge: Parsed challenge
        pattern: Pattern from the lint policy
        field: Field governed by the rule that owns the pattern

    Returns:
        Matcher result, or False for an unknown pattern type
    """
    matcher = PATTERN_MATCHERS.get(pattern.type)
    if matcher is None:
        return False
    return matcher(challenge, pattern.values, field)
