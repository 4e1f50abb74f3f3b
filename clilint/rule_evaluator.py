"""
Rule Evaluator - policy-driven checks for the tags and requirements fields.

Each field is governed by one Rule from the lint policy. A rule combines its
patterns under a condition:

- and:  every pattern must hold, each failing pattern is reported
- or:   at least one pattern must hold, otherwise every pattern is reported
- none: the rule is disabled

Field-specific behaviour:
- tags with a static pattern require exactly one tag out of the pattern values
- requirements are not checked for challenges whose name contains "welcome"
"""

from typing import List, Optional

from clilint.challenge import Challenge
from clilint.lint_config import (
    CONDITION_AND,
    CONDITION_NONE,
    CONDITION_OR,
    LintConfig,
    Pattern,
    Rule,
)
from clilint.patterns import FIELD_REQUIREMENTS, FIELD_TAGS, matches


WELCOME_MARKER = "welcome"


def is_welcome_challenge(challenge: Challenge) -> bool:
    return WELCOME_MARKER in challenge.name.lower()


def _check_pattern(challenge: Challenge, pattern: Pattern, field: str) -> Optional[str]:
    """
    Check one pattern and return its diagnostic, or None if it holds.

    Args:
        challenge: Parsed challenge
        pattern: Pattern from the rule
        field: Field governed by the rule

    Returns:
        Error message, or None when the pattern is satisfied
    """
    if field == FIELD_TAGS and pattern.type == "static":
        # Duplicate tags count separately, so [easy, easy] fails
        found_count = sum(1 for tag in challenge.tags if tag in pattern.values)
        if found_count != 1:
            return f"Tags should contain exactly one of: {', '.join(pattern.values)}"
        return None

    if matches(challenge, pattern, field):
        return None

    return f"{field.capitalize()} validation failed for pattern type '{pattern.type}'"


def evaluate_rule(challenge: Challenge, rule: Rule, field: str) -> List[str]:
    """
    Evaluate a rule against one field of a challenge.

    Args:
        challenge: Parsed challenge
        rule: Rule governing the field
        field: "tags" or "requirements"

    Returns:
        List of error messages (empty if the rule passes)

    Example:
        >>> rule = Rule(condition="and", patterns=(Pattern("static", ("easy", "hard")),))
        >>> evaluate_rule(Challenge(tags=("easy",)), rule, "tags")
        []
    """
    if rule.condition == CONDITION_NONE:
        return []

    if field == FIELD_REQUIREMENTS and is_welcome_challenge(challenge):
        return []

    failures = []
    for pattern in rule.patterns:
        message = _check_pattern(challenge, pattern, field)
        if message is not None:
            failures.append(message)

    if rule.condition == CONDITION_AND:
        return failures

    if rule.condition == CONDITION_OR:
        if len(failures) < len(rule.patterns):
            return []
        return failures

    return []


class RuleEvaluator:
    """
    Applies the policy rules of one lint run to challenges.

    The evaluator holds no per-challenge state, so a single instance is shared
    across every challenge in a run.
    """

    def __init__(self, config: LintConfig):
        """
        Initialize rule evaluator with a lint policy.

        Args:
            config: Resolved lint policy
        """
        self.config = config

    def check_tags(self, challenge: Challenge) -> List[str]:
        return evaluate_rule(challenge, self.config.tags, FIELD_TAGS)

    def check_requirements(self, challenge: Challenge) -> List[str]:
        return evaluate_rule(challenge, self.config.requirements, FIELD_REQUIREMENTS)

    def evaluate(self, challenge: Challenge) -> List[str]:
        """
        Evaluate both policy rules.

        Returns:
            Requirements errors followed by tag errors
        """
        return self.check_requirements(challenge) + self.check_tags(challenge)
