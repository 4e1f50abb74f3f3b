#!/usr/bin/env python3
"""
Tests for rule_evaluator.py - policy-driven tags and requirements checks.

Test coverage:
- tags static pattern requires exactly one matching tag
- requirements exemption for welcome challenges
- and / or / none conditions
- delegation of non-static patterns to the matcher registry
- RuleEvaluator over the default policy
"""

import unittest

from clilint.challenge import Challenge
from clilint.lint_config import LintConfig, Pattern, Rule, default_lint_config
from clilint.rule_evaluator import RuleEvaluator, evaluate_rule, is_welcome_challenge


DIFFICULTY = Pattern(type="static", values=("easy", "medium", "hard"))
WELCOME = Pattern(type="static", values=("welcome",))
TAG_ERROR = "Tags should contain exactly one of: easy, medium, hard"
REQUIREMENTS_ERROR = "Requirements validation failed for pattern type 'static'"


class TestTagsRule(unittest.TestCase):
    """Test the exactly-one tag check."""

    def setUp(self):
        self.rule = Rule(condition="and", patterns=(DIFFICULTY,))

    def test_exactly_one_tag(self):
        for tag in ("easy", "medium", "hard"):
            challenge = Challenge(tags=(tag, "web"))
            self.assertEqual(evaluate_rule(challenge, self.rule, "tags"), [])

    def test_no_matching_tag(self):
        challenge = Challenge(tags=("web",))
        self.assertEqual(evaluate_rule(challenge, self.rule, "tags"), [TAG_ERROR])

    def test_no_tags_at_all(self):
        self.assertEqual(evaluate_rule(Challenge(), self.rule, "tags"), [TAG_ERROR])

    def test_multiple_matching_tags(self):
        challenge = Challenge(tags=("easy", "hard"))
        self.assertEqual(evaluate_rule(challenge, self.rule, "tags"), [TAG_ERROR])

    def test_duplicate_tag_counts_twice(self):
        challenge = Challenge(tags=("easy", "easy"))
        self.assertEqual(evaluate_rule(challenge, self.rule, "tags"), [TAG_ERROR])

    def test_message_lists_values_in_declared_order(self):
        rule = Rule(condition="and", patterns=(Pattern("static", ("hard", "easy")),))
        errors = evaluate_rule(Challenge(), rule, "tags")
        self.assertEqual(errors, ["Tags should contain exactly one of: hard, easy"])

    def test_non_static_tag_pattern_uses_matcher(self):
        rule = Rule(condition="and", patterns=(Pattern("regex", ("alice",)),))

        self.assertEqual(evaluate_rule(Challenge(author="Alice"), rule, "tags"), [])
        self.assertEqual(
            evaluate_rule(Challenge(author="bob"), rule, "tags"),
            ["Tags validation failed for pattern type 'regex'"],
        )


class TestRequirementsRule(unittest.TestCase):
    """Test the requirements check and its welcome exemption."""

    def setUp(self):
        self.rule = Rule(condition="and", patterns=(WELCOME,))

    def test_welcome_required(self):
        challenge = Challenge(name="test_challenge", requirements=())
        self.assertEqual(
            evaluate_rule(challenge, self.rule, "requirements"),
            [REQUIREMENTS_ERROR],
        )

    def test_welcome_present(self):
        challenge = Challenge(name="test_challenge", requirements=("welcome",))
        self.assertEqual(evaluate_rule(challenge, self.rule, "requirements"), [])

    def test_welcome_compared_case_insensitively(self):
        challenge = Challenge(name="test_challenge", requirements=("WELCOME",))
        self.assertEqual(evaluate_rule(challenge, self.rule, "requirements"), [])

    def test_welcome_name_is_exempt(self):
        for name in ("welcome", "Welcome to CTF", "the_WELCOME_one"):
            challenge = Challenge(name=name, requirements=("something-else",))
            self.assertTrue(is_welcome_challenge(challenge))
            self.assertEqual(evaluate_rule(challenge, self.rule, "requirements"), [])

    def test_unknown_pattern_type_fails(self):
        rule = Rule(condition="and", patterns=(Pattern("glob", ("welcome",)),))
        challenge = Challenge(name="x", requirements=("welcome",))
        self.assertEqual(
            evaluate_rule(challenge, rule, "requirements"),
            ["Requirements validation failed for pattern type 'glob'"],
        )


class TestConditions(unittest.TestCase):
    """Test and / or / none combination of patterns."""

    def setUp(self):
        self.challenge = Challenge(name="x", author="carol", requirements=("welcome",))
        self.passing = WELCOME
        self.failing = Pattern("regex", ("alice*",))

    def test_and_reports_each_failing_pattern(self):
        rule = Rule(condition="and", patterns=(self.passing, self.failing, Pattern("regex", ("bob",))))
        errors = evaluate_rule(self.challenge, rule, "requirements")
        self.assertEqual(errors, [
            "Requirements validation failed for pattern type 'regex'",
            "Requirements validation failed for pattern type 'regex'",
        ])

    def test_and_with_no_patterns_passes(self):
        rule = Rule(condition="and", patterns=())
        self.assertEqual(evaluate_rule(Challenge(name="x"), rule, "requirements"), [])

    def test_or_passes_when_one_pattern_holds(self):
        rule = Rule(condition="or", patterns=(self.failing, self.passing))
        self.assertEqual(evaluate_rule(self.challenge, rule, "requirements"), [])

    def test_or_fails_when_no_pattern_holds(self):
        rule = Rule(condition="or", patterns=(self.failing, Pattern("static", ("intro",))))
        errors = evaluate_rule(self.challenge, rule, "requirements")
        self.assertEqual(errors, [
            "Requirements validation failed for pattern type 'regex'",
            "Requirements validation failed for pattern type 'static'",
        ])

    def test_or_with_no_patterns_passes(self):
        rule = Rule(condition="or", patterns=())
        self.assertEqual(evaluate_rule(Challenge(name="x"), rule, "requirements"), [])

    def test_none_never_reports(self):
        rule = Rule(condition="none", patterns=(DIFFICULTY,))
        self.assertEqual(evaluate_rule(Challenge(tags=("bogus",)), rule, "tags"), [])


class TestRuleEvaluator(unittest.TestCase):
    """Test RuleEvaluator over whole policies."""

    def test_default_policy_valid_challenge(self):
        evaluator = RuleEvaluator(default_lint_config())
        challenge = Challenge(name="test", tags=("easy",), requirements=("welcome",))
        self.assertEqual(evaluator.evaluate(challenge), [])

    def test_default_policy_reports_requirements_then_tags(self):
        evaluator = RuleEvaluator(default_lint_config())
        challenge = Challenge(name="test", tags=("web",))
        self.assertEqual(evaluator.evaluate(challenge), [REQUIREMENTS_ERROR, TAG_ERROR])

    def test_tags_disabled_requirements_enforced(self):
        config = LintConfig(
            tags=Rule(condition="none", patterns=(DIFFICULTY,)),
            requirements=Rule(condition="and", patterns=(WELCOME,)),
        )
        evaluator = RuleEvaluator(config)
        challenge = Challenge(name="x", requirements=(), tags=("not-a-difficulty",))

        self.assertEqual(evaluator.check_tags(challenge), [])
        self.assertEqual(evaluator.check_requirements(challenge), [REQUIREMENTS_ERROR])

    def test_empty_policy_reports_nothing(self):
        evaluator = RuleEvaluator(LintConfig())
        self.assertEqual(evaluator.evaluate(Challenge()), [])


if __name__ == '__main__':
    unittest.main()
