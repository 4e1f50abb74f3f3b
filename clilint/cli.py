#!/usr/bin/env python3
"""Command-line entry point for clilint."""

import argparse
import logging
import sys
from typing import List, Optional

from clilint.forge import ForgeEnv, ForgeError, GitHubClient
from clilint.lint_config import (
    GenreConfig,
    LintConfig,
    LintConfigError,
    load_genre_config,
    resolve_lint_config,
)
from clilint.linter import LintResult, find_challenge_dirs, has_lint_errors, lint_challenges
from clilint.report import (
    NO_CHANGES_COMMENT,
    format_console,
    generate_comment_body,
    results_to_json,
)


EXIT_OK = 0
EXIT_LINT_ERRORS = 1
EXIT_FAILURE = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="clilint",
        description="Lint challenge.yml files in the specified directories (default: current directory)",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s web crypto
  %(prog)s --json .
  %(prog)s --comment-pr
        """
    )
    parser.add_argument(
        'directories',
        nargs='*',
        help='Directories to lint (ignored with --comment-pr)'
    )
    parser.add_argument(
        '--json',
        action='store_true',
        help='Output results in JSON format for GitHub Actions'
    )
    parser.add_argument(
        '--comment-pr',
        action='store_true',
        help='Post results as PR comment (requires GitHub environment)'
    )
    parser.add_argument(
        '--config',
        metavar='PATH',
        help='Lint policy file (default: lintrc.yaml in the working directory, then next to the executable)'
    )
    parser.add_argument(
        '--genre-config',
        metavar='PATH',
        help='YAML file listing the top-level genre directories to lint'
    )
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable debug logging'
    )
    return parser


def _lint_directories(
    directories: List[str],
    config: LintConfig,
    genres: Optional[GenreConfig],
) -> Optional[List[LintResult]]:
    results: List[LintResult] = []

    for directory in directories:
        try:
            results.extend(lint_challenges(directory, config, genres))
        except OSError as e:
            print(f"[ERROR] Error linting directory {directory}: {e}", file=sys.stderr)
            return None

    return results


def run_comment_pr(config: LintConfig, genres: Optional[GenreConfig]) -> int:
    """Lint the challenges touched by the current pull request and comment on it."""
    try:
        env = ForgeEnv.from_env()
    except ForgeError as e:
        print(f"[ERROR] Error getting environment: {e}", file=sys.stderr)
        return EXIT_FAILURE

    with GitHubClient(env) as client:
        try:
            changed_dirs = find_challenge_dirs(client.list_pull_request_files(), genres=genres)
        except ForgeError as e:
            print(f"[ERROR] Error finding changed directories: {e}", file=sys.stderr)
            return EXIT_FAILURE

        if not changed_dirs:
            body = NO_CHANGES_COMMENT
            results: List[LintResult] = []
        else:
            linted = _lint_directories(changed_dirs, config, genres)
            if linted is None:
                return EXIT_FAILURE
            results = linted
            body = generate_comment_body(results)

        try:
            client.create_comment(body)
        except ForgeError as e:
            print(f"[ERROR] Error posting PR comment: {e}", file=sys.stderr)
            return EXIT_FAILURE

    print(f"Successfully posted comment to PR #{env.pr_number}")
    return EXIT_LINT_ERRORS if has_lint_errors(results) else EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the linter."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = resolve_lint_config(args.config)
        genres = load_genre_config(args.genre_config) if args.genre_config else None
    except LintConfigError as e:
        print(f"[ERROR] Failed to load lint config: {e}", file=sys.stderr)
        return EXIT_FAILURE

    if args.comment_pr:
        return run_comment_pr(config, genres)

    results = _lint_directories(args.directories or ["."], config, genres)
    if results is None:
        return EXIT_FAILURE

    if args.json:
        print(results_to_json(results))
    else:
        print(format_console(results))

    return EXIT_LINT_ERRORS if has_lint_errors(results) else EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
