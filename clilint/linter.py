"""
Lint Orchestrator

Finds challenge.yml files under a directory and runs every check on each one.

Per file, checks run in this order: files, requirements, null fields, state,
version, tags. The type warning is collected separately. A file that cannot
be read or parsed gets a single error and no further checks; it never stops
the remaining files from being linted.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Iterable, List, Optional, Tuple, Union

from clilint.challenge import CHALLENGE_FILENAME, ChallengeParseError, parse_challenge
from clilint.field_checks import check_null_fields, check_state, check_type, check_version
from clilint.file_checks import check_files
from clilint.lint_config import GenreConfig, LintConfig
from clilint.rule_evaluator import RuleEvaluator


logger = logging.getLogger("clilint.linter")


@dataclass(frozen=True)
class LintResult:
    """
    Lint outcome for one challenge.yml.

    Attributes:
        file: Path of the challenge.yml that was linted
        errors: Error messages, in check order
        warnings: Advisory messages that do not fail the run
        name: Challenge name, for reports ("" if the file did not parse)
        description: Challenge description, for reports
    """
    file: str
    errors: Tuple[str, ...] = ()
    warnings: Tuple[str, ...] = ()
    name: str = ""
    description: str = ""

    @property
    def ok(self) -> bool:
        return not self.errors

    def to_dict(self) -> dict:
        return {
            "file": self.file,
            "name": self.name,
            "description": self.description,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
        }


def lint_challenge_file(
    file_path: Union[str, Path],
    config: LintConfig,
    evaluator: Optional[RuleEvaluator] = None,
) -> LintResult:
    """
    Lint a single challenge.yml.

    Args:
        file_path: Path to the challenge.yml
        config: Lint policy for this run
        evaluator: RuleEvaluator to reuse across files (built from config if None)

    Returns:
        LintResult for the file
    """
    file_path = Path(file_path)
    if evaluator is None:
        evaluator = RuleEvaluator(config)

    try:
        data = file_path.read_bytes()
    except OSError as e:
        return LintResult(file=str(file_path), errors=(f"Failed to read file: {e}",))

    try:
        challenge = parse_challenge(data)
    except ChallengeParseError as e:
        logger.debug("Failed to parse %s: %s", file_path, e)
        return LintResult(file=str(file_path), errors=(f"Invalid YAML format: {e}",))

    errors: List[str] = []
    errors.extend(check_files(file_path.parent, challenge.files))
    errors.extend(evaluator.check_requirements(challenge))
    errors.extend(check_null_fields(challenge, config.null_fields))
    errors.extend(check_state(challenge))
    errors.extend(check_version(challenge))
    errors.extend(evaluator.check_tags(challenge))

    warnings = check_type(challenge)

    return LintResult(
        file=str(file_path),
        errors=tuple(errors),
        warnings=tuple(warnings),
        name=challenge.name,
        description=challenge.description,
    )


def _raise_walk_error(error: OSError) -> None:
    raise error


def _genre_of(path: Union[str, Path], base_dir: Path) -> Optional[str]:
    """Return the top-level directory of path under base_dir, or None if it has none."""
    try:
        parts = Path(path).resolve().relative_to(base_dir).parts
    except ValueError:
        return None
    return parts[0] if parts else None


def discover_challenge_files(
    root_dir: Union[str, Path],
    genres: Optional[GenreConfig] = None,
    base_dir: Union[str, Path] = ".",
) -> List[Path]:
    """
    Find every challenge.yml under root_dir in lexical traversal order.

    With a genre allowlist, a challenge is kept only when its path relative to
    base_dir (the repository root) starts with an allowed directory. This holds
    whether root_dir is the repository root, a genre directory or a single
    challenge directory.

    Args:
        root_dir: Directory to walk
        genres: Optional allowlist of top-level directories of base_dir
        base_dir: Repository root the genre directories live in

    Returns:
        Paths of challenge.yml files

    Raises:
        OSError: If root_dir or a directory under it cannot be listed
    """
    root_dir = Path(root_dir)
    base_dir = Path(base_dir).resolve()
    found = []

    for dirpath, dirnames, filenames in os.walk(root_dir, onerror=_raise_walk_error):
        dirnames.sort()

        if genres is not None:
            if Path(dirpath).resolve() == base_dir:
                skipped = [d for d in dirnames if not genres.allows(d)]
                if skipped:
                    logger.debug("Skipping directories outside the genre list: %s", ", ".join(skipped))
                dirnames[:] = [d for d in dirnames if genres.allows(d)]
                # The repository root belongs to no genre
                continue

            genre = _genre_of(dirpath, base_dir)
            if genre is None or not genres.allows(genre):
                logger.debug("Skipping %s: not in an allowed genre", dirpath)
                dirnames[:] = []
                continue

        if CHALLENGE_FILENAME in filenames:
            found.append(Path(dirpath) / CHALLENGE_FILENAME)

    return found


def lint_challenges(
    root_dir: Union[str, Path],
    config: LintConfig,
    genres: Optional[GenreConfig] = None,
    base_dir: Union[str, Path] = ".",
) -> List[LintResult]:
    """
    Lint every challenge.yml under root_dir.

    Args:
        root_dir: Directory to walk
        config: Lint policy for this run
        genres: Optional allowlist of top-level directories
        base_dir: Repository root the allowlist refers to

    Returns:
        One LintResult per challenge.yml, in traversal order

    Raises:
        OSError: If the directory tree cannot be walked
    """
    evaluator = RuleEvaluator(config)
    results = []

    for path in discover_challenge_files(root_dir, genres, base_dir):
        result = lint_challenge_file(path, config, evaluator)
        logger.debug("Linted %s: %d error(s), %d warning(s)", path, len(result.errors), len(result.warnings))
        results.append(result)

    return results


def has_lint_errors(results: Iterable[LintResult]) -> bool:
    return any(result.errors for result in results)


def find_challenge_dirs(
    changed_files: Iterable[str],
    base_dir: Union[str, Path] = ".",
    genres: Optional[GenreConfig] = None,
) -> List[str]:
    """
    Map files changed in a pull request to the challenge directories to lint.

    A changed challenge.yml maps to its own directory, unless that directory
    no longer exists (the challenge was deleted). Any other file maps to the
    nearest ancestor directory containing a challenge.yml.

    With a genre allowlist, directories outside the allowed top-level
    directories are dropped.

    Args:
        changed_files: Repository-relative paths using "/" separators
        base_dir: Checkout root the paths are relative to
        genres: Optional allowlist of top-level directories

    Returns:
        Sorted, de-duplicated list of directories relative to base_dir

    Example:
        >>> find_challenge_dirs(["web/chall1/src/app.py", "README.md"])
        ['web/chall1']
    """
    base_dir = Path(base_dir)
    directories = set()

    for changed in changed_files:
        path = PurePosixPath(changed)

        if path.name == CHALLENGE_FILENAME:
            if (base_dir / path.parent).is_dir():
                directories.add(str(path.parent))
            continue

        current = path.parent
        while str(current) not in (".", "/"):
            if (base_dir / current / CHALLENGE_FILENAME).is_file():
                directories.add(str(current))
                break
            current = current.parent

    if genres is not None:
        directories = {
            d for d in directories
            if PurePosixPath(d).parts and genres.allows(PurePosixPath(d).parts[0])
        }

    return sorted(directories)
