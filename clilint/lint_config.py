"""
Lint Policy Configuration

Loads the rule policy (lintrc.yaml) and the optional genre allowlist.

A policy document looks like:

    tags:
      condition: and
      patterns:
        - type: static
          values: [easy, medium, hard]
    requirements:
      condition: and
      patterns:
        - type: static
          values: [welcome]
    null_fields: [image, host]

Documents are validated against lintrc_schema.json when loaded. A malformed
policy raises LintConfigError. The built-in default policy is used only when no
policy file can be found at all.
"""

import json
import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Tuple, Union

import yaml
from jsonschema import Draft7Validator


logger = logging.getLogger("clilint.lint_config")

LINTRC_FILENAME = "lintrc.yaml"

CONDITION_AND = "and"
CONDITION_OR = "or"
CONDITION_NONE = "none"
CONDITIONS = (CONDITION_AND, CONDITION_OR, CONDITION_NONE)

DEFAULT_TAG_VALUES = ("easy", "medium", "hard")
DEFAULT_REQUIREMENT_VALUES = ("welcome",)
DEFAULT_NULL_FIELDS = ("image",)

_SCHEMA_DIR = Path(__file__).parent
with open(_SCHEMA_DIR / "lintrc_schema.json", encoding="utf-8") as f:
    LINTRC_SCHEMA = json.load(f)
with open(_SCHEMA_DIR / "genre_schema.json", encoding="utf-8") as f:
    GENRE_SCHEMA = json.load(f)


class LintConfigError(Exception):
    """Raised when a policy or genre document cannot be read or is invalid."""
    pass


@dataclass(frozen=True)
class Pattern:
    """
    A typed matcher and its values.

    Attributes:
        type: Matcher name, looked up in patterns.PATTERN_MATCHERS
        values: Values the matcher compares against
    """
    type: str
    values: Tuple[str, ...] = ()


@dataclass(frozen=True)
class Rule:
    """
    A condition plus the patterns it combines.

    Attributes:
        condition: "and", "or" or "none"
        patterns: Ordered patterns evaluated under the condition
    """
    condition: str = CONDITION_NONE
    patterns: Tuple[Pattern, ...] = ()

    def __post_init__(self):
        if self.condition not in CONDITIONS:
            raise LintConfigError(
                f"Unknown rule condition: {self.condition}. "
                f"Expected one of: {', '.join(CONDITIONS)}"
            )


@dataclass(frozen=True)
class LintConfig:
    """
    Policy shared read-only by every challenge in one lint run.

    Attributes:
        tags: Rule applied to the tags field
        requirements: Rule applied to the requirements field
        null_fields: Fields that must be null (image, and optionally host)
        source: File the policy was loaded from, None for the built-in default
    """
    tags: Rule = field(default_factory=Rule)
    requirements: Rule = field(default_factory=Rule)
    null_fields: Tuple[str, ...] = DEFAULT_NULL_FIELDS
    source: Optional[Path] = None


@dataclass(frozen=True)
class GenreConfig:
    """Allowlist of top-level directories to lint."""
    genres: FrozenSet[str]
    source: Optional[Path] = None

    def allows(self, name: str) -> bool:
        return name in self.genres


def default_lint_config() -> LintConfig:
    """
    Return the built-in policy.

    Tags must contain exactly one of easy/medium/hard, and challenges must
    require "welcome" unless they are the welcome challenge themselves.
    """
    return LintConfig(
        tags=Rule(
            condition=CONDITION_AND,
            patterns=(Pattern(type="static", values=DEFAULT_TAG_VALUES),),
        ),
        requirements=Rule(
            condition=CONDITION_AND,
            patterns=(Pattern(type="static", values=DEFAULT_REQUIREMENT_VALUES),),
        ),
    )


def _validate(document: Any, schema: Dict[str, Any], path: Path) -> None:
    validator = Draft7Validator(schema)
    errors = sorted(validator.iter_errors(document), key=lambda e: [str(p) for p in e.absolute_path])
    if errors:
        error = errors[0]
        location = ".".join(str(p) for p in error.absolute_path)
        where = f" at '{location}'" if location else ""
        raise LintConfigError(f"Invalid {path}{where}: {error.message}")


def _read_yaml(path: Path) -> Any:
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise LintConfigError(f"Failed to read {path}: {e}") from e

    try:
        return yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise LintConfigError(f"Failed to parse {path}: {e}") from e


def _rule_from_dict(data: Optional[Dict[str, Any]]) -> Rule:
    # An omitted rule disables the check for that field
    if not data:
        return Rule()

    patterns = tuple(
        Pattern(type=p["type"], values=tuple(p.get("values") or ()))
        for p in data.get("patterns") or ()
    )
    return Rule(condition=data["condition"], patterns=patterns)


def parse_lint_config(document: Any, source: Path = Path(LINTRC_FILENAME)) -> LintConfig:
    """
    Build a LintConfig from an already-parsed YAML document.

    Args:
        document: Result of yaml.safe_load on a lintrc file
        source: Path reported in error messages

    Returns:
        Validated LintConfig

    Raises:
        LintConfigError: If the document does not match lintrc_schema.json
    """
    if document is None:
        document = {}

    _validate(document, LINTRC_SCHEMA, source)

    return LintConfig(
        tags=_rule_from_dict(document.get("tags")),
        requirements=_rule_from_dict(document.get("requirements")),
        null_fields=tuple(document.get("null_fields", DEFAULT_NULL_FIELDS)),
        source=source,
    )


def load_lint_config(path: Union[str, Path]) -> LintConfig:
    """
    Load and validate a lintrc.yaml file.

    Args:
        path: Path to the policy file

    Returns:
        LintConfig built from the file

    Raises:
        LintConfigError: If the file cannot be read, parsed or validated
    """
    path = Path(path)
    config = parse_lint_config(_read_yaml(path), source=path)
    logger.debug("Loaded lint policy from %s", path)
    return config


def default_search_dirs() -> List[Path]:
    """Directories searched for lintrc.yaml: the working directory, then the executable's."""
    return [Path.cwd(), Path(sys.argv[0]).resolve().parent]


def find_lint_config(search_dirs: Iterable[Union[str, Path]]) -> Optional[Path]:
    """Return the first lintrc.yaml found in search_dirs, or None."""
    for directory in search_dirs:
        candidate = Path(directory) / LINTRC_FILENAME
        if candidate.is_file():
            return candidate
    return None


def resolve_lint_config(
    explicit_path: Optional[Union[str, Path]] = None,
    search_dirs: Optional[Iterable[Union[str, Path]]] = None,
) -> LintConfig:
    """
    Resolve the policy for one lint run.

    An explicit path must exist. Otherwise lintrc.yaml is looked up in
    search_dirs, and the built-in default is returned when none is found.

    Args:
        explicit_path: Path given on the command line, if any
        search_dirs: Directories to search (default_search_dirs() when None)

    Returns:
        LintConfig for this run

    Raises:
        LintConfigError: If a policy file exists but is invalid, or the
            explicit path does not exist
    """
    if explicit_path is not None:
        return load_lint_config(explicit_path)

    if search_dirs is None:
        search_dirs = default_search_dirs()

    found = find_lint_config(search_dirs)
    if found is None:
        logger.debug("No %s found, using the built-in policy", LINTRC_FILENAME)
        return default_lint_config()

    return load_lint_config(found)


def load_genre_config(path: Union[str, Path]) -> GenreConfig:
    """
    Load a genre allowlist document ({genre: [web, crypto, ...]}).

    Raises:
        LintConfigError: If the file cannot be read, parsed or validated
    """
    path = Path(path)
    document = _read_yaml(path)
    _validate(document, GENRE_SCHEMA, path)
    return GenreConfig(genres=frozenset(document["genre"]), source=path)
