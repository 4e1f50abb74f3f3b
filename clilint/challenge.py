"""
Challenge Descriptor Model

This module parses ctfcli challenge.yml documents into an immutable Challenge
object. Parsing is strict about shape: the document is checked against
challenge_schema.json before any field is read, so a malformed entry (for
example a flag given as a bare integer) fails the whole document instead of
being silently coerced.

Key Features:
- YAML parsing with a PyYAML SafeLoader subclass
- Shape validation with a JSON Schema (Draft 7)
- Flags as bare strings or structured {type, content, data} records
- Text fields keep numbers as written (``version: 0.10`` reads as "0.10")
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

import yaml
from jsonschema import Draft7Validator


CHALLENGE_FILENAME = "challenge.yml"

SCHEMA_PATH = Path(__file__).parent / "challenge_schema.json"
with open(SCHEMA_PATH, encoding="utf-8") as f:
    CHALLENGE_SCHEMA = json.load(f)

_validator = Draft7Validator(CHALLENGE_SCHEMA)


TEXT_FIELDS = frozenset({"name", "author", "category", "description", "type", "state", "version"})

_NUMERIC_TAGS = ("tag:yaml.org,2002:int", "tag:yaml.org,2002:float")
_STR_TAG = "tag:yaml.org,2002:str"


class _ChallengeLoader(yaml.SafeLoader):
    """
    SafeLoader that keeps the source text of numeric scalars in text fields.

    ``version: 0.10`` loads as "0.10" rather than the float 0.1.
    """

    def construct_document(self, node):
        if isinstance(node, yaml.MappingNode):
            node.value = [
                (key, _as_text_node(value) if _is_text_field(key) else value)
                for key, value in node.value
            ]
        return super().construct_document(node)


def _is_text_field(key_node) -> bool:
    return isinstance(key_node, yaml.ScalarNode) and key_node.value in TEXT_FIELDS


def _as_text_node(node):
    if isinstance(node, yaml.ScalarNode) and node.tag in _NUMERIC_TAGS:
        return yaml.ScalarNode(_STR_TAG, node.value, node.start_mark, node.end_mark)
    return node


class ChallengeParseError(Exception):
    """Raised when a challenge document is not valid YAML or has the wrong shape."""
    pass


@dataclass(frozen=True)
class FlagEntry:
    """
    Structured flag record.

    Attributes:
        content: Flag value or pattern
        type: Flag type as understood by CTFd ("static" or "regex")
        data: Case-sensitivity marker, e.g. "case_insensitive"
    """
    content: str
    type: str = "static"
    data: Optional[str] = None

    @property
    def case_insensitive(self) -> bool:
        return self.data == "case_insensitive"


Flag = Union[str, FlagEntry]


@dataclass(frozen=True)
class Challenge:
    """
    Parsed challenge.yml descriptor.

    Sequence fields are stored as tuples so a parsed challenge can be shared
    between checks without any of them mutating it.
    """
    name: str = ""
    author: str = ""
    category: str = ""
    description: str = ""
    flags: Tuple[Flag, ...] = ()
    tags: Tuple[str, ...] = ()
    files: Tuple[str, ...] = ()
    requirements: Tuple[str, ...] = ()
    value: int = 0
    type: str = ""
    extra: Dict[str, Any] = field(default_factory=dict)
    image: Any = None
    host: Any = None
    state: str = ""
    version: str = ""
    hints: Tuple[Any, ...] = ()


def _format_schema_error(error) -> str:
    location = ""
    for part in error.absolute_path:
        if isinstance(part, int):
            location += f"[{part}]"
        else:
            location += f".{part}" if location else str(part)

    if location:
        return f"{location}: {error.message}"
    return error.message


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def _flag(entry: Any) -> Flag:
    if isinstance(entry, str):
        return entry
    return FlagEntry(
        content=entry["content"],
        type=entry.get("type") or "static",
        data=entry.get("data"),
    )


def parse_challenge(content: Union[str, bytes]) -> Challenge:
    """
    Parse challenge.yml content into a Challenge.

    Args:
        content: Raw document text or bytes

    Returns:
        Immutable Challenge instance

    Raises:
        ChallengeParseError: If the YAML is malformed or a field has the wrong type

    Example:
        >>> challenge = parse_challenge('name: "welcome"\\ntags: [easy]\\n')
        >>> challenge.tags
        ('easy',)
    """
    try:
        document = yaml.load(content, Loader=_ChallengeLoader)
    except yaml.YAMLError as e:
        raise ChallengeParseError(str(e)) from e

    if document is None:
        document = {}

    if not isinstance(document, dict):
        raise ChallengeParseError(
            f"expected a mapping at the top level, got {type(document).__name__}"
        )

    # Report the first error along the shallowest path
    errors = sorted(
        _validator.iter_errors(document),
        key=lambda e: (len(e.absolute_path), [str(p) for p in e.absolute_path]),
    )
    if errors:
        raise ChallengeParseError(_format_schema_error(errors[0]))

    return Challenge(
        name=_text(document.get("name")),
        author=_text(document.get("author")),
        category=_text(document.get("category")),
        description=_text(document.get("description")),
        flags=tuple(_flag(entry) for entry in document.get("flags") or []),
        tags=tuple(document.get("tags") or []),
        files=tuple(document.get("files") or []),
        requirements=tuple(document.get("requirements") or []),
        value=int(document.get("value") or 0),
        type=_text(document.get("type")),
        extra=dict(document.get("extra") or {}),
        image=document.get("image"),
        host=document.get("host"),
        state=_text(document.get("state")),
        version=_text(document.get("version")),
        hints=tuple(document.get("hints") or []),
    )


def load_challenge(path: Union[str, Path]) -> Challenge:
    """Read and parse a challenge.yml file. OSError propagates to the caller."""
    data = Path(path).read_bytes()
    return parse_challenge(data)
