"""Fixed checks on challenge fields that are not driven by the lint policy."""

from typing import Iterable, List

from clilint.challenge import Challenge


REQUIRED_STATE = "visible"
REQUIRED_VERSION = "0.1"
DISCOURAGED_TYPE = "standard"


def check_null_fields(challenge: Challenge, fields: Iterable[str]) -> List[str]:
    """
    Check that each named field is null.

    Args:
        challenge: Parsed challenge
        fields: Field names from the policy's null_fields (image, host)

    Returns:
        One error per field that has a value
    """
    errors = []

    for name in fields:
        if getattr(challenge, name) is not None:
            errors.append(f"Field '{name}' should be null")

    return errors


def check_state(challenge: Challenge) -> List[str]:
    if challenge.state != REQUIRED_STATE:
        return [f"Field 'state' should be '{REQUIRED_STATE}'"]
    return []


def check_version(challenge: Challenge) -> List[str]:
    if challenge.version != REQUIRED_VERSION:
        return [f"Field 'version' should be '{REQUIRED_VERSION}'"]
    return []


def check_type(challenge: Challenge) -> List[str]:
    """Warn when a challenge uses standard scoring. Returns warnings, not errors."""
    if challenge.type == DISCOURAGED_TYPE:
        return [f"Field 'type' is '{DISCOURAGED_TYPE}', did you intend to use 'dynamic'?"]
    return []
