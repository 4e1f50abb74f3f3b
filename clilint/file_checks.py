"""
File Reference Checks

Validates the paths listed in a challenge's ``files`` field. Paths are
resolved relative to the directory containing challenge.yml.
"""

import os
from pathlib import Path
from typing import Iterable, List, Union


MAX_FILE_SIZE = 1024 * 1024  # 1 MiB
_BYTES_PER_MB = 1024 * 1024


def check_files(challenge_dir: Union[str, Path], files: Iterable[str]) -> List[str]:
    """
    Check that every listed file exists and fits under the size limit.

    Args:
        challenge_dir: Directory containing challenge.yml
        files: Relative paths from the challenge's files field

    Returns:
        List of error messages in declaration order (empty if all files pass)

    Example:
        >>> check_files("web/chall1", ["dist/missing.zip"])
        ["File specified in 'files' does not exist: dist/missing.zip"]
    """
    errors = []
    base_dir = Path(challenge_dir)

    for file in files:
        full_path = base_dir / file

        try:
            size = os.stat(full_path).st_size
        except FileNotFoundError:
            errors.append(f"File specified in 'files' does not exist: {file}")
            continue
        except OSError as e:
            errors.append(f"Error accessing file: {file} ({e})")
            continue

        if size > MAX_FILE_SIZE:
            size_mb = size / _BYTES_PER_MB
            errors.append(
                f"File '{file}' is too large: {size_mb:.2f} MB "
                f"(maximum allowed: {MAX_FILE_SIZE / _BYTES_PER_MB:.2f} MB)"
            )

    return errors
