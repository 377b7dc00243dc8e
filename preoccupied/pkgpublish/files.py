"""
File pattern parsing, resolution, and artifact naming.

:author: Christopher O'Brien <obriencj@preoccupied.net>
:license: GNU General Public License v3
"""

import glob
import logging
import os
import re
import shlex
from typing import Hashable, Iterable, List, TypeVar

from .exceptions import PatternError


logger = logging.getLogger(__name__)


NAME_PATTERN = re.compile(r'[^-.+a-zA-Z0-9]+')


T = TypeVar('T', bound=Hashable)


def parse_patterns(text: str) -> List[str]:
    """
    Split a shell-quoted list of glob patterns into its tokens.
    """

    try:
        return shlex.split(text)
    except ValueError as e:
        raise PatternError(f'Error parsing file pattern list - {e}', text) from e


def validate_pattern(pattern: str) -> None:
    """
    Reject patterns with an unclosed ``[...]`` character class or a
    dangling trailing escape, which glob would otherwise read as
    literal text and silently match nothing.
    """

    i, n = 0, len(pattern)
    while i < n:
        if pattern[i] == '[':
            j = i + 1
            if j < n and pattern[j] in '!^':
                j += 1
            # a leading ] is a member of the class, not its end
            if j < n and pattern[j] == ']':
                j += 1
            j = pattern.find(']', j)
            if j < 0:
                raise PatternError(f'Error parsing file pattern "{pattern}"'
                                   f' - unclosed character class at offset {i}', pattern)
            i = j + 1
        else:
            i += 1

    trailing = len(pattern) - len(pattern.rstrip('\\'))
    if trailing % 2:
        raise PatternError(f'Error parsing file pattern "{pattern}" - dangling escape', pattern)


def glob_files(pattern: str) -> List[str]:
    """
    Expand a single glob pattern into the regular files it matches. A
    ``**`` path segment matches zero or more directories.
    """

    validate_pattern(pattern)

    try:
        matches = glob.glob(pattern, recursive=True, include_hidden=True)
    except (OSError, ValueError) as e:
        raise PatternError(f'Error parsing file pattern "{pattern}" - {e}', pattern) from e

    return [match for match in matches if os.path.isfile(match)]


def distinct(items: Iterable[T]) -> List[T]:
    """
    Drop repeated items, keeping the first occurrence of each.
    """

    seen = set()
    result = []
    for item in items:
        if item not in seen:
            seen.add(item)
            result.append(item)
    return result


def resolve_files(patterns: Iterable[str]) -> List[str]:
    """
    Expand every pattern and return the matched files, de-duplicated
    and in sorted order. Matching nothing at all is not an error.
    """

    found = []
    for pattern in patterns:
        matches = glob_files(pattern)
        logger.debug(f'Pattern "{pattern}" matched {len(matches)} files')
        found.extend(matches)

    return sorted(distinct(found))


def sanitize_name(filename: str) -> str:
    """
    Derive the registry artifact name for a file from its base name.
    """

    return NAME_PATTERN.sub('_', filename.rsplit('/', 1)[-1])


# The end.
