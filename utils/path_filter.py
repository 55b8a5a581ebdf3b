# utils/path_filter.py
"""
Glob-based exclusion of diff files.

Patterns are matched segment by segment against the file's target path:
`*`, `?` and `[...]` never cross a `/`, while a `**` segment spans any
number of directories. Matching is case-sensitive, and a segment starting
with `.` is only matched by a pattern segment that also starts with `.`.
"""

import logging
from fnmatch import fnmatchcase
from typing import Iterable, List, Sequence

from models import DiffFile

logger = logging.getLogger(__name__)

GLOBSTAR = "**"


def _match_segment(name: str, pattern: str) -> bool:
    if name.startswith(".") and not pattern.startswith("."):
        return False
    return fnmatchcase(name, pattern)


def _match_parts(parts: Sequence[str], patterns: Sequence[str]) -> bool:
    if not patterns:
        return not parts

    head = patterns[0]
    if head == GLOBSTAR:
        for skip in range(len(parts) + 1):
            if skip and parts[skip - 1].startswith("."):
                break
            if _match_parts(parts[skip:], patterns[1:]):
                return True
        return False

    if not parts:
        return False
    return _match_segment(parts[0], head) and _match_parts(parts[1:], patterns[1:])


def glob_match(path: str, pattern: str) -> bool:
    if not path or not pattern:
        return False
    return _match_parts(path.split("/"), pattern.split("/"))


def is_excluded(path: str, patterns: Iterable[str]) -> bool:
    return any(glob_match(path, p) for p in patterns)


def filter_files(files: Sequence[DiffFile], patterns: Sequence[str]) -> List[DiffFile]:
    """
    Drop files whose target path matches any pattern. Files without a target
    path (deleted) are never matched here; the pipeline skips them itself.
    """
    if not patterns:
        return list(files)

    kept = []
    for f in files:
        if f.target_path is not None and is_excluded(f.target_path, patterns):
            logger.info("Excluding %s from review", f.target_path)
            continue
        kept.append(f)
    return kept
