# src/shtola/core/ignore.py
import logging
from pathlib import Path, PurePath
from typing import Iterable, List, Optional

import pathspec

logger = logging.getLogger(__name__)


def dedupe_patterns(existing: Iterable[str], new: Iterable[str]) -> tuple:
    """Appends `new` to `existing`, keeping the first occurrence of each pattern."""
    seen = set()
    result = []
    for pattern in list(existing) + list(new):
        pattern = str(pattern)
        if pattern not in seen:
            seen.add(pattern)
            result.append(pattern)
    return tuple(result)


def load_ignore_spec(patterns: Iterable[str], ignore_file: Optional[Path] = None) -> pathspec.PathSpec:
    """
    Builds a PathSpec from configured patterns and, if given and present,
    the lines of an ignore file (gitignore syntax).
    """
    lines: List[str] = [str(p) for p in patterns]

    if ignore_file is not None:
        if ignore_file.exists():
            with open(ignore_file, "r", encoding="utf-8") as f:
                lines.extend(f.read().splitlines())
        else:
            logger.debug("Ignore file %s not found, skipping", ignore_file)

    return pathspec.PathSpec.from_lines("gitwildmatch", lines)


def is_path_ignored(rel_path: PurePath, spec: pathspec.PathSpec, is_directory: bool = False) -> bool:
    """Checks a source-relative path against a PathSpec. Directories match 'dir/' patterns."""
    path_str = rel_path.as_posix()
    if is_directory:
        path_str += "/"
    return spec.match_file(path_str)
