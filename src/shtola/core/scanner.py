# src/shtola/core/scanner.py
import errno
import logging
import os
from pathlib import Path
from typing import Iterable, Iterator, Optional

import pathspec
import yaml

from shtola.core.frontmatter import lexer, to_yaml
from shtola.core.ignore import is_path_ignored
from shtola.errors import FrontMatterError
from shtola.models import FileStore, ShFile

logger = logging.getLogger(__name__)


def _raise(error: OSError) -> None:
    raise error


def iter_source_files(
    root_dir: Path,
    ignore_spec: Optional[pathspec.PathSpec] = None,
    exclude: Optional[Path] = None,
) -> Iterator[Path]:
    """
    Walks the source tree in sorted order, pruning ignored directories and
    the directory `exclude` (compared by resolved path), and yields absolute
    paths of regular, non-ignored files.
    """
    if exclude is not None:
        exclude = exclude.resolve()

    for root, dirs, files in os.walk(root_dir, onerror=_raise):
        root_path = Path(root)

        # os.walk descends only into what is left in `dirs`
        dirs.sort()
        if exclude is not None:
            for d in list(dirs):
                if (root_path / d).resolve() == exclude:
                    logger.debug("Skipping output directory %s", exclude)
                    dirs.remove(d)
        if ignore_spec is not None:
            for d in list(dirs):
                if is_path_ignored((root_path / d).relative_to(root_dir), ignore_spec, is_directory=True):
                    logger.debug("Pruning directory %s", (root_path / d).relative_to(root_dir).as_posix())
                    dirs.remove(d)

        for f in sorted(files):
            file_abs_path = root_path / f
            if not file_abs_path.is_file():
                continue
            if ignore_spec is not None and is_path_ignored(file_abs_path.relative_to(root_dir), ignore_spec):
                continue
            yield file_abs_path


def read_file(path: Path, rel_path: str, frontmatter: bool) -> ShFile:
    raw = path.read_bytes()
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise OSError(errno.EILSEQ, f"Not valid UTF-8 text ({e.reason})", str(path)) from e

    if not frontmatter:
        return ShFile(frontmatter=(), content=raw)

    matter, body = lexer(text)
    try:
        documents = to_yaml(matter)
    except yaml.YAMLError as e:
        raise FrontMatterError(rel_path, str(e)) from e
    return ShFile(frontmatter=documents, content=body.encode("utf-8"))


def read_dir(source: Path, paths: Iterable[Path], frontmatter: bool = False) -> FileStore:
    """
    Reads every file in `paths` (absolute, under `source`) into a new store
    keyed by source-relative POSIX path. The first failure aborts the read.
    """
    entries = {}
    for path in paths:
        rel_path = path.relative_to(source).as_posix()
        logger.debug("Reading %s", rel_path)
        entries[rel_path] = read_file(path, rel_path, frontmatter)
    return FileStore(entries)
