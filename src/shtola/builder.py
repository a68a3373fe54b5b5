# src/shtola/builder.py
import logging
from dataclasses import replace
from pathlib import Path
from typing import Iterable, Optional, Union

from shtola.config import Config
from shtola.core.ignore import dedupe_patterns, load_ignore_spec
from shtola.core.pipeline import Stage, Ware
from shtola.core.scanner import iter_source_files, read_dir
from shtola.core.writer import clean_dir, write_dir
from shtola.errors import SourceError
from shtola.models import IR, FileStore

logger = logging.getLogger(__name__)


class Shtola:
    """
    Build orchestrator: (clean) -> read -> pipeline -> write.

    Configure with the setters, register stages, then call `build()`.
    """

    def __init__(self, config: Optional[Config] = None):
        self.config = config or Config()
        self.ignore_file: Optional[Path] = None
        self._ware = Ware()

    def ignores(self, paths: Union[str, Path, Iterable[Union[str, Path]]]) -> None:
        if isinstance(paths, (str, Path)):
            paths = [paths]
        new = [Path(p).as_posix() if isinstance(p, Path) else p for p in paths]
        self.config = replace(self.config, ignores=dedupe_patterns(self.config.ignores, new))

    def source(self, path: Union[str, Path]) -> None:
        resolved = Path(path).resolve(strict=True)
        if not resolved.is_dir():
            raise NotADirectoryError(f"Source is not a directory: {resolved}")
        self.config = replace(self.config, source=resolved)

    def destination(self, path: Union[str, Path]) -> None:
        dest = Path(path)
        dest.mkdir(parents=True, exist_ok=True)
        self.config = replace(self.config, destination=dest.resolve())

    def clean(self, flag: bool) -> None:
        self.config = replace(self.config, clean=flag)

    def frontmatter(self, flag: bool) -> None:
        self.config = replace(self.config, frontmatter=flag)

    def register(self, stage: Stage) -> None:
        self._ware.wrap(stage)

    def build(self) -> IR:
        config = self.config
        if config.source is None:
            raise SourceError("No source directory set")
        if config.destination is None:
            raise SourceError("No destination directory set")

        if config.clean:
            if config.source == config.destination or config.destination in config.source.parents:
                raise SourceError(f"Refusing to clean {config.destination}: it contains the source")
            clean_dir(config.destination)

        spec = load_ignore_spec(config.ignores, self.ignore_file)
        # Never read our own output back in.
        paths = iter_source_files(config.source, spec, exclude=config.destination)
        files: FileStore = read_dir(config.source, paths, config.frontmatter)
        logger.info("Read %d files from %s", len(files), config.source)

        logger.info("Running %d stages", len(self._ware))
        result = self._ware.run(IR(files=files, config=config))

        written = write_dir(result, config.destination)
        logger.info("Wrote %d files to %s", written, config.destination)
        return result
