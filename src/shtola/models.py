# src/shtola/models.py
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from pathlib import PurePath
from types import MappingProxyType
from typing import Any, Callable, Dict, Iterator, Tuple, Union

from shtola.config import Config

PathLike = Union[str, PurePath]


@dataclass(frozen=True)
class ShFile:
    """
    Immutable record of one file: parsed front matter plus body bytes.

    Front-matter documents are frozen on construction (mappings become
    read-only proxies, lists become tuples, sets frozensets) because records
    are shared between store versions. Build new documents to change them.
    """
    frontmatter: Tuple[Any, ...] = ()
    content: bytes = b""

    def __post_init__(self):
        object.__setattr__(self, "frontmatter", tuple(_freeze(doc) for doc in self.frontmatter))

    @property
    def text(self) -> str:
        return self.content.decode("utf-8")

    def with_content(self, content: Union[bytes, str]) -> "ShFile":
        if isinstance(content, str):
            content = content.encode("utf-8")
        return replace(self, content=content)


def _freeze(value: Any) -> Any:
    if isinstance(value, (dict, MappingProxyType)):
        return MappingProxyType({k: _freeze(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(v) for v in value)
    if isinstance(value, set):
        return frozenset(value)
    return value


def normalize_key(path: PathLike) -> str:
    """
    Turns a path into a store key: POSIX separators, no leading './'.
    Rejects keys that could point outside the destination.
    """
    if not isinstance(path, (str, PurePath)):
        raise TypeError(f"File store keys must be str or PurePath, got {type(path).__name__}")
    if isinstance(path, PurePath):
        if path.is_absolute():
            raise ValueError(f"File store keys must be relative: {path!s}")
        parts = path.parts
    else:
        if path.startswith("/"):
            raise ValueError(f"File store keys must be relative: {path}")
        parts = tuple(p for p in path.split("/") if p)

    parts = tuple(p for p in parts if p != ".")
    if not parts:
        raise ValueError(f"Empty file store key: {path!r}")
    if ".." in parts:
        raise ValueError(f"File store keys may not contain '..': {path!s}")
    return "/".join(parts)


class FileStore(Mapping):
    """
    Read-only mapping of relative path -> ShFile.

    Every "mutating" operation returns a new store. The key index is copied
    on write; records themselves are frozen and shared between versions.
    """

    __slots__ = ("_entries",)

    def __init__(self, entries: Union[Mapping, None] = None):
        data: Dict[str, ShFile] = {}
        if entries:
            for key, record in entries.items():
                data[normalize_key(key)] = _check_record(record)
        self._entries = data

    @classmethod
    def _wrap(cls, data: Dict[str, ShFile]) -> "FileStore":
        store = cls.__new__(cls)
        store._entries = data
        return store

    def __getitem__(self, key: PathLike) -> ShFile:
        try:
            return self._entries[normalize_key(key)]
        except (TypeError, ValueError):
            raise KeyError(key) from None

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, (str, PurePath)):
            return False
        try:
            return normalize_key(key) in self._entries
        except ValueError:
            return False

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"FileStore({sorted(self._entries)!r})"

    def set(self, path: PathLike, record: ShFile) -> "FileStore":
        data = dict(self._entries)
        data[normalize_key(path)] = _check_record(record)
        return self._wrap(data)

    def update(self, updates: Mapping) -> "FileStore":
        """Merge `updates` into a copy of this store; incoming entries win."""
        data = dict(self._entries)
        for key, record in updates.items():
            data[normalize_key(key)] = _check_record(record)
        return self._wrap(data)

    def remove(self, path: PathLike) -> "FileStore":
        key = normalize_key(path)
        if key not in self._entries:
            raise KeyError(key)
        data = dict(self._entries)
        del data[key]
        return self._wrap(data)

    def filter(self, predicate: Callable[[str, ShFile], bool]) -> "FileStore":
        return self._wrap({k: v for k, v in self._entries.items() if predicate(k, v)})


def _check_record(record: Any) -> ShFile:
    if not isinstance(record, ShFile):
        raise TypeError(f"Expected ShFile, got {type(record).__name__}")
    return record


@dataclass(frozen=True)
class IR:
    """The value threaded through the pipeline: every file plus the config."""
    files: FileStore = field(default_factory=FileStore)
    config: Config = field(default_factory=Config)

    def with_files(self, files: FileStore) -> "IR":
        return replace(self, files=files)

    def update_files(self, updates: Mapping) -> "IR":
        return replace(self, files=self.files.update(updates))
