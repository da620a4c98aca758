"""
File sources: enumerate game data and catalogs from a release archive or a
local game directory.

Both sources yield files sorted by their path inside the game tree, so
aggregated datasets come out the same on every run.
"""

import io
import logging
import re
import zipfile
from abc import ABC, abstractmethod
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Callable, Dict, Iterator, List, Tuple

from ..errors import MalformedObjectError


@lru_cache(maxsize=64)
def compile_pattern(pattern: str) -> "re.Pattern[str]":
    """Translate a ``**`` glob into a regex over POSIX paths.

    ``*`` and ``?`` never cross ``/``; ``**/`` matches zero or more
    directories.
    """
    regex: List[str] = []
    i = 0
    while i < len(pattern):
        if pattern.startswith("**/", i):
            regex.append("(?:[^/]+/)*")
            i += 3
        elif pattern.startswith("**", i):
            regex.append(".*")
            i += 2
        elif pattern[i] == "*":
            regex.append("[^/]*")
            i += 1
        elif pattern[i] == "?":
            regex.append("[^/]")
            i += 1
        else:
            regex.append(re.escape(pattern[i]))
            i += 1
    return re.compile("".join(regex) + r"\Z")


def match_path(pattern: str, path: str) -> bool:
    return compile_pattern(pattern).match(path) is not None


@dataclass(frozen=True)
class SourceFile:
    """A file inside a game tree, read lazily."""

    name: str
    _read: Callable[[], bytes]

    def read_bytes(self) -> bytes:
        return self._read()

    def read_text(self) -> str:
        """Decode the file as UTF-8.

        Raises:
            MalformedObjectError: if the file is not valid UTF-8
        """
        data = self._read()
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise MalformedObjectError(
                f"invalid UTF-8: {e.reason}",
                e.start,
                data.count(b"\n", 0, e.start) + 1,
                self.name,
            ) from e


class FileSource(ABC):
    """A game tree that can list its files by glob pattern."""

    @abstractmethod
    def names(self) -> List[str]:
        """Return all file paths in the tree, relative and POSIX-style."""

    @abstractmethod
    def _reader(self, name: str) -> Callable[[], bytes]:
        """Return a callable reading the file at ``name``."""

    def list_files(self, pattern: str) -> Iterator[SourceFile]:
        """Yield files matching ``pattern`` in sorted path order."""
        for name in sorted(self.names()):
            if match_path(pattern, name):
                yield SourceFile(name, self._reader(name))

    def read_texts(self, pattern: str) -> Iterator[Tuple[str, str]]:
        """Yield ``(path, text)`` pairs for files matching ``pattern``."""
        for source_file in self.list_files(pattern):
            yield source_file.name, source_file.read_text()


class ZipFileSource(FileSource):
    """Files inside a release zipball.

    GitHub zipballs wrap the tree in one ``<owner>-<repo>-<sha>/`` directory,
    which is stripped from every name.
    """

    def __init__(self, archive: bytes | str | Path):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        if isinstance(archive, bytes):
            archive = io.BytesIO(archive)
        self._zip = zipfile.ZipFile(archive)
        self._members: Dict[str, zipfile.ZipInfo] = {}
        for info in self._zip.infolist():
            if info.is_dir():
                continue
            _, _, name = info.filename.partition("/")
            if name:
                self._members[name] = info
        self.logger.debug(f"Opened archive with {len(self._members)} files")

    def names(self) -> List[str]:
        return list(self._members)

    def _reader(self, name: str) -> Callable[[], bytes]:
        info = self._members[name]
        return lambda: self._zip.read(info)

    def close(self) -> None:
        self._zip.close()

    def __enter__(self) -> "ZipFileSource":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class DirectoryFileSource(FileSource):
    """Files below a local game directory."""

    def __init__(self, root: str | Path):
        self.root = Path(root)
        if not self.root.is_dir():
            raise FileNotFoundError(f"Game directory not found: {self.root}")

    def names(self) -> List[str]:
        return [
            path.relative_to(self.root).as_posix()
            for path in self.root.rglob("*")
            if path.is_file()
        ]

    def _reader(self, name: str) -> Callable[[], bytes]:
        path = self.root / name
        return path.read_bytes
