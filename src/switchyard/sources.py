"""Route sources — where route definitions are read from.

A *source* is anything with a name, text content, and a modification
time. ``Router.load()`` reads every source before touching the route
table, and ``Router.detect_changes()`` compares modification times
against the last load.
"""

import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol, runtime_checkable


@runtime_checkable
class RouteSource(Protocol):
    """Something route definitions can be loaded from."""

    @property
    def name(self) -> str: ...

    def read_text(self) -> str: ...

    def last_modified(self) -> float: ...


@dataclass(frozen=True, slots=True)
class FileSource:
    """A route file on disk."""

    path: Path

    @property
    def name(self) -> str:
        return str(self.path)

    def read_text(self) -> str:
        return self.path.read_text(encoding="utf-8")

    def last_modified(self) -> float:
        return self.path.stat().st_mtime


@dataclass(frozen=True, slots=True)
class StringSource:
    """In-memory route definitions. ``name`` decides which loader parses it."""

    name: str
    text: str
    modified: float = field(default_factory=time.time)

    def read_text(self) -> str:
        return self.text

    def last_modified(self) -> float:
        return self.modified


def as_source(obj: str | Path | RouteSource) -> RouteSource:
    """Accept a path (``str`` or ``Path``) or anything already a source."""
    if isinstance(obj, (str, Path)):
        return FileSource(Path(obj))
    return obj
