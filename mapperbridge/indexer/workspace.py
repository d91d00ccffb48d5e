"""Workspace collaborators consumed by the mapper index.

The index never touches the file system directly. It asks a Workspace to
enumerate candidate files, read their text, and deliver change events.
LocalWorkspace is the on-disk implementation: files are identified by
``file://`` URIs, enumeration prunes SKIP_DIRS, and change events come from
a watchdog observer marshalled onto the owning asyncio loop.
"""

import asyncio
import os
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum
from fnmatch import fnmatch
from functools import lru_cache
from pathlib import Path
from typing import Protocol
from urllib.parse import unquote, urlparse
from urllib.request import url2pathname

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from ..utils.logging import logger
from .config import SKIP_DIRS
from .exceptions import FileReadError, IndexInitializationError


class ChangeKind(str, Enum):
    CREATED = "created"
    CHANGED = "changed"
    DELETED = "deleted"


@dataclass(frozen=True)
class ChangeEvent:
    """A single file change notification."""

    kind: ChangeKind
    uri: str


class Subscription(Protocol):
    def dispose(self) -> None: ...


class Workspace(Protocol):
    """What the index needs from its host."""

    async def find_files(self, globs: Sequence[str]) -> list[str]:
        """Return URIs of files matching any of the glob patterns."""
        ...

    async def read_text(self, uri: str) -> str:
        """Return file text; raise FileReadError when it cannot be read."""
        ...

    def watch(self, globs: Sequence[str], handler: Callable[[ChangeEvent], None]) -> Subscription:
        """Deliver change events for files matching globs until disposed."""
        ...


def path_to_uri(path: Path | str) -> str:
    return Path(path).resolve().as_uri()


def uri_to_path(uri: str) -> Path:
    """Convert a file URI (or a plain path) to a Path."""
    if "://" not in uri:
        return Path(uri)
    parsed = urlparse(uri)
    if parsed.scheme != "file":
        raise ValueError(f"Not a file URI: {uri}")
    return Path(url2pathname(unquote(parsed.path)))


@lru_cache(maxsize=256)
def _glob_variants(pattern: str) -> tuple[str, ...]:
    """Expand each '**/' into 'present' and 'absent' so it can match zero directories."""
    head, sep, tail = pattern.partition("**/")
    if not sep:
        return (pattern,)
    variants = []
    for rest in _glob_variants(tail):
        variants.append(head + "**/" + rest)
        variants.append(head + rest)
    return tuple(dict.fromkeys(variants))


def matches_glob(relative_path: str, pattern: str) -> bool:
    """Match a POSIX relative path against a workspace glob pattern."""
    return any(fnmatch(relative_path, variant) for variant in _glob_variants(pattern))


def matches_any(relative_path: str, globs: Sequence[str]) -> bool:
    return any(matches_glob(relative_path, pattern) for pattern in globs)


class _GlobEventHandler(FileSystemEventHandler):
    """Filter watchdog events by glob and forward them to the asyncio loop."""

    def __init__(
        self,
        root: Path,
        globs: Sequence[str],
        handler: Callable[[ChangeEvent], None],
        loop: asyncio.AbstractEventLoop,
    ):
        super().__init__()
        self.root = root
        self.globs = list(globs)
        self.handler = handler
        self.loop = loop

    def _forward(self, kind: ChangeKind, src_path: str | bytes) -> None:
        path = Path(os.fsdecode(src_path))
        try:
            relative = path.resolve().relative_to(self.root).as_posix()
        except ValueError:
            return
        if any(part in SKIP_DIRS for part in Path(relative).parts[:-1]):
            return
        if not matches_any(relative, self.globs):
            return
        event = ChangeEvent(kind, path_to_uri(path))
        if self.loop.is_closed():
            return
        self.loop.call_soon_threadsafe(self.handler, event)

    def on_created(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._forward(ChangeKind.CREATED, event.src_path)

    def on_modified(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._forward(ChangeKind.CHANGED, event.src_path)

    def on_deleted(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._forward(ChangeKind.DELETED, event.src_path)

    def on_moved(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._forward(ChangeKind.DELETED, event.src_path)
            self._forward(ChangeKind.CREATED, event.dest_path)


class _ObserverSubscription:
    def __init__(self, observer: Observer):
        self._observer = observer

    def dispose(self) -> None:
        if self._observer is None:
            return
        self._observer.stop()
        self._observer.join(timeout=5)
        self._observer = None


class LocalWorkspace:
    """Workspace backed by a directory on disk."""

    def __init__(self, root: Path | str, follow_symlinks: bool = False):
        self.root = Path(root).resolve()
        self.follow_symlinks = follow_symlinks

    def _walk(self, globs: Sequence[str]) -> list[str]:
        uris = []
        for dirpath, dirnames, filenames in os.walk(self.root, followlinks=self.follow_symlinks):
            dirnames[:] = sorted(d for d in dirnames if d not in SKIP_DIRS)
            base = Path(dirpath)
            for filename in sorted(filenames):
                path = base / filename
                relative = path.relative_to(self.root).as_posix()
                if matches_any(relative, globs):
                    uris.append(path_to_uri(path))
        return uris

    async def find_files(self, globs: Sequence[str]) -> list[str]:
        if not self.root.is_dir():
            raise IndexInitializationError(
                f"Workspace root is not a directory: {self.root}",
                details={"root": str(self.root)},
            )
        return await asyncio.to_thread(self._walk, list(globs))

    async def read_text(self, uri: str) -> str:
        path = uri_to_path(uri)
        try:
            return await asyncio.to_thread(path.read_text, encoding="utf-8", errors="replace")
        except OSError as e:
            raise FileReadError(uri, f"Could not read {path}: {e}") from e

    def watch(self, globs: Sequence[str], handler: Callable[[ChangeEvent], None]) -> Subscription:
        """Start a watchdog observer; must be called from inside a running loop."""
        loop = asyncio.get_running_loop()
        observer = Observer()
        observer.schedule(_GlobEventHandler(self.root, globs, handler, loop), str(self.root), recursive=True)
        observer.daemon = True
        observer.start()
        logger.debug("Watching {} for {}", self.root, list(globs))
        return _ObserverSubscription(observer)
