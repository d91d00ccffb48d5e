"""Helpers shared by the command modules."""

import asyncio
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Any, TypeVar

from mapperbridge.config_runtime import load_runtime_config
from mapperbridge.indexer import LocalWorkspace, MapperIndex
from mapperbridge.indexer.models import SymbolLocation
from mapperbridge.indexer.workspace import uri_to_path

T = TypeVar("T")


def open_index(root: str, watch_changes: bool = False) -> MapperIndex:
    """Create an index over a project directory using its runtime config."""
    return MapperIndex(LocalWorkspace(root), load_runtime_config(root), watch_changes=watch_changes)


def run_with_index(root: str, action: Callable[[MapperIndex], Awaitable[T]]) -> T:
    """Initialize an index for root, run action against it, then dispose it."""

    async def _run() -> T:
        index = open_index(root)
        try:
            await index.ensure_initialized()
            return await action(index)
        finally:
            index.dispose()

    return asyncio.run(_run())


def display_path(uri: str, root: str) -> str:
    path = uri_to_path(uri)
    try:
        return path.relative_to(Path(root).resolve()).as_posix()
    except ValueError:
        return str(path)


def format_location(location: SymbolLocation, root: str) -> str:
    """file:line:column with 1-based line and column, like compiler output."""
    return f"{display_path(location.uri, root)}:{location.position.line + 1}:{location.position.column + 1}"


def location_dict(location: SymbolLocation) -> dict[str, Any]:
    return {
        "uri": location.uri,
        "line": location.position.line,
        "column": location.position.column,
    }
