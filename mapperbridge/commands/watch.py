"""Watch command - keep the index live and report changes."""

import asyncio

import click

from mapperbridge.commands._common import open_index
from mapperbridge.ui import console
from mapperbridge.utils.constants import state_dir
from mapperbridge.utils.error_handler import handle_exceptions
from mapperbridge.utils.logging import configure_file_logging, logger


@click.command()
@click.option("--root", default=".", help="Project root directory")
@click.option("--interval", default=1.0, type=float, help="Seconds between status checks")
@handle_exceptions
def watch(root, interval):
    """Index ROOT, then follow file changes until interrupted (Ctrl+C).

    A rotating log is kept in ROOT/.mapperbridge/mapperbridge.log.
    """
    configure_file_logging(state_dir(root))

    async def follow() -> None:
        index = open_index(root, watch_changes=True)
        try:
            await index.ensure_initialized()
            last = None
            while True:
                current = (len(index.xml_mappers()), len(index.java_mappers()))
                if current != last:
                    logger.info("Indexed {} XML mappers, {} Java mappers", *current)
                    last = current
                await asyncio.sleep(interval)
        finally:
            index.dispose()

    try:
        asyncio.run(follow())
    except KeyboardInterrupt:
        console.print("[dim]Stopped watching[/dim]")
