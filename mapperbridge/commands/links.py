"""Links command - list counterparts for every symbol of a mapper file."""

from pathlib import Path

import click

from mapperbridge.commands._common import format_location, run_with_index
from mapperbridge.config_runtime import load_runtime_config
from mapperbridge.indexer import MapperIndex
from mapperbridge.indexer.navigation import java_statement_links, xml_method_links
from mapperbridge.ui import console
from mapperbridge.utils.error_handler import handle_exceptions


@click.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--root", default=".", help="Project root directory")
@handle_exceptions
def links(file, root):
    """For a mapper .java or .xml FILE, show where each symbol's counterpart lives.

    Java methods link to XML statements; XML statements link to Java methods.
    """
    if not load_runtime_config(root)["features"]["enable_code_links"]:
        console.print("[warning]Code links are disabled (features.enable_code_links)[/warning]")
        return

    suffix = Path(file).suffix.lower()
    if suffix == ".java":
        build_links = java_statement_links
    elif suffix == ".xml":
        build_links = xml_method_links
    else:
        raise click.BadParameter("expected a .java or .xml file", param_hint="FILE")

    content = Path(file).read_text(encoding="utf-8", errors="replace")

    async def collect(index: MapperIndex):
        return await build_links(index, content)

    results = run_with_index(root, collect)
    for link in results:
        console.print(
            f"{link.position.line + 1}:{link.position.column + 1} "
            f"[cmd]{link.name}[/cmd] -> [path]{format_location(link.target, root)}[/path]"
        )
    console.print(f"[success]{len(results)} links[/success]")
