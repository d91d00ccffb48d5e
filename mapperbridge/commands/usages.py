"""Usages command - list mapper call sites in a Java source file."""

import json
from pathlib import Path

import click

from mapperbridge.commands._common import format_location, location_dict, run_with_index
from mapperbridge.config_runtime import load_runtime_config
from mapperbridge.indexer import MapperIndex
from mapperbridge.ui import console
from mapperbridge.utils.error_handler import handle_exceptions


@click.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--root", default=".", help="Project root directory")
@click.option("--json", "as_json", is_flag=True, help="Print machine-readable JSON")
@handle_exceptions
def usages(file, root, as_json):
    """Show calls through mapper-typed fields/parameters in FILE.

    Each call is resolved to the XML statement it executes. Calls whose
    statement is not indexed are not listed.
    """
    if not load_runtime_config(root)["features"]["enable_usage_links"]:
        console.print("[warning]Usage links are disabled (features.enable_usage_links)[/warning]")
        return

    content = Path(file).read_text(encoding="utf-8", errors="replace")

    async def resolve(index: MapperIndex):
        return await index.find_mapper_usages(content)

    results = run_with_index(root, resolve)

    if as_json:
        click.echo(json.dumps([
            {
                "field": usage.call.field_name,
                "method": usage.call.method_name,
                "mapper": usage.call.mapper_fully_qualified_name,
                "line": usage.call.position.line,
                "column": usage.call.position.column,
                "statement": location_dict(usage.target),
            }
            for usage in results
        ], indent=2))
        return

    for usage in results:
        call = usage.call
        console.print(
            f"{call.position.line + 1}:{call.position.column + 1} "
            f"[cmd]{call.field_name}.{call.method_name}[/cmd] -> "
            f"[path]{format_location(usage.target, root)}[/path]"
        )
    console.print(f"[success]{len(results)} mapper calls resolved[/success]")
