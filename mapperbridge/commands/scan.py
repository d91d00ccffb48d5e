"""Scan command - build the mapper index and report mapper pairs."""

import json

import click
from rich.table import Table

from mapperbridge.commands._common import display_path, run_with_index
from mapperbridge.indexer import MapperIndex
from mapperbridge.ui import console
from mapperbridge.utils.error_handler import handle_exceptions


def _summarize(index: MapperIndex, root: str) -> list[dict]:
    rows = []
    namespaces = {doc.namespace for doc in index.xml_mappers()}
    namespaces.update(index.get_known_mapper_fqns())

    for namespace in sorted(namespaces):
        xml_doc = index.get_xml_mapper_by_namespace(namespace)
        java_doc = index.get_java_mapper_by_fqn(namespace)
        statement_ids = set(xml_doc.statement_by_id) if xml_doc else set()
        unmatched = (
            [name for name in java_doc.method_by_name if name not in statement_ids]
            if java_doc and xml_doc
            else []
        )
        rows.append({
            "namespace": namespace,
            "xml": display_path(xml_doc.uri, root) if xml_doc else None,
            "java": display_path(java_doc.uri, root) if java_doc else None,
            "statements": len(xml_doc.statements) if xml_doc else 0,
            "methods": len(java_doc.methods) if java_doc else 0,
            "unmatched_methods": unmatched,
        })
    return rows


@click.command()
@click.option("--root", default=".", help="Project root directory")
@click.option("--json", "as_json", is_flag=True, help="Print machine-readable JSON")
@handle_exceptions
def scan(root, as_json):
    """Index mapper XML and Java mapper interfaces under ROOT.

    Lists every namespace found on either side, which files declare it,
    and the Java methods that have no XML statement.

    Examples:
      mapperbridge scan
      mapperbridge scan --root ../service --json
    """

    async def collect(index: MapperIndex) -> list[dict]:
        return _summarize(index, root)

    rows = run_with_index(root, collect)

    if as_json:
        click.echo(json.dumps(rows, indent=2))
        return

    table = Table(title="Mapper pairs")
    table.add_column("Namespace", style="info")
    table.add_column("XML", style="path")
    table.add_column("Java", style="path")
    table.add_column("Statements", justify="right")
    table.add_column("Methods", justify="right")
    table.add_column("Unmatched methods", style="warning")

    for row in rows:
        table.add_row(
            row["namespace"],
            row["xml"] or "-",
            row["java"] or "-",
            str(row["statements"]),
            str(row["methods"]),
            ", ".join(row["unmatched_methods"]),
        )

    console.print(table)
    console.print(f"[success]{len(rows)} namespaces indexed[/success]")
