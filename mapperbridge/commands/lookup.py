"""Lookup commands - resolve a statement or method to its declaration."""

import click

from mapperbridge.commands._common import format_location, run_with_index
from mapperbridge.indexer import MapperIndex
from mapperbridge.ui import print_error
from mapperbridge.utils.error_handler import handle_exceptions


@click.command("find-statement")
@click.argument("namespace")
@click.argument("statement_id")
@click.option("--root", default=".", help="Project root directory")
@handle_exceptions
def find_statement(namespace, statement_id, root):
    """Print where NAMESPACE's statement STATEMENT_ID is declared.

    Exits with status 1 when the statement is not indexed.
    """

    async def lookup(index: MapperIndex):
        return index.find_statement(namespace, statement_id)

    location = run_with_index(root, lookup)
    if location is None:
        print_error(f"Statement not found: {namespace}.{statement_id}")
        raise SystemExit(1)
    click.echo(format_location(location, root))


@click.command("find-method")
@click.argument("fqn")
@click.argument("method_name")
@click.option("--root", default=".", help="Project root directory")
@handle_exceptions
def find_method(fqn, method_name, root):
    """Print where mapper FQN declares METHOD_NAME.

    Exits with status 1 when the method is not indexed.
    """

    async def lookup(index: MapperIndex):
        return index.find_method(fqn, method_name)

    location = run_with_index(root, lookup)
    if location is None:
        print_error(f"Method not found: {fqn}#{method_name}")
        raise SystemExit(1)
    click.echo(format_location(location, root))
