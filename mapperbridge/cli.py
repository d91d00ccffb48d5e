"""mapperbridge CLI - Main entry point and command registration hub."""
# ruff: noqa: E402 - commands imported after cli group definition

import click

from mapperbridge import __version__


@click.group()
@click.version_option(version=__version__, prog_name="mapperbridge")
@click.help_option("-h", "--help")
def cli():
    """mapperbridge - MyBatis mapper XML <-> Java mapper cross-references

    \b
    QUICK START:
      mapperbridge scan                                 # Index and list mapper pairs
      mapperbridge find-statement NS ID                 # Where is a statement?
      mapperbridge usages src/main/java/.../Service.java

    \b
    For detailed options: mapperbridge <command> --help"""
    pass


from mapperbridge.commands.links import links
from mapperbridge.commands.lookup import find_method, find_statement
from mapperbridge.commands.scan import scan
from mapperbridge.commands.usages import usages
from mapperbridge.commands.watch import watch

cli.add_command(scan)
cli.add_command(find_statement)
cli.add_command(find_method)
cli.add_command(usages)
cli.add_command(links)
cli.add_command(watch)


def main():
    """Main entry point for console script."""
    cli()


if __name__ == "__main__":
    main()
