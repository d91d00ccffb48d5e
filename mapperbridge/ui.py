"""Central UI handler for mapperbridge.

Single source of truth for Rich console styling. Import this instead of
instantiating Console() in every command file.
"""

import sys

from rich.console import Console
from rich.theme import Theme

BRIDGE_THEME = Theme({
    "info": "bold cyan",
    "warning": "bold yellow",
    "error": "bold red",
    "success": "bold green",
    "cmd": "bold magenta",
    "path": "bold cyan",
    "dim": "dim white",
})

# Single console instance - import this, don't create your own
console = Console(
    theme=BRIDGE_THEME,
    force_terminal=sys.stdout.isatty(),
)


def print_error(message: str) -> None:
    console.print(f"[error]{message}[/error]")
