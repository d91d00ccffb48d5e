"""Centralized constants for the mapperbridge utils package."""

from pathlib import Path

# ============================================================================
# PROJECT STATE
# ============================================================================

# Per-project state directory (config file, error log, rotating logs)
STATE_DIR_NAME = ".mapperbridge"

ERROR_LOG_NAME = "error.log"
CONFIG_FILE_NAME = "config.json"


def state_dir(root: str | Path | None = None) -> Path:
    """State directory of the project at ``root`` (current directory when omitted)."""
    return Path(root or ".") / STATE_DIR_NAME
