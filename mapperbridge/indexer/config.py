"""Indexer configuration - constants and patterns.

This module contains only configuration constants. Extraction patterns
live next to the extractor that uses them.
"""

import os

# =============================================================================
# PERFORMANCE CONFIGURATION
# =============================================================================

def _get_limit(env_var: str, default: int, max_value: int) -> int:
    """Get a numeric limit from environment or use default."""
    try:
        value = int(os.environ.get(env_var, default))
        return max(1, min(value, max_value))
    except (ValueError, TypeError):
        return default


# Maximum number of files read and parsed concurrently during a full scan
MAX_SCAN_CONCURRENCY = 256
DEFAULT_SCAN_CONCURRENCY = _get_limit("MAPPERBRIDGE_SCAN_CONCURRENCY", 32, MAX_SCAN_CONCURRENCY)


# =============================================================================
# FILE SYSTEM CONFIGURATION
# =============================================================================

# Directories never descended into while enumerating mapper candidates
SKIP_DIRS: set[str] = {
    # Version control
    ".git",
    ".hg",
    ".svn",

    # Dependencies
    "node_modules",

    # Build artifacts
    "build",
    "out",
    "target",  # Maven
    "bin",

    # Gradle / IDE state
    ".gradle",
    ".idea",
    ".vscode",
    ".settings",

    # Python tooling that may sit next to a Java project
    "__pycache__",
    ".venv",
    "venv",

    # Our own state
    ".mapperbridge",
}


# =============================================================================
# MAPPER FILE PATTERNS
# =============================================================================

DEFAULT_XML_MAPPER_GLOBS: list[str] = [
    "**/resources/**/*.xml",
    "**/*Mapper.xml",
]

DEFAULT_JAVA_MAPPER_GLOBS: list[str] = [
    "**/*Mapper.java",
    "**/*Dao.java",
    "**/*Repository.java",
]

JAVA_EXTENSIONS = [".java"]
XML_EXTENSIONS = [".xml"]
