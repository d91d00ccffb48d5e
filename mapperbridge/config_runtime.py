"""Runtime configuration for mapperbridge - centralized configuration management."""

import copy
import json
import os
from pathlib import Path
from typing import Any

from mapperbridge.indexer.config import (
    DEFAULT_JAVA_MAPPER_GLOBS,
    DEFAULT_SCAN_CONCURRENCY,
    DEFAULT_XML_MAPPER_GLOBS,
    MAX_SCAN_CONCURRENCY,
)
from mapperbridge.utils.constants import CONFIG_FILE_NAME, state_dir
from mapperbridge.utils.logging import logger

DEFAULTS = {
    "mappers": {
        "xml_mapper_globs": list(DEFAULT_XML_MAPPER_GLOBS),
        "java_mapper_globs": list(DEFAULT_JAVA_MAPPER_GLOBS),
    },
    "limits": {
        "scan_concurrency": DEFAULT_SCAN_CONCURRENCY,
    },
    "features": {
        "enable_code_links": True,
        "enable_usage_links": True,
    },
}

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _coerce_env(value: str, default_value: Any) -> Any:
    if isinstance(default_value, bool):
        lowered = value.strip().lower()
        if lowered in _TRUE_VALUES:
            return True
        if lowered in _FALSE_VALUES:
            return False
        raise ValueError("expected one of 1/0, true/false, yes/no, on/off")
    if isinstance(default_value, int):
        return int(value)
    if isinstance(default_value, list):
        return [v.strip() for v in value.split(",") if v.strip()]
    return value


def _accepts(default_value: Any, value: Any) -> bool:
    if isinstance(default_value, bool):
        return isinstance(value, bool)
    if isinstance(default_value, int):
        return isinstance(value, int) and not isinstance(value, bool)
    if isinstance(default_value, list):
        return isinstance(value, list) and all(isinstance(v, str) for v in value)
    return isinstance(value, type(default_value))


def load_runtime_config(root: str | Path = ".") -> dict[str, Any]:
    """
    Load runtime configuration from .mapperbridge/config.json and environment variables.

    Config priority (highest to lowest):
    1. Environment variables (MAPPERBRIDGE_<SECTION>_<KEY>)
    2. .mapperbridge/config.json file
    3. Built-in defaults

    Args:
        root: Root directory to look for config file

    Returns:
        Configuration dictionary with merged values
    """
    cfg = copy.deepcopy(DEFAULTS)

    path = state_dir(root) / CONFIG_FILE_NAME
    try:
        if path.exists():
            with open(path, encoding="utf-8") as f:
                user = json.load(f)

            if isinstance(user, dict):
                for section in cfg:
                    if section in user and isinstance(user[section], dict):
                        for key, value in user[section].items():
                            if key in cfg[section] and _accepts(cfg[section][key], value):
                                cfg[section][key] = value
                            elif key in cfg[section]:
                                logger.warning(
                                    "Ignoring {}.{} in {}: expected {}",
                                    section,
                                    key,
                                    path,
                                    type(cfg[section][key]).__name__,
                                )
    except (json.JSONDecodeError, OSError) as e:
        logger.warning("Could not load config file from {}: {}", path, e)
        logger.info("Continuing with default configuration")

    for section in cfg:
        for key in cfg[section]:
            env_var = f"MAPPERBRIDGE_{section.upper()}_{key.upper()}"
            if env_var in os.environ:
                value = os.environ[env_var]
                try:
                    cfg[section][key] = _coerce_env(value, cfg[section][key])
                except (ValueError, AttributeError) as e:
                    logger.warning("Invalid value for environment variable {}: '{}' - {}", env_var, value, e)
                    logger.info("Using default value: {}", cfg[section][key])

    limits = cfg["limits"]
    limits["scan_concurrency"] = max(1, min(limits["scan_concurrency"], MAX_SCAN_CONCURRENCY))

    return cfg
