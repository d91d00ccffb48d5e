"""mapperbridge utilities package."""

from .constants import CONFIG_FILE_NAME, ERROR_LOG_NAME, STATE_DIR_NAME, state_dir
from .error_handler import handle_exceptions

__all__ = [
    "CONFIG_FILE_NAME",
    "ERROR_LOG_NAME",
    "STATE_DIR_NAME",
    "handle_exceptions",
    "state_dir",
]
