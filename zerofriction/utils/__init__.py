"""zerofriction utilities package."""

from .constants import ERROR_LOG_FILE, MANIFEST_FILE, MODULES_DIR, ZF_DIR
from .error_handler import handle_exceptions
from .exit_codes import ExitCodes
from .logging import logger
from .process import run_command_async
from .similarity import levenshtein_distance, similarity

__all__ = [
    "ZF_DIR",
    "ERROR_LOG_FILE",
    "MANIFEST_FILE",
    "MODULES_DIR",
    "handle_exceptions",
    "ExitCodes",
    "logger",
    "run_command_async",
    "levenshtein_distance",
    "similarity",
]
