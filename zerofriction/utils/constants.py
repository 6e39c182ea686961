"""Centralized constants for the zerofriction utils package.

Single source of truth for paths and file names used across modules.
"""

from pathlib import Path

# ============================================================================
# OUTPUT DIRECTORIES
# ============================================================================

# Working directory for zerofriction artifacts (config, logs)
ZF_DIR = Path("./.zf")

ERROR_LOG_FILE = ZF_DIR / "error.log"
CONFIG_FILE_NAME = "config.json"

# ============================================================================
# NODE PROJECT LAYOUT
# ============================================================================

MANIFEST_FILE = "package.json"
MODULES_DIR = "node_modules"

# Source files the dependency scanner understands
JS_EXTENSIONS = frozenset([".ts", ".tsx", ".js", ".jsx", ".mjs", ".cjs"])

# Directories never walked when collecting source files
SKIP_DIRS = frozenset([
    "node_modules",
    ".git",
    ".zf",
    "dist",
    "build",
    "coverage",
    ".next",
    ".venv",
    "__pycache__",
])
