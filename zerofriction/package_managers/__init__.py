"""Package managers module - interchangeable npm/yarn/pnpm backends.

Provides a registry pattern for package manager implementations:
- pnpm (pnpm-lock.yaml)
- Yarn (yarn.lock)
- npm (package-lock.json, and the default when no lock file exists)

Usage:
    from zerofriction.package_managers import get_manager, select_manager

    # Get specific manager
    yarn_mgr = get_manager("yarn", root="path/to/project")

    # Pick the active manager from lock files
    mgr = await select_manager("path/to/project")
    result = await mgr.install("lodash")
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

from zerofriction.utils.logging import logger

from .base import DEFAULT_INSTALL_TIMEOUT, BasePackageManager, InstallOptions, InstallResult

if TYPE_CHECKING:
    from collections.abc import Sequence

DEFAULT_MANAGER = "npm"

# Lazy imports to avoid circular dependencies
_REGISTRY: dict[str, type[BasePackageManager]] | None = None


def _init_registry() -> dict[str, type[BasePackageManager]]:
    """Initialize the registry in lock-file probing priority order."""
    global _REGISTRY
    if _REGISTRY is not None:
        return _REGISTRY

    from .npm import NpmPackageManager
    from .pnpm import PnpmPackageManager
    from .yarn import YarnPackageManager

    _REGISTRY = {
        "pnpm": PnpmPackageManager,
        "yarn": YarnPackageManager,
        "npm": NpmPackageManager,
    }
    return _REGISTRY


def get_manager(manager_name: str, root: str | Path = ".", **kwargs: Any) -> BasePackageManager | None:
    """Get package manager instance by name.

    Args:
        manager_name: The manager identifier ('npm', 'yarn', 'pnpm')
        root: Project root the manager operates in
        **kwargs: Passed through to the manager (modules_dir, install_timeout)

    Returns:
        Package manager instance or None if not found
    """
    registry = _init_registry()
    cls = registry.get(manager_name.lower())
    return cls(root, **kwargs) if cls else None


def get_all_managers(root: str | Path = ".", **kwargs: Any) -> list[BasePackageManager]:
    """Get all registered package managers in probing priority order."""
    registry = _init_registry()
    return [cls(root, **kwargs) for cls in registry.values()]


async def select_manager(
    root: str | Path = ".",
    managers: Sequence[BasePackageManager] | None = None,
    **kwargs: Any,
) -> BasePackageManager:
    """Choose the active package manager by probing lock files.

    Managers are checked sequentially in priority order (pnpm, yarn, npm);
    the first whose lock file exists wins. With no lock file the npm
    manager is returned.
    """
    candidates = list(managers) if managers is not None else get_all_managers(root, **kwargs)

    for mgr in candidates:
        if await mgr.detect_lock_file():
            logger.info(f"Detected {mgr.manager_name} as active package manager")
            return mgr

    default = next((m for m in candidates if m.manager_name == DEFAULT_MANAGER), None)
    if default is None:
        default = get_manager(DEFAULT_MANAGER, root, **kwargs)
    logger.info(f"Using {DEFAULT_MANAGER} as default package manager")
    return default


__all__ = [
    "DEFAULT_INSTALL_TIMEOUT",
    "DEFAULT_MANAGER",
    "BasePackageManager",
    "InstallOptions",
    "InstallResult",
    "get_manager",
    "get_all_managers",
    "select_manager",
]
