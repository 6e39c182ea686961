"""npm package manager implementation.

Active when package-lock.json is present; also the fallback when no lock
file is found at all.
"""

from __future__ import annotations

from .base import BasePackageManager


class NpmPackageManager(BasePackageManager):
    """npm package manager for package.json projects."""

    save_flag = "--save"

    @property
    def manager_name(self) -> str:
        return "npm"

    @property
    def lock_file(self) -> str:
        return "package-lock.json"

    @property
    def add_command(self) -> list[str]:
        return ["npm", "install"]

    @property
    def install_command(self) -> list[str]:
        return ["npm", "install"]

    @property
    def remove_command(self) -> list[str]:
        return ["npm", "uninstall"]

    @property
    def list_command(self) -> list[str]:
        return ["npm", "list"]

    @property
    def dev_flag(self) -> str:
        return "--save-dev"

    @property
    def peer_flag(self) -> str:
        return "--save-peer"

    @property
    def exact_flag(self) -> str:
        return "--save-exact"
