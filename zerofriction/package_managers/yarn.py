"""Yarn package manager implementation.

yarn add always writes to package.json, so there is no save flag.
"""

from __future__ import annotations

from .base import BasePackageManager


class YarnPackageManager(BasePackageManager):
    """Yarn package manager, detected through yarn.lock."""

    @property
    def manager_name(self) -> str:
        return "yarn"

    @property
    def lock_file(self) -> str:
        return "yarn.lock"

    @property
    def add_command(self) -> list[str]:
        return ["yarn", "add"]

    @property
    def install_command(self) -> list[str]:
        return ["yarn", "install"]

    @property
    def remove_command(self) -> list[str]:
        return ["yarn", "remove"]

    @property
    def list_command(self) -> list[str]:
        return ["yarn", "list"]

    @property
    def dev_flag(self) -> str:
        return "--dev"

    @property
    def peer_flag(self) -> str:
        return "--peer"

    @property
    def exact_flag(self) -> str:
        return "--exact"
