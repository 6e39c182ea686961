"""pnpm package manager implementation."""

from __future__ import annotations

from .base import BasePackageManager


class PnpmPackageManager(BasePackageManager):
    """pnpm package manager, detected through pnpm-lock.yaml."""

    @property
    def manager_name(self) -> str:
        return "pnpm"

    @property
    def lock_file(self) -> str:
        return "pnpm-lock.yaml"

    @property
    def add_command(self) -> list[str]:
        return ["pnpm", "add"]

    @property
    def install_command(self) -> list[str]:
        return ["pnpm", "install"]

    @property
    def remove_command(self) -> list[str]:
        return ["pnpm", "remove"]

    @property
    def list_command(self) -> list[str]:
        return ["pnpm", "list"]

    @property
    def dev_flag(self) -> str:
        return "--save-dev"

    @property
    def peer_flag(self) -> str:
        return "--save-peer"

    @property
    def exact_flag(self) -> str:
        return "--save-exact"
