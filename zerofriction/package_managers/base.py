"""Abstract base class for package manager implementations.

All package managers must inherit from BasePackageManager. The install,
check and version operations are shared; concrete managers only declare
their identity, lock file and command vocabulary.

Implementations must provide:
- manager_name: Identifier for this manager ('npm', 'yarn', 'pnpm')
- lock_file: Lock file whose presence marks the manager as active
- add_command / install_command / remove_command / list_command: argv prefixes
- dev_flag / peer_flag / save_flag / exact_flag: install flags
"""

from __future__ import annotations

import asyncio
import json
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

from zerofriction.utils.logging import logger
from zerofriction.utils.process import run_command_async

DEFAULT_INSTALL_TIMEOUT = 300


@dataclass
class InstallOptions:
    """Flags for a single install; every field is optional and additive."""

    dev: bool = False
    peer: bool = False
    exact: bool = False
    version: str | None = None
    save: bool | None = None


@dataclass(frozen=True)
class InstallResult:
    """Outcome of one install attempt."""

    success: bool
    package_name: str
    duration: float
    version: str | None = None
    error: str | None = None


class BasePackageManager(ABC):
    """Abstract base class for all package manager implementations."""

    save_flag: str | None = None

    def __init__(
        self,
        root: str | Path = ".",
        modules_dir: str = "node_modules",
        install_timeout: float = DEFAULT_INSTALL_TIMEOUT,
    ):
        self.root = Path(root)
        self.modules_dir = modules_dir
        self.install_timeout = install_timeout

    @property
    @abstractmethod
    def manager_name(self) -> str:
        """Return manager identifier (e.g., 'npm', 'yarn', 'pnpm')."""
        ...

    @property
    @abstractmethod
    def lock_file(self) -> str:
        """Return the lock file name (e.g., 'yarn.lock')."""
        ...

    @property
    @abstractmethod
    def add_command(self) -> list[str]:
        """Return argv prefix used to add a single package."""
        ...

    @property
    @abstractmethod
    def install_command(self) -> list[str]:
        """Return argv used to install everything the manifest declares."""
        ...

    @property
    @abstractmethod
    def remove_command(self) -> list[str]:
        ...

    @property
    @abstractmethod
    def list_command(self) -> list[str]:
        ...

    @property
    @abstractmethod
    def dev_flag(self) -> str:
        ...

    @property
    @abstractmethod
    def peer_flag(self) -> str:
        ...

    @property
    @abstractmethod
    def exact_flag(self) -> str:
        ...

    async def detect_lock_file(self) -> bool:
        """Check whether this manager's lock file exists in the project root."""
        try:
            return (self.root / self.lock_file).is_file()
        except OSError:
            return False

    def build_install_args(self, package_name: str, options: InstallOptions | None = None) -> list[str]:
        """Build the argv for adding a package.

        Flag precedence: dev, else peer, else the save flag unless save is
        explicitly False. exact and version are applied on top.
        """
        options = options or InstallOptions()
        args = list(self.add_command)

        if options.dev:
            args.append(self.dev_flag)
        elif options.peer:
            args.append(self.peer_flag)
        elif options.save is not False and self.save_flag:
            args.append(self.save_flag)

        if options.exact:
            args.append(self.exact_flag)

        package_spec = f"{package_name}@{options.version}" if options.version else package_name
        args.append(package_spec)
        return args

    def format_install_command(self, package_name: str, options: InstallOptions | None = None) -> str:
        """Render the install argv as a shell command string."""
        return " ".join(self.build_install_args(package_name, options))

    async def install(self, package_name: str, options: InstallOptions | None = None) -> InstallResult:
        """Install a package by running the real package manager CLI.

        Never raises: every failure becomes InstallResult(success=False).
        """
        options = options or InstallOptions()
        start_time = time.time()
        args = self.build_install_args(package_name, options)

        logger.info(
            "Running {command}",
            command=" ".join(args),
            package_manager=self.manager_name,
        )

        try:
            result = await run_command_async(args, cwd=str(self.root), timeout=self.install_timeout)
        except asyncio.CancelledError:
            logger.warning(f"Install of {package_name} cancelled")
            return InstallResult(
                success=False,
                package_name=package_name,
                error="Install cancelled",
                duration=time.time() - start_time,
            )
        except Exception as e:
            return InstallResult(
                success=False,
                package_name=package_name,
                error=f"{type(e).__name__}: {e}",
                duration=time.time() - start_time,
            )

        if not result["success"]:
            error = result["stderr"].strip() or f"{self.manager_name} exited with code {result['returncode']}"
            return InstallResult(
                success=False,
                package_name=package_name,
                error=error,
                duration=time.time() - start_time,
            )

        return InstallResult(
            success=True,
            package_name=package_name,
            version=options.version or "latest",
            duration=time.time() - start_time,
        )

    async def check_installed(self, package_name: str) -> bool:
        """Check for the package directory under the modules directory."""
        try:
            return (self.root / self.modules_dir / package_name).exists()
        except (OSError, ValueError):
            return False

    async def get_version(self, package_name: str) -> str | None:
        """Read the installed package's own manifest version."""
        manifest = self.root / self.modules_dir / package_name / "package.json"
        try:
            with open(manifest, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError):
            return None

        if not isinstance(data, dict):
            return None
        version = data.get("version")
        return version if isinstance(version, str) and version else None

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<{self.__class__.__name__} manager_name={self.manager_name!r} root={str(self.root)!r}>"
