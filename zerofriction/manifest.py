"""package.json loading for dependency friction detection."""

import json
from dataclasses import dataclass, field
from pathlib import Path

from zerofriction.utils.logging import logger


@dataclass(frozen=True)
class PackageInfo:
    """Snapshot of a package.json manifest. Never mutated; re-read instead."""

    name: str = ""
    version: str = ""
    dependencies: dict[str, str] = field(default_factory=dict)
    dev_dependencies: dict[str, str] = field(default_factory=dict)
    peer_dependencies: dict[str, str] = field(default_factory=dict)

    def all_dependencies(self) -> dict[str, str]:
        """Production and dev dependencies; dev wins on duplicate names."""
        return {**self.dependencies, **self.dev_dependencies}

    def declares(self, package_name: str) -> bool:
        """Check whether any dependency section names the package."""
        return (
            package_name in self.dependencies
            or package_name in self.dev_dependencies
            or package_name in self.peer_dependencies
        )

    @classmethod
    def from_dict(cls, data: dict) -> "PackageInfo":
        """Build from parsed package.json, ignoring malformed sections."""
        return cls(
            name=str(data.get("name") or ""),
            version=str(data.get("version") or ""),
            dependencies=_string_map(data.get("dependencies")),
            dev_dependencies=_string_map(data.get("devDependencies")),
            peer_dependencies=_string_map(data.get("peerDependencies")),
        )


def _string_map(section) -> dict[str, str]:
    if not isinstance(section, dict):
        return {}
    return {str(k): str(v) for k, v in section.items()}


def load_package_info(root: str | Path = ".", manifest: str = "package.json") -> PackageInfo | None:
    """Read and parse the project manifest.

    Returns None (and logs) when the file is missing or not a JSON object.
    """
    path = Path(root) / manifest
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        logger.warning(f"Could not load {manifest}: not found in {Path(root).resolve()}")
        return None
    except (json.JSONDecodeError, OSError) as e:
        logger.warning(f"Could not load {manifest}: {e}")
        return None

    if not isinstance(data, dict):
        logger.warning(f"Could not load {manifest}: top level is not an object")
        return None

    info = PackageInfo.from_dict(data)
    logger.debug(f"Loaded package info: {info.name}@{info.version}")
    return info
