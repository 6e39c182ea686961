"""Dependency friction detection and remediation.

Turns the scanner's generic "dependency missing" issues into typed friction
points, enriches them with suggestions and install eligibility, eliminates
them through the active package manager, and aggregates outcome statistics.

Usage:
    detector = await create_detector("path/to/project")
    points = await detector.detect(
        DependencyDetectionContext(file_path="src/app.ts", content=source)
    )
    for point in points:
        await detector.eliminate(point)
    stats = detector.get_dependency_stats()
"""

from __future__ import annotations

import dataclasses
import uuid
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from zerofriction.config_runtime import load_runtime_config
from zerofriction.issues import ComputationalIssue, ProblemType
from zerofriction.manifest import PackageInfo, load_package_info
from zerofriction.package_managers import (
    DEFAULT_MANAGER,
    BasePackageManager,
    InstallOptions,
    InstallResult,
    get_manager,
    select_manager,
)
from zerofriction.scanner import DependencyScanner, Scanner
from zerofriction.utils.logging import logger

from .base import (
    DEFAULT_MAX_HISTORY_SIZE,
    FrictionDetector,
    FrictionDetectorStats,
    FrictionPoint,
    Location,
)
from .heuristics import (
    DECLARED_NOT_INSTALLED_SEVERITY,
    DEFAULT_SIMILARITY_THRESHOLD,
    calculate_severity,
    find_similar,
    is_auto_installable,
    is_dev_dependency,
    known_alternatives,
)

# Tags the scanner attaches next to the package name
GENERIC_TAGS = frozenset(["missing-dependency"])
GENERIC_TAG_FRAGMENTS = ("import", "require")


class DependencyType(str, Enum):
    MISSING = "missing"
    VERSION_CONFLICT = "version_conflict"
    PEER_DEPENDENCY = "peer_dependency"
    DEV_DEPENDENCY = "dev_dependency"


@dataclass(kw_only=True)
class DependencyFrictionPoint(FrictionPoint):
    """A missing or uninstalled package, plus how to fix it.

    package_manager is the backend that was active when the point was
    created; it is never re-evaluated.
    """

    dependency_name: str
    dependency_type: DependencyType = DependencyType.MISSING
    current_version: str | None = None
    required_version: str | None = None
    suggestions: list[str] = field(default_factory=list)
    auto_installable: bool = True
    install_command: str | None = None
    package_manager: str = DEFAULT_MANAGER

    def to_dict(self) -> dict[str, Any]:
        data = dataclasses.asdict(self)
        data["dependency_type"] = self.dependency_type.value
        return data


@dataclass
class DependencyDetectionContext:
    """Input for one detection pass."""

    file_path: str | None = None
    content: str | None = None
    check_package_json: bool = False
    workspace_root: str | None = None


@dataclass(frozen=True)
class DetectorConfig:
    """Immutable settings a detector is built with.

    The package manager is chosen once, before the detector exists, and
    never changes for the lifetime of the instance.
    """

    root: Path
    package_manager: BasePackageManager | None
    manifest: str = "package.json"
    similarity_threshold: float = DEFAULT_SIMILARITY_THRESHOLD
    max_history_size: int = DEFAULT_MAX_HISTORY_SIZE


@dataclass(frozen=True)
class DependencyFrictionStats(FrictionDetectorStats):
    friction_by_type: dict[str, int]
    friction_by_package_manager: dict[str, int]
    auto_installable_count: int
    active_package_manager: str

    def to_dict(self) -> dict[str, Any]:
        return dataclasses.asdict(self)


def extract_dependency_name(issue: ComputationalIssue) -> str | None:
    """First tag that is not a generic marker, or None."""
    for tag in issue.metadata.tags:
        if tag in GENERIC_TAGS or any(fragment in tag for fragment in GENERIC_TAG_FRAGMENTS):
            continue
        return tag
    return None


class DependencyFrictionDetector(FrictionDetector[DependencyFrictionPoint]):
    """Detects missing dependencies and installs them when it is safe to.

    Prefer create_detector(), which selects the package manager before
    returning. Public methods never raise; failures are logged and turned
    into partial results or False.
    """

    def __init__(
        self,
        config: DetectorConfig,
        scanner: Scanner | None = None,
        log: Any = None,
    ):
        super().__init__("DependencyFrictionDetector", max_history_size=config.max_history_size)
        self.config = config
        self.scanner: Scanner = scanner if scanner is not None else DependencyScanner()
        self.log = log if log is not None else logger.bind(component="dependency-friction")
        # Replaced wholesale by every detect() call; concurrent passes race
        # on it and the last writer wins.
        self.package_info: PackageInfo | None = None

    @property
    def package_manager(self) -> BasePackageManager | None:
        return self.config.package_manager

    @property
    def active_package_manager_name(self) -> str:
        return self.package_manager.manager_name if self.package_manager else "none"

    async def detect(self, context: DependencyDetectionContext) -> list[DependencyFrictionPoint]:
        """Find dependency friction for the given file and, optionally, the manifest.

        Returns whatever was collected before an error, if one occurs.
        """
        friction_points: list[DependencyFrictionPoint] = []

        try:
            self.load_package_info(context.workspace_root)
            self.scanner.set_package_info(self.package_info)

            if context.file_path and context.content:
                await self.scanner.add_file(context.file_path, context.content)

            workspace_root = self._foreign_root(context.workspace_root)

            issues = await self.scanner.get_dependency_issues()
            for issue in issues:
                point = self.create_friction_point_from_issue(issue, workspace_root)
                if point is not None:
                    friction_points.append(point)

            if context.check_package_json and self.package_info is not None:
                await self._detect_package_json_friction(friction_points, workspace_root)

        except Exception:
            self.log.opt(exception=True).error("Error detecting dependency friction")

        self.log.debug(
            "Detected {count} dependency friction points",
            count=len(friction_points),
        )
        return friction_points

    async def eliminate(self, point: DependencyFrictionPoint) -> bool:
        """Install the missing package if possible. Never raises.

        Every path records the outcome in the history exactly once.
        """
        point.attempted = True

        try:
            self.log.info(
                "Attempting to eliminate dependency friction: {name}",
                name=point.dependency_name,
            )

            manager = self.manager_for(point.metadata.get("workspace_root"))
            if manager is None:
                self.log.error("No active package manager found")
                return self._finish(point, False)

            if await manager.check_installed(point.dependency_name):
                self.log.info(
                    "Dependency {name} is already installed",
                    name=point.dependency_name,
                )
                return self._finish(point, True)

            if not point.auto_installable:
                self.log.warning(
                    "Manual installation required for {name}",
                    name=point.dependency_name,
                )
                return self._finish(point, False)

            result = await self.auto_install_dependency(point)
            if result.success:
                self.log.info(
                    "Installed {name}@{version}",
                    name=point.dependency_name,
                    version=result.version,
                    duration=result.duration,
                )
            else:
                self.log.error(
                    "Failed to install {name}: {error}",
                    name=point.dependency_name,
                    error=result.error,
                )
            return self._finish(point, result.success)

        except Exception:
            self.log.opt(exception=True).error(
                "Failed to eliminate dependency friction for {name}",
                name=point.dependency_name,
            )
            return self._finish(point, False)

    async def eliminate_all(self, points: list[DependencyFrictionPoint]) -> dict[str, bool]:
        """Eliminate points one after another; results keyed by point id."""
        results: dict[str, bool] = {}
        for point in points:
            results[point.id] = await self.eliminate(point)
        return results

    def get_dependency_stats(self) -> DependencyFrictionStats:
        """Aggregate the history. Recomputed on every call."""
        base = self.get_stats()
        by_type = Counter(point.dependency_type.value for point in self.history)
        by_manager = Counter(point.package_manager for point in self.history)

        return DependencyFrictionStats(
            total_detected=base.total_detected,
            total_attempted=base.total_attempted,
            total_eliminated=base.total_eliminated,
            elimination_rate=base.elimination_rate,
            detection_rate=base.detection_rate,
            friction_by_type=dict(by_type),
            friction_by_package_manager=dict(by_manager),
            auto_installable_count=sum(1 for p in self.history if p.auto_installable),
            active_package_manager=self.active_package_manager_name,
        )

    def load_package_info(self, workspace_root: str | None = None) -> PackageInfo | None:
        """Re-read the manifest, replacing the cached snapshot."""
        root = Path(workspace_root) if workspace_root else self.config.root
        self.package_info = load_package_info(root, self.config.manifest)
        return self.package_info

    def create_friction_point_from_issue(
        self,
        issue: ComputationalIssue,
        workspace_root: str | None = None,
    ) -> DependencyFrictionPoint | None:
        if issue.type != ProblemType.DEPENDENCY_MISSING:
            return None

        dependency_name = extract_dependency_name(issue)
        if not dependency_name:
            return None

        return DependencyFrictionPoint(
            id=f"dep-friction-{dependency_name}-{uuid.uuid4().hex[:12]}",
            description=f"Missing dependency: {dependency_name}",
            severity=calculate_severity(dependency_name),
            location=Location(
                file=issue.context.file or "",
                line=issue.context.line or 0,
                column=issue.context.column or 0,
            ),
            dependency_name=dependency_name,
            dependency_type=DependencyType.MISSING,
            suggestions=self.generate_suggestions(dependency_name),
            auto_installable=is_auto_installable(dependency_name),
            install_command=self.generate_install_command(dependency_name),
            package_manager=self._manager_name_or_default(),
            metadata={
                "issue_id": issue.id,
                "confidence": issue.metadata.confidence,
                **self._root_metadata(workspace_root),
            },
        )

    def generate_suggestions(self, dependency_name: str) -> list[str]:
        """Install command, known alternatives, then likely typos."""
        suggestions: list[str] = []

        if self.package_manager is not None:
            suggestions.append(" ".join([*self.package_manager.add_command, dependency_name]))

        suggestions.extend(known_alternatives(dependency_name))

        if self.package_info is not None:
            declared = list(self.package_info.all_dependencies())
            similar = find_similar(dependency_name, declared, self.config.similarity_threshold)
            suggestions.extend(f"Did you mean {dep}?" for dep in similar)

        return suggestions

    def generate_install_command(self, dependency_name: str, version: str | None = None) -> str:
        """Add command, dev flag when the dev heuristic matches, optional @version."""
        package_spec = f"{dependency_name}@{version}" if version else dependency_name
        if self.package_manager is None:
            return f"npm install {package_spec}"

        options = InstallOptions(
            dev=is_dev_dependency(dependency_name),
            version=version,
            save=False,
        )
        return self.package_manager.format_install_command(dependency_name, options)

    async def auto_install_dependency(self, point: DependencyFrictionPoint) -> InstallResult:
        manager = self.manager_for(point.metadata.get("workspace_root"))
        if manager is None:
            return InstallResult(
                success=False,
                package_name=point.dependency_name,
                error="No package manager available",
                duration=0.0,
            )

        options = InstallOptions(
            save=True,
            version=point.required_version,
            dev=is_dev_dependency(point.dependency_name),
        )
        return await manager.install(point.dependency_name, options)

    def manager_for(self, workspace_root: str | None = None) -> BasePackageManager | None:
        """The active backend, re-rooted at workspace_root when one is given.

        A pass over another workspace checks and installs there, never in
        the configured root.
        """
        manager = self.package_manager
        if manager is None or not workspace_root or Path(workspace_root) == manager.root:
            return manager
        return get_manager(
            manager.manager_name,
            workspace_root,
            modules_dir=manager.modules_dir,
            install_timeout=manager.install_timeout,
        )

    async def _detect_package_json_friction(
        self,
        friction_points: list[DependencyFrictionPoint],
        workspace_root: str | None = None,
    ) -> None:
        """Flag every declared dependency that is missing on disk.

        The declared range is kept as current_version only; required_version
        stays None, so eliminating the point installs the latest release and
        rewrites the range in package.json.
        """
        package_info = self.package_info
        if package_info is None:
            return

        manager = self.manager_for(workspace_root)
        install_all = " ".join(manager.install_command) if manager else "npm install"

        for dep_name, version in package_info.all_dependencies().items():
            installed = await manager.check_installed(dep_name) if manager else False
            if installed:
                continue

            friction_points.append(DependencyFrictionPoint(
                id=f"pkg-friction-{dep_name}-{uuid.uuid4().hex[:12]}",
                description=f"Package {dep_name} listed in package.json but not installed",
                severity=DECLARED_NOT_INSTALLED_SEVERITY,
                location=Location(file=self.config.manifest, line=0, column=0),
                dependency_name=dep_name,
                dependency_type=DependencyType.MISSING,
                current_version=version,
                suggestions=[f"Run {install_all}"],
                auto_installable=True,
                install_command=self.generate_install_command(dep_name, version),
                package_manager=self._manager_name_or_default(),
                metadata=self._root_metadata(workspace_root),
            ))

    def _foreign_root(self, workspace_root: str | None) -> str | None:
        """workspace_root if it names a directory other than the configured root."""
        if workspace_root and Path(workspace_root) != self.config.root:
            return workspace_root
        return None

    @staticmethod
    def _root_metadata(workspace_root: str | None) -> dict[str, Any]:
        return {"workspace_root": workspace_root} if workspace_root else {}

    def _manager_name_or_default(self) -> str:
        return self.package_manager.manager_name if self.package_manager else DEFAULT_MANAGER

    def _finish(self, point: DependencyFrictionPoint, result: bool) -> bool:
        point.eliminated = result
        self.record(point, result)
        return result


async def create_detector(
    root: str | Path = ".",
    scanner: Scanner | None = None,
    log: Any = None,
    config: DetectorConfig | None = None,
) -> DependencyFrictionDetector:
    """Build a ready detector.

    Package manager selection (lock-file probing) completes before the
    detector is returned, so detect() can be called immediately.
    """
    if config is None:
        runtime = load_runtime_config(str(root))
        manager = await select_manager(
            root,
            modules_dir=runtime["paths"]["modules_dir"],
            install_timeout=runtime["timeouts"]["install"],
        )
        config = DetectorConfig(
            root=Path(root),
            package_manager=manager,
            manifest=runtime["paths"]["manifest"],
            similarity_threshold=runtime["limits"]["similarity_threshold"],
            max_history_size=runtime["limits"]["max_history_size"],
        )

    return DependencyFrictionDetector(config, scanner=scanner, log=log)
