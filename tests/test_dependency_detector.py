"""Tests for dependency friction detection and elimination."""

import asyncio
import json
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from zerofriction.friction.base import Location
from zerofriction.friction.dependency import (
    DependencyDetectionContext,
    DependencyFrictionDetector,
    DependencyFrictionPoint,
    DependencyType,
    DetectorConfig,
    create_detector,
    extract_dependency_name,
)
from zerofriction.issues import (
    ComputationalIssue,
    ProblemContext,
    ProblemMetadata,
    ProblemType,
    SeverityLevel,
)
from zerofriction.package_managers import InstallOptions, InstallResult
from zerofriction.package_managers.npm import NpmPackageManager
from zerofriction.package_managers.yarn import YarnPackageManager


def make_detector(root, manager="npm", log=None, scanner=None, **config):
    if manager == "npm":
        manager = NpmPackageManager(root)
    cfg = DetectorConfig(root=Path(root), package_manager=manager, **config)
    return DependencyFrictionDetector(cfg, scanner=scanner, log=log if log is not None else MagicMock())


def make_point(name, **kwargs):
    kwargs.setdefault("severity", 0.7)
    return DependencyFrictionPoint(
        id=f"dep-friction-{name}-test",
        description=f"Missing dependency: {name}",
        dependency_name=name,
        **kwargs,
    )


def make_issue(tags, type=ProblemType.DEPENDENCY_MISSING):
    return ComputationalIssue(
        id="issue-1",
        type=type,
        severity=SeverityLevel.HIGH,
        context=ProblemContext(file="src/app.ts", line=3, column=5),
        metadata=ProblemMetadata(detected_by="stub", confidence=0.6, tags=tags),
    )


def stub_scanner(issues=None, error=None):
    scanner = MagicMock()
    scanner.add_file = AsyncMock()
    if error is not None:
        scanner.get_dependency_issues = AsyncMock(side_effect=error)
    else:
        scanner.get_dependency_issues = AsyncMock(return_value=issues or [])
    return scanner


def detect(detector, **context):
    context.setdefault("workspace_root", str(detector.config.root))
    return asyncio.run(detector.detect(DependencyDetectionContext(**context)))


class TestExtractDependencyName:
    """Package name is the first non-generic tag."""

    def test_skips_generic_tags(self):
        """Generic tags are skipped."""
        assert extract_dependency_name(make_issue(["missing-dependency", "lodash", "import"])) == "lodash"

    def test_skips_kind_tags_before_name(self):
        """Import kind tags before the name are skipped."""
        assert extract_dependency_name(make_issue(["require", "axios"])) == "axios"

    def test_no_name(self):
        """Only generic tags means no name."""
        assert extract_dependency_name(make_issue(["missing-dependency", "import-dynamic"])) is None

    def test_names_containing_import_are_dropped(self):
        """The fragment rule also filters real packages like 'import-maps'."""
        assert extract_dependency_name(make_issue(["missing-dependency", "import-maps"])) is None


class TestDetect:
    """Mapping scanner issues onto friction points."""

    def test_missing_lodash(self, make_project):
        """An undeclared import becomes a fully populated point."""
        root = make_project(dependencies={})
        detector = make_detector(root)

        points = detect(detector, file_path="src/app.ts", content="import _ from 'lodash';\n")

        assert len(points) == 1
        p = points[0]
        assert p.id.startswith("dep-friction-lodash-")
        assert p.description == "Missing dependency: lodash"
        assert p.dependency_name == "lodash"
        assert p.dependency_type == DependencyType.MISSING
        assert p.severity == 0.7
        assert p.location == Location("src/app.ts", 1, 1)
        assert p.auto_installable is True
        assert p.install_command == "npm install lodash"
        assert p.suggestions == ["npm install lodash", "lodash-es", "ramda"]
        assert p.package_manager == "npm"
        assert p.attempted is False
        assert p.eliminated is None
        assert p.metadata["confidence"] == 0.95

    def test_points_are_not_recorded(self, make_project):
        """Detection alone leaves the history empty."""
        detector = make_detector(make_project())
        detect(detector, file_path="a.js", content="require('left-pad');")
        assert detector.get_history() == []

    def test_typo_suggestion(self, make_project):
        """A near-miss of a declared package suggests it."""
        root = make_project(dependencies={"react": "^18.2.0"})
        detector = make_detector(root)

        points = detect(detector, file_path="src/app.tsx", content="import React from 'reakt';")

        assert points[0].suggestions == ["npm install reakt", "Did you mean react?"]

    def test_yarn_dev_dependency(self, make_project):
        """Dev tooling gets yarn's dev flag and lower severity."""
        root = make_project(dependencies={})
        detector = make_detector(root, manager=YarnPackageManager(root))

        points = detect(detector, file_path="test/app.test.js", content="const jest = require('jest');")

        p = points[0]
        assert p.severity == 0.5
        assert p.install_command == "yarn add --dev jest"
        assert p.suggestions[0] == "yarn add jest"
        assert p.package_manager == "yarn"

    def test_types_package_needs_manual_fix(self, make_project):
        """@types packages are not auto installable."""
        detector = make_detector(make_project())
        points = detect(detector, file_path="src/a.ts", content="import type { X } from '@types/node';")
        assert points[0].auto_installable is False

    def test_no_manager_falls_back_to_npm_command(self, make_project):
        """Without a backend the npm command is used."""
        detector = make_detector(make_project(), manager=None)
        points = detect(detector, file_path="src/a.ts", content="import _ from 'lodash';")

        assert points[0].install_command == "npm install lodash"
        assert points[0].suggestions == ["lodash-es", "ramda"]
        assert points[0].package_manager == "npm"

    def test_missing_manifest_still_reports(self, make_project):
        """Imports are reported even without package.json."""
        root = make_project(manifest=False)
        detector = make_detector(root)
        points = detect(detector, file_path="src/a.ts", content="import _ from 'lodash';", check_package_json=True)

        assert [p.dependency_name for p in points] == ["lodash"]
        assert detector.package_info is None

    def test_non_dependency_issues_ignored(self, make_project):
        """Circular dependency issues produce no points."""
        issue = make_issue(["circular-dependency"], type=ProblemType.ARCHITECTURAL_INCONSISTENCY)
        detector = make_detector(make_project(), scanner=stub_scanner([issue]))
        assert detect(detector) == []

    def test_issue_metadata_carried(self, make_project):
        """Issue id, confidence and location carry over."""
        issue = make_issue(["missing-dependency", "axios", "require"])
        detector = make_detector(make_project(), scanner=stub_scanner([issue]))

        p = detect(detector)[0]
        assert p.metadata == {"issue_id": "issue-1", "confidence": 0.6}
        assert p.location == Location("src/app.ts", 3, 5)

    def test_file_only_indexed_with_content(self, make_project):
        """A file is indexed only when content is given."""
        scanner = stub_scanner()
        detector = make_detector(make_project(), scanner=scanner)

        detect(detector, file_path="src/a.ts")
        scanner.add_file.assert_not_awaited()

        detect(detector, file_path="src/a.ts", content="x")
        scanner.add_file.assert_awaited_once_with("src/a.ts", "x")

    def test_scanner_receives_manifest(self, make_project):
        """The scanner resolves against the loaded manifest."""
        scanner = stub_scanner()
        detector = make_detector(make_project(dependencies={"react": "18"}), scanner=scanner)
        detect(detector)

        info = scanner.set_package_info.call_args.args[0]
        assert info.declares("react")

    def test_scanner_error_returns_empty_and_logs(self, make_project, mock_log):
        """A scanner failure is logged and yields no points."""
        detector = make_detector(make_project(), scanner=stub_scanner(error=RuntimeError("scan failed")), log=mock_log)

        assert detect(detector) == []
        mock_log.opt.assert_called_with(exception=True)
        mock_log.opt.return_value.error.assert_called_once()

    def test_partial_results_survive_manifest_check_error(self, make_project, mock_log):
        """Points found before an error are still returned."""
        root = make_project(dependencies={"react": "^18.2.0"})
        manager = NpmPackageManager(root)
        manager.check_installed = AsyncMock(side_effect=OSError("disk gone"))
        issue = make_issue(["missing-dependency", "lodash", "import"])
        detector = make_detector(root, manager=manager, scanner=stub_scanner([issue]), log=mock_log)

        points = detect(detector, check_package_json=True)

        assert [p.dependency_name for p in points] == ["lodash"]
        mock_log.opt.return_value.error.assert_called_once()


class TestPackageJsonFriction:
    """Declared-but-not-installed packages."""

    def test_declared_not_installed(self, make_project):
        """Declared packages missing from node_modules are reported."""
        root = make_project(
            dependencies={"react": "^18.2.0"},
            dev_dependencies={"jest": "^29.0.0"},
            installed=["react"],
        )
        detector = make_detector(root)

        points = detect(detector, check_package_json=True)

        assert len(points) == 1
        p = points[0]
        assert p.id.startswith("pkg-friction-jest-")
        assert p.description == "Package jest listed in package.json but not installed"
        assert p.severity == 0.7
        assert p.location == Location("package.json", 0, 0)
        assert p.current_version == "^29.0.0"
        assert p.suggestions == ["Run npm install"]
        assert p.install_command == "npm install --save-dev jest@^29.0.0"
        assert p.auto_installable is True

    def test_yarn_install_suggestion(self, make_project):
        """yarn projects are told to run yarn install."""
        root = make_project(dependencies={"lodash": "^4.17.21"})
        detector = make_detector(root, manager=YarnPackageManager(root))

        p = detect(detector, check_package_json=True)[0]
        assert p.suggestions == ["Run yarn install"]
        assert p.install_command == "yarn add lodash@^4.17.21"

    def test_disabled_by_default(self, make_project):
        """The package.json check is opt-in."""
        detector = make_detector(make_project(dependencies={"react": "18"}))
        assert detect(detector) == []

    def test_workspace_root_overrides_config_root(self, make_project, tmp_path_factory):
        """The manifest is read from the workspace root."""
        root = make_project(dependencies={"react": "18"})
        other = tmp_path_factory.mktemp("elsewhere")
        (other / "package.json").write_text(json.dumps({"dependencies": {"vue": "3"}}), encoding="utf-8")
        detector = make_detector(root, manager=None)

        points = detect(detector, check_package_json=True, workspace_root=str(other))
        assert [p.dependency_name for p in points] == ["vue"]

    def test_workspace_root_checks_installs_there(self, make_project, tmp_path_factory):
        """Packages installed under the workspace root are not reported."""
        root = make_project(dependencies={})
        other = tmp_path_factory.mktemp("workspace")
        (other / "package.json").write_text(json.dumps({"dependencies": {"lodash": "^4"}}), encoding="utf-8")
        (other / "node_modules" / "lodash").mkdir(parents=True)
        detector = make_detector(root)

        assert detect(detector, check_package_json=True, workspace_root=str(other)) == []

    def test_workspace_root_installs_there(self, make_project, tmp_path_factory, command_ok):
        """Points from another workspace are installed into that workspace."""
        root = make_project(dependencies={})
        other = tmp_path_factory.mktemp("workspace")
        (other / "package.json").write_text(json.dumps({"dependencies": {"lodash": "^4"}}), encoding="utf-8")
        detector = make_detector(root)

        points = detect(detector, check_package_json=True, workspace_root=str(other))
        assert [p.dependency_name for p in points] == ["lodash"]
        assert points[0].metadata["workspace_root"] == str(other)

        with patch(
            "zerofriction.package_managers.base.run_command_async",
            new=AsyncMock(return_value=command_ok),
        ) as run:
            assert asyncio.run(detector.eliminate(points[0])) is True

        assert run.await_args.kwargs["cwd"] == str(other)
        assert detector.package_manager.root == root


class TestEliminate:
    """Every path records exactly one outcome."""

    def test_no_manager(self, make_project, mock_log):
        """Without a backend elimination fails and is logged."""
        detector = make_detector(make_project(), manager=None, log=mock_log)
        p = make_point("lodash")

        assert asyncio.run(detector.eliminate(p)) is False
        assert p.attempted is True
        assert p.eliminated is False
        assert len(detector.get_history()) == 1
        mock_log.error.assert_called_once()

    def test_already_installed(self, make_project):
        """An installed package counts as eliminated without installing."""
        root = make_project(installed=["lodash"])
        detector = make_detector(root)
        detector.package_manager.install = AsyncMock()
        p = make_point("lodash")

        assert asyncio.run(detector.eliminate(p)) is True
        assert p.eliminated is True
        detector.package_manager.install.assert_not_awaited()

    def test_manual_fix_required(self, make_project, mock_log):
        """Manual-fix packages are never installed."""
        detector = make_detector(make_project(), log=mock_log)
        detector.package_manager.install = AsyncMock()
        p = make_point("@types/node", auto_installable=False)

        assert asyncio.run(detector.eliminate(p)) is False
        detector.package_manager.install.assert_not_awaited()
        mock_log.warning.assert_called_once()
        assert detector.get_history()[0].eliminated is False

    def test_install_success(self, make_project):
        """A successful install eliminates the point."""
        detector = make_detector(make_project())
        detector.package_manager.install = AsyncMock(
            return_value=InstallResult(success=True, package_name="lodash", version="latest", duration=0.2)
        )
        p = make_point("lodash")

        assert asyncio.run(detector.eliminate(p)) is True
        detector.package_manager.install.assert_awaited_once_with(
            "lodash", InstallOptions(save=True, version=None, dev=False)
        )

    def test_install_uses_required_version_and_dev_flag(self, make_project):
        """The required version and dev flag reach the backend."""
        detector = make_detector(make_project())
        detector.package_manager.install = AsyncMock(
            return_value=InstallResult(success=True, package_name="jest", duration=0.1)
        )

        asyncio.run(detector.eliminate(make_point("jest", required_version="^29.0.0")))
        detector.package_manager.install.assert_awaited_once_with(
            "jest", InstallOptions(save=True, version="^29.0.0", dev=True)
        )

    def test_install_failure(self, make_project, mock_log):
        """A failed install is logged and reported."""
        detector = make_detector(make_project(), log=mock_log)
        detector.package_manager.install = AsyncMock(
            return_value=InstallResult(success=False, package_name="x", error="E404", duration=0.1)
        )

        assert asyncio.run(detector.eliminate(make_point("x"))) is False
        mock_log.error.assert_called_once()

    def test_unexpected_error_is_contained(self, make_project, mock_log):
        """Unexpected errors are logged and still recorded once."""
        detector = make_detector(make_project(), log=mock_log)
        detector.package_manager.check_installed = AsyncMock(side_effect=PermissionError("denied"))
        p = make_point("lodash")

        assert asyncio.run(detector.eliminate(p)) is False
        assert p.attempted is True
        assert len(detector.get_history()) == 1
        mock_log.opt.return_value.error.assert_called_once()

    def test_idempotent_after_install(self, make_project):
        """A second elimination finds the package installed."""
        root = make_project()
        detector = make_detector(root)
        detector.package_manager.install = AsyncMock(
            return_value=InstallResult(success=True, package_name="lodash", duration=0.1)
        )
        p = make_point("lodash")

        assert asyncio.run(detector.eliminate(p)) is True
        (root / "node_modules" / "lodash").mkdir(parents=True)
        assert asyncio.run(detector.eliminate(p)) is True

        detector.package_manager.install.assert_awaited_once()
        assert len(detector.get_history()) == 2

    def test_eliminate_all_keyed_by_id(self, make_project):
        """Results are keyed by point id."""
        detector = make_detector(make_project(installed=["react"]), manager=None)
        points = [make_point("react"), make_point("vue")]
        points[1].id = "dep-friction-vue-other"

        results = asyncio.run(detector.eliminate_all(points))
        assert results == {"dep-friction-react-test": False, "dep-friction-vue-other": False}


class TestDependencyStats:
    """Grouped counts always cover the whole history."""

    def test_invariants(self, make_project):
        """Grouped counts add up to the history size."""
        root = make_project(installed=["react"])
        detector = make_detector(root)
        detector.package_manager.install = AsyncMock(
            return_value=InstallResult(success=False, package_name="x", error="E", duration=0.0)
        )
        points = [
            make_point("react"),
            make_point("lodash", dependency_type=DependencyType.VERSION_CONFLICT),
            make_point("@types/node", auto_installable=False, package_manager="yarn"),
        ]
        for p in points:
            asyncio.run(detector.eliminate(p))

        stats = detector.get_dependency_stats()
        assert stats.total_detected == 3
        assert stats.total_attempted == 3
        assert stats.total_eliminated == 1
        assert stats.elimination_rate == pytest.approx(1 / 3)
        assert stats.friction_by_type == {"missing": 2, "version_conflict": 1}
        assert stats.friction_by_package_manager == {"npm": 2, "yarn": 1}
        assert sum(stats.friction_by_type.values()) == stats.total_detected
        assert stats.auto_installable_count == 2
        assert stats.active_package_manager == "npm"

    def test_no_manager_reports_none(self, make_project):
        """Without a backend the active manager is "none"."""
        stats = make_detector(make_project(), manager=None).get_dependency_stats()
        assert stats.active_package_manager == "none"
        assert stats.total_detected == 0
        assert stats.to_dict()["friction_by_type"] == {}

    def test_history_bounded_by_config(self, make_project):
        """History size follows the configured limit."""
        detector = make_detector(make_project(), manager=None, max_history_size=2)
        for n in range(4):
            asyncio.run(detector.eliminate(make_point(f"pkg{n}")))
        assert detector.get_dependency_stats().total_detected == 2


class TestPointSerialization:
    """to_dict() is JSON-ready."""

    def test_to_dict(self):
        """Enums and locations serialize to plain JSON."""
        p = make_point("lodash", location=Location("src/a.ts", 1, 1))
        data = p.to_dict()

        assert data["dependency_type"] == "missing"
        assert data["location"] == {"file": "src/a.ts", "line": 1, "column": 1}
        json.dumps(data)


class TestCreateDetector:
    """Async factory: manager chosen before the detector exists."""

    def test_selects_manager_from_lock_file(self, make_project):
        """The backend is chosen from the lock file."""
        root = make_project(lock_file="yarn.lock")
        detector = asyncio.run(create_detector(root))

        assert detector.active_package_manager_name == "yarn"
        assert detector.config.root == Path(root)

    def test_reads_runtime_config(self, make_project, monkeypatch):
        """Limits and timeouts come from the runtime config."""
        root = make_project()
        (root / ".zf").mkdir()
        (root / ".zf" / "config.json").write_text(
            json.dumps({"limits": {"max_history_size": 5, "similarity_threshold": 0.9}}),
            encoding="utf-8",
        )
        monkeypatch.setenv("ZEROFRICTION_TIMEOUTS_INSTALL", "10")

        detector = asyncio.run(create_detector(root))

        assert detector.history.maxlen == 5
        assert detector.config.similarity_threshold == 0.9
        assert detector.package_manager.install_timeout == 10

    def test_explicit_config_wins(self, tmp_path):
        """An explicit config is used as given."""
        config = DetectorConfig(root=tmp_path, package_manager=None)
        detector = asyncio.run(create_detector(tmp_path, config=config))
        assert detector.config is config
        assert detector.package_manager is None


class TestEndToEnd:
    """Detect then eliminate through the real backend with the process mocked."""

    def test_lodash_scenario(self, make_project, command_ok):
        """Missing lodash is detected, suggested and installed."""
        root = make_project(dependencies={"react": "^18.2.0"}, installed=["react"])
        detector = asyncio.run(create_detector(root))

        points = detect(detector, file_path="src/app.ts", content="import _ from 'lodash';\nimport React from 'react';\n")
        assert [p.dependency_name for p in points] == ["lodash"]
        assert "lodash-es" in points[0].suggestions
        assert "ramda" in points[0].suggestions

        with patch(
            "zerofriction.package_managers.base.run_command_async",
            new=AsyncMock(return_value=command_ok),
        ) as run:
            assert asyncio.run(detector.eliminate(points[0])) is True

        assert run.await_args.args[0] == ["npm", "install", "--save", "lodash"]
        assert points[0].eliminated is True
        stats = detector.get_dependency_stats()
        assert stats.total_eliminated == 1
        assert stats.elimination_rate == 1.0
        assert stats.friction_by_type == {"missing": 1}
