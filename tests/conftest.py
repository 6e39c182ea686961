"""Pytest configuration and fixtures."""
import json
from pathlib import Path
from unittest.mock import MagicMock

import pytest


@pytest.fixture
def make_project(tmp_path):
    """
    Build a throwaway Node.js project under tmp_path.

    Usage:
        root = make_project(
            dependencies={"react": "^18.2.0"},
            installed=["react"],
            lock_file="yarn.lock",
            files={"src/app.ts": "import React from 'react';"},
        )
    """

    def _make(
        dependencies=None,
        dev_dependencies=None,
        peer_dependencies=None,
        installed=(),
        lock_file=None,
        files=None,
        manifest=True,
    ) -> Path:
        if manifest:
            data = {"name": "fixture-app", "version": "1.0.0"}
            if dependencies is not None:
                data["dependencies"] = dependencies
            if dev_dependencies is not None:
                data["devDependencies"] = dev_dependencies
            if peer_dependencies is not None:
                data["peerDependencies"] = peer_dependencies
            (tmp_path / "package.json").write_text(json.dumps(data), encoding="utf-8")

        for name in installed:
            pkg_dir = tmp_path / "node_modules" / name
            pkg_dir.mkdir(parents=True, exist_ok=True)
            (pkg_dir / "package.json").write_text(
                json.dumps({"name": name, "version": "1.0.0"}), encoding="utf-8"
            )

        if lock_file:
            (tmp_path / lock_file).write_text("", encoding="utf-8")

        for rel_path, content in (files or {}).items():
            path = tmp_path / rel_path
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")

        return tmp_path

    return _make


@pytest.fixture
def mock_log():
    """Stand-in for the detector's injected loguru logger."""
    return MagicMock()


@pytest.fixture
def command_ok():
    """run_command_async result for a successful package manager run."""
    return {
        "success": True,
        "returncode": 0,
        "stdout": "added 1 package",
        "stderr": "",
        "elapsed": 0.1,
        "timed_out": False,
    }
