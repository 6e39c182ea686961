"""Project-wide detection: index many source files, then run one pass."""

from __future__ import annotations

import os
from pathlib import Path

from zerofriction.utils.constants import JS_EXTENSIONS, SKIP_DIRS
from zerofriction.utils.logging import logger

from .dependency import DependencyDetectionContext, DependencyFrictionDetector, DependencyFrictionPoint


def collect_source_files(root: str | Path, paths: tuple[str, ...] | list[str] = ()) -> list[Path]:
    """JavaScript/TypeScript files to scan.

    Explicit paths (files or directories, relative to root) win; otherwise
    the whole tree under root is walked, skipping node_modules and build
    output.
    """
    root = Path(root)
    targets = [root / p for p in paths] if paths else [root]
    files: list[Path] = []

    for target in targets:
        if target.is_file():
            if target.suffix.lower() in JS_EXTENSIONS:
                files.append(target)
            continue

        if not target.is_dir():
            logger.warning(f"Skipping {target}: not a file or directory")
            continue

        for dirpath, dirnames, filenames in os.walk(target):
            dirnames[:] = sorted(d for d in dirnames if d not in SKIP_DIRS)
            for filename in sorted(filenames):
                if Path(filename).suffix.lower() in JS_EXTENSIONS:
                    files.append(Path(dirpath) / filename)

    return files


async def detect_project(
    detector: DependencyFrictionDetector,
    files: list[Path],
    check_package_json: bool = False,
) -> list[DependencyFrictionPoint]:
    """Index every file with the detector's scanner, then detect once.

    The scanner accumulates files, so a single detect() reports the whole
    project without repeating earlier files' points.
    """
    root = detector.config.root
    for path in files:
        try:
            content = path.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            logger.warning(f"Could not read {path}: {e}")
            continue

        try:
            rel_path = path.relative_to(root).as_posix()
        except ValueError:
            rel_path = path.as_posix()
        await detector.scanner.add_file(rel_path, content)

    logger.debug(f"Indexed {len(files)} source files under {root}")
    return await detector.detect(DependencyDetectionContext(
        check_package_json=check_package_json,
        workspace_root=str(root),
    ))
