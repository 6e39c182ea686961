"""Import/require scanner for JavaScript and TypeScript sources.

Recognises the module references a file makes (ES imports, type-only
imports, re-exports, dynamic import() and CommonJS require()), resolves each
against relative paths, Node.js builtins and the declared manifest, and
reports what cannot be resolved as DEPENDENCY_MISSING issues. Files that
import each other in a loop are reported as ARCHITECTURAL_INCONSISTENCY.

This is line-oriented regex matching, not a parser. Multi-line brace lists
in import/export statements are joined first; everything else must fit on
one line. Only lines that start a comment are skipped, so a reference in a
trailing // comment or in the body of a /* */ block whose lines do not
start with * is still reported.
"""

from __future__ import annotations

import posixpath
import re
import uuid
from dataclasses import dataclass, field
from typing import Protocol

from zerofriction.issues import (
    ComputationalIssue,
    ProblemContext,
    ProblemMetadata,
    ProblemType,
    SeverityLevel,
)
from zerofriction.manifest import PackageInfo
from zerofriction.utils.constants import JS_EXTENSIONS
from zerofriction.utils.logging import logger

SCANNER_NAME = "dependency-scanner"

# ============================================================================
# IMPORT PATTERNS
# ============================================================================

_QUOTED = r"""['"`]([^'"`]+)['"`]"""

# import x from 'm' / import { a, b } from 'm' / import * as ns from 'm' / import 'm'
IMPORT_PATTERN = re.compile(
    r"\bimport\s+(?!type\b)(?:[\w$*{}\s,]+?\s+from\s+)?" + _QUOTED
)
TYPE_IMPORT_PATTERN = re.compile(r"\bimport\s+type\s+[\w$*{}\s,]+?\s+from\s+" + _QUOTED)
REEXPORT_PATTERN = re.compile(r"\bexport\s+(?:type\s+)?(?:\{[^}]*\}|\*(?:\s+as\s+[\w$]+)?)\s+from\s+" + _QUOTED)
DYNAMIC_IMPORT_PATTERN = re.compile(r"\bimport\s*\(\s*" + _QUOTED + r"\s*\)")
REQUIRE_PATTERN = re.compile(r"\brequire\s*\(\s*" + _QUOTED + r"\s*\)")

# An import/export brace list that is still open at the end of its line
OPEN_BRACE_PATTERN = re.compile(
    r"^\s*(?:import\s+(?:type\s+)?(?:[\w$]+\s*,\s*)?|export\s+(?:type\s+)?)\{[^}]*$"
)
MAX_JOINED_LINES = 50

# Order matters only for which kind wins when two patterns hit the same offset
IMPORT_KINDS: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("import-type", TYPE_IMPORT_PATTERN),
    ("import", IMPORT_PATTERN),
    ("reexport", REEXPORT_PATTERN),
    ("import-dynamic", DYNAMIC_IMPORT_PATTERN),
    ("require", REQUIRE_PATTERN),
)

NODE_BUILTINS = frozenset([
    "assert", "assert/strict", "async_hooks", "buffer", "child_process",
    "cluster", "console", "constants", "crypto", "dgram",
    "diagnostics_channel", "dns", "dns/promises", "domain", "events",
    "fs", "fs/promises", "http", "http2", "https", "inspector", "module",
    "net", "os", "path", "path/posix", "path/win32", "perf_hooks",
    "process", "punycode", "querystring", "readline", "readline/promises",
    "repl", "stream", "stream/promises", "stream/consumers", "stream/web",
    "string_decoder", "sys", "timers", "timers/promises", "tls",
    "trace_events", "tty", "url", "util", "util/types", "v8", "vm",
    "wasi", "worker_threads", "zlib",
])


@dataclass
class ImportRecord:
    """One module reference found in a source file."""

    specifier: str
    kind: str
    line: int
    column: int
    resolved: bool = False
    resolved_path: str | None = None
    is_external: bool = True


@dataclass
class FileNode:
    path: str
    imports: dict[str, ImportRecord] = field(default_factory=dict)


class Scanner(Protocol):
    """What a friction detector needs from a scanner."""

    def set_package_info(self, package_info: PackageInfo | None) -> None: ...

    async def add_file(self, file_path: str, content: str) -> None: ...

    async def get_dependency_issues(self) -> list[ComputationalIssue]: ...


def normalize_package_name(specifier: str) -> str:
    """Reduce an import specifier to the package it belongs to.

    Examples:
        @org/pkg/subpath -> @org/pkg
        lodash/fp -> lodash
        node:fs -> node:fs
    """
    if specifier.startswith("@"):
        parts = specifier.split("/", 2)
        if len(parts) >= 2:
            return "/".join(parts[:2])
        return specifier

    if specifier.startswith("node:"):
        return specifier

    return specifier.split("/")[0]


def is_relative_specifier(specifier: str) -> bool:
    return specifier in (".", "..") or specifier.startswith(("./", "../"))


def is_builtin_module(specifier: str) -> bool:
    return specifier.startswith("node:") or specifier in NODE_BUILTINS


def extract_imports(content: str) -> list[ImportRecord]:
    """Find every import/require reference in source text.

    Lines that start as comments are skipped. An import or export whose
    brace list spans several lines is joined up to the closing brace and
    reported on its first line. Columns are 1-based and point at the
    keyword that introduced the reference.
    """
    records: list[ImportRecord] = []
    lines = content.splitlines()
    index = 0

    while index < len(lines):
        line = lines[index]
        line_no = index + 1
        index += 1

        stripped = line.lstrip()
        if stripped.startswith(("//", "/*", "*")):
            continue

        if OPEN_BRACE_PATTERN.match(line):
            parts = [line]
            while index < len(lines) and len(parts) < MAX_JOINED_LINES:
                parts.append(lines[index].strip())
                index += 1
                if "}" in parts[-1]:
                    break
            line = " ".join(parts)

        seen_offsets: set[int] = set()
        for kind, pattern in IMPORT_KINDS:
            for match in pattern.finditer(line):
                if match.start() in seen_offsets:
                    continue
                seen_offsets.add(match.start())
                specifier = match.group(1).strip()
                records.append(ImportRecord(
                    specifier=specifier,
                    kind=kind,
                    line=line_no,
                    column=match.start() + 1,
                    is_external=not (is_relative_specifier(specifier) or specifier.startswith("/")),
                ))

    records.sort(key=lambda r: (r.line, r.column))
    return records


class DependencyScanner:
    """Tracks imports across files and reports unresolvable ones."""

    def __init__(self, package_info: PackageInfo | None = None):
        self.package_info = package_info
        self.files: dict[str, FileNode] = {}

    def set_package_info(self, package_info: PackageInfo | None) -> None:
        """Swap the manifest used for resolving bare specifiers.

        Already indexed files are re-resolved so a newly declared package
        stops being reported.
        """
        self.package_info = package_info
        for node in self.files.values():
            for record in node.imports.values():
                self._resolve(record, node.path)

    async def add_file(self, file_path: str, content: str) -> None:
        """Index (or re-index) a file's module references."""
        file_path = file_path.replace("\\", "/")
        extension = posixpath.splitext(file_path)[1].lower()
        if extension not in JS_EXTENSIONS:
            logger.debug(f"No import analyzer for {file_path}, skipping")
            return

        node = FileNode(path=file_path)
        for record in extract_imports(content):
            self._resolve(record, file_path)
            node.imports.setdefault(record.specifier, record)

        self.files[file_path] = node
        logger.debug(f"Indexed {file_path} ({len(node.imports)} module references)")

    async def update_file(self, file_path: str, content: str) -> None:
        await self.add_file(file_path, content)

    def remove_file(self, file_path: str) -> bool:
        """Stop tracking a file. Returns False if it was not tracked."""
        return self.files.pop(file_path.replace("\\", "/"), None) is not None

    async def get_dependency_issues(self) -> list[ComputationalIssue]:
        """Report unresolved imports and import cycles for every tracked file."""
        issues: list[ComputationalIssue] = []

        for file_path, node in self.files.items():
            for record in node.imports.values():
                if not record.resolved:
                    issues.append(self._missing_dependency_issue(file_path, record))

            cycle = self.find_cycle(file_path)
            if cycle:
                issues.append(self._circular_dependency_issue(file_path, cycle))

        return issues

    def get_stats(self) -> dict[str, int]:
        """Counts over the current import graph."""
        total = external = missing = 0
        for node in self.files.values():
            for record in node.imports.values():
                total += 1
                if record.is_external:
                    external += 1
                if not record.resolved:
                    missing += 1

        return {
            "total_files": len(self.files),
            "total_dependencies": total,
            "external_dependencies": external,
            "missing_dependencies": missing,
            "circular_dependencies": sum(1 for path in self.files if self.find_cycle(path)),
        }

    def find_cycle(self, start: str) -> list[str]:
        """Return the first import cycle through start, or an empty list."""
        stack: list[tuple[str, list[str]]] = [(start, [start])]
        visited: set[str] = set()

        while stack:
            current, path = stack.pop()
            for target in self._local_targets(current):
                if target == start:
                    return path
                if target not in visited:
                    visited.add(target)
                    stack.append((target, path + [target]))

        return []

    def _local_targets(self, file_path: str) -> list[str]:
        node = self.files.get(file_path)
        if node is None:
            return []

        targets = []
        for record in node.imports.values():
            if record.is_external or not record.resolved_path:
                continue
            match = self._match_tracked_file(record.resolved_path)
            if match:
                targets.append(match)
        return targets

    def _match_tracked_file(self, resolved_path: str) -> str | None:
        """Map an extensionless import path onto a tracked file."""
        if resolved_path in self.files:
            return resolved_path
        for ext in sorted(JS_EXTENSIONS):
            for candidate in (resolved_path + ext, f"{resolved_path}/index{ext}"):
                if candidate in self.files:
                    return candidate
        return None

    def _resolve(self, record: ImportRecord, from_path: str) -> None:
        specifier = record.specifier

        if is_relative_specifier(specifier):
            record.resolved = True
            record.resolved_path = posixpath.normpath(
                posixpath.join(posixpath.dirname(from_path), specifier)
            )
            return

        if specifier.startswith("/"):
            record.resolved = True
            record.resolved_path = specifier
            return

        if is_builtin_module(specifier):
            record.resolved = True
            record.resolved_path = specifier if specifier.startswith("node:") else f"node:{specifier}"
            return

        package = normalize_package_name(specifier)
        if self.package_info and self.package_info.declares(package):
            record.resolved = True
            record.resolved_path = f"node_modules/{package}"
            return

        record.resolved = False
        record.resolved_path = None

    def _missing_dependency_issue(self, file_path: str, record: ImportRecord) -> ComputationalIssue:
        package = normalize_package_name(record.specifier)
        return ComputationalIssue(
            id=f"missing-dep-{package}-{uuid.uuid4().hex[:12]}",
            type=ProblemType.DEPENDENCY_MISSING,
            severity=SeverityLevel.HIGH,
            context=ProblemContext(
                file=file_path,
                line=record.line,
                column=record.column,
                scope=["dependency"],
            ),
            metadata=ProblemMetadata(
                detected_by=SCANNER_NAME,
                confidence=0.95,
                tags=["missing-dependency", package, record.kind],
            ),
        )

    def _circular_dependency_issue(self, file_path: str, cycle: list[str]) -> ComputationalIssue:
        return ComputationalIssue(
            id=f"circular-dep-{uuid.uuid4().hex[:12]}",
            type=ProblemType.ARCHITECTURAL_INCONSISTENCY,
            severity=SeverityLevel.MEDIUM,
            context=ProblemContext(
                file=file_path,
                scope=["dependency", "architecture"],
                related_files=cycle,
            ),
            metadata=ProblemMetadata(
                detected_by=SCANNER_NAME,
                confidence=0.9,
                tags=["circular-dependency", "architecture"],
            ),
        )
