"""Shared issue types produced by scanners and consumed by friction detectors.

Extracted so the scanner and the detectors can both depend on them without
importing each other.
"""

import time
from dataclasses import dataclass, field
from enum import Enum, IntEnum


class ProblemType(str, Enum):
    """Kind of problem a scanner reports."""

    SYNTAX_ERROR = "SYNTAX_ERROR"
    DEPENDENCY_MISSING = "DEPENDENCY_MISSING"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    ARCHITECTURAL_INCONSISTENCY = "ARCHITECTURAL_INCONSISTENCY"
    UNKNOWN = "UNKNOWN"


class SeverityLevel(IntEnum):
    LOW = 1
    MEDIUM = 2
    HIGH = 3
    CRITICAL = 4
    BLOCKING = 5


@dataclass
class ProblemContext:
    """Where a problem was found."""

    file: str
    line: int = 0
    column: int = 0
    scope: list[str] = field(default_factory=list)
    related_files: list[str] = field(default_factory=list)


@dataclass
class ProblemMetadata:
    detected_by: str
    confidence: float = 0.8
    tags: list[str] = field(default_factory=list)
    detected_at: float = field(default_factory=time.time)


@dataclass
class ComputationalIssue:
    """A generic issue; the type discriminator decides who handles it."""

    id: str
    type: ProblemType
    severity: SeverityLevel
    context: ProblemContext
    metadata: ProblemMetadata
