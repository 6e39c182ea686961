"""Base friction detection framework.

A friction point is one detected, actionable problem. Detectors find points,
try to eliminate them, and keep a bounded history of outcomes from which
statistics are derived on demand.
"""

from __future__ import annotations

import dataclasses
import time
from abc import ABC, abstractmethod
from collections import deque
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

DEFAULT_MAX_HISTORY_SIZE = 1000


@dataclass(frozen=True)
class Location:
    """Source position of a friction point (1-based line/column, 0 if unknown)."""

    file: str
    line: int = 0
    column: int = 0


@dataclass(kw_only=True)
class FrictionPoint:
    """Core friction point shared by every detector."""

    id: str
    description: str
    severity: float
    location: Location | None = None
    attempted: bool = False
    eliminated: bool | None = None
    timestamp: float = field(default_factory=time.time)
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class FrictionDetectorStats:
    total_detected: int
    total_attempted: int
    total_eliminated: int
    elimination_rate: float
    detection_rate: float


T = TypeVar("T", bound=FrictionPoint)


class FrictionDetector(ABC, Generic[T]):
    """Abstract base class for detecting and eliminating friction points.

    The history only grows through record(); once max_history_size is
    reached the oldest entries are dropped.
    """

    def __init__(self, name: str, max_history_size: int = DEFAULT_MAX_HISTORY_SIZE):
        self.name = name
        self.history: deque[T] = deque(maxlen=max_history_size)

    @abstractmethod
    async def detect(self, context: Any) -> list[T]:
        """Detect friction in the provided context."""
        ...

    @abstractmethod
    async def eliminate(self, point: T) -> bool:
        """Try to eliminate a friction point; True on success."""
        ...

    def record(self, point: T, result: bool) -> None:
        """Append a snapshot of the point with its final outcome."""
        self.history.append(dataclasses.replace(point, eliminated=result))

    def get_history(self) -> list[T]:
        return list(self.history)

    def clear_history(self) -> None:
        self.history.clear()

    def get_stats(self) -> FrictionDetectorStats:
        """Detection and elimination rates over the recorded history."""
        total = len(self.history)
        attempted = sum(1 for p in self.history if p.attempted)
        eliminated = sum(1 for p in self.history if p.eliminated)

        return FrictionDetectorStats(
            total_detected=total,
            total_attempted=attempted,
            total_eliminated=eliminated,
            elimination_rate=eliminated / attempted if attempted > 0 else 0.0,
            detection_rate=attempted / total if total > 0 else 0.0,
        )

    def get_recent_friction(self, count: int = 10) -> list[T]:
        """Last count recorded points, oldest first."""
        if count <= 0:
            return []
        return list(self.history)[-count:]

    def get_high_severity_friction(self, threshold: float = 0.7) -> list[T]:
        return [p for p in self.history if p.severity >= threshold]
