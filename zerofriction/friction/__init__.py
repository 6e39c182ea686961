"""Friction detection and elimination.

Usage:
    from zerofriction.friction import DependencyDetectionContext, create_detector

    detector = await create_detector(".")
    points = await detector.detect(DependencyDetectionContext(check_package_json=True))
"""

from .base import FrictionDetector, FrictionDetectorStats, FrictionPoint, Location
from .dependency import (
    DependencyDetectionContext,
    DependencyFrictionDetector,
    DependencyFrictionPoint,
    DependencyFrictionStats,
    DependencyType,
    DetectorConfig,
    create_detector,
    extract_dependency_name,
)

__all__ = [
    "FrictionDetector",
    "FrictionDetectorStats",
    "FrictionPoint",
    "Location",
    "DependencyDetectionContext",
    "DependencyFrictionDetector",
    "DependencyFrictionPoint",
    "DependencyFrictionStats",
    "DependencyType",
    "DetectorConfig",
    "create_detector",
    "extract_dependency_name",
]
