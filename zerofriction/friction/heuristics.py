"""Eligibility, severity and suggestion rules for dependency friction.

This module contains the constant tables and pure functions the dependency
friction detector uses to classify a missing package.

Design principles:
- Use frozensets/tuples for membership tests
- Keep patterns finite and maintainable
- No regex (plain prefix/substring matching)
"""

from collections.abc import Iterable

from zerofriction.utils.similarity import similarity

# ============================================================================
# SEVERITY
# ============================================================================

# Frameworks whose absence breaks the whole project
CORE_DEPENDENCIES: frozenset[str] = frozenset([
    "react",
    "vue",
    "angular",
    "express",
    "typescript",
])

CORE_SEVERITY = 0.9
DEFAULT_SEVERITY = 0.7
DEV_SEVERITY = 0.5
DECLARED_NOT_INSTALLED_SEVERITY = 0.7

# ============================================================================
# AUTO-INSTALL ELIGIBILITY
# ============================================================================

# Packages that usually need a pinned version or extra configuration
NON_AUTO_INSTALLABLE_PREFIXES: tuple[str, ...] = (
    "@types/",
    "eslint-",
    "babel-",
    "webpack-",
)

# ============================================================================
# DEV DEPENDENCY HEURISTIC
# ============================================================================

DEV_DEPENDENCY_PATTERNS: tuple[str, ...] = (
    "@types/",
    "eslint",
    "prettier",
    "jest",
    "mocha",
    "chai",
    "sinon",
    "webpack",
    "babel",
    "typescript",
    "ts-node",
    "nodemon",
)

# ============================================================================
# KNOWN ALTERNATIVES
# ============================================================================

KNOWN_ALTERNATIVES: dict[str, tuple[str, ...]] = {
    "lodash": ("lodash-es", "ramda"),
    "moment": ("dayjs", "date-fns"),
    "request": ("axios", "node-fetch"),
    "jquery": ("vanilla JavaScript", "modern DOM APIs"),
}

DEFAULT_SIMILARITY_THRESHOLD = 0.7


def is_auto_installable(dependency_name: str) -> bool:
    """Whether a fix can be applied without asking a human."""
    return not dependency_name.startswith(NON_AUTO_INSTALLABLE_PREFIXES)


def is_dev_dependency(dependency_name: str) -> bool:
    """Whether the package belongs in devDependencies."""
    return any(pattern in dependency_name for pattern in DEV_DEPENDENCY_PATTERNS)


def calculate_severity(dependency_name: str) -> float:
    if dependency_name in CORE_DEPENDENCIES:
        return CORE_SEVERITY
    if is_dev_dependency(dependency_name):
        return DEV_SEVERITY
    return DEFAULT_SEVERITY


def known_alternatives(dependency_name: str) -> list[str]:
    return list(KNOWN_ALTERNATIVES.get(dependency_name, ()))


def find_similar(
    dependency_name: str,
    candidates: Iterable[str],
    threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
) -> list[str]:
    """Declared names that look like a typo of dependency_name.

    A candidate qualifies when its similarity is strictly above threshold.
    Candidate order is preserved.
    """
    return [
        candidate
        for candidate in candidates
        if similarity(candidate, dependency_name) > threshold
    ]
