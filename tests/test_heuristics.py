"""Unit tests for dependency eligibility, severity and suggestion rules."""

import pytest

from zerofriction.friction.heuristics import (
    CORE_SEVERITY,
    DEFAULT_SEVERITY,
    DEV_SEVERITY,
    calculate_severity,
    find_similar,
    is_auto_installable,
    is_dev_dependency,
    known_alternatives,
)


class TestAutoInstallable:
    """Packages needing configuration are left for a human."""

    @pytest.mark.parametrize("name", [
        "@types/node",
        "eslint-plugin-react",
        "babel-loader",
        "webpack-cli",
    ])
    def test_prefixed_packages_are_manual(self, name):
        """Types, plugins, loaders and CLIs need a human."""
        assert is_auto_installable(name) is False

    @pytest.mark.parametrize("name", ["lodash", "eslint", "webpack", "@babel/core"])
    def test_plain_packages_are_auto(self, name):
        """Only the exact prefixes block auto install ('eslint' alone is fine)."""
        assert is_auto_installable(name) is True


class TestDevDependencyHeuristic:
    """Substring match against known tooling names."""

    @pytest.mark.parametrize("name", [
        "jest", "ts-jest", "@types/react", "prettier", "nodemon", "ts-node", "@babel/core",
    ])
    def test_tooling_is_dev(self, name):
        """Test and build tooling is a dev dependency."""
        assert is_dev_dependency(name) is True

    @pytest.mark.parametrize("name", ["lodash", "react", "axios"])
    def test_runtime_packages_are_not_dev(self, name):
        """Runtime libraries are not dev dependencies."""
        assert is_dev_dependency(name) is False


class TestSeverity:
    """Test severity scoring."""

    def test_core_framework(self):
        """Core frameworks get the highest severity."""
        assert calculate_severity("react") == CORE_SEVERITY
        assert calculate_severity("express") == CORE_SEVERITY

    def test_core_wins_over_dev(self):
        """typescript matches the dev heuristic but is a core dependency."""
        assert calculate_severity("typescript") == CORE_SEVERITY

    def test_dev_tooling(self):
        """Dev tooling gets the lowest severity."""
        assert calculate_severity("jest") == DEV_SEVERITY

    def test_default(self):
        """Everything else gets the default severity."""
        assert calculate_severity("axios") == DEFAULT_SEVERITY


class TestSuggestions:
    """Test alternatives and typo matching."""

    def test_known_alternatives(self):
        """Known packages list their alternatives in order."""
        assert known_alternatives("lodash") == ["lodash-es", "ramda"]
        assert known_alternatives("moment") == ["dayjs", "date-fns"]

    def test_unknown_has_no_alternatives(self):
        """Unknown packages have no alternatives."""
        assert known_alternatives("left-pad") == []

    def test_find_similar_picks_typo(self):
        """A one-letter typo finds the declared package."""
        assert find_similar("reakt", ["react", "vue", "lodash"], 0.7) == ["react"]

    def test_find_similar_threshold_is_strict(self):
        """similarity('abcde', 'abcdx') is exactly 0.8, which does not exceed 0.8."""
        assert find_similar("abcde", ["abcdx"], 0.8) == []
        assert find_similar("abcde", ["abcdx"], 0.79) == ["abcdx"]

    def test_find_similar_preserves_order(self):
        """Matches keep the candidates' order."""
        assert find_similar("lodash", ["lodas", "xodash"], 0.7) == ["lodas", "xodash"]
