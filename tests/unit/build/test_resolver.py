"""
Unit tests for closest known version resolution.
"""

import itertools

import pytest

from bindbuild.build.resolver import (
    Resolution,
    ResolutionReason,
    closest_version,
    resolve_version,
)
from bindbuild.config.registry import EmptyRegistry
from bindbuild.version import Version


def versions(*texts):
    return [Version.parse(t) for t in texts]


def closest(known, current):
    result = closest_version(versions(*known), Version.parse(current))
    return str(result) if result is not None else None


class TestClosestVersionScenarios:
    """Literal scenarios the resolver must reproduce exactly."""

    @pytest.mark.parametrize(
        "known,current,expected",
        [
            (["5.11.0", "5.12.2"], "5.13.1", "5.12.2"),
            (["5.11.0", "5.9.7", "5.12.2"], "5.9.1", "5.9.7"),
            (["5.11.0", "5.10.7", "5.12.2"], "5.9.1", None),
            (["5.11.0", "5.9.7", "5.12.2"], "5.10.1", "5.9.7"),
            (["5.11.0", "5.9.7", "5.12.2"], "5.11.2", "5.11.0"),
            (["5.11.2", "5.9.7", "5.12.2"], "5.11.0", "5.11.2"),
        ],
    )
    def test_scenarios(self, known, current, expected):
        """Test the reference scenarios."""
        assert closest(known, current) == expected


class TestResolutionReasons:
    """Test the reason category reported with each decision."""

    def test_exact(self):
        """Test exact match reason."""
        resolution = resolve_version(versions("5.11.0", "5.12.2"), Version.parse("5.12.2"))
        assert resolution.version == Version.parse("5.12.2")
        assert resolution.reason is ResolutionReason.EXACT
        assert resolution.is_exact

    def test_same_minor_older(self):
        """Test closest older patch in the same line."""
        resolution = resolve_version(versions("5.11.0", "5.11.1", "5.11.5"), Version.parse("5.11.3"))
        assert resolution.version == Version.parse("5.11.1")
        assert resolution.reason is ResolutionReason.SAME_MINOR_OLDER

    def test_same_minor_fallback_newer(self):
        """Test oldest patch of the line when all known patches are newer."""
        resolution = resolve_version(versions("5.11.4", "5.11.2", "5.10.0"), Version.parse("5.11.0"))
        assert resolution.version == Version.parse("5.11.2")
        assert resolution.reason is ResolutionReason.SAME_MINOR_NEWER

    def test_cross_line_older(self):
        """Test closest older version from another line."""
        resolution = resolve_version(versions("5.9.7", "5.11.0"), Version.parse("5.10.1"))
        assert resolution.version == Version.parse("5.9.7")
        assert resolution.reason is ResolutionReason.CROSS_LINE_OLDER

    def test_cross_major_older(self):
        """Test an unknown newer major falls back to the newest older known version."""
        resolution = resolve_version(versions("5.15.2", "5.12.0"), Version.parse("6.2.0"))
        assert resolution.version == Version.parse("5.15.2")
        assert resolution.reason is ResolutionReason.CROSS_LINE_OLDER

    def test_unsupported(self):
        """Test installed version older than every known version."""
        resolution = resolve_version(versions("5.10.7", "5.11.0"), Version.parse("5.9.1"))
        assert resolution.version is None
        assert resolution.reason is ResolutionReason.UNSUPPORTED
        assert not resolution.supported

    def test_unsupported_does_not_pick_oldest(self):
        """Test there is no fallback to the globally oldest known version."""
        assert closest(["6.0.0"], "5.15.2") is None

    def test_empty_known_raises(self):
        """Test empty known set is a contract violation."""
        with pytest.raises(EmptyRegistry):
            resolve_version([], Version.parse("5.12.2"))


class TestResolutionDescribe:
    """Test the single log line rendering."""

    def test_describe_exact(self):
        resolution = Resolution(Version.parse("5.12.2"), Version.parse("5.12.2"), ResolutionReason.EXACT)
        assert resolution.describe() == "Using known version 5.12.2 (exact match)"

    def test_describe_fallback(self):
        resolution = resolve_version(versions("5.11.0", "5.12.2"), Version.parse("5.13.1"))
        line = resolution.describe()
        assert "5.13.1" in line
        assert "5.12.2" in line
        assert "cross-line-older" in line
        assert "\n" not in line

    def test_describe_unsupported(self):
        resolution = resolve_version(versions("5.11.0"), Version.parse("5.9.1"))
        assert "unsupported" in resolution.describe()
        assert "5.9.1" in resolution.describe()


KNOWN_SETS = [
    ("5.11.0", "5.12.2"),
    ("5.11.0", "5.9.7", "5.12.2"),
    ("5.11.0", "5.10.7", "5.12.2"),
    ("5.11.2", "5.9.7", "5.12.2"),
    ("5.6.1", "5.9.7", "5.9.8", "5.12.0", "5.12.2", "5.15.2", "6.2.4"),
]

PROBES = [
    "5.5.0", "5.6.0", "5.6.1", "5.6.3", "5.9.1", "5.9.7", "5.9.9", "5.10.1",
    "5.11.0", "5.11.2", "5.12.1", "5.12.5", "5.13.1", "5.15.0", "6.0.0", "6.2.4", "7.0.0",
]


def reference(known, current):
    """Direct transcription of the selection rules."""
    if current in known:
        return current
    same = [v for v in known if (v.major, v.minor) == (current.major, current.minor)]
    if same:
        older = [v for v in same if v < current]
        return max(older) if older else min(same)
    older = [v for v in known if v < current]
    return max(older) if older else None


class TestResolutionProperties:
    """Properties that hold for every known set and installed version."""

    @pytest.mark.parametrize("known", KNOWN_SETS)
    def test_exact_match_always_chosen(self, known):
        """Test every known version resolves to itself."""
        known_versions = versions(*known)
        for version in known_versions:
            assert closest_version(known_versions, version) == version

    @pytest.mark.parametrize("known", KNOWN_SETS)
    @pytest.mark.parametrize("current", PROBES)
    def test_matches_rules(self, known, current):
        """Test the result follows the same-minor and cross-line rules."""
        known_versions = versions(*known)
        current_version = Version.parse(current)
        assert closest_version(known_versions, current_version) == reference(known_versions, current_version)

    @pytest.mark.parametrize("known", KNOWN_SETS[:4])
    @pytest.mark.parametrize("current", PROBES)
    def test_order_independent(self, known, current):
        """Test registry order never affects the result."""
        current_version = Version.parse(current)
        results = {
            closest_version(versions(*perm), current_version)
            for perm in itertools.permutations(known)
        }
        assert len(results) == 1

    @pytest.mark.parametrize("current", PROBES)
    def test_idempotent_and_duplicates_ignored(self, current):
        """Test repeated resolution and duplicate known entries give the same answer."""
        known = versions(*KNOWN_SETS[4])
        current_version = Version.parse(current)
        first = resolve_version(known, current_version)
        second = resolve_version(known, current_version)
        doubled = resolve_version(known + known, current_version)
        assert first == second == doubled

    @pytest.mark.parametrize(
        "known,current,inserted",
        [
            (["5.11.0", "5.12.2"], "5.13.1", "5.13.0"),
            (["5.11.0", "5.12.2"], "5.13.1", "5.12.5"),
            (["5.9.7", "5.11.0"], "5.10.1", "5.9.9"),
            (["5.9.7", "5.11.0"], "5.10.1", "5.10.0"),
            (["5.11.0", "5.11.5"], "5.11.3", "5.11.2"),
            (["5.11.4", "5.9.7"], "5.11.0", "5.11.2"),
            (["5.15.2"], "6.2.0", "6.0.0"),
        ],
    )
    def test_monotonic(self, known, current, inserted):
        """Test a version added between the result and the installed one becomes the result."""
        current_version = Version.parse(current)
        before = closest_version(versions(*known), current_version)
        new_version = Version.parse(inserted)
        assert min(before, current_version) < new_version < max(before, current_version)

        after = closest_version(versions(*known, inserted), current_version)
        assert after == new_version
