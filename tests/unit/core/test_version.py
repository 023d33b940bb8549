"""
Unit tests for the library version model.
"""

import pytest

from bindbuild.version import InvalidVersion, Version


class TestVersionParse:
    """Test suite for Version.parse."""

    def test_parse_simple(self):
        """Test parsing a plain major.minor.patch string."""
        version = Version.parse("5.12.2")
        assert version.major == 5
        assert version.minor == 12
        assert version.patch == 2

    def test_parse_strips_whitespace(self):
        """Test surrounding whitespace is ignored."""
        assert Version.parse("  5.12.2\n") == Version(5, 12, 2)

    def test_parse_keeps_metadata_for_diagnostics(self):
        """Test pre-release/build metadata is retained but not rendered."""
        version = Version.parse("5.12.2-rc1+build7")
        assert str(version) == "5.12.2"
        assert version.raw == "5.12.2-rc1+build7"
        assert version.metadata == "-rc1+build7"

    @pytest.mark.parametrize(
        "text",
        ["", "abc", "5", "5.12", "5.12.x", "v5.12.2", "5.12.2.1", "-1.0.0"],
    )
    def test_parse_invalid(self, text):
        """Test malformed strings raise InvalidVersion."""
        with pytest.raises(InvalidVersion):
            Version.parse(text)

    def test_parse_non_string(self):
        """Test non-string input raises InvalidVersion."""
        with pytest.raises(InvalidVersion, match="must be a string"):
            Version.parse(5)  # type: ignore[arg-type]

    def test_invalid_version_is_value_error(self):
        """Test InvalidVersion can be caught as ValueError."""
        with pytest.raises(ValueError):
            Version.parse("not-a-version")


class TestVersionOrdering:
    """Test suite for Version ordering and equality."""

    def test_lexicographic_order(self):
        """Test ordering on (major, minor, patch)."""
        versions = [Version.parse(v) for v in ["5.12.2", "5.9.7", "6.0.0", "5.11.0", "5.12.10"]]
        assert [str(v) for v in sorted(versions)] == ["5.9.7", "5.11.0", "5.12.2", "5.12.10", "6.0.0"]

    def test_numeric_not_string_compare(self):
        """Test components compare as numbers."""
        assert Version.parse("5.9.0") < Version.parse("5.10.0")

    def test_metadata_not_part_of_ordering(self):
        """Test versions differing only in metadata are equal."""
        assert Version.parse("5.12.2-rc1") == Version.parse("5.12.2")
        assert not Version.parse("5.12.2-rc1") < Version.parse("5.12.2")
        assert len({Version.parse("5.12.2-rc1"), Version.parse("5.12.2+b1"), Version.parse("5.12.2")}) == 1

    def test_minor_line(self):
        """Test minor_line groups patches of a line."""
        assert Version.parse("5.12.0").minor_line == Version.parse("5.12.9").minor_line
        assert Version.parse("5.12.0").minor_line != Version.parse("5.13.0").minor_line

    def test_str_round_trip(self):
        """Test str() gives major.minor.patch and parses back equal."""
        version = Version.parse("6.5.3")
        assert str(version) == "6.5.3"
        assert Version.parse(str(version)) == version

    def test_immutable(self):
        """Test versions cannot be modified."""
        version = Version.parse("5.12.2")
        with pytest.raises(AttributeError):
            version.major = 6  # type: ignore[misc]
