"""
Unit tests for installation data loading.
"""

import json

import pytest

from bindbuild.config.installation import InstallationData, InstallationDataError
from bindbuild.version import InvalidVersion, Version


class TestInstallationData:
    """Test suite for InstallationData."""

    @pytest.fixture
    def probe_file(self, tmp_path):
        path = tmp_path / "installation.json"
        path.write_text(
            json.dumps(
                {
                    "version": "5.12.4",
                    "paths": {
                        "include_root": "/usr/include/qt5",
                        "library_root": "/usr/lib/x86_64-linux-gnu",
                    },
                }
            )
        )
        return path

    def test_from_json_file(self, probe_file):
        data = InstallationData.from_json_file(probe_file)
        assert data.version == "5.12.4"
        assert data.path("include_root") == "/usr/include/qt5"
        assert data.parsed_version() == Version(5, 12, 4)

    def test_from_json_file_missing(self, tmp_path):
        with pytest.raises(InstallationDataError, match="not found"):
            InstallationData.from_json_file(tmp_path / "installation.json")

    def test_from_json_file_invalid(self, tmp_path):
        path = tmp_path / "installation.json"
        path.write_text("version = 5.12.4")
        with pytest.raises(InstallationDataError, match="Invalid JSON"):
            InstallationData.from_json_file(path)

    def test_from_json_file_invalid_utf8(self, tmp_path):
        path = tmp_path / "installation.json"
        path.write_bytes(b'{"version": "5.12.4", "paths": {"root": "\xff"}}')
        with pytest.raises(InstallationDataError, match="Invalid JSON"):
            InstallationData.from_json_file(path)

    def test_from_json_file_unreadable(self, tmp_path):
        path = tmp_path / "installation.json"
        path.mkdir()
        with pytest.raises(InstallationDataError, match="Failed to read"):
            InstallationData.from_json_file(path)

    def test_missing_version(self):
        with pytest.raises(InstallationDataError, match="version"):
            InstallationData.from_dict({"paths": {}})

    def test_paths_must_be_object(self):
        with pytest.raises(InstallationDataError):
            InstallationData.from_dict({"version": "5.12.4", "paths": ["/usr"]})

    def test_paths_optional(self):
        data = InstallationData.from_dict({"version": "5.12.4"})
        assert dict(data.paths) == {}

    def test_invalid_version_deferred_to_parse(self):
        """Test a malformed version is reported as InvalidVersion when parsed."""
        data = InstallationData.from_dict({"version": "5.12"})
        with pytest.raises(InvalidVersion):
            data.parsed_version()

    def test_missing_path(self):
        data = InstallationData("5.12.4", {"include_root": "/usr/include"})
        with pytest.raises(KeyError):
            data.path("library_root")
