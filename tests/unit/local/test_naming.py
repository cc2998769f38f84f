"""Tests for the artifact naming convention."""

from __future__ import annotations

import pytest

from sigdeploy.local.naming import ArtifactKind, ArtifactName, is_valid_version, parse_artifact_name
from sigdeploy.models.signature import OutputFormat

NAME = ArtifactName.for_identity("Acme", "1.0", "jane.doe@acme.sk")


class TestEncode:
    def test_base_name(self):
        assert NAME.base_name == "Acme 1.0 (jane.doe@acme.sk)"

    def test_content_file_name(self):
        assert NAME.content_file_name(OutputFormat.HTM) == "Acme 1.0 (jane.doe@acme.sk).htm"

    def test_files_dir_name(self):
        assert NAME.files_dir_name == "Acme 1.0 (jane.doe@acme.sk)_files"

    def test_marker_name(self):
        assert NAME.marker_name == "Acme 1.0 version.txt"


class TestDecode:
    def test_content_file(self):
        decoded = parse_artifact_name("Acme 2.1 (john@acme.sk).rtf", "Acme")
        assert decoded.kind is ArtifactKind.CONTENT
        assert decoded.version == "2.1"
        assert decoded.identity == "john@acme.sk"
        assert decoded.fmt is OutputFormat.RTF

    def test_resource_dir(self):
        decoded = parse_artifact_name(NAME.files_dir_name, "Acme")
        assert decoded.kind is ArtifactKind.RESOURCES
        assert decoded.identity == "jane.doe@acme.sk"

    def test_marker(self):
        decoded = parse_artifact_name("Acme 3 version.txt", "Acme")
        assert decoded.kind is ArtifactKind.MARKER
        assert decoded.version == "3"
        assert decoded.identity is None

    @pytest.mark.parametrize("version", ["1.0", "2024 Q1", "v 3 . 1", "2024-03-01"])
    def test_encoded_names_decode_to_themselves(self, version):
        name = ArtifactName.for_identity("Acme", version, "jane.doe@acme.sk")
        for fmt in OutputFormat:
            assert parse_artifact_name(name.content_file_name(fmt), "Acme") == ArtifactName(
                "Acme", version, "jane.doe@acme.sk", ArtifactKind.CONTENT, fmt
            )
        assert parse_artifact_name(name.files_dir_name, "Acme") == ArtifactName(
            "Acme", version, "jane.doe@acme.sk", ArtifactKind.RESOURCES
        )
        assert parse_artifact_name(name.marker_name, "Acme") == ArtifactName(
            "Acme", version, kind=ArtifactKind.MARKER
        )

    @pytest.mark.parametrize("version", ["2024/05", "1.0 (EU)", "a:b", ""])
    def test_unencodable_versions_rejected(self, version):
        assert not is_valid_version(version)
        with pytest.raises(ValueError):
            ArtifactName.for_identity("Acme", version, "jane.doe@acme.sk")

    def test_foreign_names_rejected(self):
        assert parse_artifact_name("Personal.htm", "Acme") is None
        assert parse_artifact_name("Other 1.0 (jane@acme.sk).htm", "Acme") is None
        assert parse_artifact_name("Acme 1.0 (jane@acme.sk).docx", "Acme") is None

    def test_prefix_with_regex_characters(self):
        name = ArtifactName.for_identity("Acme (EU)+", "1.0", "j@a.sk")
        assert parse_artifact_name(name.content_file_name(OutputFormat.TXT), "Acme (EU)+") is not None
