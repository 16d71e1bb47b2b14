"""Unit tests for cargo metadata introspection."""

from __future__ import annotations

import json
import subprocess
from pathlib import Path

import pytest

from debmanifest.cargo import metadata as metadata_mod
from debmanifest.cargo.metadata import CargoMetadataIntrospector, MetadataTarget, parse_metadata
from debmanifest.errors import CommandError, DebManifestError

pytestmark = pytest.mark.unit


class TestParseMetadata:
    """Tests for parse_metadata function."""

    def test_root_package(self, metadata_json: str, project_dir: Path) -> None:
        """Test selecting the root package by id."""
        metadata = parse_metadata(metadata_json)
        root = metadata.root_package()
        assert root.manifest_path == str(project_dir / "Cargo.toml")
        assert [t.name for t in root.targets] == ["hello"]

    def test_workspace_dir_override(self, metadata_json: str, project_dir: Path) -> None:
        """Test that an explicit workspace root is used."""
        assert parse_metadata(metadata_json).workspace_dir() == project_dir

    def test_workspace_dir_defaults_to_manifest_dir(self, metadata_json: str, project_dir: Path) -> None:
        """Test the fallback to the root manifest's directory."""
        data = json.loads(metadata_json)
        del data["workspace_root"]
        assert parse_metadata(json.dumps(data)).workspace_dir() == project_dir

    def test_missing_root_package(self, metadata_json: str) -> None:
        """Test that a root id not among the packages is fatal."""
        data = json.loads(metadata_json)
        data["resolve"]["root"] = "other 0.0.0"
        with pytest.raises(DebManifestError, match="root package"):
            parse_metadata(json.dumps(data)).root_package()

    def test_malformed_output(self) -> None:
        """Test that malformed JSON is a command error."""
        with pytest.raises(CommandError, match="Malformed"):
            parse_metadata("{not json")


class TestMetadataTarget:
    """Tests for MetadataTarget.is_binary."""

    def test_binary(self, bin_target: MetadataTarget) -> None:
        """Test that bin kind and crate type make a binary."""
        assert bin_target.is_binary

    def test_library(self, lib_target: MetadataTarget) -> None:
        """Test that libraries are not binaries."""
        assert not lib_target.is_binary


class TestCargoMetadataIntrospector:
    """Tests for CargoMetadataIntrospector."""

    def test_missing_cargo(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that a missing executable is reported."""
        monkeypatch.setattr(metadata_mod.shutil, "which", lambda name: None)
        with pytest.raises(CommandError, match="is it in your PATH"):
            CargoMetadataIntrospector().metadata()

    def test_runs_cargo_metadata(self, monkeypatch: pytest.MonkeyPatch, metadata_json: str) -> None:
        """Test the command line and output parsing."""
        seen: list[list[str]] = []

        def fake_run(cmd: list[str], **kwargs: object) -> subprocess.CompletedProcess[str]:
            seen.append(cmd)
            return subprocess.CompletedProcess(cmd, 0, stdout=metadata_json, stderr="")

        monkeypatch.setattr(metadata_mod.shutil, "which", lambda name: f"/usr/bin/{name}")
        monkeypatch.setattr(metadata_mod.subprocess, "run", fake_run)
        result = CargoMetadataIntrospector(Path("/src/Cargo.toml")).metadata()
        assert result.root_package().targets[0].name == "hello"
        assert seen == [
            ["/usr/bin/cargo", "metadata", "--format-version=1", "--manifest-path", "/src/Cargo.toml"]
        ]

    def test_non_zero_exit(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that a failing cargo is fatal with its stderr."""

        def fake_run(cmd: list[str], **kwargs: object) -> subprocess.CompletedProcess[str]:
            return subprocess.CompletedProcess(cmd, 101, stdout="", stderr="could not find Cargo.toml")

        monkeypatch.setattr(metadata_mod.shutil, "which", lambda name: f"/usr/bin/{name}")
        monkeypatch.setattr(metadata_mod.subprocess, "run", fake_run)
        with pytest.raises(CommandError, match="could not find Cargo.toml") as excinfo:
            CargoMetadataIntrospector().metadata()
        assert excinfo.value.returncode == 101
