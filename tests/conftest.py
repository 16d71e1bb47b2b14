"""Shared test fixtures for debmanifest tests."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from debmanifest.cargo.descriptor import CargoDescriptor
from debmanifest.cargo.metadata import CargoMetadata, MetadataTarget


class FakeIntrospector:
    """Build introspector returning canned metadata."""

    def __init__(self, metadata: CargoMetadata) -> None:
        self._metadata = metadata
        self.calls = 0

    def metadata(self) -> CargoMetadata:
        self.calls += 1
        return self._metadata


class FakeResolver:
    """Dependency resolver backed by a dict; missing binaries raise."""

    def __init__(self, deps: dict[str, list[str]], errors: dict[str, Exception] | None = None) -> None:
        self._deps = deps
        self._errors = errors or {}
        self.calls: list[tuple[Path, str]] = []

    def __call__(self, binary: Path, arch: str) -> list[str]:
        self.calls.append((binary, arch))
        key = binary.name
        if key in self._errors:
            raise self._errors[key]
        return self._deps.get(key, [])


def make_descriptor(deb: dict[str, Any] | None = None, **package: Any) -> CargoDescriptor:
    """Create a descriptor with sensible package defaults."""
    data: dict[str, Any] = {
        "name": "hello",
        "version": "1.0.0",
        "authors": ["Jane Doe <jane@example.com>", "John Roe <john@example.com>"],
        "license": "MIT",
        "description": "Says hello",
    }
    data.update(package)
    data = {k: v for k, v in data.items() if v is not None}
    if deb is not None:
        data["metadata"] = {"deb": deb}
    return CargoDescriptor.model_validate({"package": data})


@pytest.fixture
def bin_target() -> MetadataTarget:
    """A binary build target named 'hello'."""
    return MetadataTarget(name="hello", kind=["bin"], crate_types=["bin"])


@pytest.fixture
def lib_target() -> MetadataTarget:
    """A library build target."""
    return MetadataTarget(name="hello", kind=["lib"], crate_types=["rlib"])


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """A project directory with a manifest, a readme and release binaries."""
    root = tmp_path / "hello"
    root.mkdir()
    (root / "Cargo.toml").write_text(
        '[package]\nname = "hello"\nversion = "1.0.0"\nauthors = ["Jane Doe <jane@example.com>"]\n',
        encoding="utf-8",
    )
    (root / "README.md").write_text("# Hello\n\nSays hello.\n", encoding="utf-8")
    release = root / "target" / "release"
    release.mkdir(parents=True)
    (release / "hello").write_bytes(b"\x7fELF")
    (release / "helper").write_bytes(b"\x7fELF")
    (release / "deps").mkdir()
    return root


@pytest.fixture
def metadata_json(project_dir: Path) -> str:
    """`cargo metadata` output describing `project_dir`."""
    return json.dumps(
        {
            "packages": [
                {
                    "id": "hello 1.0.0 (path+file:///hello)",
                    "name": "hello",
                    "manifest_path": str(project_dir / "Cargo.toml"),
                    "targets": [
                        {"name": "hello", "kind": ["bin"], "crate_types": ["bin"], "src_path": "src/main.rs"},
                    ],
                },
                {
                    "id": "dep 0.1.0 (registry+https://github.com/rust-lang/crates.io-index)",
                    "name": "dep",
                    "manifest_path": "/registry/dep/Cargo.toml",
                    "targets": [{"name": "dep", "kind": ["lib"], "crate_types": ["lib"]}],
                },
            ],
            "resolve": {"root": "hello 1.0.0 (path+file:///hello)", "nodes": []},
            "target_directory": str(project_dir / "target"),
            "workspace_root": str(project_dir),
            "version": 1,
        }
    )
