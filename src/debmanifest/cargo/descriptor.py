"""Typed records for ``Cargo.toml`` and its ``[package.metadata.deb]`` table."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import tomli
from pydantic import BaseModel, ValidationError

from debmanifest.errors import DescriptorError, IoFileError


def _kebab(name: str) -> str:
    return name.replace("_", "-")


_RECORD_CONFIG: Any = {
    "alias_generator": _kebab,
    "populate_by_name": True,
    "extra": "ignore",
    "frozen": True,
}


class DebOverrides(BaseModel):
    """User packaging directives from ``[package.metadata.deb]``.

    Every field is optional; fallbacks are resolved once when the package
    config is synthesized.
    """

    maintainer: str | None = None
    copyright: str | None = None
    license_file: list[str] | None = None
    changelog: str | None = None
    depends: str | None = None
    conflicts: str | None = None
    breaks: str | None = None
    replaces: str | None = None
    provides: str | None = None
    extended_description: str | None = None
    section: str | None = None
    priority: str | None = None
    revision: str | None = None
    conf_files: list[str] | None = None
    assets: list[list[str]] | None = None
    maintainer_scripts: str | None = None
    features: list[str] | None = None
    default_features: bool | None = None

    model_config = _RECORD_CONFIG


class PackageMetadata(BaseModel):
    deb: DebOverrides | None = None

    model_config = _RECORD_CONFIG


class CargoPackage(BaseModel):
    """The ``[package]`` table."""

    name: str
    version: str
    authors: list[str] | None = None
    license: str | None = None
    license_file: str | None = None
    homepage: str | None = None
    documentation: str | None = None
    repository: str | None = None
    description: str | None = None
    readme: str | None = None
    metadata: PackageMetadata | None = None

    model_config = _RECORD_CONFIG


class CargoProfile(BaseModel):
    # Cargo accepts booleans, levels (0-2) and names ("none", "full").
    debug: bool | int | str | None = None

    model_config = _RECORD_CONFIG


class CargoProfiles(BaseModel):
    release: CargoProfile | None = None

    model_config = _RECORD_CONFIG


class CargoDescriptor(BaseModel):
    """A parsed ``Cargo.toml``."""

    package: CargoPackage
    profile: CargoProfiles | None = None

    model_config = _RECORD_CONFIG

    @property
    def deb(self) -> DebOverrides:
        """Packaging directives, empty when the table is absent."""
        metadata = self.package.metadata
        if metadata is None or metadata.deb is None:
            return DebOverrides()
        return metadata.deb

    @property
    def release_debug(self) -> bool | int | str | None:
        if self.profile is None or self.profile.release is None:
            return None
        return self.profile.release.debug


def parse_descriptor(text: str, *, source: str = "Cargo.toml") -> CargoDescriptor:
    """Parse and validate ``Cargo.toml`` content.

    Raises
    ------
    DescriptorError
        If the text is not valid TOML or lacks required fields.
    """
    try:
        data = tomli.loads(text)
    except tomli.TOMLDecodeError as e:
        raise DescriptorError(f"Failed to parse {source}: {e}") from e
    try:
        return CargoDescriptor.model_validate(data)
    except ValidationError as e:
        raise DescriptorError(f"Invalid {source}: {e}") from e


def load_descriptor(path: Path) -> CargoDescriptor:
    """Read and parse a ``Cargo.toml`` file."""
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise IoFileError("unable to read Cargo.toml", path) from e
    return parse_descriptor(text, source=str(path))
