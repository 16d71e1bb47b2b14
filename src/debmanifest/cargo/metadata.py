"""Build introspection through ``cargo metadata``."""

from __future__ import annotations

import shutil
import subprocess
from pathlib import Path
from typing import Protocol

from pydantic import BaseModel, ValidationError

from debmanifest.errors import CommandError, DebManifestError
from debmanifest.log import get_logger

LOGGER = get_logger(__name__)


class MetadataTarget(BaseModel):
    """One build target of a package.

    Attributes
    ----------
    name
        Target name; for binaries this is the executable's file name.
    kind
        Target kinds, e.g. ``["bin"]`` or ``["lib"]``.
    crate_types
        Crate types produced, e.g. ``["bin"]`` or ``["rlib", "cdylib"]``.
    """

    name: str
    kind: list[str]
    crate_types: list[str] = []

    model_config = {"frozen": True, "extra": "ignore"}

    @property
    def is_binary(self) -> bool:
        return "bin" in self.kind and "bin" in self.crate_types


class MetadataPackage(BaseModel):
    id: str
    manifest_path: str
    targets: list[MetadataTarget] = []

    model_config = {"frozen": True, "extra": "ignore"}


class MetadataResolve(BaseModel):
    root: str | None = None

    model_config = {"frozen": True, "extra": "ignore"}


class CargoMetadata(BaseModel):
    """The parts of ``cargo metadata --format-version=1`` output we use."""

    packages: list[MetadataPackage]
    resolve: MetadataResolve | None = None
    target_directory: str
    workspace_root: str | None = None

    model_config = {"frozen": True, "extra": "ignore"}

    def root_package(self) -> MetadataPackage:
        """Return the package being built.

        Raises
        ------
        DebManifestError
            If the resolve graph has no root or it is not among the packages.
        """
        root_id = self.resolve.root if self.resolve is not None else None
        for package in self.packages:
            if root_id is not None and package.id == root_id:
                return package
        raise DebManifestError("Unable to find root package in cargo metadata")

    def workspace_dir(self) -> Path:
        if self.workspace_root:
            return Path(self.workspace_root)
        return Path(self.root_package().manifest_path).parent


class BuildIntrospector(Protocol):
    def metadata(self) -> CargoMetadata: ...


class CargoMetadataIntrospector:
    """Runs ``cargo metadata`` and parses its result.

    Parameters
    ----------
    manifest_path
        Optional ``Cargo.toml`` to inspect instead of the one cargo finds
        from the working directory.
    cargo
        Cargo executable name or path.
    """

    def __init__(self, manifest_path: Path | None = None, *, cargo: str = "cargo") -> None:
        self._manifest_path = manifest_path
        self._cargo = cargo

    def metadata(self) -> CargoMetadata:
        cargo_bin = shutil.which(self._cargo)
        if cargo_bin is None:
            raise CommandError(f"{self._cargo} not found (is it in your PATH?)")

        cmd = [cargo_bin, "metadata", "--format-version=1"]
        if self._manifest_path is not None:
            cmd.extend(["--manifest-path", str(self._manifest_path)])
        LOGGER.debug("Running command: %s", " ".join(cmd))
        try:
            proc = subprocess.run(cmd, capture_output=True, text=True, check=False)
        except OSError as e:
            raise CommandError(f"Failed to run {self._cargo}: {e}") from e
        if proc.returncode != 0:
            raise CommandError(
                f"{self._cargo} metadata failed ({proc.returncode}): {proc.stderr.strip()}",
                returncode=proc.returncode,
                stderr=proc.stderr,
            )
        return parse_metadata(proc.stdout)


def parse_metadata(text: str) -> CargoMetadata:
    """Validate ``cargo metadata`` JSON output."""
    try:
        return CargoMetadata.model_validate_json(text)
    except ValidationError as e:
        raise CommandError(f"Malformed cargo metadata output: {e}") from e
