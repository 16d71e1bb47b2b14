"""Error types raised while resolving a package manifest."""

from __future__ import annotations

from pathlib import Path


class DebManifestError(Exception):
    """Base class for fatal manifest resolution errors."""


class IoFileError(DebManifestError):
    """A required file could not be read.

    Attributes
    ----------
    path
        The file that failed to read.
    """

    def __init__(self, message: str, path: Path) -> None:
        super().__init__(f"{message}: {path}")
        self.path = path


class CommandError(DebManifestError):
    """An external command could not be run or exited unsuccessfully."""

    def __init__(self, message: str, returncode: int | None = None, stderr: str = "") -> None:
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr


class InvalidFieldError(DebManifestError):
    """A user-provided field is malformed or missing without a fallback.

    Attributes
    ----------
    field
        Name of the offending field.
    """

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"{field}: {message}")
        self.field = field


class NumParseError(InvalidFieldError):
    """A numeric field (permission octal, line count) failed to parse."""


class DescriptorError(DebManifestError):
    """The project descriptor is not valid TOML or has the wrong shape."""


class AssetError(DebManifestError):
    """An asset violates its construction invariants."""


class EmptyPackageError(DebManifestError):
    """No assets were resolved for the package."""


class DependencyResolutionError(DebManifestError):
    """Automatic dependency resolution failed for one binary.

    This is never fatal on its own; the aggregator downgrades it to an
    advisory warning.
    """
