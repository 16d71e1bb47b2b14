"""Files installed by the package and their destinations."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path, PurePosixPath

from debmanifest.errors import AssetError

EXECUTABLE_BITS = 0o111


@dataclass(frozen=True, init=False)
class Asset:
    """A single file installed by the package.

    The destination is normalized on construction so it is always relative
    to the package root: a leading ``/`` is removed, and a destination that
    ends in ``/`` names a directory, so the source's file name is appended.

    Attributes
    ----------
    source
        Path of the file to install, absolute or relative. Relative sources
        come from asset rules (resolved against the directory holding
        ``Cargo.toml``) and are joined to the workspace root when classifying
        binaries.
    destination
        Path inside the package root filesystem (always relative).
    mode
        Permission bits, e.g. ``0o755``.
    """

    source: Path
    destination: PurePosixPath
    mode: int

    def __init__(self, source: str | Path, destination: str | PurePosixPath, mode: int) -> None:
        source = Path(source)
        object.__setattr__(self, "source", source)
        object.__setattr__(self, "destination", _normalize_destination(source, str(destination)))
        object.__setattr__(self, "mode", mode)

    def is_binary_executable(self, workspace_root: Path, release_dir: Path) -> bool:
        """Whether this asset is a compiled executable from the release build.

        Files from the build output directory with any executable bit set are
        assumed to be binaries.
        """
        source_abspath = workspace_root / self.source
        return source_abspath.is_relative_to(release_dir) and (self.mode & EXECUTABLE_BITS) != 0


def _normalize_destination(source: Path, destination: str) -> PurePosixPath:
    # PurePosixPath drops a trailing separator, so check the raw text first.
    directory_style = destination.endswith("/")
    dest = PurePosixPath(destination)

    if dest.is_absolute():
        # parts[0] is the root, which may be "//" on POSIX.
        dest = PurePosixPath(*dest.parts[1:])

    if directory_style:
        name = source.name
        if name in ("", ".."):
            raise AssetError(f"Source must be a file to install into a directory: {source}")
        dest = dest / name
    return dest
