"""Default assets for packages that declare no asset rules."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path, PurePosixPath

from debmanifest.cargo.metadata import MetadataTarget
from debmanifest.manifest.assets import Asset

BIN_DIR = PurePosixPath("usr/bin")
DOC_DIR = PurePosixPath("usr/share/doc")


def implied_assets(
    targets: Iterable[MetadataTarget],
    *,
    package_name: str,
    build_dir: Path,
    readme: str | None,
) -> list[Asset]:
    """Build the assets installed when the user lists none.

    Every binary target is installed into ``/usr/bin`` as ``0o755``, and a
    declared readme goes into the package's documentation directory as
    ``0o644``.

    Parameters
    ----------
    targets
        Build targets of the root package.
    package_name
        Package name, used for the documentation directory.
    build_dir
        Directory holding release build output.
    readme
        Readme path from the project descriptor, if any.

    Returns
    -------
    list[Asset]
        Binaries in target order, then the readme.
    """
    assets = [
        Asset(build_dir / target.name, str(BIN_DIR / target.name), 0o755) for target in targets if target.is_binary
    ]
    if readme is not None:
        assets.append(Asset(readme, str(DOC_DIR / package_name / readme), 0o644))
    return assets
