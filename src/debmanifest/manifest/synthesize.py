"""Synthesis of the package config from the project descriptor.

This is the entry point of the manifest engine: it resolves every fallback
of the packaging directives once, selects the assets to install, and
collects advisory warnings for the user.
"""

from __future__ import annotations

import re
from collections import Counter
from collections.abc import Iterable
from pathlib import Path

from debmanifest.cargo.descriptor import CargoDescriptor, CargoPackage, DebOverrides, load_descriptor
from debmanifest.cargo.metadata import BuildIntrospector, CargoMetadataIntrospector, MetadataTarget
from debmanifest.errors import EmptyPackageError, InvalidFieldError, IoFileError, NumParseError
from debmanifest.log import get_logger
from debmanifest.manifest.arch import debian_arch, host_arch
from debmanifest.manifest.assets import Asset
from debmanifest.manifest.config import Config
from debmanifest.manifest.expand import expand_asset_rule
from debmanifest.manifest.implied import implied_assets

LOGGER = get_logger(__name__)

README_CANDIDATES = ("README.md", "README.txt", "README")
MARKDOWN_SUFFIXES = (".md", ".markdown")
_LINE_COUNT = re.compile(r"[0-9]+")


def config_from_manifest(
    target: str | None = None, *, introspector: BuildIntrospector | None = None
) -> tuple[Config, list[str]]:
    """Resolve the package config for the project cargo reports.

    Parameters
    ----------
    target
        Optional target triple being cross-compiled for.
    introspector
        Source of build metadata; defaults to running ``cargo metadata``.

    Returns
    -------
    tuple[Config, list[str]]
        The config and advisory warnings.
    """
    introspector = introspector or CargoMetadataIntrospector()
    metadata = introspector.metadata()
    root_package = metadata.root_package()
    manifest_path = Path(root_package.manifest_path)
    descriptor = load_descriptor(manifest_path)
    return synthesize_config(
        descriptor,
        targets=root_package.targets,
        workspace_root=metadata.workspace_dir(),
        target_dir=Path(metadata.target_directory),
        target=target,
        project_dir=manifest_path.parent,
    )


def synthesize_config(
    descriptor: CargoDescriptor,
    *,
    targets: Iterable[MetadataTarget],
    workspace_root: Path,
    target_dir: Path,
    target: str | None = None,
    project_dir: Path,
) -> tuple[Config, list[str]]:
    """Build the package config from a parsed descriptor.

    Parameters
    ----------
    descriptor
        Parsed ``Cargo.toml``.
    targets
        Build targets of the root package.
    workspace_root
        Root of the cargo workspace.
    target_dir
        Cargo's target directory. When cross-compiling, output lives in a
        subdirectory named after the target triple.
    target
        Optional target triple.
    project_dir
        Directory containing ``Cargo.toml``; relative paths in the
        descriptor are read from here.

    Returns
    -------
    tuple[Config, list[str]]
        The config and advisory warnings.

    Raises
    ------
    InvalidFieldError
        If a required field has no fallback or a numeric field is malformed.
    IoFileError
        If the readme cannot be read.
    EmptyPackageError
        If no assets were found to package.
    """
    if target is not None:
        target_dir = target_dir / target

    package = descriptor.package
    deb = descriptor.deb
    license_file, license_file_skip_lines = _license_file(package, deb)
    warnings = check_config(package, deb, project_dir=project_dir)

    config = Config(
        workspace_root=workspace_root,
        target=target,
        target_dir=target_dir,
        name=package.name,
        version=version_string(package.version, deb.revision),
        copyright=_copyright(package, deb),
        maintainer=_maintainer(package, deb),
        description=package.description or f"{package.name} -- autogenerated Rust project",
        architecture=debian_arch(target) if target is not None else host_arch(),
        license=package.license,
        license_file=license_file,
        license_file_skip_lines=license_file_skip_lines,
        homepage=package.homepage,
        documentation=package.documentation,
        repository=package.repository,
        extended_description=_extended_description(deb, package.readme, project_dir=project_dir),
        depends=deb.depends if deb.depends is not None else "$auto",
        section=deb.section,
        priority=deb.priority or "optional",
        conflicts=deb.conflicts,
        breaks=deb.breaks,
        replaces=deb.replaces,
        provides=deb.provides,
        conf_files="".join(f"{path}\n" for path in deb.conf_files) if deb.conf_files is not None else None,
        maintainer_scripts=Path(deb.maintainer_scripts) if deb.maintainer_scripts is not None else None,
        features=list(deb.features or []),
        default_features=deb.default_features if deb.default_features is not None else True,
        strip=_strip(descriptor.release_debug),
    )

    build_dir = config.path_in_build()
    if deb.assets is not None:
        assets: list[Asset] = []
        for rule in deb.assets:
            assets.extend(expand_asset_rule(rule, build_dir=build_dir, base_dir=project_dir))
    else:
        assets = implied_assets(targets, package_name=package.name, build_dir=build_dir, readme=package.readme)

    # Checked before the generated copyright/changelog assets are added: those
    # alone do not make a useful package.
    if not assets:
        raise EmptyPackageError(
            "No binaries found. The package is empty. Please specify some assets to package in Cargo.toml"
        )
    config.assets.extend(assets)
    warnings.extend(duplicate_destination_warnings(config.assets))
    config.add_copyright_asset()
    config.add_changelog_asset(deb.changelog)

    LOGGER.debug("Resolved %d assets for %s %s", len(config.assets), config.name, config.version)
    return config, warnings


def check_config(package: CargoPackage, deb: DebOverrides, *, project_dir: Path) -> list[str]:
    """Collect advisory warnings about incomplete package metadata."""
    warnings: list[str] = []
    if package.description is None:
        warnings.append("description field is missing in Cargo.toml")
    if package.license is None:
        warnings.append("license field is missing in Cargo.toml")

    readme = package.readme
    if readme is not None:
        if deb.extended_description is None and readme.endswith(MARKDOWN_SUFFIXES):
            warnings.append(
                f"extended-description field missing. Using {readme}, but markdown may not render well."
            )
    else:
        for candidate in README_CANDIDATES:
            if (project_dir / candidate).exists():
                warnings.append(f"{candidate} file exists, but is not specified in `readme` Cargo.toml field")
                break
    return warnings


def duplicate_destination_warnings(assets: Iterable[Asset]) -> list[str]:
    """Warn about destinations claimed by more than one asset.

    Duplicates are kept; the archive builder decides which file wins.
    """
    counts = Counter(asset.destination for asset in assets)
    return [
        f"{destination} is installed by {count} assets; only one will end up in the package"
        for destination, count in counts.items()
        if count > 1
    ]


def version_string(version: str, revision: str | None) -> str:
    if revision is not None:
        return f"{version}-{revision}"
    return version


def _copyright(package: CargoPackage, deb: DebOverrides) -> str:
    if deb.copyright is not None:
        return deb.copyright
    if package.authors is None:
        raise InvalidFieldError("copyright", "Package must have a copyright or authors")
    return ", ".join(package.authors)


def _maintainer(package: CargoPackage, deb: DebOverrides) -> str:
    if deb.maintainer is not None:
        return deb.maintainer
    if not package.authors:
        raise InvalidFieldError("maintainer", "Package must have a maintainer or authors")
    return package.authors[0]


def _extended_description(deb: DebOverrides, readme: str | None, *, project_dir: Path) -> str | None:
    if deb.extended_description is not None:
        return deb.extended_description
    if readme is None:
        return None
    path = project_dir / readme
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise IoFileError("unable to read README", path) from e


def _license_file(package: CargoPackage, deb: DebOverrides) -> tuple[Path | None, int]:
    if deb.license_file is None:
        return (Path(package.license_file) if package.license_file is not None else None), 0

    args = deb.license_file
    file = Path(args[0]) if args else None
    lines = 0
    if len(args) > 1:
        if not _LINE_COUNT.fullmatch(args[1]):
            raise NumParseError("license-file", f"invalid number of lines: {args[1]!r}")
        lines = int(args[1])
    return file, lines


def _strip(debug: bool | int | str | None) -> bool:
    # Debug info requested for release builds means the binary is kept intact.
    if debug is None:
        return True
    if isinstance(debug, str):
        return debug in ("none", "0", "false")
    return not debug
