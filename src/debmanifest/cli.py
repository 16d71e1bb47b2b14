"""Command-line entry point: print the resolved package manifest."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any

import yaml

from debmanifest.cargo.metadata import CargoMetadataIntrospector
from debmanifest.cargo.shlibs import SharedLibraryResolver
from debmanifest.errors import DebManifestError
from debmanifest.log import configure_logging, get_logger
from debmanifest.manifest.config import Config
from debmanifest.manifest.synthesize import config_from_manifest

LOGGER = get_logger("debmanifest.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="debmanifest",
        description="Resolve a Cargo project into the files and metadata of a Debian package.",
    )
    parser.add_argument("--target", help="Target triple when cross-compiling")
    parser.add_argument("--manifest-path", type=Path, help="Path to Cargo.toml")
    parser.add_argument("--format", choices=("yaml", "json"), default="yaml", help="Output format")
    parser.add_argument("--no-deps", action="store_true", help="Skip dependency resolution")
    parser.add_argument("--log-level", default=None, help="Logging level (default: INFO)")
    return parser


def manifest_dict(config: Config, *, depends: str | None) -> dict[str, Any]:
    """Plain-data view of a config, suitable for YAML or JSON output."""
    return {
        "package": config.name,
        "version": config.version,
        "architecture": config.architecture,
        "maintainer": config.maintainer,
        "copyright": config.copyright,
        "description": config.description,
        "extended_description": config.extended_description,
        "license": config.license,
        "license_file": str(config.license_file) if config.license_file is not None else None,
        "license_file_skip_lines": config.license_file_skip_lines,
        "homepage": config.homepage,
        "documentation": config.documentation,
        "repository": config.repository,
        "repository_type": config.repository_type(),
        "depends": depends if depends is not None else config.depends,
        "section": config.section,
        "priority": config.priority,
        "conflicts": config.conflicts,
        "breaks": config.breaks,
        "replaces": config.replaces,
        "provides": config.provides,
        "conf_files": config.conf_files.splitlines() if config.conf_files else [],
        "maintainer_scripts": str(config.maintainer_scripts) if config.maintainer_scripts is not None else None,
        "features": config.features,
        "default_features": config.default_features,
        "strip": config.strip,
        "assets": [
            {"source": str(a.source), "destination": str(a.destination), "mode": f"{a.mode:o}"}
            for a in config.assets
        ],
    }


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    try:
        config, warnings = config_from_manifest(
            args.target, introspector=CargoMetadataIntrospector(args.manifest_path)
        )
        for warning in warnings:
            LOGGER.warning("%s", warning)
        # Resolver warnings are logged by the aggregator itself.
        depends = None if args.no_deps else config.get_dependencies(SharedLibraryResolver())
    except DebManifestError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    data = manifest_dict(config, depends=depends)
    if args.format == "json":
        sys.stdout.write(json.dumps(data, indent=2) + "\n")
    else:
        sys.stdout.write(yaml.safe_dump(data, sort_keys=False, allow_unicode=True))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
