"""The resolved package configuration."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath

from debmanifest.manifest.assets import Asset
from debmanifest.manifest.depends import DependencyResolver, aggregate_dependencies
from debmanifest.manifest.implied import DOC_DIR


@dataclass
class Config:
    """Everything needed to build the package, with all defaults applied.

    A Config is built once per invocation. After synthesis the only mutation
    is appending the generated copyright and changelog assets.
    """

    workspace_root: Path
    target: str | None
    target_dir: Path
    name: str
    version: str
    copyright: str
    maintainer: str
    description: str
    architecture: str
    license: str | None = None
    license_file: Path | None = None
    license_file_skip_lines: int = 0
    homepage: str | None = None
    documentation: str | None = None
    repository: str | None = None
    extended_description: str | None = None
    depends: str = "$auto"
    section: str | None = None
    priority: str = "optional"
    # https://wiki.debian.org/PackageTransition
    conflicts: str | None = None
    breaks: str | None = None
    replaces: str | None = None
    provides: str | None = None
    conf_files: str | None = None
    assets: list[Asset] = field(default_factory=list)
    maintainer_scripts: Path | None = None
    features: list[str] = field(default_factory=list)
    default_features: bool = True
    strip: bool = True

    def path_in_build(self, rel_path: str | Path = "") -> Path:
        """Path inside the release build output directory."""
        return self.target_dir / "release" / rel_path

    def deb_dir(self) -> Path:
        """Scratch directory for generated package files."""
        return self.target_dir / "debian"

    def path_in_deb(self, rel_path: str | Path) -> Path:
        return self.deb_dir() / rel_path

    def doc_dir(self) -> PurePosixPath:
        return DOC_DIR / self.name

    def binaries(self) -> list[Path]:
        """Sources of assets that are executables from the release build."""
        release_dir = self.path_in_build()
        return [a.source for a in self.assets if a.is_binary_executable(self.workspace_root, release_dir)]

    def get_dependencies(self, resolver: DependencyResolver, *, warnings: list[str] | None = None) -> str:
        """Resolve the ``Depends`` value for this package.

        Parameters
        ----------
        resolver
            Callable mapping ``(binary, architecture)`` to package names.
        warnings
            Optional list receiving advisory messages for binaries whose
            dependencies could not be resolved.
        """
        return aggregate_dependencies(
            self.depends,
            binaries=self.binaries(),
            architecture=self.architecture,
            resolver=resolver,
            warnings=warnings,
        )

    def add_copyright_asset(self) -> None:
        # The file itself is generated later, into the scratch directory.
        self.assets.append(Asset(self.path_in_deb("copyright"), str(self.doc_dir() / "copyright"), 0o644))

    def add_changelog_asset(self, changelog: str | None) -> None:
        if changelog is not None:
            self.assets.append(Asset(changelog, str(self.doc_dir() / "changelog"), 0o644))

    def repository_type(self) -> str | None:
        """Guess the version control system from the repository URL.

        Cargo suggests human-friendly URLs rather than tool-specific schemes,
        so this is a heuristic.
        """
        repo = self.repository
        if repo is None:
            return None
        if (
            repo.startswith("git+")
            or repo.endswith(".git")
            or "git@" in repo
            or "github.com" in repo
            or "gitlab.com" in repo
        ):
            return "Git"
        if repo.startswith("cvs+") or "pserver:" in repo or "@cvs." in repo:
            return "Cvs"
        if repo.startswith("hg+") or "hg@" in repo or "/hg." in repo:
            return "Hg"
        if repo.startswith("svn+") or "/svn." in repo:
            return "Svn"
        return None
