"""Runtime dependencies of compiled binaries, found via ``ldd`` and ``dpkg``."""

from __future__ import annotations

import shutil
import subprocess
from pathlib import Path

from debmanifest.errors import DependencyResolutionError
from debmanifest.log import get_logger

LOGGER = get_logger(__name__)


class SharedLibraryResolver:
    """Maps a binary to the Debian packages owning the libraries it links.

    Instances are callable as ``resolver(binary, arch)`` and return a sorted
    list of package names.

    Parameters
    ----------
    ldd
        ``ldd`` executable name or path.
    dpkg
        ``dpkg`` executable name or path.
    """

    def __init__(self, *, ldd: str = "ldd", dpkg: str = "dpkg") -> None:
        self._ldd = ldd
        self._dpkg = dpkg

    def __call__(self, binary: Path, arch: str) -> list[str]:
        libraries = parse_ldd_output(self._run([self._ldd, str(binary)]))
        packages: set[str] = set()
        for library in libraries:
            packages.update(self._owners(library, arch))
        return sorted(packages)

    def _owners(self, library: Path, arch: str) -> set[str]:
        candidates = [library]
        resolved = library.resolve()
        if resolved != library:
            candidates.append(resolved)

        error: DependencyResolutionError | None = None
        for candidate in candidates:
            try:
                output = self._run([self._dpkg, "-S", str(candidate)])
            except DependencyResolutionError as e:
                error = e
                continue
            return parse_dpkg_search(output, arch)
        raise DependencyResolutionError(f"No installed package owns {library}") from error

    def _run(self, cmd: list[str]) -> str:
        executable = shutil.which(cmd[0])
        if executable is None:
            raise DependencyResolutionError(f"{cmd[0]} not found (is it in your PATH?)")
        LOGGER.debug("Running command: %s", " ".join(cmd))
        try:
            proc = subprocess.run([executable, *cmd[1:]], capture_output=True, text=True, check=False)
        except (OSError, UnicodeDecodeError) as e:
            raise DependencyResolutionError(f"Failed to run {cmd[0]}: {e}") from e
        if proc.returncode != 0:
            raise DependencyResolutionError(f"{' '.join(cmd)} failed ({proc.returncode}): {proc.stderr.strip()}")
        return proc.stdout


def parse_ldd_output(text: str) -> list[Path]:
    """Extract absolute library paths from ``ldd`` output.

    Virtual objects such as ``linux-vdso.so.1`` have no file and are skipped.
    """
    libraries: list[Path] = []
    for line in text.splitlines():
        line = line.strip()
        if not line:
            continue
        if "=>" in line:
            line = line.split("=>", 1)[1].strip()
        path = line.split(" (", 1)[0].strip()
        if path.startswith("/"):
            libraries.append(Path(path))
    return list(dict.fromkeys(libraries))


def parse_dpkg_search(text: str, arch: str) -> set[str]:
    """Extract package names from ``dpkg -S`` output.

    Lines look like ``libc6:amd64: /lib/x86_64-linux-gnu/libc.so.6``, and may
    list several comma-separated owners. Owners qualified with a different
    architecture are ignored.
    """
    packages: set[str] = set()
    for line in text.splitlines():
        if ": " not in line or line.startswith("diversion by"):
            continue
        owners = line.rsplit(": ", 1)[0]
        for owner in owners.split(","):
            name, _, owner_arch = owner.strip().partition(":")
            if not name:
                continue
            if owner_arch and owner_arch not in (arch, "all"):
                continue
            packages.add(name)
    return packages
