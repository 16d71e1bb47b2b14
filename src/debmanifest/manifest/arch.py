"""Debian architecture names for Rust target triples.

See https://wiki.debian.org/Multiarch/Tuples and ``rustc --print target-list``.
"""

from __future__ import annotations

import platform

# (arch, abi) -> Debian architecture. An abi of None matches any abi.
_ARCH_TABLE: dict[tuple[str, str | None], str] = {
    ("aarch64", None): "arm64",
    ("mips64", "gnuabin32"): "mipsn32",
    ("mips64el", "gnuabin32"): "mipsn32el",
    ("mipsisa32r6", None): "mipsr6",
    ("mipsisa32r6el", None): "mipsr6el",
    ("mipsisa64r6", "gnuabi64"): "mips64r6",
    ("mipsisa64r6", "gnuabin32"): "mipsn32r6",
    ("mipsisa64r6el", "gnuabi64"): "mips64r6el",
    ("mipsisa64r6el", "gnuabin32"): "mipsn32r6el",
    ("powerpc", "gnuspe"): "powerpcspe",
    ("powerpc64", None): "ppc64",
    ("powerpc64le", None): "ppc64el",
    ("i586", None): "i386",
    ("i686", None): "i386",
    ("x86", None): "i386",
    ("x86_64", "gnux32"): "x32",
    ("x86_64", None): "amd64",
}


def debian_arch(target: str) -> str:
    """Map a target triple (or a bare arch name) to a Debian architecture.

    Parameters
    ----------
    target
        Target triple such as ``armv7-unknown-linux-gnueabihf``, or a host
        architecture name such as ``x86_64``.

    Returns
    -------
    str
        Debian architecture tag. Unknown architectures are returned as-is.
    """
    parts = target.split("-")
    arch = parts[0]
    abi = parts[-1] if len(parts) > 1 else ""

    exact = _ARCH_TABLE.get((arch, abi))
    if exact is not None:
        return exact
    wildcard = _ARCH_TABLE.get((arch, None))
    if wildcard is not None:
        return wildcard
    if arch.startswith("arm"):
        return "armhf" if abi.endswith("hf") else "armel"
    return arch


# platform.machine() spellings that differ from the Rust arch names.
_HOST_ALIASES = {
    "arm64": "aarch64",
    "amd64": "x86_64",
    "AMD64": "x86_64",
    "ppc64le": "powerpc64le",
    "ppc64": "powerpc64",
}


def host_arch() -> str:
    """Debian architecture of the running machine."""
    machine = platform.machine()
    return debian_arch(_HOST_ALIASES.get(machine, machine))
