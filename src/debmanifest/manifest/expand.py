"""Expansion of declared asset rules into concrete assets.

A rule is ``[source, destination, mode]``. The source may be a literal path
or a glob pattern; ``*``, ``?`` and ``[...]`` match within one path
component and ``**`` matches any number of directories.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from fnmatch import fnmatchcase
from pathlib import Path, PurePath, PurePosixPath

from debmanifest.errors import InvalidFieldError, IoFileError, NumParseError
from debmanifest.log import get_logger
from debmanifest.manifest.assets import Asset

LOGGER = get_logger(__name__)

# Sources starting with this are rewritten into the actual build directory,
# which differs when cross-compiling or using a custom target dir.
RELEASE_MARKER = ("target", "release")

_GLOB_CHARS = frozenset("*[]!")
_MAGIC_CHARS = frozenset("*?[")
_OCTAL = re.compile(r"[0-7]+")


def is_glob_pattern(text: str) -> bool:
    """Whether a source path should be treated as a pattern."""
    return any(c in _GLOB_CHARS for c in text)


def literal_prefix(path: PurePath) -> PurePath:
    """Leading components of ``path`` that contain no glob characters."""
    parts: list[str] = []
    for part in path.parts:
        if is_glob_pattern(part):
            break
        parts.append(part)
    return type(path)(*parts)


def parse_mode(text: str) -> int:
    """Parse a permission string written in base 8.

    Raises
    ------
    NumParseError
        If the text is not an octal number.
    """
    if not _OCTAL.fullmatch(text):
        raise NumParseError("assets", f"unable to parse chmod argument {text!r} as octal")
    return int(text, 8)


def expand_asset_rule(rule: Sequence[str], *, build_dir: Path, base_dir: Path) -> list[Asset]:
    """Expand one declared asset rule.

    Parameters
    ----------
    rule
        ``[source, destination, mode]`` as declared by the user.
    build_dir
        Directory holding release build output; sources under
        ``target/release`` are redirected here.
    base_dir
        Directory that relative sources are resolved against. Sources of the
        returned assets stay relative if the rule's source was relative.

    Returns
    -------
    list[Asset]
        One asset per matching file, in sorted order. May be empty.

    Raises
    ------
    InvalidFieldError
        If the rule is missing its source, destination or mode.
    NumParseError
        If the mode is not octal.
    """
    source_text = _rule_part(rule, 0, "missing path for asset")
    destination = _rule_part(rule, 1, "missing target for asset")
    mode = parse_mode(_rule_part(rule, 2, "missing chmod for asset"))

    source = Path(source_text)
    if source.parts[: len(RELEASE_MARKER)] == RELEASE_MARKER:
        source = build_dir.joinpath(*source.parts[len(RELEASE_MARKER) :])

    pattern = is_glob_pattern(str(source))
    prefix = literal_prefix(source)

    assets: list[Asset] = []
    for match in glob_files(source, base_dir=base_dir):
        if pattern:
            # Each prefix component matches exactly one component of the match.
            suffix = PurePosixPath(*match.parts[len(prefix.parts) :])
            target = str(PurePosixPath(destination) / suffix)
        else:
            target = destination
        assets.append(Asset(match, target, mode))

    if not assets:
        LOGGER.debug("Asset rule %s matched no files", source)
    return assets


def glob_files(pattern: Path, *, base_dir: Path) -> list[Path]:
    """List files matching a glob pattern; directories are never returned.

    Parameters
    ----------
    pattern
        Literal path or glob pattern, absolute or relative to ``base_dir``.
    base_dir
        Directory relative patterns are resolved against.

    Returns
    -------
    list[Path]
        Matches in deterministic order, relative if ``pattern`` is relative.
    """
    parts = pattern.parts
    fixed = 0
    while fixed < len(parts) and not _has_magic(parts[fixed]):
        fixed += 1
    start = Path(*parts[:fixed])

    found: list[Path] = []
    _walk(base_dir / start, start, parts[fixed:], found)
    return list(dict.fromkeys(found))


def _walk(abs_path: Path, rel_path: Path, parts: tuple[str, ...], found: list[Path]) -> None:
    if not parts:
        if abs_path.is_file():
            found.append(rel_path)
        return

    head, tail = parts[0], parts[1:]
    if head == "**":
        _walk(abs_path, rel_path, tail, found)
        for child in _children(abs_path):
            if child.is_dir():
                # Symlinked directories are not descended into, so cycles cannot recurse forever.
                if not child.is_symlink():
                    _walk(child, rel_path / child.name, parts, found)
            elif not tail and child.is_file():
                found.append(rel_path / child.name)
        return

    if not _has_magic(head):
        child = abs_path / head
        if child.exists():
            _walk(child, rel_path / head, tail, found)
        return

    for child in _children(abs_path):
        if fnmatchcase(child.name, head):
            _walk(child, rel_path / child.name, tail, found)


def _children(directory: Path) -> list[Path]:
    if not directory.is_dir():
        return []
    try:
        return sorted(directory.iterdir(), key=lambda p: p.name)
    except OSError as e:
        raise IoFileError("unable to read directory", directory) from e


def _has_magic(part: str) -> bool:
    return any(c in _MAGIC_CHARS for c in part)


def _rule_part(rule: Sequence[str], index: int, message: str) -> str:
    if len(rule) <= index:
        raise InvalidFieldError("assets", message)
    return rule[index]
