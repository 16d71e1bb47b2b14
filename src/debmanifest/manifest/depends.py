"""Aggregation of declared and automatically resolved dependencies."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from pathlib import Path

from debmanifest.log import get_logger

LOGGER = get_logger(__name__)

AUTO_TOKEN = "$auto"

DependencyResolver = Callable[[Path, str], Iterable[str]]
"""Returns the packages a binary needs on an architecture, or raises."""


def aggregate_dependencies(
    directive: str,
    *,
    binaries: Iterable[Path],
    architecture: str,
    resolver: DependencyResolver,
    warnings: list[str] | None = None,
) -> str:
    """Merge a ``depends`` directive into one deduplicated dependency list.

    Parameters
    ----------
    directive
        Comma-separated dependencies. The token ``$auto`` expands to the
        packages each binary links against.
    binaries
        Binary paths to resolve for ``$auto``.
    architecture
        Debian architecture passed to the resolver.
    resolver
        Callable returning dependency names for one binary.
    warnings
        Optional list that receives an advisory message for every binary
        whose dependencies could not be resolved.

    Returns
    -------
    str
        Sorted, ``", "``-joined dependency names; empty if there are none.
    """
    binaries = list(binaries)
    deps: set[str] = set()
    for word in directive.split(","):
        word = word.strip()
        if not word:
            continue
        if word != AUTO_TOKEN:
            deps.add(word)
            continue
        for binary in binaries:
            try:
                # Collected first so a resolver failing midway contributes nothing.
                names = list(resolver(binary, architecture))
            except Exception as e:
                message = f"{e} (no auto deps for {binary})"
                LOGGER.warning("%s", message)
                if warnings is not None:
                    warnings.append(message)
                continue
            deps.update(names)
    return ", ".join(sorted(deps))
