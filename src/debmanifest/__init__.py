"""Resolve Cargo projects into Debian package manifests."""

from __future__ import annotations

__version__ = "0.1.0"
