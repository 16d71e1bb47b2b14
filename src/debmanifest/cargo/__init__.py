"""Cargo-specific inputs: the manifest, build metadata and shared-library lookups."""
