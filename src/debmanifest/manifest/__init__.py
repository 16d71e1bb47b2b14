"""Asset resolution and package metadata synthesis."""
