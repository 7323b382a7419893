"""CLI commands: clone, refs, scan."""
