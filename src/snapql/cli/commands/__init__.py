"""CLI command subgroups."""
