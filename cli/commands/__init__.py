"""CLI sub-command groups."""
