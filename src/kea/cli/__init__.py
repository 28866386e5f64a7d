"""CLI interface for kea."""
