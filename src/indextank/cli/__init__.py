"""Command-line entry point for one-off document operations."""
