"""Helpers shared across sfokit modules."""
