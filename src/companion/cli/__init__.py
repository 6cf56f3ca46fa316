"""Command line interface for the companion widget."""
