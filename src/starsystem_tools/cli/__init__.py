"""Command-line interface for starsystem-tools."""
