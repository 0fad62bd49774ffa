"""Command-line interface for makinilya."""
