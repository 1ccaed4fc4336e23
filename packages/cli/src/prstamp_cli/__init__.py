"""Command-line entry point for prstamp."""
