"""Command-line mod manager for Factorio instances."""

__version__ = "0.1.0"