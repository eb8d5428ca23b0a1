"""CLI commands for tradejournal.

This package provides the command-line interface: account commands,
journal management and per-day trade and charge entry.
"""

from tradejournal.cli.main import cli, main

__all__ = ["cli", "main"]
