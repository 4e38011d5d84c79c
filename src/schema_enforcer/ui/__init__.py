"""Command-line surface: argparse router and plain-text rendering."""

from schema_enforcer.ui.cli import CLIError, build_parser, run_cli

__all__ = ["CLIError", "build_parser", "run_cli"]
