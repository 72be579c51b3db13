"""propcheck CLI - command line interface for running properties."""

from propcheck.cli.commands import cli, discover_properties


def main() -> None:
    """Main entry point for the propcheck CLI."""
    cli()


__all__ = ["main", "cli", "discover_properties"]
