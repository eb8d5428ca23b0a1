"""Main CLI entry point for tradejournal.

This module provides the main click group and lazy loading
for command modules to keep startup fast.
"""

import click

from tradejournal.config import load_settings
from tradejournal.errors import ConfigError
from tradejournal.log import setup_logging


class LazyGroup(click.Group):
    """A click Group that lazily loads commands.

    Command modules are only imported when one of their
    commands is actually invoked.
    """

    def __init__(self, *args, lazy_subcommands: dict[str, str] | None = None, **kwargs):
        """Initialize the lazy group.

        Args:
            lazy_subcommands: Mapping of command names to module paths.
        """
        super().__init__(*args, **kwargs)
        self._lazy_subcommands = lazy_subcommands or {}

    def list_commands(self, ctx: click.Context) -> list[str]:
        """List all available commands."""
        base = super().list_commands(ctx)
        lazy = list(self._lazy_subcommands.keys())
        return sorted(set(base + lazy))

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        """Get a command by name, lazily loading if needed."""
        if cmd_name in self.commands:
            return self.commands[cmd_name]

        if cmd_name in self._lazy_subcommands:
            return self._lazy_load(cmd_name)

        return None

    def _lazy_load(self, cmd_name: str) -> click.Command:
        """Lazily load a command from its module path."""
        import importlib

        module_path = self._lazy_subcommands[cmd_name]
        module = importlib.import_module(module_path)

        cmd = None
        attr = getattr(module, cmd_name, None)
        if isinstance(attr, click.Command):
            cmd = attr
        else:
            # Commands whose name shadows a builtin are bound under another attribute
            for attr_name in dir(module):
                attr = getattr(module, attr_name)
                if isinstance(attr, click.Command) and attr.name == cmd_name:
                    cmd = attr
                    break

        if cmd is None:
            raise click.ClickException(f"Could not find command '{cmd_name}' in {module_path}")

        self.add_command(cmd)
        return cmd


LAZY_SUBCOMMANDS = {
    # Identity
    "register": "tradejournal.cli.auth",
    "login": "tradejournal.cli.auth",
    "logout": "tradejournal.cli.auth",
    "whoami": "tradejournal.cli.auth",
    "init": "tradejournal.cli.auth",
    # Journals
    "new": "tradejournal.cli.journals",
    "list": "tradejournal.cli.journals",
    "show": "tradejournal.cli.journals",
    "delete": "tradejournal.cli.journals",
    # Entries
    "trade": "tradejournal.cli.entry",
    "charge": "tradejournal.cli.entry",
    "capital": "tradejournal.cli.entry",
    "edit": "tradejournal.cli.entry",
}


CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


@click.group(cls=LazyGroup, lazy_subcommands=LAZY_SUBCOMMANDS, context_settings=CONTEXT_SETTINGS)
@click.version_option(package_name="tradejournal")
@click.option("-v", "--verbose", is_flag=True, default=False, help="Enable debug logging.")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """TradeJournal - 30-day trading journal for your daily P&L.

    Record up to five trades and the charges for each day, and see
    completed days, win/loss days, per-day revenue and ROI update
    as you go.

    \b
    Quick Start:
      tradejournal register               # Create an account
      tradejournal new --capital 10000    # Start a journal today
      tradejournal trade JOURNAL_ID 1 250 # Record trade 1 for today
      tradejournal show JOURNAL_ID        # Summary and week grid
    """
    ctx.ensure_object(dict)
    try:
        settings = load_settings()
    except ConfigError as e:
        raise click.ClickException(str(e))
    ctx.obj["settings"] = settings
    setup_logging("DEBUG" if verbose else settings.log_level)


def main() -> None:
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
