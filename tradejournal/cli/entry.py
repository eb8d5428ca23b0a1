"""Entry commands for tradejournal CLI.

Record trade results, daily charges and starting capital, either one
value at a time or in an interactive editing session that saves
automatically after a short pause.
"""

import shlex
from datetime import date
from typing import Optional

import click
from rich.markup import escape
from rich.panel import Panel

from tradejournal.cli.common import (
    console,
    fail,
    format_money,
    get_data_store,
    get_settings,
    parse_date,
    pnl_color,
    require_user,
)
from tradejournal.errors import DateNotEditableError
from tradejournal.models import TRADES_PER_DAY

# Allow negative amounts such as "-250" as positional arguments.
AMOUNT_CONTEXT = {"ignore_unknown_options": True}


def _open_session(journal_id: str):
    """Open an editing session on one of the user's journals."""
    from tradejournal.cli.journals import load_owned_journal
    from tradejournal.session import JournalSession

    settings = get_settings()
    store = get_data_store(settings)
    user = require_user(store)
    journal = load_owned_journal(store, user, journal_id)
    session = JournalSession(
        store,
        journal,
        edit_window=settings.edit_window,
        debounce_seconds=settings.debounce_seconds,
    )
    return session, settings


def _locate(session, day: date) -> tuple[str, int]:
    """Week key and column for a date, exiting if it is outside the journal."""
    journal = session.journal
    located = session.locate(day)
    if located is None:
        fail(
            f"{day.isoformat()} is outside this journal "
            f"({journal.start_date.isoformat()} to {journal.end_date.isoformat()})",
            title="Invalid Date",
        )
    return located


def _not_editable(error: DateNotEditableError) -> None:
    fail(
        f"{error}\n\n"
        "[dim]Only today's entries can be changed. Set journal.edit_window = \"any\" "
        "in config.toml to allow other days.[/dim]",
        title="Read-only Day",
    )


def _save_and_close(session) -> None:
    result = session.save()
    session.close()
    if not result.ok:
        fail(f"Could not save journal: {result.error}", title="Save Failed")


def _print_day(session, week_key: str, day_index: int, currency: str) -> None:
    from tradejournal.journal import day_profit_loss

    week = session.week(week_key)
    amount = day_profit_loss(week, day_index)
    color = pnl_color(amount)
    console.print(
        f"[green]✓[/green] {week.dates[day_index].isoformat()} "
        f"P/L [{color}]{format_money(amount, currency)}[/{color}]"
    )


@click.command(context_settings=AMOUNT_CONTEXT)
@click.argument("journal_id")
@click.argument("row", type=click.IntRange(1, TRADES_PER_DAY))
@click.argument("amount")
@click.option("--date", "day", type=str, default=None, help="Day to record (YYYY-MM-DD). Defaults to today.")
def trade(journal_id: str, row: int, amount: str, day: Optional[str]) -> None:
    """Record the result of trade ROW (1-5) for a day.

    Non-numeric amounts are recorded as 0.

    \b
    Examples:
      tradejournal trade JOURNAL_ID 1 250
      tradejournal trade JOURNAL_ID 2 -120.5
    """
    session, settings = _open_session(journal_id)
    week_key, day_index = _locate(session, parse_date(day))

    try:
        session.edit_trade(week_key, row - 1, day_index, amount)
    except DateNotEditableError as e:
        session.close()
        _not_editable(e)

    _save_and_close(session)
    _print_day(session, week_key, day_index, settings.currency)


@click.command(context_settings=AMOUNT_CONTEXT)
@click.argument("journal_id")
@click.argument("amount")
@click.option("--date", "day", type=str, default=None, help="Day to record (YYYY-MM-DD). Defaults to today.")
def charge(journal_id: str, amount: str, day: Optional[str]) -> None:
    """Record the brokerage and tax charges for a day."""
    session, settings = _open_session(journal_id)
    week_key, day_index = _locate(session, parse_date(day))

    try:
        session.edit_charge(week_key, day_index, amount)
    except DateNotEditableError as e:
        session.close()
        _not_editable(e)

    _save_and_close(session)
    _print_day(session, week_key, day_index, settings.currency)


@click.command(context_settings=AMOUNT_CONTEXT)
@click.argument("journal_id")
@click.argument("amount")
def capital(journal_id: str, amount: str) -> None:
    """Set the journal's starting capital."""
    session, settings = _open_session(journal_id)

    try:
        session.set_starting_capital(amount)
    except ValueError as e:
        session.close()
        fail(str(e), title="Invalid Capital")

    _save_and_close(session)
    console.print(
        f"[green]✓[/green] Starting capital set to "
        f"{format_money(session.journal.starting_capital, settings.currency)}"
    )


EDIT_HELP = """\
[bold]Commands[/bold]
  [cyan]t ROW AMOUNT \\[DATE][/cyan]  record trade ROW (1-5)
  [cyan]c AMOUNT \\[DATE][/cyan]      record charges
  [cyan]cap AMOUNT[/cyan]           set starting capital
  [cyan]w \\[weekN][/cyan]            show a week
  [cyan]save[/cyan]                 save now
  [cyan]q[/cyan]                    quit
[dim]DATE defaults to today. Changes save automatically after a short pause.[/dim]"""


def run_edit_command(session, line: str, today: date) -> Optional[str]:
    """Apply one interactive edit command.

    Returns:
        A message to display, or None for an empty line.

    Raises:
        click.UsageError: If the command is malformed.
        DateNotEditableError: If the targeted day is read-only.
    """
    parts = shlex.split(line)
    if not parts:
        return None
    command, args = parts[0].lower(), parts[1:]

    def locate(day_arg: Optional[str]) -> tuple[str, int]:
        day = parse_date(day_arg) if day_arg else today
        located = session.locate(day)
        if located is None:
            raise click.UsageError(f"{day.isoformat()} is outside this journal")
        return located

    if command in ("t", "trade"):
        if len(args) not in (2, 3) or not args[0].isdigit():
            raise click.UsageError("usage: t ROW AMOUNT [DATE]")
        row = int(args[0])
        if not 1 <= row <= TRADES_PER_DAY:
            raise click.UsageError(f"ROW must be between 1 and {TRADES_PER_DAY}")
        week_key, day_index = locate(args[2] if len(args) == 3 else None)
        session.edit_trade(week_key, row - 1, day_index, args[1])
        return f"trade {row} on {session.week(week_key).dates[day_index].isoformat()} updated"

    if command in ("c", "charge"):
        if len(args) not in (1, 2):
            raise click.UsageError("usage: c AMOUNT [DATE]")
        week_key, day_index = locate(args[1] if len(args) == 2 else None)
        session.edit_charge(week_key, day_index, args[0])
        return f"charges on {session.week(week_key).dates[day_index].isoformat()} updated"

    if command in ("cap", "capital"):
        if len(args) != 1:
            raise click.UsageError("usage: cap AMOUNT")
        try:
            session.set_starting_capital(args[0])
        except ValueError as e:
            raise click.UsageError(str(e))
        return "starting capital updated"

    if command == "save":
        result = session.save()
        if not result.ok:
            return f"[red]save failed:[/red] {result.error}"
        return "saved"

    raise click.UsageError(f"unknown command '{command}' (type ? for help)")


@click.command()
@click.argument("journal_id")
def edit(journal_id: str) -> None:
    """Edit a journal interactively.

    Changes are saved automatically once you pause typing; use
    [save] to write immediately.
    """
    from tradejournal.cli.journals import current_week_key
    from tradejournal.cli.render import summary_panel, week_table, week_totals_line

    session, settings = _open_session(journal_id)
    today = date.today()
    week_key = current_week_key(session.journal, today)

    def show_week(key: str) -> None:
        console.print(week_table(key, session.week(key), date.today(), settings.currency))
        console.print(week_totals_line(session.week_totals(key), settings.currency))

    console.print(Panel(EDIT_HELP, title=f"[bold]Editing {journal_id}[/bold]", border_style="cyan"))
    show_week(week_key)

    try:
        while True:
            line = click.prompt("journal", default="", show_default=False, prompt_suffix="> ")
            command = line.strip().lower()
            if command in ("q", "quit", "exit"):
                break
            if command in ("?", "help"):
                console.print(EDIT_HELP)
                continue
            if command.startswith("w"):
                parts = command.split()
                if len(parts) > 1:
                    week_key = parts[1] if parts[1].startswith("week") else f"week{parts[1]}"
                if week_key not in session.journal.weeks:
                    console.print(f"[red]Unknown week {week_key}[/red]")
                    week_key = current_week_key(session.journal, today)
                    continue
                show_week(week_key)
                continue
            try:
                message = run_edit_command(session, line, date.today())
            except DateNotEditableError as e:
                console.print(f"[red]{escape(str(e))}[/red] [dim](outside the edit window)[/dim]")
                continue
            except click.UsageError as e:
                console.print(f"[red]{escape(e.message)}[/red]")
                continue
            if message:
                console.print(f"[green]✓[/green] {message}")
    except click.Abort:
        console.print()

    if session.dirty and click.confirm("Save changes before leaving?", default=True):
        result = session.save()
        if not result.ok:
            session.close()
            fail(f"Could not save journal: {result.error}", title="Save Failed")
    session.close()

    console.print(summary_panel(session.journal, session.overall_totals(), settings.currency))
