"""Journal management commands for tradejournal CLI.

Handles creating, listing, showing and deleting 30-day journals.
"""

from datetime import date
from typing import Optional

import click
from rich.panel import Panel
from rich.table import Table

from tradejournal.cli.common import (
    console,
    fail,
    format_money,
    get_data_store,
    get_settings,
    parse_date,
    require_user,
)
from tradejournal.errors import DuplicateJournalError, JournalNotFoundError, UnauthorizedJournalError
from tradejournal.models import WEEK_KEYS


def load_owned_journal(store, user, journal_id: str):
    """Load a journal the user owns, exiting with an error otherwise."""
    from tradejournal.auth import ensure_owner
    from tradejournal.journal import align_journal

    try:
        journal = ensure_owner(store.get_journal(journal_id), user)
    except (JournalNotFoundError, UnauthorizedJournalError) as e:
        fail(str(e), title="Journal Unavailable")
    return align_journal(journal)


def current_week_key(journal, today: date) -> str:
    """The week holding today, or week1 when today is outside the journal."""
    from tradejournal.journal import locate_date

    located = locate_date(journal, today)
    return located[0] if located else WEEK_KEYS[0]


@click.command()
@click.option(
    "--start",
    "start",
    type=str,
    default=None,
    help="First day of the journal (YYYY-MM-DD). Defaults to today.",
)
@click.option("--capital", type=float, default=0.0, help="Starting capital.")
def new(start: Optional[str], capital: float) -> None:
    """Create a 30-day journal.

    Only one journal per calendar month (of the start date) is allowed.

    \b
    Examples:
      tradejournal new                               # Start today
      tradejournal new --start 2025-01-01 --capital 10000
    """
    from tradejournal.journal import new_journal

    start_date = parse_date(start)
    if capital < 0:
        raise click.BadParameter("Starting capital must be zero or positive.", param_hint="--capital")

    store = get_data_store()
    user = require_user(store)

    try:
        journal = store.create_journal(new_journal(user.id, start_date, capital))
    except DuplicateJournalError as e:
        fail(
            f"{e}\n\nOpen it with [cyan]tradejournal show {e.existing_id}[/cyan]",
            title="Journal Exists",
        )

    console.print(Panel(
        f"[green]✓[/green] Journal [cyan]{journal.id}[/cyan] created\n\n"
        f"Covers {journal.start_date.isoformat()} to {journal.end_date.isoformat()}",
        title="[bold green]Journal Created[/bold green]",
        border_style="green",
    ))


@click.command(name="list")
@click.option(
    "--all",
    "show_all",
    is_flag=True,
    default=False,
    help="List journals of every user, grouped by email.",
)
def list_journals(show_all: bool) -> None:
    """List journals, newest first."""
    from tradejournal.journal import compute_overall_totals

    settings = get_settings()
    store = get_data_store(settings)
    user = require_user(store)

    if show_all:
        owned = store.list_all_journals()
        groups: dict[str, list] = {}
        for item in owned:
            groups.setdefault(item.user_email, []).append(item.journal)
    else:
        groups = {user.email: store.list_journals(user.id)}

    if not any(groups.values()):
        console.print(Panel(
            "[dim]No journals found[/dim]\n\n"
            "Create one with [cyan]tradejournal new[/cyan]",
            title="[bold]Journals[/bold]",
            border_style="dim",
        ))
        return

    for email, journals in groups.items():
        table = Table(title=f"Journals • {email}", show_header=True, header_style="bold cyan")
        table.add_column("ID", style="dim", no_wrap=True)
        table.add_column("Month")
        table.add_column("Start")
        table.add_column("End")
        table.add_column("Capital", justify="right")
        table.add_column("Days", justify="right")
        table.add_column("ROI", justify="right")

        for journal in journals:
            totals = compute_overall_totals(journal)
            roi_color = "green" if totals.roi >= 0 else "red"
            table.add_row(
                journal.id,
                journal.start_date.strftime("%B %Y"),
                journal.start_date.isoformat(),
                journal.end_date.isoformat(),
                format_money(totals.total_capital, settings.currency),
                str(totals.completed_days),
                f"[{roi_color}]{totals.roi:.2f}%[/{roi_color}]",
            )
        console.print(table)


@click.command()
@click.argument("journal_id")
@click.option(
    "--week",
    "week_key",
    type=click.Choice(list(WEEK_KEYS)),
    default=None,
    help="Week to display. Defaults to the week holding today.",
)
def show(journal_id: str, week_key: Optional[str]) -> None:
    """Show a journal's summary and one week's trade grid.

    \b
    Examples:
      tradejournal show JOURNAL_ID
      tradejournal show JOURNAL_ID --week week3
    """
    from tradejournal.cli.render import journal_title, summary_panel, week_table, week_totals_line
    from tradejournal.journal import compute_overall_totals, compute_week_totals

    settings = get_settings()
    store = get_data_store(settings)
    user = require_user(store)
    journal = load_owned_journal(store, user, journal_id)

    today = date.today()
    week_key = week_key or current_week_key(journal, today)

    console.print(f"[bold]Trading Journal[/bold]  [dim]{journal_title(journal)}[/dim]")
    console.print(summary_panel(journal, compute_overall_totals(journal), settings.currency))
    console.print(week_table(week_key, journal.weeks[week_key], today, settings.currency))
    console.print(week_totals_line(compute_week_totals(journal.weeks[week_key]), settings.currency))


@click.command()
@click.argument("journal_id")
@click.option("--yes", is_flag=True, default=False, help="Skip the confirmation prompt.")
def delete(journal_id: str, yes: bool) -> None:
    """Delete one of your journals permanently."""
    store = get_data_store()
    user = require_user(store)

    if not yes:
        click.confirm(f"Delete journal {journal_id}? This cannot be undone", abort=True)

    try:
        store.delete_journal(journal_id, owner_id=user.id)
    except JournalNotFoundError as e:
        fail(str(e), title="Delete Failed")

    console.print(f"[green]✓[/green] Deleted journal [cyan]{journal_id}[/cyan]")
