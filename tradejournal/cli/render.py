"""Rich rendering of journal summaries and week grids."""

from datetime import date

from rich.columns import Columns
from rich.panel import Panel
from rich.table import Table

from tradejournal.cli.common import format_money, pnl_color
from tradejournal.journal import day_profit_loss, is_today
from tradejournal.models import Journal, OverallTotals, WeekBlock, WeekTotals


def journal_title(journal: Journal) -> str:
    start = journal.start_date.strftime("%a, %b %d, %Y")
    end = journal.end_date.strftime("%a, %b %d, %Y")
    return f"30-Day Journal • {start} - {end}"


def summary_panel(journal: Journal, totals: OverallTotals, currency: str) -> Columns:
    """Journal-wide statistics as three side-by-side panels."""
    days = Table.grid(padding=(0, 2))
    days.add_row("Completed Days", f"[bold]{totals.completed_days}[/bold]")
    days.add_row("Starting Capital", format_money(journal.starting_capital, currency))

    money = Table.grid(padding=(0, 2))
    capital_color = pnl_color(totals.total_capital - journal.starting_capital)
    money.add_row(
        "Capital Now",
        f"[{capital_color}]{format_money(totals.total_capital, currency)}[/{capital_color}]",
    )
    money.add_row("Per Day Revenue", format_money(totals.per_day_revenue, currency))
    money.add_row("Total Earning", format_money(totals.total_earning, currency))
    roi_color = pnl_color(totals.roi)
    money.add_row("ROI", f"[{roi_color}]{totals.roi:.2f}%[/{roi_color}]")

    trades = Table.grid(padding=(0, 2))
    trades.add_row("Trades Taken", f"[bold]{totals.total_trades}[/bold]")
    trades.add_row("Win Days", f"[green]{totals.win_days}[/green]")
    trades.add_row("Loss Days", f"[red]{totals.loss_days}[/red]")
    trades.add_row("Total Charges", f"[yellow]{format_money(totals.total_charges, currency)}[/yellow]")

    return Columns([
        Panel(days, title="[bold]Progress[/bold]", border_style="cyan"),
        Panel(money, title="[bold]Capital[/bold]", border_style="green"),
        Panel(trades, title="[bold]Trades[/bold]", border_style="blue"),
    ])


def week_table(week_key: str, week: WeekBlock, today: date, currency: str) -> Table:
    """The trade grid for one week, with charges and per-day P&L rows."""
    table = Table(
        title=week_key.replace("week", "Week "),
        show_header=True,
        header_style="bold cyan",
    )
    table.add_column("Day", style="bold")
    for day in week.dates:
        label = day.strftime("%a %b %d")
        if is_today(day, today):
            label += "\n[green]TODAY[/green]"
        table.add_column(label, justify="right")

    for row_index, row in enumerate(week.trades):
        table.add_row(
            f"Trade {row_index + 1}",
            *[format_money(value, currency) if value else "[dim]-[/dim]" for value in row],
        )

    table.add_row(
        "[yellow]Charges[/yellow]",
        *[
            f"[yellow]{format_money(charge, currency)}[/yellow]" if charge else "[dim]-[/dim]"
            for charge in week.charges
        ],
        end_section=True,
    )

    cells = []
    for day_index in range(len(week.dates)):
        amount = day_profit_loss(week, day_index)
        color = pnl_color(amount)
        cells.append(f"[bold {color}]{format_money(amount, currency)}[/bold {color}]")
    table.add_row("Profit/Loss", *cells)
    return table


def week_totals_line(totals: WeekTotals, currency: str) -> str:
    color = pnl_color(totals.net_profit)
    return (
        f"[bold]Week Earning:[/bold] {format_money(totals.total_earning, currency)}   "
        f"[bold]Charges:[/bold] [yellow]{format_money(totals.total_charges, currency)}[/yellow]   "
        f"[bold]Net Profit:[/bold] [{color}]{format_money(totals.net_profit, currency)}[/{color}]"
    )
