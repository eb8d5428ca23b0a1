"""Shared helpers for tradejournal CLI commands."""

from datetime import date
from typing import Optional

import click
from rich.console import Console
from rich.panel import Panel

from tradejournal.config import Settings, config_dir, load_settings
from tradejournal.db.store import DataStore
from tradejournal.models import User

console = Console()


def get_settings(ctx: Optional[click.Context] = None) -> Settings:
    """Settings loaded by the root group, or loaded now."""
    ctx = ctx or click.get_current_context(silent=True)
    if ctx is not None:
        obj = ctx.find_root().obj
        if isinstance(obj, dict) and "settings" in obj:
            return obj["settings"]
    return load_settings()


def get_data_store(settings: Optional[Settings] = None) -> DataStore:
    """Get the data store instance."""
    settings = settings or get_settings()
    return DataStore(settings.database_path)


def get_session_file():
    """Session file remembering the logged-in user."""
    from tradejournal.auth import SessionFile

    return SessionFile(config_dir() / "session.json")


def fail(message: str, title: str = "Error") -> None:
    """Print an error panel and exit with status 1."""
    console.print(Panel(
        f"[red]✗[/red] {message}",
        title=f"[bold red]{title}[/bold red]",
        border_style="red",
    ))
    raise SystemExit(1)


def require_user(store: DataStore) -> User:
    """The logged-in user; exits with an error if nobody is logged in."""
    user = get_session_file().current_user(store)
    if user is None:
        fail(
            "Not logged in.\n\n"
            "Run [cyan]tradejournal login[/cyan] or [cyan]tradejournal register[/cyan] first.",
            title="Authentication Required",
        )
    return user


def parse_date(value: Optional[str]) -> date:
    """Parse a YYYY-MM-DD option, defaulting to today."""
    if value is None:
        return date.today()
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise click.BadParameter(f"Invalid date '{value}'. Use YYYY-MM-DD format.")


def format_money(amount: float, currency: str) -> str:
    sign = "-" if amount < 0 else ""
    return f"{sign}{currency}{abs(amount):.2f}"


def pnl_color(amount: float) -> str:
    if amount > 0:
        return "green"
    if amount < 0:
        return "red"
    return "dim"
