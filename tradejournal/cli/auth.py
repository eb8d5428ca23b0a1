"""Account commands for tradejournal CLI.

Handles registration, login/logout and the config template.
"""

import click
from rich.panel import Panel

from tradejournal.cli.common import console, fail, get_data_store, get_session_file
from tradejournal.errors import AuthError, UserExistsError


@click.command()
@click.option("--force", is_flag=True, default=False, help="Overwrite an existing config file.")
def init(force: bool) -> None:
    """Create a configuration file with default settings."""
    from tradejournal.config import config_path, create_template_config

    path = config_path()
    if path.exists() and not force:
        console.print(f"[yellow]Config already exists at[/yellow] [cyan]{path}[/cyan]")
        return

    path = create_template_config()
    console.print(Panel(
        f"[green]✓[/green] Configuration written to\n[cyan]{path}[/cyan]\n\n"
        "[dim]Set journal.edit_window = \"any\" to allow editing past and future days.[/dim]",
        title="[bold green]Config Created[/bold green]",
        border_style="green",
    ))


@click.command()
@click.option("--email", prompt=True, help="Login email.")
@click.option("--name", default=None, help="Display name (defaults to the email's local part).")
@click.password_option(help="Account password.")
def register(email: str, name: str | None, password: str) -> None:
    """Create an account and log in.

    \b
    Examples:
      tradejournal register --email me@example.com
    """
    from tradejournal.auth import register as register_user

    store = get_data_store()
    try:
        user = register_user(store, email, password, name=name)
    except (AuthError, UserExistsError) as e:
        fail(str(e), title="Registration Failed")

    get_session_file().save(user)
    console.print(Panel(
        f"[green]✓[/green] Registered and logged in as [cyan]{user.email}[/cyan]\n\n"
        "[dim]Create your first journal with [cyan]tradejournal new[/cyan].[/dim]",
        title="[bold green]Welcome[/bold green]",
        border_style="green",
    ))


@click.command()
@click.option("--email", prompt=True, help="Login email.")
@click.option("--password", prompt=True, hide_input=True, help="Account password.")
def login(email: str, password: str) -> None:
    """Log in and remember the user for subsequent commands."""
    from tradejournal.auth import authenticate

    store = get_data_store()
    try:
        user = authenticate(store, email, password)
    except AuthError as e:
        fail(str(e), title="Login Failed")

    get_session_file().save(user)
    console.print(Panel(
        f"[green]✓[/green] Logged in as [cyan]{user.email}[/cyan]",
        title="[bold green]Login Successful[/bold green]",
        border_style="green",
    ))


@click.command()
def logout() -> None:
    """Log out and forget the current user."""
    if get_session_file().clear():
        console.print(Panel(
            "[green]✓[/green] Session cleared\n\n"
            "[dim]Your journals remain stored locally.[/dim]",
            title="[bold green]Logout Successful[/bold green]",
            border_style="green",
        ))
    else:
        console.print("[yellow]Not logged in. Nothing to logout from.[/yellow]")


@click.command()
def whoami() -> None:
    """Show the logged-in user."""
    store = get_data_store()
    user = get_session_file().current_user(store)
    if user is None:
        console.print("[yellow]Not logged in.[/yellow]")
        return
    console.print(f"[bold]{user.name}[/bold] <[cyan]{user.email}[/cyan]>")
