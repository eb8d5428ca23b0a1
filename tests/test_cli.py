"""End-to-end tests for the tradejournal CLI.

**Feature: trading-journal**
"""

from datetime import date, timedelta
from pathlib import Path

import pytest
from click.testing import CliRunner

from tradejournal.cli import cli
from tradejournal.config import HOME_ENV_VAR
from tradejournal.db.store import DataStore
from tradejournal.journal import compute_overall_totals


@pytest.fixture
def runner(tmp_path: Path, monkeypatch) -> CliRunner:
    monkeypatch.setenv(HOME_ENV_VAR, str(tmp_path))
    monkeypatch.setenv("COLUMNS", "200")
    return CliRunner()


@pytest.fixture
def store(tmp_path: Path) -> DataStore:
    return DataStore(tmp_path / "tradejournal.db")


def _register(runner: CliRunner, email: str = "me@example.com") -> None:
    result = runner.invoke(cli, ["register", "--email", email, "--password", "secret123"])
    assert result.exit_code == 0, result.output


def _new_journal(runner: CliRunner, store: DataStore, start: date, email: str = "me@example.com"):
    result = runner.invoke(cli, ["new", "--start", start.isoformat(), "--capital", "10000"])
    assert result.exit_code == 0, result.output
    user = store.get_user_by_email(email)
    return store.list_journals(user.id)[0]


class TestCommandDiscovery:
    def test_help_lists_lazy_commands(self, runner: CliRunner):
        result = runner.invoke(cli, ["--help"])

        assert result.exit_code == 0
        for name in ("register", "login", "new", "list", "show", "trade", "charge", "edit"):
            assert name in result.output

    def test_unknown_command(self, runner: CliRunner):
        assert runner.invoke(cli, ["frobnicate"]).exit_code != 0


class TestAccountCommands:
    def test_register_login_logout(self, runner: CliRunner):
        _register(runner)

        assert "me@example.com" in runner.invoke(cli, ["whoami"]).output
        assert runner.invoke(cli, ["logout"]).exit_code == 0
        assert "Not logged in" in runner.invoke(cli, ["whoami"]).output

        result = runner.invoke(cli, ["login", "--email", "me@example.com", "--password", "secret123"])
        assert result.exit_code == 0, result.output
        assert "Login Successful" in result.output

    def test_bad_login(self, runner: CliRunner):
        _register(runner)

        result = runner.invoke(cli, ["login", "--email", "me@example.com", "--password", "nope123"])

        assert result.exit_code == 1
        assert "Invalid email or password" in result.output

    def test_commands_require_login(self, runner: CliRunner):
        result = runner.invoke(cli, ["list"])

        assert result.exit_code == 1
        assert "Not logged in" in result.output

    def test_init_writes_config(self, runner: CliRunner, tmp_path: Path):
        result = runner.invoke(cli, ["init"])

        assert result.exit_code == 0, result.output
        assert (tmp_path / "config.toml").exists()


class TestJournalCommands:
    def test_create_list_show_delete(self, runner: CliRunner, store: DataStore):
        _register(runner)
        journal = _new_journal(runner, store, date.today())

        listed = runner.invoke(cli, ["list"])
        assert listed.exit_code == 0, listed.output
        assert journal.id in listed.output

        shown = runner.invoke(cli, ["show", journal.id, "--week", "week6"])
        assert shown.exit_code == 0, shown.output
        assert "Trading Journal" in shown.output
        assert "Week 6" in shown.output

        deleted = runner.invoke(cli, ["delete", journal.id, "--yes"])
        assert deleted.exit_code == 0, deleted.output
        assert "No journals found" in runner.invoke(cli, ["list"]).output

    def test_duplicate_month_is_refused(self, runner: CliRunner, store: DataStore):
        _register(runner)
        journal = _new_journal(runner, store, date(2025, 1, 1))

        result = runner.invoke(cli, ["new", "--start", "2025-01-20"])

        assert result.exit_code == 1
        assert journal.id in result.output

    def test_other_users_journal_is_hidden(self, runner: CliRunner, store: DataStore):
        _register(runner, "owner@example.com")
        journal = _new_journal(runner, store, date(2025, 1, 1), email="owner@example.com")
        _register(runner, "intruder@example.com")

        assert runner.invoke(cli, ["show", journal.id]).exit_code == 1
        assert runner.invoke(cli, ["delete", journal.id, "--yes"]).exit_code == 1
        assert store.get_journal(journal.id).id == journal.id

        everyone = runner.invoke(cli, ["list", "--all"])
        assert "owner@example.com" in everyone.output

    def test_invalid_start_date(self, runner: CliRunner):
        _register(runner)

        assert runner.invoke(cli, ["new", "--start", "01/02/2025"]).exit_code == 2


class TestEntryCommands:
    def test_record_a_trading_day(self, runner: CliRunner, store: DataStore):
        """Trades 100 and -20 with charge 5 on today's date."""
        _register(runner)
        journal = _new_journal(runner, store, date.today())

        for args in (["trade", journal.id, "1", "100"],
                     ["trade", journal.id, "2", "-20"],
                     ["charge", journal.id, "5"]):
            result = runner.invoke(cli, args)
            assert result.exit_code == 0, result.output

        totals = compute_overall_totals(store.get_journal(journal.id))
        assert totals.total_trades == 2
        assert totals.win_days == 1
        assert totals.total_earning == 80.0
        assert totals.total_charges == 5.0
        assert totals.total_capital == 10075.0

    def test_other_days_are_read_only(self, runner: CliRunner, store: DataStore):
        _register(runner)
        journal = _new_journal(runner, store, date.today())
        tomorrow = (date.today() + timedelta(days=1)).isoformat()

        result = runner.invoke(cli, ["trade", journal.id, "1", "100", "--date", tomorrow])

        assert result.exit_code == 1
        assert "not editable" in result.output
        assert compute_overall_totals(store.get_journal(journal.id)).total_trades == 0

    def test_date_outside_journal(self, runner: CliRunner, store: DataStore):
        _register(runner)
        journal = _new_journal(runner, store, date.today())
        before = (date.today() - timedelta(days=1)).isoformat()

        result = runner.invoke(cli, ["charge", journal.id, "5", "--date", before])

        assert result.exit_code == 1
        assert "outside this journal" in result.output

    def test_edit_follows_stored_week_dates(self, runner: CliRunner, store: DataStore):
        from tradejournal.journal import new_journal

        _register(runner)
        today = date.today()
        journal = _new_journal(runner, store, today - timedelta(days=2))
        shifted = new_journal(journal.owner, today).weeks
        store.update_journal(journal.id, weeks=shifted)

        result = runner.invoke(cli, ["trade", journal.id, "1", "40"])

        assert result.exit_code == 0, result.output
        week1 = store.get_journal(journal.id).weeks["week1"]
        assert week1.dates[0] == today
        assert week1.trades[0] == (40.0, 0.0, 0.0, 0.0, 0.0)

    def test_non_numeric_amount_is_zero(self, runner: CliRunner, store: DataStore):
        _register(runner)
        journal = _new_journal(runner, store, date.today())

        result = runner.invoke(cli, ["trade", journal.id, "3", "lots"])

        assert result.exit_code == 0, result.output
        assert compute_overall_totals(store.get_journal(journal.id)).total_trades == 0

    def test_set_capital(self, runner: CliRunner, store: DataStore):
        _register(runner)
        journal = _new_journal(runner, store, date.today())

        assert runner.invoke(cli, ["capital", journal.id, "2500"]).exit_code == 0
        assert store.get_journal(journal.id).starting_capital == 2500.0
        assert runner.invoke(cli, ["capital", journal.id, "-1"]).exit_code == 1

    def test_interactive_edit(self, runner: CliRunner, store: DataStore):
        _register(runner)
        journal = _new_journal(runner, store, date.today())

        result = runner.invoke(
            cli,
            ["edit", journal.id],
            input="t 1 50\nc 2\nw\nbogus\nsave\nq\n",
        )

        assert result.exit_code == 0, result.output
        assert "unknown command" in result.output
        stored = compute_overall_totals(store.get_journal(journal.id))
        assert stored.total_earning == 50.0
        assert stored.total_charges == 2.0

    def test_interactive_edit_saves_on_exit(self, runner: CliRunner, store: DataStore):
        _register(runner)
        journal = _new_journal(runner, store, date.today())

        result = runner.invoke(cli, ["edit", journal.id], input="t 2 -30\nq\ny\n")

        assert result.exit_code == 0, result.output
        assert compute_overall_totals(store.get_journal(journal.id)).loss_days == 1
