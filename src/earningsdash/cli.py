"""
earningsdash CLI — command-line interface.

Usage:
    earningsdash --csv services.csv daily 42 --date 2025-03-14
    earningsdash --csv services.csv monthly 42 --year 2025 --month 3
    earningsdash --config earningsdash.yaml export 42 --start 2025-01-01 --end 2025-03-31
    earningsdash --config earningsdash.yaml goals set 42 --type daily --target 250
"""

from __future__ import annotations

import logging
from datetime import date
from pathlib import Path
from typing import Any

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from earningsdash import __version__
from earningsdash.errors import EarningsError

app = typer.Typer(
    name="earningsdash",
    help="💰 earningsdash — Earnings analytics for service providers",
    no_args_is_help=True,
    rich_markup_mode="rich",
)
goals_app = typer.Typer(help="Set, list, track and delete earnings goals", no_args_is_help=True)
app.add_typer(goals_app, name="goals")

console = Console()

_state: dict[str, Any] = {"config": None, "csv": None, "today": None}

_TREND_STYLES = {"up": "green", "down": "red", "flat": "dim"}
_STATUS_STYLES = {"achieved": "green", "on-track": "yellow", "behind": "red"}


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"[bold]earningsdash[/bold] v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version",
        callback=_version_callback,
        is_eager=True,
    ),
    config: str = typer.Option(
        "earningsdash.yaml",
        "--config",
        help="Path to config file",
    ),
    csv: str = typer.Option(
        None,
        "--csv",
        help="Load completed-service records from a CSV file into an in-memory store",
    ),
    today: str = typer.Option(
        None,
        "--today",
        help="Reference date (YYYY-MM-DD) used instead of the system date",
    ),
    log_level: str = typer.Option(
        "WARNING",
        "--log-level",
        help="Logging level: DEBUG, INFO, WARNING, ERROR",
    ),
) -> None:
    """💰 earningsdash — daily and monthly earnings, goals and exports."""
    logging.basicConfig(
        level=log_level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
    )
    _state["config"] = config
    _state["csv"] = csv
    _state["today"] = today


def _dashboard():  # noqa: ANN202
    """Build the dashboard from CLI state."""
    from earningsdash.analyzers.date_ranges import parse_date
    from earningsdash.dashboard import EarningsDashboard
    from earningsdash.stores.csv_loader import CSVRecordLoader
    from earningsdash.stores.memory import MemoryRecordStore

    reference = None
    if _state["today"]:
        try:
            reference = parse_date(_state["today"], "today")
        except EarningsError as e:
            _fail(e)
    clock = (lambda: reference) if reference else date.today

    config_path = _state["config"] if _state["config"] and Path(_state["config"]).exists() else None
    if _state["csv"]:
        dashboard = EarningsDashboard.from_config(config_path, clock=clock, storage={"backend": "memory"})
        records = CSVRecordLoader(_state["csv"]).load()
        assert isinstance(dashboard.record_store, MemoryRecordStore)
        dashboard.record_store.extend(records)
        return dashboard
    return EarningsDashboard.from_config(config_path, clock=clock)


def _fail(error: EarningsError) -> None:
    console.print(f"[red]Error ({error.error_type}): {error.message}[/red]")
    raise typer.Exit(1)


def _money(amount: Any) -> str:
    return f"${amount:,.2f}"


def _warn_if_ephemeral_goals(dashboard) -> None:  # noqa: ANN001
    from earningsdash.stores.memory import MemoryGoalStore

    if isinstance(dashboard.goal_store, MemoryGoalStore):
        console.print(
            "[yellow]Warning: goals are kept in memory and are lost when this command exits. "
            "Set storage.backend: sql (or EARNINGSDASH_DATABASE_URL) to keep them.[/yellow]"
        )


@app.command()
def daily(
    provider_id: str = typer.Argument(..., help="Provider id"),
    day: str = typer.Option(None, "--date", "-d", help="Day (YYYY-MM-DD), defaults to today"),
    category: list[str] = typer.Option(None, "--category", "-c", help="Restrict to category (repeatable)"),
) -> None:
    """Show one day's earnings with trend comparisons."""
    dashboard = _dashboard()
    try:
        result = dashboard.get_daily_earnings(provider_id, day or dashboard.clock(), category or [])
    except EarningsError as e:
        _fail(e)
        return

    console.print(Panel.fit(
        f"[bold]{_money(result.total_earnings)}[/bold] from {result.service_count} services",
        title=f"Earnings — {result.date.isoformat()}",
    ))
    _print_breakdown(result.category_breakdown)
    _print_comparison(result.comparison or {})


@app.command()
def monthly(
    provider_id: str = typer.Argument(..., help="Provider id"),
    year: int = typer.Option(None, "--year", "-y", help="Year, defaults to the current year"),
    month: int = typer.Option(None, "--month", "-m", help="Month (1-12), defaults to the current month"),
    category: list[str] = typer.Option(None, "--category", "-c", help="Restrict to category (repeatable)"),
) -> None:
    """Show a month's earnings summary."""
    dashboard = _dashboard()
    ref = dashboard.clock()
    try:
        result = dashboard.get_monthly_earnings(provider_id, year or ref.year, month or ref.month, category or [])
    except EarningsError as e:
        _fail(e)
        return

    table = Table(title=f"Earnings — {result.period}", show_lines=True)
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")
    table.add_row("Total Earnings", _money(result.total_earnings))
    table.add_row("Services", str(result.service_count))
    table.add_row("Average per Day", _money(result.average_daily_earnings))
    if result.highest_day:
        table.add_row("Best Day", f"{result.highest_day.date} ({_money(result.highest_day.total_earnings)})")
    if result.lowest_day:
        table.add_row("Slowest Day", f"{result.lowest_day.date} ({_money(result.lowest_day.total_earnings)})")
    console.print(table)
    _print_breakdown(result.category_breakdown)
    _print_comparison(result.comparison or {})


@app.command()
def heatmap(
    provider_id: str = typer.Argument(..., help="Provider id"),
    year: int = typer.Option(None, "--year", "-y"),
    month: int = typer.Option(None, "--month", "-m"),
) -> None:
    """Print a month as a calendar heatmap."""
    import calendar

    dashboard = _dashboard()
    ref = dashboard.clock()
    year, month = year or ref.year, month or ref.month
    try:
        cells = dashboard.get_month_heatmap(provider_id, year, month)
    except EarningsError as e:
        _fail(e)
        return

    table = Table(title=f"{calendar.month_name[month]} {year}")
    for name in ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"):
        table.add_column(name, justify="center")

    row: list[str] = [""] * cells[0].date.weekday()
    for cell in cells:
        row.append(f"[on {cell.color}] {cell.date.day:>2} [/]")
        if len(row) == 7:
            table.add_row(*row)
            row = []
    if row:
        table.add_row(*(row + [""] * (7 - len(row))))
    console.print(table)


@app.command()
def categories(provider_id: str = typer.Argument(..., help="Provider id")) -> None:
    """List the categories a provider has earned in."""
    dashboard = _dashboard()
    for name in dashboard.get_provider_categories(provider_id):
        console.print(f"• {name}")


@app.command()
def export(
    provider_id: str = typer.Argument(..., help="Provider id"),
    start: str = typer.Option(..., "--start", help="First day (YYYY-MM-DD)"),
    end: str = typer.Option(..., "--end", help="Last day (YYYY-MM-DD)"),
    category: list[str] = typer.Option(None, "--category", "-c", help="Restrict to category (repeatable)"),
    output_dir: str = typer.Option(None, "--output-dir", "-o", help="Directory for the CSV file"),
) -> None:
    """Export daily per-category earnings to CSV."""
    from earningsdash.exporters.csv_export import write_export

    dashboard = _dashboard()
    try:
        result = dashboard.generate_export(provider_id, start, end, category or [])
    except EarningsError as e:
        _fail(e)
        return

    if not result.success:
        console.print(
            f"[yellow]{result.message}[/yellow] "
            f"({result.date_range.start} to {result.date_range.end})"
        )
        return

    path = write_export(result, output_dir or dashboard.config.export_dir)
    console.print(
        f"[green]✓[/green] Exported {result.record_count} services "
        f"({_money(result.total_amount)}) to [bold]{path}[/bold]"
    )


@app.command()
def summary(
    provider_id: str = typer.Argument(..., help="Provider id"),
    year: int = typer.Option(None, "--year", "-y"),
    month: int = typer.Option(None, "--month", "-m"),
    output: str = typer.Option("earnings_summary.md", "--output", "-o", help="Markdown output path"),
) -> None:
    """Write a Markdown summary of a month."""
    dashboard = _dashboard()
    ref = dashboard.clock()
    try:
        content = dashboard.render_month_summary(provider_id, year or ref.year, month or ref.month)
    except EarningsError as e:
        _fail(e)
        return

    path = Path(output)
    path.write_text(content, encoding="utf-8")
    console.print(f"[green]✓[/green] Summary saved to [bold]{path}[/bold]")


@app.command("import-records")
def import_records(
    file: str = typer.Argument(..., help="CSV of completed-service records"),
    provider_id: str = typer.Option(None, "--provider", help="Provider id for rows without one"),
) -> None:
    """Load a CSV of completed services into the configured SQL store."""
    from earningsdash.stores.csv_loader import CSVRecordLoader
    from earningsdash.stores.sql import SQLRecordStore

    dashboard = _dashboard()
    if not isinstance(dashboard.record_store, SQLRecordStore):
        console.print("[red]Error: import-records needs storage.backend: sql in the config[/red]")
        raise typer.Exit(1)

    loader = CSVRecordLoader(file, default_provider_id=provider_id)
    count = dashboard.record_store.add_records(loader.load())
    console.print(f"[green]✓[/green] Imported {count} records ({loader.skipped} skipped)")


# -- goals ------------------------------------------------------------------


@goals_app.command("set")
def goals_set(
    provider_id: str = typer.Argument(..., help="Provider id"),
    goal_type: str = typer.Option(..., "--type", "-t", help="daily or monthly"),
    target: str = typer.Option(..., "--target", help="Target amount"),
    start: str = typer.Option(None, "--start", help="Explicit window start (YYYY-MM-DD)"),
    end: str = typer.Option(None, "--end", help="Explicit window end (YYYY-MM-DD)"),
) -> None:
    """Set a goal, replacing the active goal of the same type."""
    dashboard = _dashboard()
    _warn_if_ephemeral_goals(dashboard)
    try:
        goal = dashboard.set_goal(provider_id, goal_type, target, start, end)
    except EarningsError as e:
        _fail(e)
        return
    console.print(f"[green]✓[/green] {goal.goal_type.value} goal {goal.goal_id}: {_money(goal.target_amount)}")


@goals_app.command("list")
def goals_list(provider_id: str = typer.Argument(..., help="Provider id")) -> None:
    """List active goals."""
    dashboard = _dashboard()
    _warn_if_ephemeral_goals(dashboard)
    table = Table(title="Active Goals")
    table.add_column("Goal", style="bold cyan")
    table.add_column("Type")
    table.add_column("Target", justify="right")
    table.add_column("Window")
    for goal in dashboard.get_active_goals(provider_id):
        window = f"{goal.start_date} → {goal.end_date}" if goal.has_explicit_window else "current period"
        table.add_row(goal.goal_id, goal.goal_type.value, _money(goal.target_amount), window)
    console.print(table)


@goals_app.command("progress")
def goals_progress(
    provider_id: str = typer.Argument(..., help="Provider id"),
    goal_id: str = typer.Argument(..., help="Goal id"),
) -> None:
    """Show progress toward a goal."""
    dashboard = _dashboard()
    _warn_if_ephemeral_goals(dashboard)
    try:
        progress = dashboard.get_goal_progress(provider_id, goal_id)
    except EarningsError as e:
        _fail(e)
        return
    style = _STATUS_STYLES[progress.status.value]
    console.print(
        f"{_money(progress.current_amount)} of {_money(progress.target_amount)} "
        f"([{style}]{progress.progress_percentage}% — {progress.status.value}[/{style}]), "
        f"{progress.days_remaining} days left"
    )


@goals_app.command("delete")
def goals_delete(
    provider_id: str = typer.Argument(..., help="Provider id"),
    goal_id: str = typer.Argument(..., help="Goal id"),
) -> None:
    """Delete (deactivate) a goal."""
    dashboard = _dashboard()
    _warn_if_ephemeral_goals(dashboard)
    try:
        dashboard.delete_goal(provider_id, goal_id)
    except EarningsError as e:
        _fail(e)
        return
    console.print(f"[green]✓[/green] Goal {goal_id} deleted")


def _print_breakdown(entries) -> None:  # noqa: ANN001
    if not entries:
        return
    table = Table(title="By Category")
    table.add_column("Category", style="bold")
    table.add_column("Earnings", justify="right")
    table.add_column("Services", justify="right")
    table.add_column("Share", justify="right")
    for entry in entries:
        table.add_row(entry.category, _money(entry.earnings), str(entry.service_count), f"{entry.percentage:.2f}%")
    console.print(table)


def _print_comparison(comparison) -> None:  # noqa: ANN001
    for kind, result in comparison.items():
        style = _TREND_STYLES[result.trend.value]
        console.print(
            f"  {kind.value}: [{style}]{result.percentage_change:+.2f}% ({result.trend.value})[/{style}] "
            f"vs {_money(result.baseline_amount)}"
        )


if __name__ == "__main__":
    app()
