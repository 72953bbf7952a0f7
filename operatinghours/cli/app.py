"""
Main CLI application using Typer.
"""

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from ..config import AppConfig, get_default_config_path, load_schedule
from ..domain.exceptions import OperatingHoursError
from ..domain.intervals import is_ordered
from ..domain.models import Channel, OperatingHours, Schedule
from ..domain.weekly import Week
from ..services.schedule_editor import ScheduleEditorService

app = typer.Typer(
    name="operatinghours",
    help="Inspect and validate weekly operating hours and time-slot limits",
    add_completion=False
)

console = Console()

ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="Path to config file. Defaults to ./operatinghours.yaml"),
]
VerboseOption = Annotated[bool, typer.Option("--verbose", "-v", help="Show debug logging.")]


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _load_config(config_file: Optional[Path]) -> AppConfig:
    """
    Load the given config file, or the default one if it exists.

    Without any config file the built-in defaults are used.
    """
    if config_file is not None:
        return AppConfig.load_from_yaml(config_file)

    default_path = get_default_config_path()
    if default_path.exists():
        return AppConfig.load_from_yaml(default_path)
    return AppConfig()


def _format_schedule(schedule: Schedule) -> str:
    lines = [
        f"{schedule.date_range.start} ~ {schedule.date_range.end}",
        f"pickup {schedule.pickup_time}",
        f"cutoff {schedule.cutoff_time}",
    ]
    if schedule.limits:
        lines.extend(f"• {limit.describe()}" for limit in schedule.limits)
    else:
        lines.append("[dim]no limits[/dim]")
    return "\n".join(lines)


def _format_window(window: OperatingHours) -> str:
    if window.time_range.is_all_day():
        return "all day"
    label = str(window.time_range)
    if not is_ordered(window.time_range):
        label += "\n[yellow]⚠ end before start[/yellow]"
    return label


def _render_week(week: Week) -> Table:
    table = Table(
        title="Operating hours",
        show_header=True,
        header_style="bold cyan",
        show_lines=True,
    )
    table.add_column("Day", style="bold yellow")
    table.add_column("Open")
    table.add_column("Hours")
    table.add_column("Pickup")
    table.add_column("Delivery")

    for day in week:
        open_label = "[green]✓[/green]" if day.is_open else "[red]✗[/red]"
        if not day.operating_hours:
            table.add_row(day.day, open_label, "[dim]-[/dim]", "", "")
            continue
        for position, window in enumerate(day.operating_hours):
            table.add_row(
                day.day if position == 0 else "",
                open_label if position == 0 else "",
                _format_window(window),
                _format_schedule(window.schedule_for(Channel.PICKUP)),
                _format_schedule(window.schedule_for(Channel.DELIVERY)),
            )

    return table


@app.command()
def show(
    schedule_file: Annotated[Optional[Path], typer.Argument(help="YAML schedule file. Without one the default week is shown.")] = None,
    config_file: ConfigOption = None,
    verbose: VerboseOption = False,
):
    """
    Show a weekly schedule as a table.

    Examples:

        operatinghours show
        operatinghours show week.yaml
    """
    _setup_logging(verbose)
    try:
        config = _load_config(config_file)
        if schedule_file is None:
            week = ScheduleEditorService(config=config).default_week()
        else:
            week = load_schedule(schedule_file)

        console.print()
        console.print(_render_week(week))
        console.print()

    except (OperatingHoursError, FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def check(
    schedule_file: Annotated[Path, typer.Argument(help="YAML schedule file to validate.")],
    config_file: ConfigOption = None,
    verbose: VerboseOption = False,
):
    """
    Validate windows and limits of a schedule file.

    Exits with code 1 if any channel has blocking limit errors.
    """
    _setup_logging(verbose)
    try:
        config = _load_config(config_file)
        week = load_schedule(schedule_file)
        report = ScheduleEditorService(config=config).validate_week(week)
    except (OperatingHoursError, FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    console.print()
    for warning in report.warnings:
        console.print(f"[yellow]⚠ {warning}[/yellow]")

    invalid = report.invalid_channels()
    if not invalid:
        console.print("[bold green]✓ All limits are valid.[/bold green]\n")
        return

    for entry in invalid:
        console.print(
            f"[bold red]✗ {entry.day}, window {entry.window_position}, "
            f"{entry.channel.value}:[/bold red]"
        )
        for message in entry.report.general_errors:
            console.print(f"    {message}")
        for limit_id, messages in entry.report.limit_errors.items():
            for message in messages:
                console.print(f"    limit {limit_id}: {message}")

    console.print()
    raise typer.Exit(1)


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]operatinghours[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
