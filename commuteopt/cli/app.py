"""
Main CLI application for commuteopt
Provides commands for managing the commute profile, analyzing departures and serving the proxy
"""

import asyncio
from datetime import date, timedelta
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from commuteopt.analysis.slots import upcoming_days
from commuteopt.config.manager import ProfileManager
from commuteopt.config.models import CommuteProfile
from commuteopt.core.errors import CommuteError
from commuteopt.core.models import COMPARE_ALL, AnalysisMode, Direction, TimeWindow
from commuteopt.directions.client import GoogleDirectionsClient, ProxyDirectionsClient, TravelTimeProvider
from commuteopt.settings import AppSettings, configure_logging, get_settings

from .analyze_command import IncompleteAnalysisError, analyze_commute, render_result

# Initialize Typer app
app = typer.Typer(
    name="commuteopt",
    help="commuteopt - Find the best time to leave for your commute",
    add_completion=False,
)

# Console for rich output
console = Console()


def _manager(config_dir: Optional[Path]) -> ProfileManager:
    return ProfileManager(config_dir)


def build_provider(settings: AppSettings, direct: bool, proxy_url: Optional[str]) -> TravelTimeProvider:
    """Proxy client by default; Google directly with --direct"""
    if direct:
        return GoogleDirectionsClient(api_key=settings.google_api_key)
    return ProxyDirectionsClient(base_url=proxy_url or settings.proxy_url)


def _parse_day(day: Optional[str], offset: Optional[int]) -> date:
    if day and offset is not None:
        console.print("[red]Use either --date or --day, not both[/red]")
        raise typer.Exit(1)
    if day:
        try:
            return date.fromisoformat(day)
        except ValueError:
            console.print(f"[red]Invalid date: {day}. Use YYYY-MM-DD[/red]")
            raise typer.Exit(1)
    return date.today() + timedelta(days=offset or 0)


def _parse_directions(direction: str) -> List[Direction]:
    if direction.lower() == "both":
        return [Direction.MORNING, Direction.EVENING]
    try:
        return [Direction(direction.lower())]
    except ValueError:
        console.print(f"[red]Invalid direction: {direction}[/red]")
        console.print("Valid options: morning, evening, both")
        raise typer.Exit(1)


@app.command()
def setup(
    home: str = typer.Option(..., "--home", help="Home address"),
    work: str = typer.Option(..., "--work", help="Work address"),
    morning: Optional[str] = typer.Option(None, "--morning", help="Morning window, e.g. 06:00-10:00"),
    evening: Optional[str] = typer.Option(None, "--evening", help="Evening window, e.g. 16:00-20:00"),
    model: Optional[str] = typer.Option(None, "--model", help="Traffic model (optimistic/best_guess/pessimistic/compare_all)"),
    interval: Optional[int] = typer.Option(None, "--interval", help="Minutes between sampled departures"),
    config_dir: Optional[Path] = typer.Option(None, "--config-dir", help="Profile directory"),
):
    """
    Save your commute profile

    Examples:
        commuteopt setup --home "10 High St, Oxford" --work "1 Park Rd, Oxford"
        commuteopt setup --home "..." --work "..." --morning 07:00-09:30 --model compare_all
    """
    manager = _manager(config_dir)

    # Keep existing window and model settings unless overridden
    values = {}
    if manager.exists():
        try:
            values = manager.load_profile().model_dump()
        except CommuteError:
            values = {}

    values.update(home_address=home, work_address=work)
    try:
        if morning:
            values["morning_window"] = TimeWindow.parse(morning)
        if evening:
            values["evening_window"] = TimeWindow.parse(evening)
        if model:
            values["traffic_model"] = model
        if interval:
            values["interval_minutes"] = interval
        profile = CommuteProfile(**values)
        path = manager.save_profile(profile)
    except (ValueError, CommuteError) as e:
        console.print(f"[red]Invalid profile: {e}[/red]")
        raise typer.Exit(1)

    console.print(f"[green]✓ Profile saved to {path}[/green]")


@app.command(name="show-config")
def show_config(
    config_dir: Optional[Path] = typer.Option(None, "--config-dir", help="Profile directory"),
):
    """Show the stored commute profile"""
    try:
        profile = _manager(config_dir).load_profile()
    except CommuteError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    table = Table(title="Commute Profile")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")

    table.add_row("Home", profile.home_address)
    table.add_row("Work", profile.work_address)
    table.add_row("Morning window", profile.morning_window.label)
    table.add_row("Evening window", profile.evening_window.label)
    table.add_row("Traffic model", profile.traffic_model)
    table.add_row("Interval", f"{profile.interval_minutes} min")

    console.print(table)


@app.command()
def clear(
    config_dir: Optional[Path] = typer.Option(None, "--config-dir", help="Profile directory"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
):
    """Delete the stored commute profile"""
    if not yes and not typer.confirm("Delete your commute profile?"):
        raise typer.Exit(0)

    if _manager(config_dir).clear():
        console.print("[green]✓ Profile deleted[/green]")
    else:
        console.print("[yellow]No profile to delete[/yellow]")


@app.command()
def days(
    count: int = typer.Option(7, "--count", help="Number of days to list"),
):
    """List the days available for analysis"""
    table = Table(title="Upcoming Days")
    table.add_column("--day", justify="right", style="cyan")
    table.add_column("Day")
    table.add_column("Date")

    for offset, day in enumerate(upcoming_days(date.today(), count)):
        table.add_row(str(offset), day.strftime("%a"), day.strftime("%d %b"))

    console.print(table)


@app.command()
def analyze(
    day: Optional[str] = typer.Option(None, "--date", help="Day to analyze (YYYY-MM-DD), defaults to today"),
    offset: Optional[int] = typer.Option(None, "--day", help="Days from today (see 'commuteopt days')"),
    direction: str = typer.Option("both", "--direction", help="morning, evening or both"),
    model: Optional[str] = typer.Option(None, "--model", help="Traffic model, overrides the profile"),
    compare_all: bool = typer.Option(False, "--compare-all", help="Query all three traffic models"),
    direct: bool = typer.Option(False, "--direct", help="Call Google directly with GOOGLE_API_KEY"),
    proxy_url: Optional[str] = typer.Option(None, "--proxy-url", help="Directions proxy URL"),
    config_dir: Optional[Path] = typer.Option(None, "--config-dir", help="Profile directory"),
):
    """
    Find the best departure time for a day

    Examples:
        commuteopt analyze
        commuteopt analyze --day 1 --direction morning
        commuteopt analyze --date 2025-03-14 --compare-all
    """
    analysis_day = _parse_day(day, offset)
    directions = _parse_directions(direction)

    mode = None
    try:
        if compare_all:
            mode = AnalysisMode.from_setting(COMPARE_ALL)
        elif model:
            mode = AnalysisMode.from_setting(model)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    settings = get_settings()

    try:
        profile = _manager(config_dir).load_profile()
        provider = build_provider(settings, direct, proxy_url)
        results = asyncio.run(analyze_commute(profile, provider, settings, analysis_day, directions, mode))
    except KeyboardInterrupt:
        console.print("\n[yellow]Analysis cancelled by user[/yellow]")
        raise typer.Exit(0)
    except IncompleteAnalysisError as e:
        for finished in e.results.values():
            render_result(finished, profile, analysis_day)
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    except CommuteError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    for direction_result in directions:
        render_result(results[direction_result], profile, analysis_day)

    console.print("[green]✓ Analysis complete![/green]")


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host", help="Bind address"),
    port: int = typer.Option(8000, "--port", help="Port"),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes"),
):
    """Run the directions proxy"""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "commuteopt.server.app:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        log_level=settings.log_level.lower(),
        # Client addresses come from X-Forwarded-For only behind these proxies
        proxy_headers=True,
        forwarded_allow_ips=settings.forwarded_allow_ips,
    )


@app.callback()
def callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """
    commuteopt - Find the best time to leave for your commute

    Samples predicted travel times across your morning and evening windows
    and recommends the departure with the shortest trip.
    """
    configure_logging("DEBUG" if verbose else get_settings().log_level)


def main():
    """Main entry point for CLI"""
    # Load environment variables
    from dotenv import load_dotenv
    load_dotenv()

    app()


if __name__ == "__main__":
    main()
