"""
Analyze command implementation
Runs window analyses and renders the results
"""

from datetime import date
from typing import Dict, List, Optional

from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.table import Table

from commuteopt.analysis.orchestrator import CommuteAnalyzer
from commuteopt.analysis.service import CommuteService
from commuteopt.config.models import CommuteProfile
from commuteopt.core.errors import CommuteError
from commuteopt.core.models import AnalysisMode, AnalysisResult, Direction, TrafficLevel, TrafficModel
from commuteopt.directions.client import TravelTimeProvider
from commuteopt.settings import AppSettings

console = Console()

BAR_WIDTH = 30

TRAFFIC_STYLES = {
    TrafficLevel.LOW: ("green", "Light"),
    TrafficLevel.MEDIUM: ("yellow", "Moderate"),
    TrafficLevel.HIGH: ("red", "Heavy"),
}

MODEL_STYLES = {
    TrafficModel.OPTIMISTIC: ("green", "Best"),
    TrafficModel.BEST_GUESS: ("yellow", "Avg"),
    TrafficModel.PESSIMISTIC: ("red", "Worst"),
}


class IncompleteAnalysisError(CommuteError):
    """A later direction failed after earlier ones finished"""

    def __init__(self, error: CommuteError, results: Dict[Direction, AnalysisResult]):
        super().__init__(str(error))
        self.error = error
        self.results = results


def shorten_address(address: str, max_length: int = 20) -> str:
    """First comma-separated part of an address, truncated"""
    if not address:
        return ""
    short = address.split(",")[0].strip()
    return short[:max_length] + "..." if len(short) > max_length else short


async def analyze_commute(
    profile: CommuteProfile,
    provider: TravelTimeProvider,
    settings: AppSettings,
    day: date,
    directions: List[Direction],
    mode: Optional[AnalysisMode] = None,
) -> Dict[Direction, AnalysisResult]:
    """
    Analyze the requested directions for a day

    Args:
        profile: Commute profile
        provider: Travel time provider
        settings: Pacing and timeout settings
        day: Day to analyze
        directions: Directions to analyze, in order
        mode: Overrides the profile's traffic model

    Returns:
        Results keyed by direction

    Raises:
        IncompleteAnalysisError: If a direction failed after earlier ones finished
        CommuteError: If the first direction failed
    """
    analyzer = CommuteAnalyzer(
        provider,
        pacing_delay=settings.pacing_delay,
        call_timeout=settings.call_timeout,
    )
    service = CommuteService(profile, analyzer)
    results = {}

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        TimeElapsedColumn(),
        console=console,
        transient=True,
    ) as progress:
        for direction in directions:
            task = progress.add_task(f"Analyzing {direction.value} commute...", total=None)

            def advance(done: int, total: int, task=task, direction=direction) -> None:
                progress.update(
                    task,
                    total=total,
                    completed=done,
                    description=f"Analyzing {direction.value} commute... {done}/{total}",
                )

            try:
                results[direction] = await service.analyze_direction(day, direction, mode, on_progress=advance)
            except CommuteError as e:
                if not results:
                    raise
                raise IncompleteAnalysisError(e, results) from e
            progress.remove_task(task)

    return results


def _bar(fraction: float, style: str) -> str:
    width = max(0, min(BAR_WIDTH, round(fraction * BAR_WIDTH)))
    return f"[{style}]{'█' * width}[/{style}]"


def render_result(result: AnalysisResult, profile: CommuteProfile, day: date) -> None:
    """Print the recommendation and the per-slot chart for one window"""
    direction = result.direction or Direction.MORNING
    origin, destination = direction.route(profile.home_address, profile.work_address)
    optimal = result.optimal

    if result.is_compare_all:
        duration_minutes = optimal.samples.best_guess.duration_minutes
    else:
        duration_minutes = optimal.duration_minutes

    savings = f"Save {result.savings_minutes} min" if result.savings_minutes > 0 else "Optimal time"
    console.print(Panel(
        f"[bold]Best time:[/bold] {optimal.slot.label}\n"
        f"[bold]Duration:[/bold] {duration_minutes} min\n"
        f"[bold]Savings:[/bold] {savings}",
        title=f"{direction.value.title()} · {shorten_address(origin)} → {shorten_address(destination)} · {day:%a %b %d}",
        border_style="green",
    ))

    scale = result.chart_scale()
    table = Table(caption=f"Scale: {scale.min_label}–{scale.max_label} min")
    table.add_column("Time", style="cyan", justify="right")

    if result.is_compare_all:
        for model in TrafficModel:
            style, label = MODEL_STYLES[model]
            table.add_column(label, justify="right", style=style)
        table.add_column("Chart (avg)")

        for slot in result.times:
            cells = []
            for model in TrafficModel:
                sample = slot.samples.get(model)
                cells.append(f"{sample.duration_minutes} min" if sample else "--")
            best_guess = slot.samples.best_guess
            bar = _bar(scale.bar_height(best_guess.duration if best_guess else None), "yellow")
            time_label = f"[bold]{slot.slot.label} ★[/bold]" if slot.is_optimal else slot.slot.label
            table.add_row(time_label, *cells, bar)
    else:
        table.add_column("Duration", justify="right")
        table.add_column("Traffic")
        table.add_column("Chart")

        for slot in result.times:
            style, label = TRAFFIC_STYLES[slot.traffic_level]
            time_label = f"[bold]{slot.slot.label} ★[/bold]" if slot.is_optimal else slot.slot.label
            table.add_row(
                time_label,
                f"{slot.duration_minutes} min",
                f"[{style}]{label}[/{style}]",
                _bar(scale.bar_height(slot.duration), style),
            )

    console.print(table)
