"""
Commute analysis for a stored profile
"""

import logging
from datetime import date, datetime, time
from typing import Callable, Optional

from commuteopt.config.models import CommuteProfile
from commuteopt.core.errors import PastDateError
from commuteopt.core.models import AnalysisMode, AnalysisResult, DayAnalysis, Direction

from .orchestrator import CommuteAnalyzer, ProgressCallback


class CommuteService:
    """
    Runs window analyses for a commute profile
    Morning runs home to work, evening runs work to home
    """

    def __init__(
        self,
        profile: CommuteProfile,
        analyzer: CommuteAnalyzer,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.profile = profile
        self.analyzer = analyzer
        self.clock = clock or analyzer.clock
        self.logger = logging.getLogger(__name__)

    def ensure_not_past(self, day: date) -> None:
        """Reject days that are already over"""
        end_of_day = datetime.combine(day, time.max)
        if end_of_day < self.clock():
            raise PastDateError("Cannot analyze past dates. Select today or a future date.")

    async def analyze_direction(
        self,
        day: date,
        direction: Direction,
        mode: Optional[AnalysisMode] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> AnalysisResult:
        """Analyze one commute window of a day"""
        self.ensure_not_past(day)

        origin, destination = direction.route(self.profile.home_address, self.profile.work_address)
        window = self.profile.window_for(direction)

        self.logger.info(f"Analyzing {direction.value} commute on {day} ({window})")
        return await self.analyzer.analyze(
            origin,
            destination,
            window,
            day,
            mode or self.profile.mode,
            direction=direction,
            interval_minutes=self.profile.interval_minutes,
            on_progress=on_progress,
        )

    async def analyze_day(
        self,
        day: date,
        mode: Optional[AnalysisMode] = None,
        on_progress: Optional[Callable[[Direction, int, int], None]] = None,
    ) -> DayAnalysis:
        """
        Analyze the morning window, then the evening window

        Raises:
            PastDateError: If the day is over
            NoFutureSlotsError: If either window has fully passed
        """
        self.ensure_not_past(day)

        results = {}
        for direction in (Direction.MORNING, Direction.EVENING):
            callback = None
            if on_progress:
                callback = (lambda d: lambda done, total: on_progress(d, done, total))(direction)
            results[direction.value] = await self.analyze_direction(day, direction, mode, callback)

        return DayAnalysis(day=day, **results)
