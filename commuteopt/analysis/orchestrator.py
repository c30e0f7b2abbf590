"""
Paced, sequential sampling of a travel time provider across a commute window
"""

import asyncio
import logging
from datetime import date, datetime
from typing import Awaitable, Callable, List, Optional

from commuteopt.core.errors import (
    AllSlotsFailedError,
    ConfigError,
    GovernorDeniedError,
    NoFutureSlotsError,
    ProviderTimeoutError,
)
from commuteopt.core.models import (
    AnalysisMode,
    AnalysisResult,
    CallOutcome,
    DepartureInstant,
    Direction,
    DurationSample,
    ModelSamples,
    SlotSamples,
    TimeWindow,
    TrafficModel,
)
from commuteopt.directions.client import TravelTimeProvider
from commuteopt.governor.limiter import seconds_per_request

from .aggregator import aggregate
from .slots import DEFAULT_INTERVAL_MINUTES, future_departures, generate_time_slots

# Seconds after every provider call; one client stays inside the proxy's short window
DEFAULT_PACING_DELAY = seconds_per_request()
DEFAULT_CALL_TIMEOUT = 15.0  # seconds per provider call

GENERIC_FAILURE_MESSAGE = "Failed to fetch travel times. Please check your addresses."

ProgressCallback = Callable[[int, int], None]


class CommuteAnalyzer:
    """
    Samples a travel time provider across a commute window
    Calls are issued one at a time, in slot then model order, each followed by a pacing delay
    """

    def __init__(
        self,
        provider: TravelTimeProvider,
        pacing_delay: float = DEFAULT_PACING_DELAY,
        call_timeout: float = DEFAULT_CALL_TIMEOUT,
        interval_minutes: int = DEFAULT_INTERVAL_MINUTES,
        clock: Optional[Callable[[], datetime]] = None,
        sleep: Optional[Callable[[float], Awaitable[None]]] = None,
    ):
        self.provider = provider
        self.pacing_delay = pacing_delay
        self.call_timeout = call_timeout
        self.interval_minutes = interval_minutes
        self.clock = clock or datetime.now
        self.sleep = sleep or asyncio.sleep
        self.logger = logging.getLogger(__name__)

    async def analyze(
        self,
        origin: str,
        destination: str,
        window: TimeWindow,
        day: date,
        mode: AnalysisMode,
        direction: Optional[Direction] = None,
        interval_minutes: Optional[int] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> AnalysisResult:
        """
        Find the departure time with the shortest predicted travel time

        Args:
            origin: Origin address
            destination: Destination address
            window: Commute window to sample
            day: Calendar day of the commute
            mode: Single traffic model or compare-all
            direction: Commute direction, used in messages and on the result
            interval_minutes: Slot spacing, defaults to the analyzer's interval
            on_progress: Called with (completed_calls, total_calls) after each call

        Returns:
            AnalysisResult for the window

        Raises:
            InvalidWindowError: If the window ends before it starts
            NoFutureSlotsError: If every departure in the window has passed
            AllSlotsFailedError: If no departure produced a usable travel time
            GovernorDeniedError: If the proxy rate limit rejected a call
            ConfigError: If the provider reports missing configuration
        """
        # Captured once so every slot is judged against the same boundary
        now = self.clock()

        slots = generate_time_slots(window.start, window.end, interval_minutes or self.interval_minutes)
        departures = future_departures(day, slots, now)

        if not departures:
            period = direction.value if direction else "selected"
            when = "today" if day == now.date() else day.strftime("%a %b %d")
            raise NoFutureSlotsError(
                f"All {period} times ({window.label}) have passed for {when}. Try selecting tomorrow.",
                period=period,
                window=str(window),
            )

        models = mode.models
        total_calls = len(departures) * len(models)
        completed = 0

        kept: List[SlotSamples] = []
        last_error: Optional[Exception] = None

        for departure in departures:
            samples = {}

            for model in models:
                outcome = await self._fetch(origin, destination, departure, model)
                if outcome.succeeded:
                    samples[model] = DurationSample(duration=outcome.duration)
                else:
                    self.logger.warning(
                        f"Failed to fetch time for {departure.slot} ({model.value}): {outcome.error}"
                    )
                    last_error = outcome.error

                await self.sleep(self.pacing_delay)

                completed += 1
                if on_progress:
                    on_progress(completed, total_calls)

            # Compare-all keeps a slot with any model present; single mode needs its one call
            if ModelSamples.from_mapping(samples).has_any:
                kept.append(SlotSamples(departure=departure, samples=samples))

        if not kept:
            if last_error is not None:
                raise AllSlotsFailedError(str(last_error), last_error=last_error) from last_error
            raise AllSlotsFailedError(GENERIC_FAILURE_MESSAGE)

        self.logger.info(
            f"Kept {len(kept)} of {len(departures)} departures from {origin} to {destination}"
        )
        return aggregate(kept, mode, direction)

    async def _fetch(
        self,
        origin: str,
        destination: str,
        departure: DepartureInstant,
        model: TrafficModel,
    ) -> CallOutcome:
        """Race one provider call against the call timeout"""
        call = asyncio.ensure_future(
            self.provider.get_duration(origin, destination, departure.departure_time, model)
        )
        done, _ = await asyncio.wait({call}, timeout=self.call_timeout)

        if call not in done:
            # The call keeps running; whatever it eventually returns is dropped
            call.add_done_callback(self._discard_late_result)
            return CallOutcome.timed_out(
                ProviderTimeoutError(f"Request timed out after {self.call_timeout:g} seconds")
            )

        try:
            return CallOutcome.ok(call.result())
        except (GovernorDeniedError, ConfigError):
            raise
        except Exception as e:
            return CallOutcome.failed(e)

    def _discard_late_result(self, call: "asyncio.Future") -> None:
        if call.cancelled():
            return
        error = call.exception()
        if error is not None:
            self.logger.debug(f"Ignoring late provider failure: {error}")
        else:
            self.logger.debug(f"Ignoring late provider result: {call.result()}s")
