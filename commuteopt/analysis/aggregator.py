"""
Turns raw per-slot samples into a ranked analysis result
"""

from typing import List, Optional, Sequence

from commuteopt.core.errors import AllSlotsFailedError
from commuteopt.core.models import (
    AnalysisMode,
    AnalysisResult,
    ChartScale,
    Direction,
    ModelSamples,
    SlotResult,
    SlotSamples,
    TrafficLevel,
    TrafficModel,
    seconds_to_minutes,
)

# Ratio to the fastest slot below which traffic counts as light / moderate
LOW_TRAFFIC_RATIO = 1.2
MEDIUM_TRAFFIC_RATIO = 1.4


def classify_traffic(duration: int, min_duration: int) -> TrafficLevel:
    """Classify a duration against the fastest duration in its window"""
    if min_duration <= 0:
        return TrafficLevel.LOW if duration <= 0 else TrafficLevel.HIGH

    ratio = duration / min_duration
    if ratio < LOW_TRAFFIC_RATIO:
        return TrafficLevel.LOW
    elif ratio < MEDIUM_TRAFFIC_RATIO:
        return TrafficLevel.MEDIUM
    return TrafficLevel.HIGH


def chart_scale(min_duration: int, max_duration: int) -> ChartScale:
    """Chart bounds leaving 10% headroom below the fastest sample"""
    return ChartScale.from_bounds(min_duration, max_duration)


def aggregate(
    slot_samples: Sequence[SlotSamples],
    mode: AnalysisMode,
    direction: Optional[Direction] = None,
) -> AnalysisResult:
    """
    Aggregate kept slots into an analysis result

    Args:
        slot_samples: Kept slots in slot order
        mode: Single-model or compare-all mode
        direction: Commute direction, carried onto the result

    Returns:
        AnalysisResult with exactly one optimal slot

    Raises:
        AllSlotsFailedError: If there is nothing to rank
    """
    if not slot_samples:
        raise AllSlotsFailedError("No travel times available to analyze")

    if mode.compare_all:
        return _aggregate_compare_all(slot_samples, direction)
    return _aggregate_single(slot_samples, mode.traffic_model, direction)


def _aggregate_single(
    slot_samples: Sequence[SlotSamples],
    traffic_model: TrafficModel,
    direction: Optional[Direction],
) -> AnalysisResult:
    durations = [s.samples[traffic_model].duration for s in slot_samples]
    min_duration = min(durations)
    max_duration = max(durations)

    # min() keeps the first index on ties
    optimal_index = min(range(len(durations)), key=lambda i: durations[i])

    times: List[SlotResult] = []
    for i, (slot, duration) in enumerate(zip(slot_samples, durations)):
        times.append(SlotResult(
            slot=slot.departure.slot,
            departure_time=slot.departure.departure_time,
            duration=duration,
            traffic_level=classify_traffic(duration, min_duration),
            is_optimal=(i == optimal_index),
        ))

    return AnalysisResult(
        times=times,
        optimal_index=optimal_index,
        min_duration=min_duration,
        max_duration=max_duration,
        savings_minutes=seconds_to_minutes(max_duration - durations[optimal_index]),
        is_compare_all=False,
        direction=direction,
    )


def _aggregate_compare_all(
    slot_samples: Sequence[SlotSamples],
    direction: Optional[Direction],
) -> AnalysisResult:
    # Only best_guess ranks slots; the chart bounds span every model
    candidates = [i for i, s in enumerate(slot_samples) if TrafficModel.BEST_GUESS in s.samples]
    if not candidates:
        raise AllSlotsFailedError("No best_guess travel times were returned for any departure time")

    def best_guess(i: int) -> int:
        return slot_samples[i].samples[TrafficModel.BEST_GUESS].duration

    optimal_index = min(candidates, key=best_guess)

    all_durations = [sample.duration for s in slot_samples for sample in s.samples.values()]
    min_duration = min(all_durations)
    max_duration = max(all_durations)

    times = [
        SlotResult(
            slot=s.departure.slot,
            departure_time=s.departure.departure_time,
            samples=ModelSamples.from_mapping(s.samples),
            is_optimal=(i == optimal_index),
        )
        for i, s in enumerate(slot_samples)
    ]

    return AnalysisResult(
        times=times,
        optimal_index=optimal_index,
        min_duration=min_duration,
        max_duration=max_duration,
        savings_minutes=seconds_to_minutes(max_duration - best_guess(optimal_index)),
        is_compare_all=True,
        direction=direction,
    )
