"""
Core data models for commute departure analysis
"""

import math
from datetime import date, datetime
from enum import Enum
from functools import total_ordering
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positive values"""
    return int(math.floor(value + 0.5))


def seconds_to_minutes(seconds: float) -> int:
    """Convert a duration in seconds to whole minutes"""
    return round_half_up(seconds / 60)


class TrafficModel(str, Enum):
    """Traffic prediction models understood by the directions provider"""

    OPTIMISTIC = "optimistic"
    BEST_GUESS = "best_guess"
    PESSIMISTIC = "pessimistic"


COMPARE_ALL = "compare_all"


class TrafficLevel(str, Enum):
    """Traffic classification relative to the fastest sampled slot"""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Direction(str, Enum):
    """Commute direction"""

    MORNING = "morning"
    EVENING = "evening"

    def route(self, home_address: str, work_address: str) -> Tuple[str, str]:
        """Return (origin, destination) for this direction"""
        if self is Direction.MORNING:
            return home_address, work_address
        return work_address, home_address


@total_ordering
class TimeSlot(BaseModel):
    """A time of day on the sampling grid"""

    model_config = ConfigDict(frozen=True)

    hour: int = Field(..., ge=0, le=23)
    minute: int = Field(..., ge=0, le=59)

    @classmethod
    def parse(cls, value: str) -> "TimeSlot":
        """Parse an HH:MM string"""
        try:
            hours, minutes = value.split(":")
            return cls(hour=int(hours), minute=int(minutes))
        except (ValueError, AttributeError):
            raise ValueError(f"Time must be in HH:MM format (e.g., 08:00), got {value!r}")

    @classmethod
    def from_minutes(cls, total_minutes: int) -> "TimeSlot":
        return cls(hour=total_minutes // 60, minute=total_minutes % 60)

    @property
    def minutes(self) -> int:
        """Minutes since midnight"""
        return self.hour * 60 + self.minute

    @property
    def label(self) -> str:
        """12-hour label, e.g. 6:15 AM"""
        period = "PM" if self.hour >= 12 else "AM"
        return f"{self.hour % 12 or 12}:{self.minute:02d} {period}"

    @property
    def short_label(self) -> str:
        return f"{self.hour % 12 or 12}:{self.minute:02d}"

    def __lt__(self, other: "TimeSlot") -> bool:
        if not isinstance(other, TimeSlot):
            return NotImplemented
        return self.minutes < other.minutes

    def __str__(self) -> str:
        return f"{self.hour:02d}:{self.minute:02d}"


class TimeWindow(BaseModel):
    """Start and end of a commute window as HH:MM strings"""

    start: str = Field(..., description="Window start (HH:MM)")
    end: str = Field(..., description="Window end (HH:MM)")

    @field_validator("start", "end")
    def validate_time(cls, v):
        """Normalize to zero-padded HH:MM"""
        return str(TimeSlot.parse(v))

    @classmethod
    def parse(cls, value: str) -> "TimeWindow":
        """Parse a START-END string such as 06:00-10:00"""
        try:
            start, end = value.split("-")
        except ValueError:
            raise ValueError(f"Window must be in HH:MM-HH:MM format, got {value!r}")
        return cls(start=start.strip(), end=end.strip())

    @property
    def start_slot(self) -> TimeSlot:
        return TimeSlot.parse(self.start)

    @property
    def end_slot(self) -> TimeSlot:
        return TimeSlot.parse(self.end)

    @property
    def label(self) -> str:
        return f"{self.start_slot.label} - {self.end_slot.label}"

    def __str__(self) -> str:
        return f"{self.start}-{self.end}"


class AnalysisMode(BaseModel):
    """Query one traffic model per slot, or all three"""

    model_config = ConfigDict(frozen=True)

    compare_all: bool = False
    traffic_model: TrafficModel = TrafficModel.BEST_GUESS

    @classmethod
    def single(cls, traffic_model: TrafficModel = TrafficModel.BEST_GUESS) -> "AnalysisMode":
        return cls(compare_all=False, traffic_model=traffic_model)

    @classmethod
    def compare(cls) -> "AnalysisMode":
        return cls(compare_all=True)

    @classmethod
    def from_setting(cls, setting: str) -> "AnalysisMode":
        """Build a mode from a profile setting (a traffic model or compare_all)"""
        if setting == COMPARE_ALL:
            return cls.compare()
        try:
            return cls.single(TrafficModel(setting))
        except ValueError:
            valid = [m.value for m in TrafficModel] + [COMPARE_ALL]
            raise ValueError(f"Invalid traffic model: {setting}. Must be one of {valid}")

    @property
    def models(self) -> List[TrafficModel]:
        """Models to query for each slot, in query order"""
        if self.compare_all:
            return [TrafficModel.OPTIMISTIC, TrafficModel.BEST_GUESS, TrafficModel.PESSIMISTIC]
        return [self.traffic_model]

    @property
    def setting(self) -> str:
        return COMPARE_ALL if self.compare_all else self.traffic_model.value


class DepartureInstant(BaseModel):
    """A time slot bound to a calendar date"""

    slot: TimeSlot
    departure_time: datetime


class CallStatus(str, Enum):
    """How a single provider call settled"""

    OK = "ok"
    TIMED_OUT = "timed_out"
    FAILED = "failed"


class CallOutcome(BaseModel):
    """
    Result of one provider call raced against its timeout.
    A success that arrives after the timeout never becomes an outcome.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    status: CallStatus
    duration: Optional[int] = None
    error: Optional[Exception] = None

    @classmethod
    def ok(cls, duration: int) -> "CallOutcome":
        return cls(status=CallStatus.OK, duration=duration)

    @classmethod
    def timed_out(cls, error: Exception) -> "CallOutcome":
        return cls(status=CallStatus.TIMED_OUT, error=error)

    @classmethod
    def failed(cls, error: Exception) -> "CallOutcome":
        return cls(status=CallStatus.FAILED, error=error)

    @property
    def succeeded(self) -> bool:
        return self.status == CallStatus.OK


class DurationSample(BaseModel):
    """Predicted travel time for one (slot, traffic model) pair"""

    duration: int = Field(..., ge=0, description="Travel time in seconds")

    @property
    def duration_minutes(self) -> int:
        return seconds_to_minutes(self.duration)


class ModelSamples(BaseModel):
    """Per-model samples for one slot in compare-all mode; absent models are None"""

    optimistic: Optional[DurationSample] = None
    best_guess: Optional[DurationSample] = None
    pessimistic: Optional[DurationSample] = None

    @classmethod
    def from_mapping(cls, samples: Dict[TrafficModel, DurationSample]) -> "ModelSamples":
        return cls(**{model.value: sample for model, sample in samples.items()})

    def get(self, model: TrafficModel) -> Optional[DurationSample]:
        return getattr(self, model.value)

    @property
    def has_any(self) -> bool:
        return any(self.get(model) is not None for model in TrafficModel)

    def durations(self) -> List[int]:
        """Durations of the models that produced a sample"""
        return [s.duration for s in (self.optimistic, self.best_guess, self.pessimistic) if s is not None]


class SlotSamples(BaseModel):
    """Raw samples gathered for one kept departure"""

    departure: DepartureInstant
    samples: Dict[TrafficModel, DurationSample] = Field(default_factory=dict)


class SlotResult(BaseModel):
    """One departure time in an analysis result"""

    slot: TimeSlot
    departure_time: datetime

    # Single-model mode
    duration: Optional[int] = Field(None, description="Travel time in seconds")
    traffic_level: Optional[TrafficLevel] = None

    # Compare-all mode
    samples: Optional[ModelSamples] = None

    is_optimal: bool = False

    @property
    def time(self) -> str:
        return str(self.slot)

    @property
    def duration_minutes(self) -> Optional[int]:
        if self.duration is None:
            return None
        return seconds_to_minutes(self.duration)

    @property
    def recommended_duration(self) -> Optional[int]:
        """Duration used to rank this slot"""
        if self.samples is not None:
            best_guess = self.samples.best_guess
            return best_guess.duration if best_guess else None
        return self.duration

    def durations(self) -> List[int]:
        if self.samples is not None:
            return self.samples.durations()
        return [self.duration] if self.duration is not None else []


class ChartScale(BaseModel):
    """Vertical scale shared by every bar in a results chart"""

    display_min: float
    max_duration: int

    @classmethod
    def from_bounds(cls, min_duration: int, max_duration: int) -> "ChartScale":
        spread = max_duration - min_duration
        return cls(
            display_min=max(0.0, min_duration - spread * 0.1),
            max_duration=max_duration,
        )

    def bar_height(self, value: Optional[int]) -> float:
        """Bar height as a fraction of the chart; missing values are empty bars"""
        if value is None:
            return 0.0
        display_range = self.max_duration - self.display_min
        if display_range <= 0:
            return 1.0
        return (value - self.display_min) / display_range

    @property
    def min_label(self) -> int:
        return seconds_to_minutes(self.display_min)

    @property
    def max_label(self) -> int:
        return seconds_to_minutes(self.max_duration)


class AnalysisResult(BaseModel):
    """Ranked view of one commute window"""

    times: List[SlotResult] = Field(..., min_length=1)
    optimal_index: int = Field(..., ge=0)
    min_duration: int
    max_duration: int
    savings_minutes: int
    is_compare_all: bool = False
    direction: Optional[Direction] = None

    @model_validator(mode="after")
    def validate_single_optimal(self):
        """Exactly one slot, the one at optimal_index, is flagged optimal"""
        if self.optimal_index >= len(self.times):
            raise ValueError("optimal_index out of range")
        flagged = [i for i, slot in enumerate(self.times) if slot.is_optimal]
        if flagged != [self.optimal_index]:
            raise ValueError("exactly one slot must be marked optimal")
        return self

    @property
    def optimal(self) -> SlotResult:
        return self.times[self.optimal_index]

    @property
    def optimal_duration(self) -> int:
        return self.optimal.recommended_duration

    def chart_scale(self) -> ChartScale:
        return ChartScale.from_bounds(self.min_duration, self.max_duration)


class DayAnalysis(BaseModel):
    """Morning and evening results for one calendar day"""

    day: date
    morning: AnalysisResult
    evening: AnalysisResult

    def for_direction(self, direction: Direction) -> AnalysisResult:
        return self.morning if direction is Direction.MORNING else self.evening
