"""
Commute profile configuration
"""

from pydantic import BaseModel, Field, field_validator

from commuteopt.core.models import COMPARE_ALL, AnalysisMode, Direction, TimeWindow, TrafficModel

DEFAULT_MORNING_WINDOW = "06:00-10:00"
DEFAULT_EVENING_WINDOW = "16:00-20:00"
DEFAULT_INTERVAL_MINUTES = 15


class CommuteProfile(BaseModel):
    """
    The single commute being optimized
    Addresses are passed to the provider as entered
    """

    home_address: str = Field(
        ...,
        description="Home address (morning origin, evening destination)",
        min_length=1
    )
    work_address: str = Field(
        ...,
        description="Work address (morning destination, evening origin)",
        min_length=1
    )

    morning_window: TimeWindow = Field(
        default_factory=lambda: TimeWindow.parse(DEFAULT_MORNING_WINDOW),
        description="Morning departure window"
    )
    evening_window: TimeWindow = Field(
        default_factory=lambda: TimeWindow.parse(DEFAULT_EVENING_WINDOW),
        description="Evening departure window"
    )

    traffic_model: str = Field(
        TrafficModel.BEST_GUESS.value,
        description="Traffic model (optimistic/best_guess/pessimistic) or compare_all"
    )
    interval_minutes: int = Field(
        DEFAULT_INTERVAL_MINUTES,
        description="Minutes between sampled departure times",
        ge=1,
        le=120
    )

    @field_validator("morning_window", "evening_window", mode="before")
    def parse_window(cls, v):
        """Accept windows written as HH:MM-HH:MM"""
        if isinstance(v, str):
            return TimeWindow.parse(v)
        return v

    @field_validator("traffic_model")
    def validate_traffic_model(cls, v):
        """Validate traffic model setting"""
        valid = {m.value for m in TrafficModel} | {COMPARE_ALL}
        if v not in valid:
            raise ValueError(f"Invalid traffic model: {v}. Must be one of {sorted(valid)}")
        return v

    @property
    def mode(self) -> AnalysisMode:
        return AnalysisMode.from_setting(self.traffic_model)

    def window_for(self, direction: Direction) -> TimeWindow:
        return self.morning_window if direction is Direction.MORNING else self.evening_window
