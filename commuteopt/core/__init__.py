"""
Core models and error taxonomy for commuteopt
"""

from .errors import (
    AllSlotsFailedError,
    CommuteError,
    ConfigError,
    GovernorDeniedError,
    InvalidWindowError,
    NoFutureSlotsError,
    PastDateError,
    ProviderError,
    ProviderErrorKind,
    ProviderTimeoutError,
)
from .models import (
    AnalysisMode,
    AnalysisResult,
    DayAnalysis,
    DepartureInstant,
    Direction,
    SlotResult,
    TimeSlot,
    TimeWindow,
    TrafficLevel,
    TrafficModel,
)

__all__ = [
    "AllSlotsFailedError",
    "AnalysisMode",
    "AnalysisResult",
    "CommuteError",
    "ConfigError",
    "DayAnalysis",
    "DepartureInstant",
    "Direction",
    "GovernorDeniedError",
    "InvalidWindowError",
    "NoFutureSlotsError",
    "PastDateError",
    "ProviderError",
    "ProviderErrorKind",
    "ProviderTimeoutError",
    "SlotResult",
    "TimeSlot",
    "TimeWindow",
    "TrafficLevel",
    "TrafficModel",
]
