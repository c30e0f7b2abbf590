"""
commuteopt: Commute Departure Time Optimizer

Samples predicted travel times across a morning and an evening window and
recommends the departure time with the shortest trip.
"""

__version__ = "0.1.0"

from .core.models import AnalysisMode, AnalysisResult, Direction, TimeWindow, TrafficModel

__all__ = [
    "AnalysisMode",
    "AnalysisResult",
    "Direction",
    "TimeWindow",
    "TrafficModel",
]
