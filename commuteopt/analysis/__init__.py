"""
Departure time analysis engine
"""

from .aggregator import aggregate, chart_scale, classify_traffic
from .orchestrator import CommuteAnalyzer
from .service import CommuteService
from .slots import future_departures, generate_time_slots, is_future, resolve_departure, upcoming_days

__all__ = [
    "CommuteAnalyzer",
    "CommuteService",
    "aggregate",
    "chart_scale",
    "classify_traffic",
    "future_departures",
    "generate_time_slots",
    "is_future",
    "resolve_departure",
    "upcoming_days",
]
