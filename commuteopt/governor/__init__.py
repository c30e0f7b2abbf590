"""
Request rate governor for the directions proxy
"""

from .limiter import GovernorDecision, RateLimitEntry, RequestGovernor, seconds_per_request
from .store import InMemoryStore, KeyValueStore

__all__ = [
    "GovernorDecision",
    "RateLimitEntry",
    "RequestGovernor",
    "seconds_per_request",
    "InMemoryStore",
    "KeyValueStore",
]
