"""
Directions API integration for commute travel times
"""

from .client import GoogleDirectionsClient, ProxyDirectionsClient, TravelTimeProvider
from .models import DirectionsRequest, DirectionsResult

__all__ = [
    "GoogleDirectionsClient",
    "ProxyDirectionsClient",
    "TravelTimeProvider",
    "DirectionsRequest",
    "DirectionsResult",
]
