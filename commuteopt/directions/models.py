"""
Directions proxy data models
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from commuteopt.core.models import TrafficModel

REQUIRED_FIELDS = ("origin", "destination", "departureTime")


class DirectionsRequest(BaseModel):
    """Body of POST /api/directions"""

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    origin: Optional[str] = Field(None, description="Origin address")
    destination: Optional[str] = Field(None, description="Destination address")
    departure_time: Optional[str] = Field(
        None, alias="departureTime", description="Departure time (ISO-8601)"
    )
    traffic_model: Optional[TrafficModel] = Field(
        None, alias="trafficModel", description="Traffic model, best_guess if omitted"
    )

    def missing_fields(self) -> List[str]:
        values = {
            "origin": self.origin,
            "destination": self.destination,
            "departureTime": self.departure_time,
        }
        return [name for name in REQUIRED_FIELDS if not values[name]]

    def departure_datetime(self) -> datetime:
        """Parse departureTime; naive values are taken as local time"""
        value = self.departure_time or ""
        if value.endswith("Z"):
            value = value[:-1] + "+00:00"
        try:
            return datetime.fromisoformat(value)
        except ValueError:
            raise ValueError(f"Invalid departureTime: {self.departure_time}")


class DirectionsResult(BaseModel):
    """Travel time for one route as returned by the proxy"""

    model_config = ConfigDict(populate_by_name=True)

    duration: int = Field(..., description="Travel time in seconds, with traffic when available")
    duration_text: Optional[str] = Field(None, alias="durationText")
    distance: Optional[int] = Field(None, description="Distance in meters")
    distance_text: Optional[str] = Field(None, alias="distanceText")
