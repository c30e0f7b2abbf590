"""
Tests for directions proxy data models
"""

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from commuteopt.core.models import TrafficModel
from commuteopt.directions.models import DirectionsRequest, DirectionsResult


class TestDirectionsRequest:
    """Test DirectionsRequest model"""

    def test_aliases(self):
        """Test camelCase wire names"""
        request = DirectionsRequest.model_validate(
            {
                "origin": "Home",
                "destination": "Work",
                "departureTime": "2025-03-14T07:30:00Z",
                "trafficModel": "pessimistic",
            }
        )

        assert request.departure_time == "2025-03-14T07:30:00Z"
        assert request.traffic_model == TrafficModel.PESSIMISTIC
        assert request.missing_fields() == []

    def test_missing_fields(self):
        """Test absent and blank required fields"""
        request = DirectionsRequest.model_validate({"origin": "  ", "departureTime": "2025-03-14T07:30:00Z"})

        assert request.missing_fields() == ["origin", "destination"]

    def test_traffic_model_optional(self):
        """Test omitted traffic model"""
        request = DirectionsRequest(origin="Home", destination="Work", departure_time="2025-03-14T07:30:00")

        assert request.traffic_model is None

    def test_invalid_traffic_model(self):
        """Test unknown traffic model"""
        with pytest.raises(ValidationError):
            DirectionsRequest.model_validate({"trafficModel": "fastest"})

    def test_departure_datetime_utc_suffix(self):
        """Test trailing Z is read as UTC"""
        request = DirectionsRequest(departure_time="2025-03-14T07:30:00Z")

        assert request.departure_datetime() == datetime(2025, 3, 14, 7, 30, tzinfo=timezone.utc)

    def test_departure_datetime_offset(self):
        """Test explicit UTC offset"""
        request = DirectionsRequest(departure_time="2025-03-14T07:30:00+01:00")

        parsed = request.departure_datetime()
        assert parsed.utcoffset() == timedelta(hours=1)

    def test_departure_datetime_invalid(self):
        """Test unparseable departure time"""
        request = DirectionsRequest(departure_time="tomorrow morning")

        with pytest.raises(ValueError, match="Invalid departureTime"):
            request.departure_datetime()


class TestDirectionsResult:
    """Test DirectionsResult model"""

    def test_dump_by_alias(self):
        """Test response body field names"""
        result = DirectionsResult(duration=1800, duration_text="30 mins", distance=12000, distance_text="12 km")

        assert result.model_dump(by_alias=True) == {
            "duration": 1800,
            "durationText": "30 mins",
            "distance": 12000,
            "distanceText": "12 km",
        }
