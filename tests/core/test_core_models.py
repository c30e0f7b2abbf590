"""
Tests for core domain models
"""

from datetime import date, datetime

import pytest
from pydantic import ValidationError

from commuteopt.core.errors import ProviderError, ProviderErrorKind
from commuteopt.core.models import (
    COMPARE_ALL,
    AnalysisMode,
    AnalysisResult,
    Direction,
    DurationSample,
    ModelSamples,
    SlotResult,
    TimeSlot,
    TimeWindow,
    TrafficLevel,
    TrafficModel,
    round_half_up,
    seconds_to_minutes,
)


def _result(slot_time, duration, is_optimal=False):
    slot = TimeSlot.parse(slot_time)
    return SlotResult(
        slot=slot,
        departure_time=datetime(2025, 3, 14, slot.hour, slot.minute),
        duration=duration,
        traffic_level=TrafficLevel.LOW,
        is_optimal=is_optimal,
    )


class TestRounding:
    """Test minute rounding helpers"""

    def test_round_half_up(self):
        """Test halves round away from zero"""
        assert round_half_up(0.5) == 1
        assert round_half_up(2.5) == 3
        assert round_half_up(2.49) == 2

    def test_seconds_to_minutes(self):
        """Test seconds to whole minutes"""
        assert seconds_to_minutes(90) == 2
        assert seconds_to_minutes(1199) == 20


class TestTimeSlot:
    """Test TimeSlot model"""

    def test_parse(self):
        """Test HH:MM parsing"""
        slot = TimeSlot.parse("7:05")

        assert slot.hour == 7
        assert slot.minute == 5
        assert str(slot) == "07:05"
        assert slot.minutes == 425

    def test_parse_invalid(self):
        """Test invalid times"""
        for value in ("25:00", "07:60", "0700", "seven"):
            with pytest.raises(ValueError):
                TimeSlot.parse(value)

    def test_labels(self):
        """Test 12-hour labels"""
        assert TimeSlot.parse("00:15").label == "12:15 AM"
        assert TimeSlot.parse("06:00").label == "6:00 AM"
        assert TimeSlot.parse("12:00").label == "12:00 PM"
        assert TimeSlot.parse("17:45").label == "5:45 PM"
        assert TimeSlot.parse("17:45").short_label == "5:45"

    def test_ordering(self):
        """Test slots order by time of day"""
        assert TimeSlot.parse("06:45") < TimeSlot.parse("07:00")
        assert TimeSlot.parse("07:00") >= TimeSlot.parse("07:00")
        assert TimeSlot.from_minutes(425) == TimeSlot.parse("07:05")


class TestTimeWindow:
    """Test TimeWindow model"""

    def test_parse(self):
        """Test START-END parsing"""
        window = TimeWindow.parse("6:00 - 10:00")

        assert window.start == "06:00"
        assert window.end == "10:00"
        assert str(window) == "06:00-10:00"
        assert window.label == "6:00 AM - 10:00 AM"

    def test_parse_invalid(self):
        """Test malformed windows"""
        with pytest.raises(ValueError):
            TimeWindow.parse("06:00")
        with pytest.raises(ValidationError):
            TimeWindow(start="6am", end="10:00")


class TestAnalysisMode:
    """Test AnalysisMode model"""

    def test_single(self):
        """Test single model mode"""
        mode = AnalysisMode.from_setting("pessimistic")

        assert not mode.compare_all
        assert mode.models == [TrafficModel.PESSIMISTIC]
        assert mode.setting == "pessimistic"

    def test_compare_all(self):
        """Test compare-all query order"""
        mode = AnalysisMode.from_setting(COMPARE_ALL)

        assert mode.models == [TrafficModel.OPTIMISTIC, TrafficModel.BEST_GUESS, TrafficModel.PESSIMISTIC]
        assert mode.setting == COMPARE_ALL

    def test_invalid_setting(self):
        """Test unknown setting"""
        with pytest.raises(ValueError, match="Invalid traffic model"):
            AnalysisMode.from_setting("fastest")


class TestDirection:
    """Test Direction enum"""

    def test_route(self):
        """Test morning goes to work and evening goes home"""
        assert Direction.MORNING.route("Home", "Work") == ("Home", "Work")
        assert Direction.EVENING.route("Home", "Work") == ("Work", "Home")


class TestModelSamples:
    """Test ModelSamples model"""

    def test_from_mapping(self):
        """Test missing models stay absent"""
        samples = ModelSamples.from_mapping(
            {
                TrafficModel.BEST_GUESS: DurationSample(duration=700),
                TrafficModel.PESSIMISTIC: DurationSample(duration=900),
            }
        )

        assert samples.optimistic is None
        assert samples.get(TrafficModel.BEST_GUESS).duration == 700
        assert samples.has_any
        assert samples.durations() == [700, 900]

    def test_negative_duration(self):
        """Test durations cannot be negative"""
        with pytest.raises(ValidationError):
            DurationSample(duration=-1)


class TestAnalysisResult:
    """Test AnalysisResult invariants"""

    def test_optimal_flag_must_match_index(self):
        """Test exactly one optimal slot at optimal_index"""
        with pytest.raises(ValidationError):
            AnalysisResult(
                times=[_result("07:00", 600), _result("07:15", 700, is_optimal=True)],
                optimal_index=0,
                min_duration=600,
                max_duration=700,
                savings_minutes=2,
            )

    def test_requires_times(self):
        """Test an empty result is rejected"""
        with pytest.raises(ValidationError):
            AnalysisResult(times=[], optimal_index=0, min_duration=0, max_duration=0, savings_minutes=0)

    def test_optimal(self):
        """Test optimal accessors"""
        result = AnalysisResult(
            times=[_result("07:00", 600, is_optimal=True), _result("07:15", 700)],
            optimal_index=0,
            min_duration=600,
            max_duration=700,
            savings_minutes=2,
        )

        assert result.optimal.time == "07:00"
        assert result.optimal_duration == 600
        assert result.chart_scale().display_min == 590


class TestProviderError:
    """Test provider error mapping"""

    def test_from_status(self):
        """Test Google status sub-kinds"""
        assert ProviderError.from_status("ZERO_RESULTS").kind == ProviderErrorKind.NO_ROUTE
        assert ProviderError.from_status("NOT_FOUND").kind == ProviderErrorKind.NO_ROUTE
        assert ProviderError.from_status("REQUEST_DENIED").kind == ProviderErrorKind.DENIED
        assert ProviderError.from_status("OVER_QUERY_LIMIT").kind == ProviderErrorKind.OTHER
        assert str(ProviderError.from_status("INVALID_REQUEST")) == "Google API error: INVALID_REQUEST"
