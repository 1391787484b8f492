"""Tests for occurrence resolution."""

from datetime import datetime, timedelta

from earlyspring_core.models.alarm import Weekday
from earlyspring_core.scheduling.resolver import format_time_remaining, next_occurrence
from tests.conftest import MONDAY, make_alarm


class TestNextOccurrence:
    """Tests for next_occurrence."""

    def test_later_today(self):
        """Active weekday with the time still ahead rings today."""
        alarm = make_alarm(time="07:00", days=[Weekday.MON])

        result = next_occurrence(alarm, MONDAY.replace(hour=6, minute=30))

        assert result == datetime(2024, 1, 1, 7, 0)

    def test_passed_today_wraps_to_next_week(self):
        """One second past the only active slot resolves to next week."""
        alarm = make_alarm(time="07:00", days=[Weekday.MON])

        result = next_occurrence(alarm, datetime(2024, 1, 1, 7, 0, 1))

        assert result == datetime(2024, 1, 8, 7, 0)

    def test_exact_time_counts_as_passed(self):
        """A target equal to now is not returned."""
        alarm = make_alarm(time="07:00", days=[Weekday.MON])

        result = next_occurrence(alarm, datetime(2024, 1, 1, 7, 0, 0))

        assert result == datetime(2024, 1, 8, 7, 0)

    def test_next_active_weekday(self):
        """Inactive today scans forward to the next active day."""
        alarm = make_alarm(time="06:15", days=[Weekday.WED, Weekday.FRI])

        result = next_occurrence(alarm, MONDAY.replace(hour=12))

        assert result == datetime(2024, 1, 3, 6, 15)
        assert Weekday.for_date(result) is Weekday.WED

    def test_wraps_over_weekend(self):
        """Saturday evening with a weekday alarm resolves to Monday."""
        alarm = make_alarm(time="07:00", days=[Weekday.MON, Weekday.TUE])

        result = next_occurrence(alarm, datetime(2024, 1, 6, 22, 0))

        assert result == datetime(2024, 1, 8, 7, 0)

    def test_seconds_are_zeroed(self):
        """Resolved instants carry no seconds."""
        alarm = make_alarm(time="08:30", days=list(Weekday))

        result = next_occurrence(alarm, datetime(2024, 1, 1, 7, 12, 45, 123))

        assert result == datetime(2024, 1, 1, 8, 30)
        assert result.second == 0 and result.microsecond == 0

    def test_no_active_days(self):
        """An alarm without weekdays never resolves."""
        alarm = make_alarm(days=[])

        assert next_occurrence(alarm, MONDAY) is None

    def test_always_strictly_future(self):
        """Every resolution across a week of start times is ahead of now."""
        alarm = make_alarm(time="07:00", days=[Weekday.MON, Weekday.THU, Weekday.SUN])
        now = MONDAY

        for _ in range(7 * 24 * 4):
            result = next_occurrence(alarm, now)
            assert result > now
            assert result - now <= timedelta(days=7)
            assert Weekday.for_date(result) in alarm.days
            now += timedelta(minutes=15)

    def test_one_shot_in_future(self):
        """One-shot alarms resolve to their explicit instant."""
        fire_at = MONDAY.replace(hour=7, minute=10)
        alarm = make_alarm(days=[], fire_at=fire_at)

        assert next_occurrence(alarm, MONDAY.replace(hour=7)) == fire_at

    def test_one_shot_in_past(self):
        """A passed one-shot instant does not resolve."""
        fire_at = MONDAY.replace(hour=7, minute=10)
        alarm = make_alarm(days=[], fire_at=fire_at)

        assert next_occurrence(alarm, fire_at) is None


class TestFormatTimeRemaining:
    """Tests for format_time_remaining."""

    def test_hours_and_minutes(self):
        """Durations over an hour show both units."""
        assert format_time_remaining(datetime(2024, 1, 1, 9, 5), datetime(2024, 1, 1, 7, 0)) == "2h 5m remaining"

    def test_minutes_only(self):
        """Durations under an hour show minutes."""
        assert format_time_remaining(datetime(2024, 1, 1, 7, 45), datetime(2024, 1, 1, 7, 0)) == "45m remaining"

    def test_due(self):
        """Past or present instants read "Now"."""
        assert format_time_remaining(datetime(2024, 1, 1, 7, 0), datetime(2024, 1, 1, 7, 0)) == "Now"
