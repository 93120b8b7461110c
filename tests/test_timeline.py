from datetime import date, datetime, timezone

import pytest

from okr_app.core.timeline import (
    calculate_ideal_progress,
    cycle_change_reason,
    cycle_status,
    objective_status,
    timeline_status,
)


class TestIdealProgress:

    def test_before_start(self):
        assert calculate_ideal_progress(date(2026, 1, 1), date(2026, 3, 31), date(2025, 12, 31)) == 0

    def test_on_start_day(self):
        assert calculate_ideal_progress(date(2026, 1, 1), date(2026, 3, 31), date(2026, 1, 1)) == 0

    def test_after_end(self):
        assert calculate_ideal_progress(date(2026, 1, 1), date(2026, 3, 31), date(2026, 4, 1)) == 100

    def test_end_day_counts_as_running(self):
        value = calculate_ideal_progress(date(2026, 1, 1), date(2026, 1, 2), datetime(2026, 1, 2, 0, 0, tzinfo=timezone.utc))
        assert 49 < value < 51

    def test_halfway(self):
        start = datetime(2026, 1, 1, tzinfo=timezone.utc)
        end = datetime(2026, 1, 11, tzinfo=timezone.utc)
        now = datetime(2026, 1, 6, tzinfo=timezone.utc)
        assert calculate_ideal_progress(start, end, now) == pytest.approx(50)


class TestTimelineStatus:

    @pytest.mark.parametrize("progress, ideal, expected", [
        (100, 20, "completed"),
        (60, 50, "ahead"),
        (55, 50, "on_track"),
        (40, 50, "on_track"),
        (39, 50, "at_risk"),
        (25, 50, "at_risk"),
        (24, 50, "behind"),
    ])
    def test_gap_buckets(self, progress, ideal, expected):
        assert timeline_status(progress, ideal) == expected


class TestObjectiveStatus:

    def test_manual_status_wins(self):
        assert objective_status("paused", [100], 50) == "paused"
        assert objective_status("canceled", [10], 50) == "canceled"

    def test_no_key_results(self):
        assert objective_status("in_progress", [], 50) == "not_started"

    def test_completed(self):
        assert objective_status(None, [100, 100], 30) == "completed"

    def test_cycle_over(self):
        assert objective_status(None, [60, 40], 100) == "partially_achieved"
        assert objective_status(None, [40, 20], 100) == "not_achieved"

    def test_running_cycle(self):
        assert objective_status(None, [50], 50) == "on_track"
        assert objective_status(None, [35], 50) == "at_risk"
        assert objective_status(None, [20], 50) == "behind"


class TestCycleStatus:

    def test_transitions(self):
        start, end = date(2026, 1, 1), date(2026, 3, 31)
        assert cycle_status(start, end, date(2025, 12, 31)) == "planning"
        assert cycle_status(start, end, date(2026, 1, 1)) == "active"
        assert cycle_status(start, end, date(2026, 3, 31)) == "active"
        assert cycle_status(start, end, date(2026, 4, 1)) == "completed"

    def test_change_reasons(self):
        assert cycle_change_reason("planning", "active") == "Cycle started"
        assert cycle_change_reason("active", "completed") == "Cycle ended"
        assert cycle_change_reason("active", "planning") == "Cycle has not started yet"
        assert cycle_change_reason("planning", "completed") == "Status changed from planning to completed"
