"""Unit tests for progressive overload and deload scheduling."""
import pytest

from drift.engine.periodization import (
    average_session_rpe,
    calculate_progression_metrics,
    generate_overload_summary,
    is_deload_week,
    next_deload_week,
    next_week_target,
    should_consider_early_deload,
    validate_volume,
)
from drift.models import MuscleGroup, SessionStatus, WorkoutSession


class TestNextWeekTarget:

    def test_newbie_low_rpe(self):
        assert next_week_target(10000, 5, 2, 8000) == 10500

    @pytest.mark.parametrize("rpe", [1, 5, 7, 9, 10])
    def test_deload_overrides_rpe(self, rpe):
        assert next_week_target(10000, rpe, 3, 8000) == pytest.approx(6000)

    @pytest.mark.parametrize("rpe,expected", [(6, 10500), (7, 10250), (8, 10250), (8.5, 10000), (9, 10000)])
    def test_newbie_band(self, rpe, expected):
        assert next_week_target(10000, rpe, 1, 10000) == expected

    @pytest.mark.parametrize("rpe,expected", [(5, 10250), (8, 10250), (9, 10000)])
    def test_later_band(self, rpe, expected):
        assert next_week_target(10000, rpe, 5, 10000) == expected

    def test_cap_returned_exactly(self):
        assert next_week_target(15900, 5, 1, 8000) == 16000

    def test_rounds_half_up(self):
        # 1010 * 1.05 = 1060.5
        assert next_week_target(1010, 5, 1, 1010) == 1061

    def test_non_positive_current(self):
        assert next_week_target(0, 5, 1, 8000) == 0

    @pytest.mark.parametrize("current", [100, 8000, 15999, 16000, 40000])
    @pytest.mark.parametrize("rpe", [1, 6, 7, 8, 9, 10])
    @pytest.mark.parametrize("week", [1, 2, 3, 4, 5, 7, 11, 12])
    def test_never_exceeds_cap(self, current, rpe, week):
        assert next_week_target(current, rpe, week, 8000) <= 16000


class TestDeloadWeeks:

    @pytest.mark.parametrize("week,expected", [(1, False), (3, False), (4, True), (8, True), (9, False)])
    def test_is_deload_week(self, week, expected):
        assert is_deload_week(week) is expected

    @pytest.mark.parametrize("week,expected", [(1, 4), (3, 4), (4, 8), (5, 8)])
    def test_next_deload_week(self, week, expected):
        assert next_deload_week(week) == expected

    def test_early_deload_three_high_sessions(self):
        should, reason = should_consider_early_deload([6, 9, 9, 10])
        assert should
        assert "Last 3" in reason

    def test_early_deload_high_average(self):
        should, reason = should_consider_early_deload([9, 8, 9, 8, 9])
        assert should
        assert "8.6" in reason

    @pytest.mark.parametrize("rpes", [[], [9, 9], [7, 8, 9], [8, 8, 8, 8, 9]])
    def test_no_early_deload(self, rpes):
        assert should_consider_early_deload(rpes) == (False, None)


class TestAverageRpe:

    def _session(self, group, rpe, status=SessionStatus.COMPLETED):
        return WorkoutSession(muscle_group=group, target_volume=1000, status=status, session_rpe=rpe)

    def test_mean_of_completed_sessions(self):
        sessions = [
            self._session(MuscleGroup.PUSH, 6),
            self._session(MuscleGroup.PUSH, 8),
            self._session(MuscleGroup.PUSH, 10, SessionStatus.SKIPPED),
            self._session(MuscleGroup.PULL, 10),
        ]
        assert average_session_rpe(sessions, MuscleGroup.PUSH) == 7

    def test_defaults_to_neutral(self):
        sessions = [self._session(MuscleGroup.PUSH, None)]
        assert average_session_rpe(sessions, MuscleGroup.PUSH) == 7
        assert average_session_rpe([], MuscleGroup.LEGS, default=6) == 6


class TestSummaries:

    def test_newbie_reason(self):
        summary = generate_overload_summary(10000, 5, 2, 8000)
        assert summary.next_volume == 10500
        assert summary.reason == "Newbie gains (+5%, RPE: 5.0)"

    def test_progressive_reason(self):
        summary = generate_overload_summary(10000, 7, 5, 8000)
        assert summary.reason == "Progressive overload (+3%, RPE: 7.0)"

    def test_deload_reason(self):
        summary = generate_overload_summary(10000, 5, 3, 8000)
        assert summary.is_next_week_deload
        assert summary.reason == "Deload week (40% reduction for recovery)"

    def test_maintain_reason(self):
        summary = generate_overload_summary(10000, 9.5, 6, 8000)
        assert summary.reason == "Maintain volume (RPE too high: 9.5)"

    def test_validate_volume(self):
        assert validate_volume(10000, 10000) is None
        assert "approaching" in validate_volume(18000, 10000)
        assert "below" in validate_volume(7000, 10000)

    def test_progression_metrics(self):
        metrics = calculate_progression_metrics(8, 8000, 10000)

        assert metrics.total_increase == 2000
        assert metrics.percentage_gain == pytest.approx(25)
        assert metrics.avg_weekly_increase == pytest.approx(250)
        assert metrics.deloads_completed == 2
