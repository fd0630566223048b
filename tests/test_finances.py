"""Tests for the savings projection."""

from datetime import date

import pytest
from config import DEFAULT_SAVINGS_GOALS, EngineConfig
from finances import (
    days_away,
    days_saved_in_period,
    goal_progress,
    project_finances,
    project_profile_finances,
    relapse_cost,
    total_saved,
)
from schemas import RecoveryProfile, SavingsGoal

AS_OF = date(2025, 6, 15)


def _make_profile(**overrides):
    data = {
        "sobrietyStartDate": "2025-05-16",
        "dailyCost": 10,
        "customSavingsGoals": [{"name": "Guitar", "targetAmount": 400, "icon": "🎸"}],
        "activeSavingsGoal": "Guitar",
    }
    data.update(overrides)
    return RecoveryProfile.model_validate(data)


class TestPeriodDays:
    def test_sobriety_before_month_counts_day_of_month(self):
        assert days_saved_in_period(date(2025, 1, 10), AS_OF, date(2025, 6, 1)) == 15

    def test_mid_month_start_counts_start_day(self):
        assert days_saved_in_period(date(2025, 6, 10), AS_OF, date(2025, 6, 1)) == 6

    def test_start_today_counts_one_day(self):
        assert days_saved_in_period(AS_OF, AS_OF, date(2025, 6, 1)) == 1

    def test_future_start_counts_nothing(self):
        assert days_saved_in_period(date(2025, 7, 1), AS_OF, date(2025, 6, 1)) == 0

    def test_year_boundary(self):
        assert days_saved_in_period(date(2024, 3, 1), date(2025, 2, 1), date(2025, 1, 1)) == 32


class TestGoals:
    def test_days_away_example(self):
        assert days_away(100, 50, 10) == 5

    def test_days_away_rounds_up_partial_days(self):
        assert days_away(100, 50, 15) == 4

    def test_days_away_decimal_money_is_exact(self):
        # 1.1 / 0.1 is 11.000000000000002 in floats
        assert days_away(1.1, 0, 0.1) == 11

    def test_days_away_reached_goal_is_zero(self):
        assert days_away(100, 150, 10) == 0

    def test_days_away_without_rate_is_unprojectable(self):
        assert days_away(100, 50, 0) is None

    def test_goal_progress(self):
        progress = goal_progress(SavingsGoal(name="Phone", target_amount=500), 300, 10, active_name="Phone")
        assert progress.progress_percent == 60
        assert progress.achieved is False
        assert progress.days_away == 20
        assert progress.projectable is True
        assert progress.is_active is True

    def test_goal_progress_caps_at_100(self):
        progress = goal_progress(SavingsGoal(name="Phone", target_amount=500), 900, 10)
        assert progress.progress_percent == 100
        assert progress.achieved is True
        assert progress.days_away == 0

    def test_zero_target_is_already_met(self):
        progress = goal_progress(SavingsGoal(name="Free", target_amount=0), 0, 10)
        assert progress.achieved is True
        assert progress.progress_percent == 100


class TestRelapseCost:
    def test_uses_product_constants(self):
        cost = relapse_cost(30, 300)
        assert cost.would_have_spent == 300
        assert cost.interest_penalty == 102
        assert cost.health_cost_estimate == 120
        assert cost.total_hypothetical_cost == 522
        assert cost.net_swing == 822

    def test_constants_are_configurable(self):
        config = EngineConfig(interest_penalty_multiplier=0.5, health_cost_per_day=10)
        cost = relapse_cost(3, 30, config)
        assert cost.interest_penalty == 15
        assert cost.health_cost_estimate == 30
        assert cost.total_hypothetical_cost == 75


class TestProjectFinances:
    def test_profile_summary(self):
        summary = project_profile_finances(_make_profile(), AS_OF)
        assert summary.applicable is True
        assert summary.total_saved == 300
        assert summary.days_this_month == 15
        assert summary.saved_this_month == 150
        assert summary.days_this_year == 31
        assert summary.saved_this_year == 310
        assert [g.name for g in summary.goals] == [g.name for g in DEFAULT_SAVINGS_GOALS] + ["Guitar"]
        assert summary.active_goal.name == "Guitar"
        assert summary.active_goal.days_away == 10
        assert summary.actual_savings is None

    def test_actual_savings_comparison(self):
        summary = project_profile_finances(_make_profile(actualMoneySaved=250), AS_OF)
        assert summary.actual_savings.actual == 250
        assert summary.actual_savings.projected == 300
        assert summary.actual_savings.difference == -50
        assert summary.actual_savings.on_track is False

    def test_unknown_active_goal(self):
        summary = project_profile_finances(_make_profile(activeSavingsGoal="Boat"), AS_OF)
        assert summary.active_goal is None
        assert not any(g.is_active for g in summary.goals)

    def test_zero_daily_cost_is_not_applicable(self):
        summary = project_profile_finances(_make_profile(dailyCost=0), AS_OF)
        assert summary.applicable is False
        assert summary.total_saved is None
        assert summary.saved_this_month is None
        assert summary.saved_this_year is None
        assert summary.goals == []
        assert summary.relapse_cost is None

    def test_negative_daily_cost_is_not_applicable(self):
        summary = project_profile_finances(_make_profile(dailyCost=-5), AS_OF)
        assert summary.applicable is False
        assert summary.reason == "no daily cost"

    def test_missing_start_date_is_not_applicable(self):
        summary = project_profile_finances(_make_profile(sobrietyStartDate=None), AS_OF)
        assert summary.applicable is False
        assert summary.reason == "no sobriety start date"

    @pytest.mark.parametrize("elapsed,daily_cost", [(0, 12.5), (1, 0.01), (365, 7.3), (1000, 19.99)])
    def test_total_saved_is_days_times_rate(self, elapsed, daily_cost):
        start = date.fromordinal(AS_OF.toordinal() - elapsed)
        summary = project_finances(elapsed, daily_cost, AS_OF, start_date=start)
        assert summary.total_saved == total_saved(elapsed, daily_cost) == elapsed * daily_cost


class TestActualProgress:
    def test_reported_savings_give_their_own_progress(self):
        summary = project_profile_finances(_make_profile(actualMoneySaved=250), AS_OF)
        assert summary.active_goal.progress_percent == 75
        assert summary.active_goal.actual_progress_percent == 63
        phone = next(g for g in summary.goals if g.name == "New Phone")
        assert phone.actual_progress_percent == 50

    def test_absent_without_reported_savings(self):
        summary = project_profile_finances(_make_profile(), AS_OF)
        assert all(g.actual_progress_percent is None for g in summary.goals)

    def test_reported_savings_cap_at_100(self):
        progress = goal_progress(SavingsGoal(name="Guitar", target_amount=400), 300, 10, actual_saved=900)
        assert progress.actual_progress_percent == 100


class TestNonFiniteInputs:
    @pytest.mark.parametrize("daily_cost", ["NaN", "Infinity", "-Infinity"])
    def test_daily_cost_is_not_applicable(self, daily_cost):
        summary = project_profile_finances(_make_profile(dailyCost=daily_cost), AS_OF)
        assert summary.applicable is False
        assert summary.reason == "invalid daily cost"
        assert summary.daily_cost is None
        assert summary.goals == []

    def test_daily_cost_checked_before_start_date(self):
        summary = project_profile_finances(_make_profile(sobrietyStartDate=None, dailyCost=float("nan")), AS_OF)
        assert summary.reason == "invalid daily cost"

    def test_goal_with_nan_target_is_skipped(self):
        profile = _make_profile(customSavingsGoals=[{"name": "Guitar", "targetAmount": "NaN"}])
        summary = project_profile_finances(profile, AS_OF)
        assert summary.applicable is True
        assert [g.name for g in summary.goals] == [g.name for g in DEFAULT_SAVINGS_GOALS]
        assert summary.active_goal is None

    def test_goal_progress_rejects_infinite_target(self):
        assert goal_progress(SavingsGoal(name="Moon", target_amount=float("inf")), 300, 10) is None

    def test_days_away_needs_finite_numbers(self):
        assert days_away(500, 100, float("inf")) is None
        assert days_away(float("nan"), 100, 10) is None

    def test_nan_actual_savings_are_ignored(self):
        summary = project_profile_finances(_make_profile(actualMoneySaved="NaN"), AS_OF)
        assert summary.applicable is True
        assert summary.actual_savings is None
        assert summary.active_goal.actual_progress_percent is None
