"""
Money saved by not using, and what using would have cost.

Savings follow a simple daily-rate model: every sober day saves ``daily_cost``,
with no compounding and no partial days. Without a positive daily cost, or
without a sobriety start date, none of these figures mean anything, so the
summary is marked not applicable instead of reporting zeros.
"""
import logging
import math
from datetime import date
from decimal import Decimal
from typing import Iterable, List, Optional

from config import DEFAULT_CONFIG, EngineConfig
from datemath import days_between, start_of_month, start_of_year
from rounding import clamp, round_half_up
from schemas import ActualSavings, FinancialSummary, GoalProgress, RecoveryProfile, RelapseCost, SavingsGoal
from sobriety import elapsed_days as count_elapsed_days

logger = logging.getLogger(__name__)


def _money(value) -> float:
    return round_half_up(value, 2)


def total_saved(elapsed: int, daily_cost: float) -> float:
    return elapsed * daily_cost


def days_saved_in_period(start_date: date, as_of: date, period_start: date) -> int:
    """Sober days between ``period_start`` and ``as_of``, counting the start day itself.

    A sobriety that began before the period counts every day of the period so
    far; one that began inside it counts from its first day.
    """
    if start_date > as_of:
        return 0
    first_day = max(start_date, period_start)
    return days_between(first_day, as_of) + 1


def _finite(value) -> bool:
    return value is not None and not isinstance(value, bool) and math.isfinite(value)


def days_away(target_amount: float, saved: float, daily_cost: float) -> Optional[int]:
    """Days at ``daily_cost`` until ``saved`` reaches ``target_amount``; None if it can't be projected."""
    if not (_finite(daily_cost) and daily_cost > 0) or not _finite(target_amount) or not _finite(saved):
        return None
    remaining = Decimal(str(target_amount)) - Decimal(str(saved))
    return max(0, math.ceil(remaining / Decimal(str(daily_cost))))


def _percent_of(amount: float, target_amount: float) -> int:
    if target_amount <= 0:
        return 100
    return clamp(round_half_up(100 * amount / target_amount), 0, 100)


def goal_progress(
    goal: SavingsGoal,
    saved: float,
    daily_cost: float,
    active_name: Optional[str] = None,
    actual_saved: Optional[float] = None,
) -> Optional[GoalProgress]:
    """Progress toward ``goal``; None when its target amount is not a usable number."""
    if not _finite(goal.target_amount):
        logger.warning("Skipping savings goal %r with target %s", goal.name, goal.target_amount)
        return None
    away = days_away(goal.target_amount, saved, daily_cost)
    return GoalProgress(
        name=goal.name,
        target_amount=goal.target_amount,
        icon=goal.icon,
        progress_percent=_percent_of(saved, goal.target_amount),
        actual_progress_percent=_percent_of(actual_saved, goal.target_amount) if _finite(actual_saved) else None,
        achieved=goal.target_amount <= 0 or saved >= goal.target_amount,
        days_away=away,
        projectable=away is not None,
        is_active=active_name is not None and goal.name == active_name,
    )


def relapse_cost(elapsed: int, saved: float, config: EngineConfig = DEFAULT_CONFIG) -> RelapseCost:
    """Illustrative cost of having kept using over the same ``elapsed`` days."""
    interest = round_half_up(saved * config.interest_penalty_multiplier)
    health = round_half_up(elapsed * config.health_cost_per_day)
    hypothetical = saved + interest + health
    return RelapseCost(
        would_have_spent=_money(saved),
        interest_penalty=interest,
        health_cost_estimate=health,
        total_hypothetical_cost=_money(hypothetical),
        net_swing=_money(saved + hypothetical),
    )


def actual_savings(actual: float, projected: float) -> ActualSavings:
    return ActualSavings(
        actual=_money(actual),
        projected=_money(projected),
        difference=_money(actual - projected),
        on_track=actual >= projected,
    )


def _not_applicable(daily_cost: Optional[float], reason: str) -> FinancialSummary:
    return FinancialSummary(applicable=False, reason=reason, daily_cost=daily_cost)


def project_finances(
    elapsed: Optional[int],
    daily_cost: float,
    as_of: date,
    start_date: Optional[date] = None,
    goals: Iterable[SavingsGoal] = (),
    active_goal: Optional[str] = None,
    actual_money_saved: Optional[float] = None,
    config: EngineConfig = DEFAULT_CONFIG,
) -> FinancialSummary:
    if daily_cost is not None and not _finite(daily_cost):
        logger.warning("Ignoring non-finite daily cost %s", daily_cost)
        return _not_applicable(None, "invalid daily cost")
    if elapsed is None or start_date is None:
        return _not_applicable(daily_cost, "no sobriety start date")
    if daily_cost is None or daily_cost <= 0:
        if daily_cost is not None and daily_cost < 0:
            logger.warning("Ignoring negative daily cost %s", daily_cost)
        return _not_applicable(daily_cost or 0.0, "no daily cost")
    if actual_money_saved is not None and not _finite(actual_money_saved):
        logger.warning("Ignoring non-finite actual money saved %s", actual_money_saved)
        actual_money_saved = None

    elapsed = max(0, elapsed)
    saved = total_saved(elapsed, daily_cost)
    days_month = days_saved_in_period(start_date, as_of, start_of_month(as_of))
    days_year = days_saved_in_period(start_date, as_of, start_of_year(as_of))

    progress: List[GoalProgress] = []
    for goal in goals:
        entry = goal_progress(goal, saved, daily_cost, active_goal, actual_money_saved)
        if entry is not None:
            progress.append(entry)
    active = next((g for g in progress if g.is_active), None)
    if active_goal and active is None:
        logger.info("Active savings goal %r is not among the user's goals", active_goal)

    return FinancialSummary(
        applicable=True,
        daily_cost=daily_cost,
        total_saved=saved,
        days_this_month=days_month,
        saved_this_month=days_month * daily_cost,
        days_this_year=days_year,
        saved_this_year=days_year * daily_cost,
        goals=progress,
        active_goal=active,
        relapse_cost=relapse_cost(elapsed, saved, config),
        actual_savings=actual_savings(actual_money_saved, saved) if actual_money_saved is not None else None,
    )


def project_profile_finances(profile: RecoveryProfile, as_of: date, config: EngineConfig = DEFAULT_CONFIG) -> FinancialSummary:
    """Financial summary for a profile: default goals first, then the user's own."""
    start = profile.sobriety_start_date
    return project_finances(
        count_elapsed_days(start, as_of),
        profile.daily_cost,
        as_of,
        start_date=start,
        goals=list(config.default_savings_goals) + list(profile.custom_savings_goals),
        active_goal=profile.active_savings_goal,
        actual_money_saved=profile.actual_money_saved,
        config=config,
    )
