"""
Milestone ladder: which sobriety milestones are reached and how far the next one is.

Catalog entries are ordered by ``days_required``; entries sharing a threshold
keep their catalog order.
"""
from datetime import date, timedelta
from typing import Iterable, List, Optional

from rounding import clamp, round_half_up
from schemas import Milestone, MilestoneProgress, MilestoneStatus, NextMilestone


def sort_catalog(catalog: Iterable[Milestone]) -> List[Milestone]:
    # sorted() is stable, so equal thresholds stay in catalog order
    return sorted(catalog, key=lambda m: m.days_required)


def milestone_statuses(elapsed: int, catalog: Iterable[Milestone], start_date: Optional[date] = None) -> List[MilestoneStatus]:
    elapsed = max(0, elapsed)
    statuses = []
    for milestone in sort_catalog(catalog):
        statuses.append(MilestoneStatus(
            **milestone.model_dump(),
            achieved=elapsed >= milestone.days_required,
            days_until=max(0, milestone.days_required - elapsed),
            target_date=start_date + timedelta(days=milestone.days_required) if start_date else None,
        ))
    return statuses


def progress_percentage(elapsed: int, previous_days: int, next_days: int) -> int:
    """Percent of the way from the previous achieved threshold to the next one."""
    span = next_days - previous_days
    if span <= 0:
        return 100
    return clamp(round_half_up(100 * (elapsed - previous_days) / span), 0, 100)


def next_milestone(elapsed: int, catalog: Iterable[Milestone], start_date: Optional[date] = None) -> Optional[NextMilestone]:
    """First unachieved milestone, or None when every milestone is reached."""
    elapsed = max(0, elapsed)
    previous_days = 0
    for status in milestone_statuses(elapsed, catalog, start_date):
        if status.achieved:
            previous_days = status.days_required
            continue
        return NextMilestone(
            **status.model_dump(),
            progress_percentage=progress_percentage(elapsed, previous_days, status.days_required),
            previous_days=previous_days,
        )
    return None


def evaluate_milestones(elapsed: int, catalog: Iterable[Milestone], start_date: Optional[date] = None) -> MilestoneProgress:
    catalog = list(catalog)
    elapsed = max(0, elapsed)
    statuses = milestone_statuses(elapsed, catalog, start_date)
    upcoming = next_milestone(elapsed, catalog, start_date)
    return MilestoneProgress(
        elapsed_days=elapsed,
        milestones=statuses,
        achieved=[s for s in statuses if s.achieved],
        next_milestone=upcoming,
        all_achieved=upcoming is None,
    )
