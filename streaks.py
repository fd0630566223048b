"""
Consecutive-day streaks of check-in events.

A streak is a run of calendar days each with at least one qualifying event.
The current streak ends today if today already has an event, otherwise
yesterday: a check-in still possible later today does not break it.
"""
from datetime import date, timedelta
from typing import Iterable, List

from schemas import CheckInRecord, StreakRun, StreakSummary


def _runs(unique_dates: List[date]) -> List[StreakRun]:
    """Split sorted, distinct dates into runs of consecutive days, oldest first."""
    runs = []
    if not unique_dates:
        return runs
    start = end = unique_dates[0]
    for current in unique_dates[1:]:
        if (current - end).days == 1:
            end = current
            continue
        runs.append(StreakRun(start=start, end=end, length=(end - start).days + 1))
        start = end = current
    runs.append(StreakRun(start=start, end=end, length=(end - start).days + 1))
    return runs


def _current_streak(runs: List[StreakRun], as_of: date) -> int:
    if not runs:
        return 0
    last = runs[-1]
    if last.end in (as_of, as_of - timedelta(days=1)):
        return last.length
    return 0


def calculate_streaks(dates: Iterable[date], as_of: date) -> StreakSummary:
    """Current and longest streak over ``dates``. Dates after ``as_of`` are ignored.

    Example: events on D-5, D-4, D-3, D-1 and D give current 2, longest 3.
    """
    unique_dates = sorted({d for d in dates if d <= as_of})
    runs = _runs(unique_dates)
    return StreakSummary(
        current_streak=_current_streak(runs, as_of),
        longest_streak=max((r.length for r in runs), default=0),
        total_days=len(unique_dates),
        last_date=unique_dates[-1] if unique_dates else None,
        runs=sorted(runs, key=lambda r: (r.length, r.end), reverse=True),
    )


def morning_checkin_dates(records: Iterable[CheckInRecord]) -> List[date]:
    return [r.date for r in records if r.date is not None and r.morning_data is not None]


def reflection_dates(records: Iterable[CheckInRecord]) -> List[date]:
    return [r.date for r in records if r.date is not None and r.evening_data is not None]
