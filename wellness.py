"""
Averages and trends for check-in ratings.

Morning check-ins carry mood, craving, anxiety and sleep; the evening
reflection carries overall_day. All are 0-10. A rating that is absent, or
outside 0-10, counts as missing for that metric rather than as a zero.
"""
import logging
import math
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional

from config import MISSED_CHECKIN_WINDOW_DAYS, WEEK_DAYS
from datemath import date_range, trailing_window
from schemas import CheckInRecord, WeekOverWeek, WellnessSummary

logger = logging.getLogger(__name__)

MORNING_METRICS = ("mood", "craving", "anxiety", "sleep")
EVENING_METRICS = ("overall_day",)
METRICS = MORNING_METRICS + EVENING_METRICS

# For these a falling average is the good direction.
LOWER_IS_BETTER = frozenset({"craving", "anxiety"})

MIN_RATING = 0
MAX_RATING = 10


def _check_metric(metric: str) -> None:
    if metric not in METRICS:
        raise ValueError(f"Unknown wellness metric: {metric!r}")


def sort_records(records: Iterable[CheckInRecord]) -> List[CheckInRecord]:
    """Records in date order. Records not yet given a calendar day are left out."""
    dated = []
    for record in records:
        if record.date is None:
            logger.debug("Skipping check-in without a calendar day (created_at=%s)", record.created_at)
            continue
        dated.append(record)
    return sorted(dated, key=lambda r: r.date)


def metric_value(record: CheckInRecord, metric: str) -> Optional[float]:
    """The record's rating for ``metric``, or None when absent or unusable."""
    _check_metric(metric)
    source = record.evening_data if metric in EVENING_METRICS else record.morning_data
    if source is None:
        return None
    value = getattr(source, metric)
    if value is None or isinstance(value, bool):
        return None
    if not math.isfinite(value) or not MIN_RATING <= value <= MAX_RATING:
        logger.debug("Excluding out-of-range %s=%s on %s", metric, value, record.date)
        return None
    return float(value)


def _values(records: Iterable[CheckInRecord], metric: str) -> List[float]:
    _check_metric(metric)
    values = []
    for record in sort_records(records):
        value = metric_value(record, metric)
        if value is not None:
            values.append(value)
    return values


def _mean(values: List[float]) -> Optional[float]:
    if not values:
        return None
    return math.fsum(values) / len(values)


def average(records: Iterable[CheckInRecord], metric: str) -> Optional[float]:
    """Mean rating for ``metric`` over every record; None when there is no data."""
    return _mean(_values(records, metric))


def _in_range(records: Iterable[CheckInRecord], first: date, last: date) -> List[CheckInRecord]:
    return [r for r in records if r.date is not None and first <= r.date <= last]


def week_over_week(records: Iterable[CheckInRecord], metric: str, as_of: date) -> WeekOverWeek:
    """Compare the 7 days ending at ``as_of`` with the 7 days before them."""
    _check_metric(metric)
    records = list(records)
    first, last = trailing_window(as_of, WEEK_DAYS)
    current = average(_in_range(records, first, last), metric)
    prev_last = first - timedelta(days=1)
    previous = average(_in_range(records, prev_last - timedelta(days=WEEK_DAYS - 1), prev_last), metric)

    if current is None or previous is None:
        return WeekOverWeek(metric=metric, current_average=current, previous_average=previous)

    delta = current - previous
    if delta == 0:
        trend, improved = "stable", False
    else:
        improved = delta < 0 if metric in LOWER_IS_BETTER else delta > 0
        trend = "improving" if improved else "declining"
    return WeekOverWeek(
        metric=metric,
        current_average=current,
        previous_average=previous,
        delta=delta,
        is_improvement=improved,
        trend=trend,
    )


def missed_count(records: Iterable[CheckInRecord], metric: str, as_of: date, window_days: int = MISSED_CHECKIN_WINDOW_DAYS) -> int:
    """Days in the trailing window with no usable rating for ``metric``."""
    _check_metric(metric)
    if window_days < 1:
        return 0
    first, last = trailing_window(as_of, window_days)
    covered = {r.date for r in _in_range(records, first, last) if metric_value(r, metric) is not None}
    return sum(1 for day in date_range(first, last) if day not in covered)


def summarize(records: Iterable[CheckInRecord], metric: str, as_of: date, window_days: int = MISSED_CHECKIN_WINDOW_DAYS) -> WellnessSummary:
    records = sort_records(records)
    values = _values(records, metric)
    return WellnessSummary(
        metric=metric,
        average=_mean(values),
        sample_size=len(values),
        week_over_week=week_over_week(records, metric, as_of),
        missed_count=missed_count(records, metric, as_of, window_days),
        window_days=window_days,
    )


def summarize_all(records: Iterable[CheckInRecord], as_of: date, window_days: int = MISSED_CHECKIN_WINDOW_DAYS) -> Dict[str, WellnessSummary]:
    records = sort_records(records)
    return {metric: summarize(records, metric, as_of, window_days) for metric in METRICS}
