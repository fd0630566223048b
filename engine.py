"""
Assemble every derived recovery metric for one user.

``compute_snapshot`` is a pure function of its arguments: it never reads the
clock and never modifies the profile or check-in list it is given, so the same
inputs always produce the same snapshot.
"""
import logging
from datetime import date
from typing import Any, Iterable, List, Mapping, Optional

from config import DEFAULT_CONFIG, EngineConfig
from datemath import to_local_date
from finances import project_profile_finances
from milestones import evaluate_milestones
from profile_completion import score_profile
from schemas import CheckInRecord, MetricsSnapshot, RecoveryProfile
from sobriety import count_sobriety
from streaks import calculate_streaks, morning_checkin_dates, reflection_dates
from wellness import sort_records, summarize_all

logger = logging.getLogger(__name__)


def total_checkins(records: Iterable[CheckInRecord]) -> int:
    """Morning and evening entries count separately."""
    return sum((r.morning_data is not None) + (r.evening_data is not None) for r in records)


def localize_checkins(records: Iterable[CheckInRecord], tz: Optional[str] = None) -> List[CheckInRecord]:
    """Give records stored only with a createdAt timestamp the day it falls on in ``tz``.

    Returns copies; the records passed in are left as they are. Raises
    ValueError for an unknown timezone.
    """
    localized = []
    for record in records:
        if record.date is None and record.created_at is not None:
            record = record.model_copy(update={"date": to_local_date(record.created_at, tz)})
        localized.append(record)
    return localized


def compute_snapshot(
    profile: RecoveryProfile,
    checkins: Iterable[CheckInRecord],
    as_of: date,
    user: Optional[Mapping[str, Any]] = None,
    config: Optional[EngineConfig] = None,
) -> MetricsSnapshot:
    config = config or DEFAULT_CONFIG
    records = sort_records(localize_checkins(checkins, profile.timezone or config.timezone))

    sobriety = count_sobriety(profile.sobriety_start_date, as_of)
    milestones = None
    if sobriety.is_set:
        milestones = evaluate_milestones(sobriety.elapsed_days, config.milestones, sobriety.start_date)

    finances = project_profile_finances(profile, as_of, config)
    wellness = summarize_all(records, as_of, config.missed_checkin_window_days)
    checkin_streak = calculate_streaks(morning_checkin_dates(records), as_of)
    reflection_streak = calculate_streaks(reflection_dates(records), as_of)
    completion = score_profile(user, config.required_profile_fields) if user is not None else None

    logger.debug("Computed snapshot as of %s from %d check-ins", as_of, len(records))
    return MetricsSnapshot(
        as_of=as_of,
        sobriety=sobriety,
        elapsed_days=sobriety.elapsed_days,
        milestones=milestones,
        next_milestone=milestones.next_milestone if milestones else None,
        achieved_milestones=milestones.achieved if milestones else [],
        finances=finances,
        total_saved=finances.total_saved,
        saved_this_month=finances.saved_this_month,
        saved_this_year=finances.saved_this_year,
        wellness=wellness,
        wellness_averages={metric: s.average for metric, s in wellness.items()},
        week_over_week_deltas={metric: s.week_over_week for metric, s in wellness.items()},
        missed_checkins={metric: s.missed_count for metric, s in wellness.items()},
        checkin_streak=checkin_streak,
        reflection_streak=reflection_streak,
        current_streak=checkin_streak.current_streak,
        longest_streak=checkin_streak.longest_streak,
        total_checkins=total_checkins(records),
        profile_completion_percent=completion.percent if completion else None,
    )
