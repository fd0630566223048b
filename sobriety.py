"""Days-sober counting."""
import logging
from datetime import date
from typing import Optional

from datemath import days_between
from schemas import SobrietyCount

logger = logging.getLogger(__name__)


def elapsed_days(start_date: Optional[date], as_of: date) -> Optional[int]:
    """Whole days sober on ``as_of``, or None when no start date is set.

    Day 0 is the start date itself. A start date after ``as_of`` gives 0.
    """
    if start_date is None:
        return None
    return max(0, days_between(start_date, as_of))


def count_sobriety(start_date: Optional[date], as_of: date) -> SobrietyCount:
    if start_date is None:
        return SobrietyCount(is_set=False)
    clamped = start_date > as_of
    if clamped:
        logger.warning("Sobriety start date %s is after %s; counting 0 days", start_date, as_of)
    return SobrietyCount(
        is_set=True,
        elapsed_days=elapsed_days(start_date, as_of),
        start_date=start_date,
        clamped=clamped,
    )
