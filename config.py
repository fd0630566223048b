"""
Product constants and runtime settings.

The money and check-in constants below are presentation-tuning values chosen
by the product, not derived figures. They are read from the environment (a
``.env`` file is honored) so they can be tuned without touching the
calculations.
"""
import logging
import os
from typing import List, Optional, Tuple

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

from datemath import DEFAULT_TIMEZONE, get_timezone
from schemas import Milestone, SavingsGoal

load_dotenv()

logger = logging.getLogger(__name__)

# Illustrative compounded-interest loss per dollar spent on the substance.
INTEREST_PENALTY_MULTIPLIER = 0.34
# Illustrative health cost per day of use, in dollars.
HEALTH_COST_PER_DAY = 4
MISSED_CHECKIN_WINDOW_DAYS = 31
WEEK_DAYS = 7

MILESTONES: Tuple[Milestone, ...] = (
    Milestone(days_required=1, title="1 Day", icon="🌱", description="The first full day. Every journey starts here."),
    Milestone(days_required=7, title="1 Week", icon="🌿", description="A full week of choosing recovery."),
    Milestone(days_required=14, title="2 Weeks", icon="🍀", description="Two weeks in, new routines are forming."),
    Milestone(days_required=30, title="1 Month", icon="🌲", description="One month of sobriety."),
    Milestone(days_required=60, title="2 Months", icon="🌳", description="Two months of steady progress."),
    Milestone(days_required=90, title="3 Months", icon="🌴", description="Ninety days, a major recovery marker."),
    Milestone(days_required=180, title="6 Months", icon="🏔️", description="Half a year of sobriety."),
    Milestone(days_required=365, title="1 Year", icon="🌟", description="A full year. Celebrate it."),
    Milestone(days_required=730, title="2 Years", icon="💎", description="Two years of recovery."),
    Milestone(days_required=1095, title="3 Years", icon="🏆", description="Three years of recovery."),
    Milestone(days_required=1825, title="5 Years", icon="👑", description="Five years of recovery."),
    Milestone(days_required=3650, title="10 Years", icon="🎖️", description="A decade of recovery."),
)

DEFAULT_SAVINGS_GOALS: Tuple[SavingsGoal, ...] = (
    SavingsGoal(name="New Phone", target_amount=500, icon="📱"),
    SavingsGoal(name="Emergency Fund", target_amount=1000, icon="🛟"),
    SavingsGoal(name="Vacation Fund", target_amount=2000, icon="✈️"),
    SavingsGoal(name="New Car Down Payment", target_amount=5000, icon="🚗"),
)

REQUIRED_PROFILE_FIELDS: Tuple[str, ...] = (
    "first_name",
    "last_name",
    "phone",
    "sobriety_date",
    "substance",
    "daily_cost",
    "emergency_contacts",
    "address",
    "profile_image_url",
    "date_of_birth",
)


class EngineConfig(BaseModel):
    """Tunables handed to every calculation. Defaults are the product constants above."""
    timezone: str = DEFAULT_TIMEZONE
    interest_penalty_multiplier: float = Field(INTEREST_PENALTY_MULTIPLIER, ge=0)
    health_cost_per_day: float = Field(HEALTH_COST_PER_DAY, ge=0)
    missed_checkin_window_days: int = Field(MISSED_CHECKIN_WINDOW_DAYS, ge=1)
    milestones: List[Milestone] = Field(default_factory=lambda: list(MILESTONES))
    default_savings_goals: List[SavingsGoal] = Field(default_factory=lambda: list(DEFAULT_SAVINGS_GOALS))
    required_profile_fields: List[str] = Field(default_factory=lambda: list(REQUIRED_PROFILE_FIELDS))

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, value):
        get_timezone(value)
        return value


def _env_number(name: str, default, cast=float):
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return cast(raw)
    except ValueError:
        logger.warning("Ignoring invalid %s=%r, using %s", name, raw, default)
        return default


def load_config(overrides: Optional[dict] = None) -> EngineConfig:
    """Build an EngineConfig from RECOVERY_* environment variables plus explicit overrides."""
    values = {
        "timezone": os.getenv("RECOVERY_TIMEZONE") or DEFAULT_TIMEZONE,
        "interest_penalty_multiplier": _env_number("RECOVERY_INTEREST_MULTIPLIER", INTEREST_PENALTY_MULTIPLIER),
        "health_cost_per_day": _env_number("RECOVERY_HEALTH_COST_PER_DAY", HEALTH_COST_PER_DAY),
        "missed_checkin_window_days": _env_number("RECOVERY_MISSED_WINDOW_DAYS", MISSED_CHECKIN_WINDOW_DAYS, int),
    }
    if overrides:
        values.update(overrides)
    return EngineConfig(**values)


DEFAULT_CONFIG = EngineConfig()
