"""
Schemas for the Recovery Metrics API

Input models mirror the documents kept by the app's document store (users,
checkIns, savingsGoals). The store uses camelCase keys; each model accepts
those as aliases so field names are normalized once, here, and every
calculation works on the snake_case names.

Output models are recomputed on every request and never persisted. A value
that cannot be computed is None together with a flag saying why (is_set,
applicable, projectable, sample_size).
"""
from pydantic import AliasChoices, BaseModel, BeforeValidator, Field, field_validator, model_validator
from typing import Annotated, Dict, List, Literal, Optional
from datetime import date, datetime

from datemath import parse_date_key

WellnessMetric = Literal["mood", "craving", "anxiety", "sleep", "overall_day"]
Trend = Literal["improving", "declining", "stable"]


def _alias(*names: str) -> AliasChoices:
    return AliasChoices(*names)


def _optional_date_key(value):
    if value is None or value == "":
        return None
    return parse_date_key(value)


# A calendar day given as "YYYY-MM-DD", a (year, month, day) triple or a date
DateKey = Annotated[Optional[date], BeforeValidator(_optional_date_key)]


# Inputs

class SavingsGoal(BaseModel):
    """
    Collection: savingsGoals
    A dollar target the user tracks projected savings against
    """
    name: str = Field(..., description="Goal display name")
    target_amount: float = Field(..., validation_alias=_alias("target_amount", "targetAmount", "amount"), description="Target in the user's currency")
    icon: str = Field("💰", description="Simple icon or emoji for UI")


class RecoveryProfile(BaseModel):
    """
    Collection: users (recovery subset)
    Sobriety start date and cost parameters used to derive every date and money metric
    """
    sobriety_start_date: DateKey = Field(None, validation_alias=_alias("sobriety_start_date", "sobrietyStartDate", "sobrietyDate"), description="Calendar day sobriety began; absent means not set")
    daily_cost: float = Field(0.0, validation_alias=_alias("daily_cost", "dailyCost"), description="Substance cost per day; 0 disables money metrics")
    custom_savings_goals: List[SavingsGoal] = Field(default_factory=list, validation_alias=_alias("custom_savings_goals", "customSavingsGoals"))
    active_savings_goal: Optional[str] = Field(None, validation_alias=_alias("active_savings_goal", "activeSavingsGoal"), description="Name of the goal currently tracked")
    actual_money_saved: Optional[float] = Field(None, validation_alias=_alias("actual_money_saved", "actualMoneySaved"), description="Self-reported money actually set aside")
    timezone: Optional[str] = Field(None, description="IANA timezone the user's calendar days are counted in")

    @field_validator("daily_cost", mode="before")
    @classmethod
    def _default_daily_cost(cls, value):
        return 0.0 if value is None or value == "" else value


class MorningData(BaseModel):
    """Morning check-in ratings, each 0-10. Missing ratings stay None."""
    mood: Optional[float] = None
    craving: Optional[float] = None
    anxiety: Optional[float] = Field(None, validation_alias=_alias("anxiety", "anxietyLevel"))
    sleep: Optional[float] = Field(None, validation_alias=_alias("sleep", "sleepQuality"))


class EveningData(BaseModel):
    """Evening reflection: a 0-10 rating of the day plus free text."""
    overall_day: Optional[float] = Field(None, validation_alias=_alias("overall_day", "overallDay"))
    challenges: Optional[str] = None
    gratitude: Optional[str] = None
    tomorrow_goal: Optional[str] = Field(None, validation_alias=_alias("tomorrow_goal", "tomorrowGoal"))


class CheckInRecord(BaseModel):
    """
    Collection: checkIns
    One per user per calendar day, holding up to one morning and one evening entry
    """
    date: DateKey = Field(None, description="Calendar day of this check-in in the user's timezone")
    created_at: Optional[datetime] = Field(None, validation_alias=_alias("created_at", "createdAt"), description="Write timestamp; gives the day, in the user's timezone, when no date key is stored")
    morning_data: Optional[MorningData] = Field(None, validation_alias=_alias("morning_data", "morningData"))
    evening_data: Optional[EveningData] = Field(None, validation_alias=_alias("evening_data", "eveningData"))

    @model_validator(mode="after")
    def _require_day(self):
        if self.date is None and self.created_at is None:
            raise ValueError("check-in needs a date or a createdAt timestamp")
        return self


class Milestone(BaseModel):
    """Static catalog entry: a sobriety day-count threshold with display metadata"""
    days_required: int = Field(..., ge=0, validation_alias=_alias("days_required", "daysRequired", "days"))
    title: str
    icon: str = "⭐"
    description: str = ""


# Outputs

class SobrietyCount(BaseModel):
    is_set: bool = Field(..., description="False when no sobriety start date is recorded")
    elapsed_days: Optional[int] = Field(None, description="Whole days sober; None when not set")
    start_date: Optional[date] = None
    clamped: bool = Field(False, description="Start date was in the future and elapsed days were clamped to 0")


class MilestoneStatus(Milestone):
    achieved: bool
    days_until: int
    target_date: Optional[date] = None


class NextMilestone(MilestoneStatus):
    progress_percentage: int = Field(..., ge=0, le=100, description="Progress from the previous achieved milestone")
    previous_days: int = Field(0, description="days_required of the last achieved milestone, 0 if none")


class MilestoneProgress(BaseModel):
    elapsed_days: int
    milestones: List[MilestoneStatus]
    achieved: List[MilestoneStatus]
    next_milestone: Optional[NextMilestone] = None
    all_achieved: bool


class GoalProgress(BaseModel):
    name: str
    target_amount: float
    icon: str = "💰"
    progress_percent: int = Field(..., ge=0, le=100)
    actual_progress_percent: Optional[int] = Field(None, ge=0, le=100, description="Progress from self-reported savings, when reported")
    achieved: bool
    days_away: Optional[int] = Field(None, description="Days until the goal at the current daily rate")
    projectable: bool = Field(..., description="False when there is no daily rate to project with")
    is_active: bool = False


class RelapseCost(BaseModel):
    """What continuing to use would have cost, using fixed illustrative constants"""
    would_have_spent: float
    interest_penalty: int
    health_cost_estimate: int
    total_hypothetical_cost: float
    net_swing: float


class ActualSavings(BaseModel):
    actual: float
    projected: float
    difference: float
    on_track: bool


class FinancialSummary(BaseModel):
    applicable: bool
    reason: Optional[str] = Field(None, description="Why money metrics are not applicable")
    daily_cost: Optional[float] = Field(None, description="None when the stored cost is not a finite number")
    total_saved: Optional[float] = None
    days_this_month: Optional[int] = None
    saved_this_month: Optional[float] = None
    days_this_year: Optional[int] = None
    saved_this_year: Optional[float] = None
    goals: List[GoalProgress] = Field(default_factory=list)
    active_goal: Optional[GoalProgress] = None
    relapse_cost: Optional[RelapseCost] = None
    actual_savings: Optional[ActualSavings] = None


class WeekOverWeek(BaseModel):
    metric: WellnessMetric
    current_average: Optional[float] = Field(None, description="Mean over the 7 days ending at as_of")
    previous_average: Optional[float] = Field(None, description="Mean over the 7 days before that")
    delta: Optional[float] = None
    is_improvement: Optional[bool] = None
    trend: Optional[Trend] = None


class WellnessSummary(BaseModel):
    metric: WellnessMetric
    average: Optional[float] = Field(None, description="None means no data, never 0")
    sample_size: int
    week_over_week: WeekOverWeek
    missed_count: int
    window_days: int


class StreakRun(BaseModel):
    start: date
    end: date
    length: int


class StreakSummary(BaseModel):
    current_streak: int
    longest_streak: int
    total_days: int
    last_date: Optional[date] = None
    runs: List[StreakRun] = Field(default_factory=list)


class ProfileCompletion(BaseModel):
    percent: int = Field(..., ge=0, le=100)
    completed: int
    total: int
    missing: List[str] = Field(default_factory=list)


class MetricsSnapshot(BaseModel):
    """Every derived value a screen displays, for one profile and check-in history"""
    as_of: date
    sobriety: SobrietyCount
    elapsed_days: Optional[int] = None
    milestones: Optional[MilestoneProgress] = None
    next_milestone: Optional[NextMilestone] = None
    achieved_milestones: List[MilestoneStatus] = Field(default_factory=list)
    finances: FinancialSummary
    total_saved: Optional[float] = None
    saved_this_month: Optional[float] = None
    saved_this_year: Optional[float] = None
    wellness: Dict[str, WellnessSummary]
    wellness_averages: Dict[str, Optional[float]]
    week_over_week_deltas: Dict[str, WeekOverWeek]
    missed_checkins: Dict[str, int]
    checkin_streak: StreakSummary
    reflection_streak: StreakSummary
    current_streak: int
    longest_streak: int
    total_checkins: int
    profile_completion_percent: Optional[int] = None

# Tip: The /schema endpoint in the API serves these models' JSON schemas.
