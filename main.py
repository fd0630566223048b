import logging
import os
from datetime import date
from typing import Any, Dict, List, Optional

from fastapi import Body, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import AliasChoices, BaseModel, Field

from config import load_config
from datemath import today
from engine import compute_snapshot, localize_checkins
from finances import project_profile_finances
from milestones import evaluate_milestones, sort_catalog
from profile_completion import score_profile
from schemas import CheckInRecord, DateKey, Milestone, RecoveryProfile, SavingsGoal
from sobriety import count_sobriety
from streaks import calculate_streaks, morning_checkin_dates, reflection_dates
from wellness import METRICS, summarize

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

config = load_config()

app = FastAPI(title="Recovery Metrics API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Request models for endpoints
class MetricsRequest(BaseModel):
    profile: RecoveryProfile = Field(default_factory=RecoveryProfile)
    checkins: List[CheckInRecord] = Field(default_factory=list, validation_alias=AliasChoices("checkins", "checkIns"))
    user: Optional[Dict[str, Any]] = Field(None, description="Raw user document, used for profile completion")
    as_of: Optional[date] = Field(None, validation_alias=AliasChoices("as_of", "asOf"), description="Evaluation day; defaults to today in the user's timezone")


class SobrietyRequest(BaseModel):
    sobriety_start_date: DateKey = Field(None, validation_alias=AliasChoices("sobriety_start_date", "sobrietyStartDate", "sobrietyDate"))
    timezone: Optional[str] = None
    as_of: Optional[date] = Field(None, validation_alias=AliasChoices("as_of", "asOf"))


# Helpers

def _as_of(requested: Optional[date], tz: Optional[str]) -> date:
    if requested is not None:
        return requested
    try:
        return today(tz or config.timezone)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


def _checkins(payload: MetricsRequest) -> List[CheckInRecord]:
    try:
        return localize_checkins(payload.checkins, payload.profile.timezone or config.timezone)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


def _ensure_metric(metric: str) -> str:
    if metric not in METRICS:
        raise HTTPException(status_code=404, detail=f"Unknown metric '{metric}'")
    return metric


# Basic routes
@app.get("/")
def read_root():
    return {"message": "Recovery Metrics API"}


@app.get("/schema")
def get_schema():
    return {
        "recoveryprofile": RecoveryProfile.model_json_schema(),
        "checkin": CheckInRecord.model_json_schema(),
        "savingsgoal": SavingsGoal.model_json_schema(),
        "milestone": Milestone.model_json_schema(),
    }


@app.get("/api/config")
def get_config():
    return config.model_dump()


# Milestones
@app.get("/api/milestones")
def list_milestones():
    return {"items": [m.model_dump() for m in sort_catalog(config.milestones)]}


@app.post("/api/milestones/progress")
def milestone_progress(payload: SobrietyRequest):
    as_of = _as_of(payload.as_of, payload.timezone)
    sobriety = count_sobriety(payload.sobriety_start_date, as_of)
    if not sobriety.is_set:
        return {"sobriety": sobriety.model_dump(), "progress": None}
    progress = evaluate_milestones(sobriety.elapsed_days, config.milestones, sobriety.start_date)
    return {"sobriety": sobriety.model_dump(), "progress": progress.model_dump()}


# Sobriety
@app.post("/api/sobriety")
def sobriety_count(payload: SobrietyRequest):
    as_of = _as_of(payload.as_of, payload.timezone)
    return count_sobriety(payload.sobriety_start_date, as_of).model_dump()


# Finances
@app.post("/api/finances")
def finances(payload: MetricsRequest):
    as_of = _as_of(payload.as_of, payload.profile.timezone)
    return project_profile_finances(payload.profile, as_of, config).model_dump()


# Wellness
@app.post("/api/wellness/{metric}")
def wellness_summary(metric: str, payload: MetricsRequest):
    _ensure_metric(metric)
    as_of = _as_of(payload.as_of, payload.profile.timezone)
    return summarize(_checkins(payload), metric, as_of, config.missed_checkin_window_days).model_dump()


# Streaks
@app.post("/api/streaks")
def streaks(payload: MetricsRequest):
    as_of = _as_of(payload.as_of, payload.profile.timezone)
    checkins = _checkins(payload)
    return {
        "checkins": calculate_streaks(morning_checkin_dates(checkins), as_of).model_dump(),
        "reflections": calculate_streaks(reflection_dates(checkins), as_of).model_dump(),
    }


# Profile
@app.post("/api/profile-completion")
def profile_completion(user: Dict[str, Any] = Body(...)):
    return score_profile(user, config.required_profile_fields).model_dump()


# Dashboard
@app.post("/api/metrics")
def metrics(payload: MetricsRequest):
    as_of = _as_of(payload.as_of, payload.profile.timezone)
    snapshot = compute_snapshot(payload.profile, _checkins(payload), as_of, user=payload.user, config=config)
    return snapshot.model_dump()


if __name__ == "__main__":
    import uvicorn
    port = int(os.getenv("PORT", 8000))
    uvicorn.run(app, host="0.0.0.0", port=port)
