"""Share of required profile fields a user has filled in."""
from typing import Any, Iterable, Mapping, Optional

from config import REQUIRED_PROFILE_FIELDS
from rounding import round_half_up
from schemas import ProfileCompletion


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def field_value(user: Mapping[str, Any], field: str) -> Any:
    """Look a field up by its snake_case name, falling back to the stored camelCase key."""
    if field in user:
        return user[field]
    return user.get(_camel(field))


def is_filled(value: Any) -> bool:
    if value is None or value == "":
        return False
    if isinstance(value, (list, tuple, set)):
        return len(value) > 0
    if isinstance(value, Mapping):
        # addresses count once they say where, at least a city or a street
        return bool(value.get("city") or value.get("street"))
    return True


def score_profile(user: Optional[Mapping[str, Any]], required_fields: Iterable[str] = REQUIRED_PROFILE_FIELDS) -> ProfileCompletion:
    required = list(required_fields)
    user = user or {}
    missing = [f for f in required if not is_filled(field_value(user, f))]
    completed = len(required) - len(missing)
    percent = round_half_up(100 * completed / len(required)) if required else 100
    return ProfileCompletion(percent=percent, completed=completed, total=len(required), missing=missing)
