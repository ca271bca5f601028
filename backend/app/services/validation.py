"""Field-level validation for records that are about to be persisted.

Validators here never raise for bad input; they return a list of
:class:`FieldError` so callers can report every problem at once.
"""
import datetime as dt
import re
from dataclasses import dataclass
from typing import Annotated, Any, Mapping

from pydantic import BaseModel, ConfigDict, EmailStr, Field, StringConstraints
from pydantic import ValidationError as PydanticValidationError

TIME_RE = re.compile(r"^([0-1]?[0-9]|2[0-3]):[0-5][0-9]$")
DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
DAY_NAMES = ("MO", "TU", "WE", "TH", "FR", "SA", "SU")
DAY_NUMBERS = ("1", "2", "3", "4", "5", "6", "7")


@dataclass
class FieldError:
    field: str
    message: str
    value: Any = None


class UserRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email: EmailStr
    display_name: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)] = Field(alias="displayName")
    last_login_at: dt.datetime | None = Field(default=None, alias="lastLoginAt")


# error tags use the public (camelCase) field names
_USER_FIELD_TAGS = {
    "email": "email",
    "display_name": "displayName",
    "displayName": "displayName",
    "last_login_at": "lastLoginAt",
    "lastLoginAt": "lastLoginAt",
}


def validate_user(record: Mapping[str, Any]) -> list[FieldError]:
    """Return one error per invalid field, ordered email, displayName, lastLoginAt."""
    try:
        UserRecord.model_validate(dict(record))
    except PydanticValidationError as e:
        errors: list[FieldError] = []
        seen: set[str] = set()
        for err in e.errors():
            loc = err["loc"][0] if err["loc"] else ""
            tag = _USER_FIELD_TAGS.get(str(loc), str(loc))
            if tag in seen:
                continue
            seen.add(tag)
            errors.append(FieldError(field=tag, message=err["msg"], value=err.get("input")))
        return errors
    return []


def is_valid_time(value: str) -> bool:
    return bool(TIME_RE.match(value.strip()))


def is_valid_days_of_week(value: str) -> bool:
    parts = [p.strip().upper() for p in value.split(",")]
    return all(p in DAY_NAMES or p in DAY_NUMBERS for p in parts)


def is_valid_date(value: str) -> bool:
    s = value.strip()
    if not DATE_RE.match(s):
        return False
    try:
        dt.date.fromisoformat(s)
    except ValueError:
        return False
    return True
