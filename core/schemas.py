import re
from datetime import datetime, timezone
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from core.enums import Sex

Score = Annotated[int | float, Field(ge=1, le=10)]

_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
_TOKEN_FIELDS = ("idToken", "token", "id_token", "access_token")


def to_number(value: Any) -> int | float:
    """Coerce numeric input (including numeric strings) to int or float."""
    if isinstance(value, bool):
        raise ValueError("boolean is not a number")
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        number = float(value.strip())
    else:
        raise ValueError(f"not a number: {value!r}")
    if number != number or number in (float("inf"), float("-inf")):
        raise ValueError(f"not a finite number: {value!r}")
    return int(number) if number.is_integer() else number


def parse_iso_datetime(value: str) -> datetime:
    parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class Capacities(BaseModel):
    strength: Score
    power: Score
    muscular_endurance: Score = Field(alias="muscularEndurance")
    aerobic_capacity: Score = Field(alias="aerobicCapacity")
    anaerobic_capacity: Score = Field(alias="anaerobicCapacity")
    gymnastics_skill: Score = Field(alias="gymnasticsSkill")
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class UserProfile(BaseModel):
    name: str
    email: str
    sex: Sex
    age: int | float
    weight: int | float
    birthday: str | None = None
    capacities: Capacities | None = None
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @field_validator("age", "weight", mode="before")
    @classmethod
    def _normalize_numeric(cls, value: Any) -> int | float:
        return to_number(value)

    def to_storage(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class Workout(BaseModel):
    id: str
    date: str
    description: str
    weights: dict[str, str] = Field(default_factory=dict)
    result: str
    goal: str | None = None
    strategy: str | None = None
    user_feedback: str | None = Field(default=None, alias="userFeedback")
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @field_validator("id", mode="before")
    @classmethod
    def _id_to_str(cls, value: Any) -> Any:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("date")
    @classmethod
    def _validate_date(cls, value: str) -> str:
        parse_iso_datetime(value)
        return value

    @field_validator("weights", mode="before")
    @classmethod
    def _weights_to_str(cls, value: Any) -> Any:
        if value is None:
            return {}
        if isinstance(value, dict):
            return {str(k): str(v) for k, v in value.items()}
        return value

    @property
    def performed_at(self) -> datetime:
        return parse_iso_datetime(self.date)

    def to_storage(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


def sort_by_date_desc(workouts: list[Workout]) -> list[Workout]:
    return sorted(workouts, key=lambda w: w.performed_at, reverse=True)


class WorkoutSuggestion(BaseModel):
    workout: str
    goal: str
    suggested_weights: dict[str, str] = Field(default_factory=dict, alias="suggestedWeights")
    strategy: str
    workout_id: str | None = Field(default=None, alias="workoutId")
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @field_validator("suggested_weights", mode="before")
    @classmethod
    def _weights_to_str(cls, value: Any) -> Any:
        if value is None:
            return {}
        if isinstance(value, dict):
            return {str(k): str(v) for k, v in value.items()}
        return value

    @field_validator("workout_id", mode="before")
    @classmethod
    def _workout_id_to_str(cls, value: Any) -> Any:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @classmethod
    def from_analysis(cls, data: dict[str, Any]) -> "WorkoutSuggestion":
        """Map the photo-analysis payload onto a suggestion."""
        return cls.model_validate(
            {
                "workout": data.get("parsedWorkout"),
                "goal": data.get("goal"),
                "suggestedWeights": data.get("recommendedWeights"),
                "strategy": data.get("strategy"),
                "workoutId": data.get("workout_id"),
            }
        )


class LoginData(BaseModel):
    email: str = Field(description="Account email address")
    password: str = Field(min_length=1, description="Account password")

    @field_validator("email")
    @classmethod
    def _validate_email(cls, value: str) -> str:
        value = value.strip()
        if not _EMAIL_PATTERN.match(value):
            raise ValueError("Please enter a valid email address")
        return value


class SignupData(LoginData):
    name: str = Field(min_length=1, description="Display name")
    sex: Sex = Field(description="male or female")
    birthday: str = Field(description="Date of birth, YYYY-MM-DD")
    weight: float = Field(description="Body weight in kilograms")

    @field_validator("birthday")
    @classmethod
    def _validate_birthday(cls, value: str) -> str:
        try:
            datetime.strptime(value, "%Y-%m-%d")
        except ValueError as exc:
            raise ValueError("Birthday must be a date in YYYY-MM-DD format") from exc
        return value

    @field_validator("weight", mode="before")
    @classmethod
    def _validate_weight(cls, value: Any) -> Any:
        try:
            number = to_number(value)
        except ValueError as exc:
            raise ValueError("Weight must be a number") from exc
        if number <= 0:
            raise ValueError("Weight must be greater than zero")
        return number


class AuthResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    @property
    def bearer(self) -> str | None:
        """First non-empty token among the field names the backend has used."""
        extra = self.model_extra or {}
        for name in _TOKEN_FIELDS:
            value = extra.get(name)
            if isinstance(value, str) and value:
                return value
        return None


class WorkoutPage(BaseModel):
    items: list[Workout]
    page: int
    page_size: int

    @property
    def has_more(self) -> bool:
        # a full page may still be the last one
        return len(self.items) >= self.page_size

    @classmethod
    def from_payload(cls, payload: Any, *, page: int, page_size: int) -> "WorkoutPage":
        if isinstance(payload, dict):
            payload = payload.get("workouts")
        if not isinstance(payload, list):
            raise ValueError("workouts payload is neither a list nor an object with a workouts list")
        return cls.model_validate({"items": payload, "page": page, "page_size": page_size})


class ResultSubmission(BaseModel):
    workout_id: str
    result: str
    user_feedback: str | None = Field(default=None, alias="userFeedback")
    model_config = ConfigDict(populate_by_name=True)

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
