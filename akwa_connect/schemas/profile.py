from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel
from datetime import date, datetime
from typing import Any, Optional


class UserProfile(BaseModel):
    """Profile fields the compatibility engine reads.

    Accepts the camelCase keys produced by the profile store
    (``relationshipGoal``, ``minAgePreference``...) as well as snake_case.
    Missing optional fields are left as ``None``; the engine substitutes
    neutral defaults when scoring.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )

    id: str
    dob: Optional[date] = None
    gender: Optional[str] = None
    relationship_goal: Optional[str] = None
    education: Optional[str] = None
    profession: Optional[str] = None
    connection_type: str = "native"
    lga: Optional[str] = None
    hometown: Optional[str] = None
    current_lga: Optional[str] = None
    city: Optional[str] = None
    connection_reason: Optional[str] = None
    hobbies: list[str] = []
    bio: Optional[str] = None
    preferences: Optional[str] = None
    disability_desc: Optional[str] = None
    min_age_preference: Optional[int] = None
    max_age_preference: Optional[int] = None
    blocked_users: list[str] = []
    gender_preference: list[str] = []

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, v: Any) -> Any:
        # Store ids may be UUIDs or integers
        return v if isinstance(v, str) or v is None else str(v)

    @field_validator("dob", mode="before")
    @classmethod
    def _dob_date_part(cls, v: Any) -> Any:
        if isinstance(v, datetime):
            return v.date()
        if isinstance(v, str):
            v = v.strip()
            if not v:
                return None
            if "T" in v:
                return v.split("T", 1)[0]
        return v

    @field_validator("connection_type", mode="before")
    @classmethod
    def _default_connection_type(cls, v: Any) -> Any:
        return v or "native"

    @field_validator("hobbies", "blocked_users", "gender_preference", mode="before")
    @classmethod
    def _none_to_empty(cls, v: Any) -> Any:
        if v is None:
            return []
        if isinstance(v, str):
            return [v]
        return v
