from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import Any, Literal, Optional

from akwa_connect.schemas.profile import UserProfile


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CompatibilityBreakdown(_CamelModel):
    location: float = Field(ge=0, le=100)
    preferences: float = Field(ge=0, le=100)
    hobbies: float = Field(ge=0, le=100)
    demographics: float = Field(ge=0, le=100)
    bio_similarity: float = Field(ge=0, le=100)


class CompatibilityResult(_CamelModel):
    total_score: int = Field(ge=0, le=100)
    breakdown: CompatibilityBreakdown
    compatible: bool
    reasons: list[str] = []


class RankedMatch(_CamelModel):
    user: UserProfile
    score: int
    reasons: list[str] = []
    breakdown: Optional[CompatibilityBreakdown] = None
    compatible: Optional[bool] = None


class MatchFilters(_CamelModel):
    lga: Optional[str] = None
    min_age: Optional[int] = None
    max_age: Optional[int] = None
    hobbies: list[str] = []

    @field_validator("hobbies", mode="before")
    @classmethod
    def _none_to_empty(cls, v: Any) -> Any:
        return [] if v is None else v

    def is_empty(self) -> bool:
        return not (self.lga or self.min_age or self.max_age or self.hobbies)


# ── Request / response bodies ─────────────────────────────────────────────────

class CompatibilityRequest(_CamelModel):
    user_a: UserProfile
    user_b: UserProfile


class RankedMatchesRequest(_CamelModel):
    user_id: str
    users: list[UserProfile]
    manual: bool = False
    filters: MatchFilters = MatchFilters()

    @field_validator("filters", mode="before")
    @classmethod
    def _none_to_default(cls, v: Any) -> Any:
        return {} if v is None else v


class RankedMatchesResponse(_CamelModel):
    matches: list[RankedMatch]
    type: Literal["manual", "algorithmic"]
