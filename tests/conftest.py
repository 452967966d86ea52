"""Shared pytest fixtures for Akwa-Connect tests."""
import pytest
from datetime import date, datetime, timezone

from akwa_connect.config import Settings
from akwa_connect.schemas.profile import UserProfile
from akwa_connect.services.matching_service import MatchingService

# All ages in the suite are computed against this instant.
NOW = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


def dob_for_age(age: int) -> date:
    """Birthday on 1 January, so the user is exactly ``age`` at NOW."""
    return date(NOW.year - age, 1, 1)


def make_profile(id: str = "u1", age: int | None = 30, **fields) -> UserProfile:
    data = {"id": id, "dob": dob_for_age(age) if age is not None else None}
    data.update(fields)
    return UserProfile(**data)


@pytest.fixture
def settings():
    return Settings()


@pytest.fixture
def matching_service(settings):
    return MatchingService(settings=settings, clock=lambda: NOW)


@pytest.fixture
def spec_user_a():
    """Worked example: native from Uyo, 30 years old."""
    return UserProfile.model_validate({
        "id": "u1",
        "dob": "1995-01-01",
        "lga": "uyo",
        "connectionType": "native",
        "hobbies": ["music", "art"],
        "minAgePreference": 25,
        "maxAgePreference": 40,
        "relationshipGoal": "serious relationship",
    })


@pytest.fixture
def spec_user_b():
    """Worked example: native from Uyo, 30 years old, wants marriage."""
    return UserProfile.model_validate({
        "id": "u2",
        "dob": "1994-06-15",
        "lga": "uyo",
        "connectionType": "native",
        "hobbies": ["music", "travel"],
        "minAgePreference": 20,
        "maxAgePreference": 45,
        "relationshipGoal": "marriage",
    })


@pytest.fixture
def candidate_pool():
    """Acting user u1 (blocks u3) plus a mixed pool of candidates."""
    return [
        make_profile("u1", 30, lga="uyo", hobbies=["music", "art"], blocked_users=["u3"]),
        make_profile("u2", 35, lga="uyo", hobbies=["music"], gender="female"),
        make_profile("u3", 31, lga="uyo", hobbies=["music", "art"], gender="female"),
        make_profile("u4", 28, lga="eket", hobbies=["travel"], gender="male"),
        make_profile("u5", 26, lga="uyo", hobbies=["art", "travel"], gender="female"),
        make_profile("u6", 50, lga="uyo", hobbies=["music"], gender="female"),
    ]
