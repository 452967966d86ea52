"""
Akwa-Connect — Compatibility Engine

Scores a pair of user profiles on a 0–100 scale and ranks candidate pools.

Weighted sum over five sub-scores (each 0–100):
  score = 0.30 × location + 0.25 × preferences + 0.20 × hobbies
        + 0.15 × demographics + 0.10 × bio_similarity

Then:
  1. Dealbreakers (age outside either user's preferred range, or an
     incompatible relationship-goal pair) force score 0, incompatible.
  2. Flat bonuses (academic +15, both single parents +20, both aged
     25–40 +10) are added and the total is capped at 100.
  3. compatible ⇔ score ≥ 40.

The engine is pure: it reads the clock once per public call, performs no
I/O and never mutates its inputs.  Missing optional profile fields degrade
to neutral scores instead of raising.
"""

from __future__ import annotations

import math
import re
from datetime import date, datetime, timezone
from typing import Callable, Iterable, Mapping

import structlog

from akwa_connect.config import Settings, get_settings
from akwa_connect.data.regions import (
    ACADEMIC_PROFESSION_KEYWORDS,
    AGE_GAP_BANDS,
    COMPATIBLE_GOALS,
    CULTURAL_TERMS,
    EDUCATION_LEVELS,
    INCOMPATIBLE_GOAL_PAIRS,
    OUT_OF_REGION_MARKERS,
    OUTSIDE_NIGERIA,
    PROFESSIONAL_AGE_RANGE,
    SINGLE_PARENT_GOAL,
    are_lgas_adjacent,
    senatorial_district,
)
from akwa_connect.schemas.match import (
    CompatibilityBreakdown,
    CompatibilityResult,
    MatchFilters,
    RankedMatch,
)
from akwa_connect.schemas.profile import UserProfile

logger = structlog.get_logger("akwa_connect.matching_service")

# ──────────────────────────────────────────────────────────────────────────────
# Constants
# ──────────────────────────────────────────────────────────────────────────────

_SECONDS_PER_YEAR = 365.25 * 24 * 60 * 60

# ASCII \W to keep tokenization identical to the web client's matcher
_WORD_SPLIT = re.compile(r"\W+", re.ASCII)
_MIN_WORD_LENGTH = 4

_NATIVE = "native"

_NEUTRAL_SCORE = 50.0
_HOBBY_PRESENCE_BONUS = 10.0
_NO_COMMON_BIO_WORDS_SCORE = 30.0

_DEALBREAKER_REASON = "Dealbreaker detected"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _significant_words(text: str) -> set[str]:
    """Lower-cased words longer than three characters."""
    return {w for w in _WORD_SPLIT.split(text.lower()) if len(w) >= _MIN_WORD_LENGTH}


def _shared_hobbies(hobbies_a: Iterable[str], hobbies_b: Iterable[str]) -> list[str]:
    """Hobbies of A that B also lists, in A's order, without repeats."""
    other = set(hobbies_b)
    return [h for h in dict.fromkeys(hobbies_a) if h in other]


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class MatchingService:
    """Pairwise compatibility scoring and candidate ranking.

    Configuration is read from ``Settings`` at construction; the clock is
    injectable so that age-dependent results are reproducible in tests.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        settings = settings or get_settings()
        self.weights: Mapping[str, float] = settings.weights
        self.threshold: float = settings.COMPATIBILITY_THRESHOLD
        self.default_age: int = settings.DEFAULT_AGE
        self.default_min_age: int = settings.DEFAULT_MIN_AGE_PREFERENCE
        self.default_max_age: int = settings.DEFAULT_MAX_AGE_PREFERENCE
        self.default_reason: str = settings.DEFAULT_MATCH_REASON
        self._clock = clock or _utc_now

        logger.debug(
            "matching_service_initialised",
            weights=dict(self.weights),
            threshold=self.threshold,
        )

    # ── Public API ────────────────────────────────────────────────────────

    def calculate_compatibility(
        self,
        user_a: UserProfile,
        user_b: UserProfile,
    ) -> CompatibilityResult:
        """Score how well ``user_b`` suits ``user_a``.

        Parameters
        ----------
        user_a:
            The acting user.
        user_b:
            The candidate.

        Returns
        -------
        CompatibilityResult
            ``total_score`` (0–100), the per-dimension ``breakdown``,
            ``compatible`` flag and ordered human-readable ``reasons``.
            ``reasons`` may be empty; see :meth:`with_default_reason`.
        """
        return self._score_pair(user_a, user_b, self._now())

    def find_manual_matches(
        self,
        user_id: str,
        all_users: Iterable[UserProfile],
        filters: MatchFilters | Mapping | None = None,
    ) -> list[RankedMatch]:
        """Rank a filtered pool for a user-driven search.

        The acting user is located in ``all_users`` by id; an unknown id
        yields an empty list.  The acting user and everyone on their
        blocked list are excluded, then the optional filters are applied
        as a conjunction:

        - ``lga``: exact match on the candidate's LGA
        - ``min_age`` / ``max_age``: inclusive bounds on the candidate's age
        - ``hobbies``: candidate lists at least one of them

        Every surviving candidate is scored and returned, best first, including
        incompatible ones.  Ties keep pool order.
        """
        if filters is None:
            filters = MatchFilters()
        elif not isinstance(filters, MatchFilters):
            filters = MatchFilters.model_validate(filters)

        pool = list(all_users)
        current = next((u for u in pool if u.id == user_id), None)
        if current is None:
            logger.info("manual_matches_user_not_found", user_id=user_id)
            return []

        now = self._now()
        blocked = set(current.blocked_users)
        candidates = [u for u in pool if u.id != user_id and u.id not in blocked]

        if filters.lga:
            candidates = [u for u in candidates if u.lga == filters.lga]
        if filters.min_age:
            candidates = [
                u for u in candidates if self._age(u.dob, now) >= filters.min_age
            ]
        if filters.max_age:
            candidates = [
                u for u in candidates if self._age(u.dob, now) <= filters.max_age
            ]
        if filters.hobbies:
            wanted = set(filters.hobbies)
            candidates = [u for u in candidates if wanted.intersection(u.hobbies)]

        matches = []
        for candidate in candidates:
            result = self._score_pair(current, candidate, now)
            matches.append(
                RankedMatch(
                    user=candidate,
                    score=result.total_score,
                    reasons=result.reasons,
                    breakdown=result.breakdown,
                )
            )
        matches.sort(key=lambda m: m.score, reverse=True)

        logger.info(
            "manual_matches_ranked",
            user_id=user_id,
            pool_size=len(pool),
            after_filters=len(candidates),
            filters=filters.model_dump(exclude_defaults=True),
        )
        return matches

    def find_algorithmic_matches(
        self,
        user: UserProfile,
        candidates: Iterable[UserProfile],
    ) -> list[RankedMatch]:
        """Rank a pool for the automatic match feed.

        Unlike :meth:`find_manual_matches`, only ``compatible`` pairs are
        kept.  The pool is first narrowed by :meth:`restrict_pool`; blocked
        lists are not consulted here.
        """
        now = self._now()

        scored = 0
        matches = []
        for candidate in self._restrict_pool(user, candidates, now):
            if candidate.id == user.id:
                continue
            scored += 1
            result = self._score_pair(user, candidate, now)
            if not result.compatible:
                continue
            matches.append(
                RankedMatch(
                    user=candidate,
                    score=result.total_score,
                    reasons=result.reasons,
                    breakdown=result.breakdown,
                    compatible=True,
                )
            )
        matches.sort(key=lambda m: m.score, reverse=True)

        logger.info(
            "algorithmic_matches_ranked",
            user_id=user.id,
            scored=scored,
            compatible=len(matches),
        )
        return matches

    def restrict_pool(
        self,
        user: UserProfile,
        pool: Iterable[UserProfile],
    ) -> list[UserProfile]:
        """Narrow ``pool`` to the candidates ``user`` is willing to see.

        Others must have a gender listed in ``user.gender_preference`` (when
        the list is non-empty) and an age inside the user's preferred range.
        The acting user is kept so the result can be handed to
        :meth:`find_manual_matches`.
        """
        return self._restrict_pool(user, pool, self._now())

    def with_default_reason(self, reasons: list[str]) -> list[str]:
        """Return ``reasons``, or the configured fallback phrase if empty."""
        return reasons if reasons else [self.default_reason]

    # ── Pool restriction ──────────────────────────────────────────────────

    def _restrict_pool(
        self,
        user: UserProfile,
        pool: Iterable[UserProfile],
        now: datetime,
    ) -> list[UserProfile]:
        wanted_genders = set(user.gender_preference)
        kept = []
        for candidate in pool:
            if candidate.id != user.id:
                if wanted_genders and candidate.gender not in wanted_genders:
                    continue
                if not self._check_age_preference(user, candidate, now):
                    continue
            kept.append(candidate)
        return kept

    # ── Pair scoring ──────────────────────────────────────────────────────

    def _score_pair(
        self,
        user_a: UserProfile,
        user_b: UserProfile,
        now: datetime,
    ) -> CompatibilityResult:
        breakdown = CompatibilityBreakdown(
            location=self._calculate_location_score(user_a, user_b),
            preferences=self._calculate_preference_score(user_a, user_b, now),
            hobbies=self._calculate_hobby_score(user_a, user_b),
            demographics=self._calculate_demographic_score(user_a, user_b, now),
            bio_similarity=self._calculate_bio_similarity(user_a, user_b),
        )

        score = 0.0
        for dimension, weight in self.weights.items():
            score += getattr(breakdown, dimension) * weight

        if self._has_dealbreaker(user_a, user_b, now):
            logger.debug("dealbreaker_detected", user_a=user_a.id, user_b=user_b.id)
            return CompatibilityResult(
                total_score=0,
                breakdown=breakdown,
                compatible=False,
                reasons=[_DEALBREAKER_REASON],
            )

        score = min(score + self._calculate_special_bonuses(user_a, user_b, now), 100.0)

        return CompatibilityResult(
            total_score=_round_half_up(score),
            breakdown=breakdown,
            compatible=score >= self.threshold,
            reasons=self._generate_match_reasons(user_a, user_b, breakdown, now),
        )

    # ── Location ──────────────────────────────────────────────────────────

    def _calculate_location_score(self, user_a: UserProfile, user_b: UserProfile) -> float:
        """Tiered proximity score driven by each user's connection type."""
        a_native = user_a.connection_type == _NATIVE
        b_native = user_b.connection_type == _NATIVE

        if a_native and b_native:
            if user_a.lga == user_b.lga:
                return 100.0
            if are_lgas_adjacent(user_a.lga, user_b.lga):
                return 85.0
            if senatorial_district(user_a.lga) == senatorial_district(user_b.lga):
                return 70.0
            return 50.0

        if a_native != b_native:
            native, non_native = (user_a, user_b) if a_native else (user_b, user_a)

            if non_native.current_lga == native.lga:
                return 80.0
            if non_native.current_lga and non_native.current_lga not in OUT_OF_REGION_MARKERS:
                return 65.0
            if non_native.connection_reason and self._check_cultural_interest(
                non_native.connection_reason, native
            ):
                return 60.0
            return 40.0

        if not a_native and not b_native:
            if (
                user_a.current_lga
                and user_b.current_lga
                and user_a.current_lga != OUTSIDE_NIGERIA
                and user_b.current_lga != OUTSIDE_NIGERIA
            ):
                if user_a.current_lga == user_b.current_lga:
                    return 75.0
                if user_a.city == user_b.city:
                    return 65.0
                return 50.0

            if user_a.connection_reason and user_b.connection_reason:
                interest = self._calculate_interest_similarity(
                    user_a.connection_reason, user_b.connection_reason
                )
                return 40.0 + interest * 0.6
            return 30.0

        return 25.0

    @staticmethod
    def _check_cultural_interest(reason: str, native: UserProfile) -> bool:
        """Does the non-native's reason mention the culture or the native's home?"""
        hometown = native.hometown.lower() if native.hometown is not None else None
        lga = native.lga.lower() if native.lga is not None else None
        for keyword in _WORD_SPLIT.split(reason.lower()):
            if keyword in CULTURAL_TERMS:
                return True
            if hometown is not None and keyword in hometown:
                return True
            if lga is not None and keyword in lga:
                return True
        return False

    @staticmethod
    def _calculate_interest_similarity(reason_a: str, reason_b: str) -> float:
        """Word overlap of two connection reasons, 0–100."""
        words_a = _significant_words(reason_a)
        words_b = _significant_words(reason_b)
        if not words_a or not words_b:
            return 0.0
        return len(words_a & words_b) / max(len(words_a), len(words_b)) * 100.0

    # ── Preferences ───────────────────────────────────────────────────────

    def _calculate_preference_score(
        self, user_a: UserProfile, user_b: UserProfile, now: datetime
    ) -> float:
        score = 0.0

        a_prefers_b = self._check_age_preference(user_a, user_b, now)
        b_prefers_a = self._check_age_preference(user_b, user_a, now)
        if a_prefers_b and b_prefers_a:
            score += 40.0
        elif a_prefers_b or b_prefers_a:
            score += 20.0

        score += self._check_goal_alignment(user_a.relationship_goal, user_b.relationship_goal) * 30.0

        if user_a.preferences and user_b.preferences:
            score += self._calculate_text_similarity(user_a.preferences, user_b.preferences) * 30.0

        return min(score, 100.0)

    def _check_age_preference(
        self, user: UserProfile, target: UserProfile, now: datetime
    ) -> bool:
        """Is ``target``'s age inside ``user``'s preferred range (inclusive)?"""
        target_age = self._age(target.dob, now)
        min_age = user.min_age_preference or self.default_min_age
        max_age = user.max_age_preference or self.default_max_age
        return min_age <= target_age <= max_age

    @staticmethod
    def _check_goal_alignment(goal_a: str | None, goal_b: str | None) -> float:
        if not goal_a or not goal_b:
            return 0.5
        if goal_b.lower() in COMPATIBLE_GOALS.get(goal_a.lower(), ()):
            return 1.0
        return 0.3

    @staticmethod
    def _calculate_text_similarity(text_a: str, text_b: str) -> float:
        """Overlap of significant words relative to the shorter text, 0–1."""
        words_a = _significant_words(text_a)
        words_b = _significant_words(text_b)
        if not words_a or not words_b:
            return 0.0
        return len(words_a & words_b) / min(len(words_a), len(words_b))

    # ── Hobbies, demographics, bio ────────────────────────────────────────

    @staticmethod
    def _calculate_hobby_score(user_a: UserProfile, user_b: UserProfile) -> float:
        if not user_a.hobbies or not user_b.hobbies:
            return _NEUTRAL_SCORE

        common = _shared_hobbies(user_a.hobbies, user_b.hobbies)
        total = len(set(user_a.hobbies) | set(user_b.hobbies))
        similarity = len(common) / total * 100.0
        return min(similarity + _HOBBY_PRESENCE_BONUS, 100.0)

    def _calculate_demographic_score(
        self, user_a: UserProfile, user_b: UserProfile, now: datetime
    ) -> float:
        score = _NEUTRAL_SCORE

        age_gap = abs(self._age(user_a.dob, now) - self._age(user_b.dob, now))
        for max_gap, bonus in AGE_GAP_BANDS:
            if age_gap <= max_gap:
                score += bonus
                break

        if user_a.education and user_b.education:
            level_a = user_a.education.lower()
            level_b = user_b.education.lower()
            if level_a in EDUCATION_LEVELS and level_b in EDUCATION_LEVELS:
                diff = abs(EDUCATION_LEVELS.index(level_a) - EDUCATION_LEVELS.index(level_b))
                if diff == 0:
                    score += 20
                elif diff == 1:
                    score += 10

        if user_a.disability_desc and user_b.disability_desc:
            score += 15

        return min(score, 100.0)

    @staticmethod
    def _calculate_bio_similarity(user_a: UserProfile, user_b: UserProfile) -> float:
        if not user_a.bio or not user_b.bio:
            return _NEUTRAL_SCORE

        words_a = _significant_words(user_a.bio)
        words_b = _significant_words(user_b.bio)
        common = words_a & words_b
        if not common:
            return _NO_COMMON_BIO_WORDS_SCORE

        return min(len(common) / min(len(words_a), len(words_b)) * 100.0, 100.0)

    # ── Dealbreakers & bonuses ────────────────────────────────────────────

    def _has_dealbreaker(
        self, user_a: UserProfile, user_b: UserProfile, now: datetime
    ) -> bool:
        # Age must fall inside both users' ranges
        if not self._check_age_preference(user_a, user_b, now) or not self._check_age_preference(
            user_b, user_a, now
        ):
            return True

        goal_a = user_a.relationship_goal.lower() if user_a.relationship_goal else None
        goal_b = user_b.relationship_goal.lower() if user_b.relationship_goal else None
        return frozenset((goal_a, goal_b)) in INCOMPATIBLE_GOAL_PAIRS

    def _calculate_special_bonuses(
        self, user_a: UserProfile, user_b: UserProfile, now: datetime
    ) -> float:
        bonus = 0.0

        if self._is_academic(user_a) and self._is_academic(user_b):
            bonus += 15

        if user_a.relationship_goal == SINGLE_PARENT_GOAL and user_b.relationship_goal == SINGLE_PARENT_GOAL:
            bonus += 20

        low, high = PROFESSIONAL_AGE_RANGE
        if low <= self._age(user_a.dob, now) <= high and low <= self._age(user_b.dob, now) <= high:
            bonus += 10

        return bonus

    @staticmethod
    def _is_academic(user: UserProfile) -> bool:
        if not user.profession:
            return False
        profession = user.profession.lower()
        return any(keyword in profession for keyword in ACADEMIC_PROFESSION_KEYWORDS)

    # ── Reasons ───────────────────────────────────────────────────────────

    def _generate_match_reasons(
        self,
        user_a: UserProfile,
        user_b: UserProfile,
        breakdown: CompatibilityBreakdown,
        now: datetime,
    ) -> list[str]:
        reasons: list[str] = []

        if breakdown.location > 80:
            reasons.append("You're in the same LGA")
        elif breakdown.location > 60:
            reasons.append("You're in nearby areas")

        common = _shared_hobbies(user_a.hobbies, user_b.hobbies)
        if common:
            reasons.append(f"Share {len(common)} hobbies: {', '.join(common)}")

        if breakdown.preferences > 70:
            reasons.append("Similar relationship goals")

        if abs(self._age(user_a.dob, now) - self._age(user_b.dob, now)) <= 3:
            reasons.append("Similar age range")

        if user_a.relationship_goal == SINGLE_PARENT_GOAL and user_b.relationship_goal == SINGLE_PARENT_GOAL:
            reasons.append("Both single parents - shared experience")

        return reasons

    # ── Helpers ───────────────────────────────────────────────────────────

    def _now(self) -> datetime:
        now = self._clock()
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        return now

    def _age(self, dob: date | None, now: datetime) -> int:
        """Whole years between ``dob`` (UTC midnight) and ``now``."""
        if dob is None:
            return self.default_age
        birth = datetime(dob.year, dob.month, dob.day, tzinfo=timezone.utc)
        return math.floor((now - birth).total_seconds() / _SECONDS_PER_YEAR)
