"""
Static lookup tables for Akwa Ibom State used by the compatibility engine.

These are configuration data, not computed values.  Keep them in step with
the LGA clusters and senatorial districts shown to users at signup; scoring
parity depends on the exact spellings below (all lower-case).
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

# ──────────────────────────────────────────────────────────────────────────────
# Geography
# ──────────────────────────────────────────────────────────────────────────────

# Hub LGA -> neighbouring LGAs.  Adjacency is only recorded hub-to-member.
LGA_ADJACENCY_CLUSTERS: Mapping[str, tuple[str, ...]] = MappingProxyType({
    "uyo": ("ibesikpo", "nsit", "nsit-atai", "nsit-ubium", "etinan"),
    "ikot ekpene": ("essien udim", "obot akara", "ini", "ikono"),
    "eket": ("esit eket", "onna", "mkpat enin", "ikai", "etim ekpo"),
    "oron": ("udung uko", "urue offong/oruko", "okobo", "mbo"),
})

LGA_SENATORIAL_DISTRICTS: Mapping[str, str] = MappingProxyType({
    "uyo": "uyo",
    "ibesikpo": "uyo",
    "nsit": "uyo",
    "nsit-atai": "uyo",
    "nsit-ubium": "uyo",
    "etinan": "uyo",
    "iburua": "uyo",
    "eket": "eket",
    "esit eket": "eket",
    "onna": "eket",
    "mkpat enin": "eket",
    "ikai": "eket",
    "etim ekpo": "eket",
    "ikot ekpene": "ikot ekpene",
    "essien udim": "ikot ekpene",
    "obot akara": "ikot ekpene",
    "ini": "ikot ekpene",
    "ikono": "ikot ekpene",
    "oron": "oron",
    "udung uko": "oron",
    "urue offong/oruko": "oron",
    "okobo": "oron",
    "mbo": "oron",
})

UNKNOWN_DISTRICT = "other"

# currentLga values meaning "does not live in the state"
OUTSIDE_NIGERIA = "outside_nigeria"
OTHER_NIGERIA = "other_nigeria"
OUT_OF_REGION_MARKERS: frozenset[str] = frozenset({OUTSIDE_NIGERIA, OTHER_NIGERIA})

CULTURAL_TERMS: frozenset[str] = frozenset({
    "culture", "tradition", "heritage", "roots", "ibibio",
    "annang", "orok", "ibeno", "akwa", "ibom",
})

# ──────────────────────────────────────────────────────────────────────────────
# Relationship goals
# ──────────────────────────────────────────────────────────────────────────────

SINGLE_PARENT_GOAL = "single_parent"

# Goal -> goals it aligns with.  Looked up from the first user's side only.
COMPATIBLE_GOALS: Mapping[str, tuple[str, ...]] = MappingProxyType({
    "marriage": ("marriage", "serious relationship"),
    "serious relationship": ("marriage", "serious relationship", SINGLE_PARENT_GOAL),
    "casual dating": ("casual dating", "friendship"),
    "friendship": ("friendship", "casual dating"),
    SINGLE_PARENT_GOAL: (SINGLE_PARENT_GOAL, "serious relationship"),
})

INCOMPATIBLE_GOAL_PAIRS: tuple[frozenset[str], ...] = (
    frozenset({"marriage", "casual dating"}),
    frozenset({SINGLE_PARENT_GOAL, "no kids ever"}),
)

# ──────────────────────────────────────────────────────────────────────────────
# Demographics
# ──────────────────────────────────────────────────────────────────────────────

EDUCATION_LEVELS: tuple[str, ...] = ("secondary", "diploma", "bachelors", "masters", "phd")

ACADEMIC_PROFESSION_KEYWORDS: tuple[str, ...] = ("student", "lecturer")

# (max age gap in years, demographic bonus), checked in order
AGE_GAP_BANDS: tuple[tuple[int, int], ...] = ((2, 30), (5, 20), (10, 10), (15, 5))

PROFESSIONAL_AGE_RANGE: tuple[int, int] = (25, 40)


def are_lgas_adjacent(lga_a: str | None, lga_b: str | None) -> bool:
    """True when one LGA is a cluster hub and the other is in its cluster."""
    for hub, neighbours in LGA_ADJACENCY_CLUSTERS.items():
        if (lga_a == hub and lga_b in neighbours) or (lga_b == hub and lga_a in neighbours):
            return True
    return False


def senatorial_district(lga: str | None) -> str:
    if lga is None:
        return UNKNOWN_DISTRICT
    return LGA_SENATORIAL_DISTRICTS.get(lga, UNKNOWN_DISTRICT)
