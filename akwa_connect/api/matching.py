"""
Akwa-Connect — Matching API

Stateless endpoints: callers post the profile records they already hold
and receive compatibility results or a ranked candidate list.
"""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, HTTPException, status

from akwa_connect.config import Settings, get_settings
from akwa_connect.schemas.match import (
    CompatibilityRequest,
    CompatibilityResult,
    RankedMatch,
    RankedMatchesRequest,
    RankedMatchesResponse,
)
from akwa_connect.services.matching_service import MatchingService

logger = structlog.get_logger("akwa_connect.api.matching")

router = APIRouter()

# ── Service singleton ─────────────────────────────────────────────────────────

_matching_service: MatchingService | None = None


def get_matching_service() -> MatchingService:
    global _matching_service
    if _matching_service is None:
        _matching_service = MatchingService()
    return _matching_service


def _fill_reasons(
    matches: list[RankedMatch], service: MatchingService
) -> list[RankedMatch]:
    return [
        m.model_copy(update={"reasons": service.with_default_reason(m.reasons)})
        for m in matches
    ]


# ──────────────────────────────────────────────────────────────────────────────
# POST /compatibility: score one pair
# ──────────────────────────────────────────────────────────────────────────────

@router.post(
    "/compatibility",
    response_model=CompatibilityResult,
    summary="Score the compatibility of two profiles",
)
async def calculate_compatibility(
    body: CompatibilityRequest,
    service: MatchingService = Depends(get_matching_service),
) -> CompatibilityResult:
    """Return the 0–100 score, breakdown, compatibility flag and reasons for
    ``userB`` as seen by ``userA``."""
    result = service.calculate_compatibility(body.user_a, body.user_b)
    logger.info(
        "compatibility_calculated",
        user_a=body.user_a.id,
        user_b=body.user_b.id,
        total_score=result.total_score,
        compatible=result.compatible,
    )
    return result.model_copy(
        update={"reasons": service.with_default_reason(result.reasons)}
    )


# ──────────────────────────────────────────────────────────────────────────────
# POST /ranked: rank a candidate pool
# ──────────────────────────────────────────────────────────────────────────────

@router.post(
    "/ranked",
    response_model=RankedMatchesResponse,
    summary="Rank candidates for a user",
)
async def rank_matches(
    body: RankedMatchesRequest,
    service: MatchingService = Depends(get_matching_service),
    settings: Settings = Depends(get_settings),
) -> RankedMatchesResponse:
    """Rank ``users`` for ``userId``.

    In both modes the pool is first narrowed to the user's gender
    preference and preferred age range.  With ``manual`` set and at least
    one filter, every filtered candidate is returned (manual search).  Otherwise only compatible candidates are
    returned (algorithmic feed).  Both lists are sorted best first.
    """
    log = logger.bind(user_id=body.user_id, pool_size=len(body.users))

    if len(body.users) > settings.MAX_CANDIDATE_POOL:
        log.warning("candidate_pool_too_large", limit=settings.MAX_CANDIDATE_POOL)
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Candidate pool exceeds {settings.MAX_CANDIDATE_POOL} profiles.",
        )

    current = next((u for u in body.users if u.id == body.user_id), None)

    if body.manual and not body.filters.is_empty():
        if current is None:
            log.info("ranked_matches_user_not_found", mode="manual")
            return RankedMatchesResponse(matches=[], type="manual")
        pool = service.restrict_pool(current, body.users)
        matches = service.find_manual_matches(body.user_id, pool, body.filters)
        return RankedMatchesResponse(
            matches=_fill_reasons(matches, service), type="manual"
        )

    if current is None:
        log.info("ranked_matches_user_not_found")
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"User {body.user_id} not found in the posted pool.",
        )

    matches = service.find_algorithmic_matches(current, body.users)
    return RankedMatchesResponse(
        matches=_fill_reasons(matches, service), type="algorithmic"
    )
