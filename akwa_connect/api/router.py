"""
Akwa-Connect — Main API Router

Aggregates all sub-routers so that ``akwa_connect.main`` can mount the
entire API surface with one ``include_router`` call.
"""

from fastapi import APIRouter

from akwa_connect.api import matching

router = APIRouter()

router.include_router(matching.router, prefix="/match", tags=["Matching"])
