"""
API v1 routes.
"""

from fastapi import APIRouter

from journey.api.v1 import authoring, progression

router = APIRouter()

router.include_router(progression.router, prefix="/progression", tags=["Progression"])
router.include_router(authoring.router, prefix="/authoring", tags=["Authoring"])
