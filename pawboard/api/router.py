from __future__ import annotations

from fastapi import APIRouter

from pawboard.api.auth_api import router as auth_router
from pawboard.api.community_api import router as community_router
from pawboard.api.meta_api import router as meta_router
from pawboard.api.moderation_api import router as moderation_router

router = APIRouter()

router.include_router(meta_router, tags=["meta"])
router.include_router(auth_router, prefix="/auth", tags=["auth"])
router.include_router(community_router, prefix="/community", tags=["community"])
router.include_router(moderation_router, prefix="/moderation", tags=["moderation"])
