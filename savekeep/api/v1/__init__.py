"""API v1 routes."""

from fastapi import APIRouter

from savekeep.api.v1 import admin, auth, health, utils

router = APIRouter()
router.include_router(auth.router, tags=["auth"])
router.include_router(utils.router, prefix="/utils", tags=["utils"])
router.include_router(admin.router, prefix="/admin", tags=["admin"])
router.include_router(health.router, prefix="/health", tags=["health"])
