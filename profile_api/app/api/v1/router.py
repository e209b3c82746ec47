"""
Top-level router for version 1 of the API.

Aggregates the domain routers under a unified prefix.  Include new
domain routers here.
"""

from fastapi import APIRouter

from .endpoints import auth, profile, users

router = APIRouter()

router.include_router(users.router, prefix="/users", tags=["users"])
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(profile.router, prefix="/profile", tags=["profile"])
