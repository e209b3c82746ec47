"""
Profile endpoints for API v1.

Private routes act on the caller's own profile and require a bearer
token.  Listing profiles, fetching one by user id and showing GitHub
repositories are public.  Validation failures return 400 with a list
of ``{field, message}`` objects; a missing profile is reported as 400
with a ``msg`` string.
"""

from typing import List

from fastapi import APIRouter, Depends

from profile_api.app.core.errors import FieldError, RequestValidationFailed
from profile_api.app.core.security import get_current_user
from profile_api.app.core.validation import check_required, require_fields
from profile_api.app.schemas.profile import (
    ExperienceIn,
    ExperienceRead,
    GithubRepo,
    OwnProfileRead,
    ProfileIn,
    ProfileRead,
    ProfileWithExperience,
)
from profile_api.app.services.github_service import GithubService
from profile_api.app.services.profile_service import ProfileService, parse_skills

router = APIRouter()

PROFILE_RULES = {
    "status": "Status is required",
    "skills": "Skills is required",
}

EXPERIENCE_RULES = {
    "title": "Title is required",
    "company": "Company is required",
    "from": "From date is required",
}


@router.get("/me", response_model=OwnProfileRead)
async def get_my_profile(current_user: dict = Depends(get_current_user)) -> OwnProfileRead:
    """Return the caller's profile with their name and avatar."""
    return await ProfileService.get_own_profile(current_user["user_id"])


@router.post("/", response_model=ProfileRead)
async def upsert_profile(
    payload: ProfileIn,
    current_user: dict = Depends(get_current_user),
) -> ProfileRead:
    """Create or update the caller's profile.

    ``status`` and ``skills`` are required.  ``skills`` is a
    comma-separated string.  Optional fields left out of the request
    keep their previous values.
    """
    errors = check_required(payload.model_dump(), PROFILE_RULES)
    if "skills" not in {e.field for e in errors} and not parse_skills(payload.skills):
        # Only separators, e.g. " , ,"
        errors.append(FieldError("skills", PROFILE_RULES["skills"]))
    if errors:
        raise RequestValidationFailed(errors)
    return await ProfileService.upsert_profile(current_user["user_id"], payload)


@router.get("/", response_model=List[ProfileWithExperience])
async def list_profiles() -> List[ProfileWithExperience]:
    """Return all profiles, each with its experience entries."""
    return await ProfileService.list_profiles()


@router.get("/user/{user_id}", response_model=List[ProfileWithExperience])
async def get_profile_by_user_id(user_id: str) -> List[ProfileWithExperience]:
    """Return the profile of the given user as a one-element list."""
    return await ProfileService.get_profiles_by_user_id(user_id)


@router.delete("/")
async def delete_profile(current_user: dict = Depends(get_current_user)) -> dict:
    """Delete the caller's profile, experience entries and account."""
    await ProfileService.delete_profile_and_user(current_user["user_id"])
    return {"msg": "User deleted"}


@router.post("/experience", response_model=ExperienceRead)
async def add_experience(
    payload: ExperienceIn,
    current_user: dict = Depends(get_current_user),
) -> ExperienceRead:
    """Add a work experience entry to the caller's profile."""
    require_fields(payload.model_dump(by_alias=True), EXPERIENCE_RULES)
    return await ProfileService.add_experience(current_user["user_id"], payload)


@router.delete("/experience/{experience_id}", response_model=List[ExperienceRead])
async def delete_experience(
    experience_id: int,
    current_user: dict = Depends(get_current_user),
) -> List[ExperienceRead]:
    """Remove one of the caller's experience entries and return the remaining ones."""
    return await ProfileService.delete_experience(current_user["user_id"], experience_id)


@router.get("/github/{username}", response_model=List[GithubRepo])
def get_github_repos(username: str) -> List[GithubRepo]:
    """Return the five most recently created public repositories of a GitHub user."""
    return GithubService.latest_repos(username)
