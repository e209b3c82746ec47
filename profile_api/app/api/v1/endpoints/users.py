"""
User registration endpoint for API v1.

A successful registration returns a bearer token so the client can
create a profile straight away.
"""

from fastapi import APIRouter

from profile_api.app.core.errors import FieldError, RequestValidationFailed
from profile_api.app.core.security import create_access_token
from profile_api.app.core.validation import check_required
from profile_api.app.schemas.user import Token, UserCreate
from profile_api.app.services.user_service import UserService

router = APIRouter()

REGISTER_RULES = {
    "name": "Name is required",
    "email": "Please include a valid email",
    "password": "Please enter a password with 6 or more characters",
}

MIN_PASSWORD_LENGTH = 6


@router.post("/", response_model=Token)
async def register_user(payload: UserCreate) -> Token:
    """Register a new user and return an access token."""
    errors = check_required(payload.model_dump(), REGISTER_RULES)
    failed = {e.field for e in errors}
    if "email" not in failed and "@" not in payload.email:
        errors.append(FieldError("email", REGISTER_RULES["email"]))
    if "password" not in failed and len(payload.password) < MIN_PASSWORD_LENGTH:
        errors.append(FieldError("password", REGISTER_RULES["password"]))
    if errors:
        raise RequestValidationFailed(errors)

    user = await UserService.create_user(payload.name, payload.email, payload.password)
    return Token(token=create_access_token({"sub": str(user.id)}))
