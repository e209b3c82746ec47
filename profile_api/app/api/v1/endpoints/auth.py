"""
Authentication endpoints for API v1.

``POST /auth`` exchanges e-mail and password for a token; ``GET /auth``
returns the user the presented token belongs to.
"""

from fastapi import APIRouter, Depends, HTTPException, status

from profile_api.app.core.errors import FieldError, RequestValidationFailed
from profile_api.app.core.security import create_access_token, get_current_user
from profile_api.app.core.validation import require_fields
from profile_api.app.schemas.user import Token, UserLogin, UserRead
from profile_api.app.services.user_service import UserService

router = APIRouter()

LOGIN_RULES = {
    "email": "Please include a valid email",
    "password": "Password is required",
}


@router.get("/", response_model=UserRead)
async def get_authenticated_user(current_user: dict = Depends(get_current_user)) -> UserRead:
    """Return the account the presented token belongs to."""
    user = await UserService.get_user_by_id(current_user["user_id"])
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User no longer exists")
    return user


@router.post("/", response_model=Token)
async def login_user(payload: UserLogin) -> Token:
    """Authenticate a user and return a token."""
    require_fields(payload.model_dump(), LOGIN_RULES)
    user = await UserService.authenticate(payload.email, payload.password)
    if not user:
        raise RequestValidationFailed([FieldError("credentials", "Invalid credentials")])
    return Token(token=create_access_token({"sub": str(user.id)}))
