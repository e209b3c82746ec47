"""
Business logic for user accounts.

Users register with a name, e-mail and password; the avatar is the
gravatar image for the e-mail address.  Profiles and experience
records hang off the user row (see ``profile_service``).
"""

import hashlib
import logging
import sqlite3
from typing import Optional

from profile_api.app.core.db import get_connection
from profile_api.app.core.errors import FieldError, RequestValidationFailed
from profile_api.app.core.security import hash_password, verify_password
from profile_api.app.schemas.user import UserRead

logger = logging.getLogger(__name__)


def gravatar_url(email: str, size: int = 200) -> str:
    """Return the gravatar URL for ``email`` (rating pg, mystery-man fallback)."""
    digest = hashlib.md5(email.strip().lower().encode("utf-8")).hexdigest()
    return f"https://www.gravatar.com/avatar/{digest}?s={size}&r=pg&d=mm"


def _row_to_user(row: sqlite3.Row) -> UserRead:
    return UserRead(
        id=row["id"],
        name=row["name"],
        email=row["email"],
        avatar=row["avatar"],
        created_at=str(row["created_at"]) if row["created_at"] is not None else None,
    )


class UserService:
    """Registration, login and lookup of users."""

    @classmethod
    async def create_user(cls, name: str, email: str, password: str) -> UserRead:
        """Insert a new user and return it.

        Raises ``RequestValidationFailed`` if the e-mail is already taken.
        """
        email = email.strip().lower()
        conn = get_connection()
        try:
            cursor = conn.cursor()
            existing = cursor.execute(
                "SELECT id FROM users WHERE email = ?", (email,)
            ).fetchone()
            if existing:
                raise RequestValidationFailed([FieldError("email", "User already exists")])
            cursor.execute(
                "INSERT INTO users (name, email, password, avatar) VALUES (?, ?, ?, ?)",
                (name.strip(), email, hash_password(password), gravatar_url(email)),
            )
            user_id = cursor.lastrowid
            conn.commit()
            logger.info("Registered user %s", user_id)
            row = cursor.execute(
                "SELECT id, name, email, avatar, created_at FROM users WHERE id = ?",
                (user_id,),
            ).fetchone()
            return _row_to_user(row)
        finally:
            conn.close()

    @classmethod
    async def authenticate(cls, email: str, password: str) -> Optional[UserRead]:
        """Return the user if the credentials match, otherwise ``None``."""
        conn = get_connection()
        try:
            row = conn.execute(
                "SELECT id, name, email, password, avatar, created_at FROM users WHERE email = ?",
                (email.strip().lower(),),
            ).fetchone()
        finally:
            conn.close()
        if not row or not verify_password(password, row["password"]):
            return None
        return _row_to_user(row)

    @classmethod
    async def get_user_by_id(cls, user_id: int) -> Optional[UserRead]:
        conn = get_connection()
        try:
            row = conn.execute(
                "SELECT id, name, email, avatar, created_at FROM users WHERE id = ?",
                (user_id,),
            ).fetchone()
        finally:
            conn.close()
        return _row_to_user(row) if row else None
