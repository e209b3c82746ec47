"""
Service layer for developer profiles and work experience.

A profile belongs to exactly one user and is written with a single
upsert keyed by ``user_id``.  Experience entries are separate rows
owned by the user; public listings return each profile with its
experiences collected into an ``experiences`` array.

All queries use parameterized statements.  Skills and social links are
stored as JSON text.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from typing import Dict, List, Optional

from profile_api.app.core.db import get_connection
from profile_api.app.core.errors import NotFoundError
from profile_api.app.schemas.profile import (
    SOCIAL_PLATFORMS,
    ExperienceIn,
    ExperienceRead,
    OwnProfileRead,
    ProfileIn,
    ProfileRead,
    ProfileWithExperience,
)

logger = logging.getLogger(__name__)

NO_PROFILE_MSG = "There is no profile for this user"
PROFILE_NOT_FOUND_MSG = "Profile not found"
EXPERIENCE_NOT_FOUND_MSG = "Experience not found"

PROFILE_COLUMNS = (
    "p.user_id, u.name, u.avatar, p.company, p.website, p.location, p.status, "
    "p.skills, p.bio, p.githubusername, p.social"
)

# Optional columns keep their stored value when a later upsert omits them;
# supplied social platforms are merged into the stored object.
UPSERT_SQL = """
    INSERT INTO profiles (user_id, company, website, location, status, skills, bio, githubusername, social)
    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
    ON CONFLICT(user_id) DO UPDATE SET
        company = COALESCE(excluded.company, profiles.company),
        website = COALESCE(excluded.website, profiles.website),
        location = COALESCE(excluded.location, profiles.location),
        status = excluded.status,
        skills = excluded.skills,
        bio = COALESCE(excluded.bio, profiles.bio),
        githubusername = COALESCE(excluded.githubusername, profiles.githubusername),
        social = json_patch(profiles.social, excluded.social),
        updated_at = CURRENT_TIMESTAMP
"""


def parse_skills(skills: str) -> List[str]:
    """Split a comma-separated skills string into trimmed entries, keeping order."""
    return [skill.strip() for skill in skills.split(",") if skill.strip()]


def _clean(value: Optional[str]) -> Optional[str]:
    # Blank strings count as "not supplied".
    if value is None:
        return None
    value = value.strip()
    return value or None


def build_social(data: ProfileIn) -> Dict[str, str]:
    """Collect the social links that were supplied; unset platforms are left out."""
    social = {}
    for platform in SOCIAL_PLATFORMS:
        url = _clean(getattr(data, platform))
        if url:
            social[platform] = url
    return social


def _row_to_experience(row: sqlite3.Row) -> ExperienceRead:
    return ExperienceRead(
        id=row["id"],
        user_id=row["user_id"],
        title=row["title"],
        company=row["company"],
        location=row["location"],
        from_date=row["from_date"],
        to_date=row["to_date"],
        current=bool(row["current"]),
        description=row["description"],
    )


def _profile_fields(row: sqlite3.Row) -> dict:
    return {
        "user_id": row["user_id"],
        "company": row["company"],
        "website": row["website"],
        "location": row["location"],
        "status": row["status"],
        "skills": json.loads(row["skills"]) if row["skills"] else [],
        "bio": row["bio"],
        "githubusername": row["githubusername"],
        "social": json.loads(row["social"]) if row["social"] else {},
    }


class ProfileService:
    """Profile and experience operations backed by SQLite."""

    @classmethod
    async def get_own_profile(cls, user_id: int) -> OwnProfileRead:
        """Return the caller's profile joined with their name and avatar.

        Raises ``NotFoundError`` if the user has not created a profile.
        """
        conn = get_connection()
        try:
            row = conn.execute(
                f"SELECT {PROFILE_COLUMNS} FROM users u "
                "INNER JOIN profiles p ON p.user_id = u.id WHERE u.id = ?",
                (user_id,),
            ).fetchone()
        finally:
            conn.close()
        if not row:
            raise NotFoundError(NO_PROFILE_MSG)
        return OwnProfileRead(name=row["name"], avatar=row["avatar"], **_profile_fields(row))

    @classmethod
    async def upsert_profile(cls, user_id: int, data: ProfileIn) -> ProfileRead:
        """Create the caller's profile or update the existing one.

        ``status`` and ``skills`` are always overwritten.  Optional fields
        that are omitted (or blank) keep their stored value, and supplied
        social links are merged over the stored ones.
        """
        skills = parse_skills(data.skills or "")
        social = build_social(data)
        conn = get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                UPSERT_SQL,
                (
                    user_id,
                    _clean(data.company),
                    _clean(data.website),
                    _clean(data.location),
                    data.status.strip(),
                    json.dumps(skills),
                    _clean(data.bio),
                    _clean(data.githubusername),
                    json.dumps(social),
                ),
            )
            conn.commit()
            logger.info("Saved profile for user %s", user_id)
            row = cursor.execute(
                "SELECT * FROM profiles p WHERE p.user_id = ?",
                (user_id,),
            ).fetchone()
            return ProfileRead(**_profile_fields(row))
        finally:
            conn.close()

    @classmethod
    async def list_profiles(cls) -> List[ProfileWithExperience]:
        """Return every user that has a profile, each with its experiences."""
        conn = get_connection()
        try:
            cursor = conn.cursor()
            rows = cursor.execute(
                f"SELECT {PROFILE_COLUMNS} FROM users u "
                "INNER JOIN profiles p ON p.user_id = u.id ORDER BY u.id"
            ).fetchall()
            experience_rows = cursor.execute(
                "SELECT * FROM experiences "
                "WHERE user_id IN (SELECT user_id FROM profiles) ORDER BY id"
            ).fetchall()
        finally:
            conn.close()
        return cls._group_experiences(rows, experience_rows)

    @classmethod
    async def get_profiles_by_user_id(cls, user_id: str) -> List[ProfileWithExperience]:
        """Return the profile of ``user_id`` as a one-element list.

        The id is compared as text, so any string is accepted.  Raises
        ``NotFoundError`` when no profile matches.
        """
        conn = get_connection()
        try:
            cursor = conn.cursor()
            rows = cursor.execute(
                f"SELECT {PROFILE_COLUMNS} FROM users u "
                "INNER JOIN profiles p ON p.user_id = u.id "
                "WHERE CAST(u.id AS TEXT) = ?",
                (user_id,),
            ).fetchall()
            experience_rows = cursor.execute(
                "SELECT * FROM experiences WHERE CAST(user_id AS TEXT) = ? ORDER BY id",
                (user_id,),
            ).fetchall()
        finally:
            conn.close()
        if not rows:
            raise NotFoundError(PROFILE_NOT_FOUND_MSG)
        return cls._group_experiences(rows, experience_rows)

    @staticmethod
    def _group_experiences(
        rows: List[sqlite3.Row], experience_rows: List[sqlite3.Row]
    ) -> List[ProfileWithExperience]:
        by_user: Dict[int, List[ExperienceRead]] = {}
        for exp_row in experience_rows:
            by_user.setdefault(exp_row["user_id"], []).append(_row_to_experience(exp_row))
        return [
            ProfileWithExperience(
                name=row["name"],
                avatar=row["avatar"],
                experiences=by_user.get(row["user_id"], []),
                **_profile_fields(row),
            )
            for row in rows
        ]

    @classmethod
    async def delete_profile_and_user(cls, user_id: int) -> None:
        """Delete the caller's experiences, profile and account.

        The three statements run in one transaction; if any of them
        fails nothing is deleted.  Deleting rows that do not exist is a
        no-op.
        """
        conn = get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM experiences WHERE user_id = ?", (user_id,))
            cursor.execute("DELETE FROM profiles WHERE user_id = ?", (user_id,))
            cursor.execute("DELETE FROM users WHERE id = ?", (user_id,))
            conn.commit()
            logger.info("Deleted user %s with profile and experience", user_id)
        except sqlite3.Error:
            conn.rollback()
            raise
        finally:
            conn.close()

    @classmethod
    async def add_experience(cls, user_id: int, data: ExperienceIn) -> ExperienceRead:
        """Insert a new experience entry for the caller.

        Entries are never merged; every call creates a row.
        """
        conn = get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                """
                INSERT INTO experiences (user_id, title, company, location, from_date, to_date, current, description)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    user_id,
                    data.title.strip(),
                    data.company.strip(),
                    _clean(data.location),
                    data.from_date.strip(),
                    _clean(data.to_date),
                    1 if data.current else 0,
                    _clean(data.description),
                ),
            )
            experience_id = cursor.lastrowid
            conn.commit()
            logger.info("Added experience %s for user %s", experience_id, user_id)
            row = cursor.execute(
                "SELECT * FROM experiences WHERE id = ?", (experience_id,)
            ).fetchone()
            return _row_to_experience(row)
        finally:
            conn.close()

    @classmethod
    async def delete_experience(cls, user_id: int, experience_id: int) -> List[ExperienceRead]:
        """Delete one of the caller's experience entries and return the rest.

        Raises ``NotFoundError`` if the entry does not exist or belongs
        to another user.
        """
        conn = get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "DELETE FROM experiences WHERE id = ? AND user_id = ?",
                (experience_id, user_id),
            )
            if cursor.rowcount == 0:
                raise NotFoundError(EXPERIENCE_NOT_FOUND_MSG)
            conn.commit()
            rows = cursor.execute(
                "SELECT * FROM experiences WHERE user_id = ? ORDER BY id", (user_id,)
            ).fetchall()
            return [_row_to_experience(row) for row in rows]
        finally:
            conn.close()
