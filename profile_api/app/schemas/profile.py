"""
Pydantic models for developer profiles and work experience.

Request models accept every field as optional so that missing required
fields are reported through the declarative rules in the endpoints
(HTTP 400 with a list of field errors) rather than pydantic's own
validation.  Response models mirror what the services read back.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

SOCIAL_PLATFORMS = ("youtube", "twitter", "facebook", "linkedin", "instagram")


class ProfileIn(BaseModel):
    """Body of ``POST /profile``.

    ``skills`` is a comma-separated string, e.g. ``"python, fastapi"``.
    The five social fields are URLs; only non-empty ones are stored.
    """

    status: Optional[str] = Field(None, examples=["Developer"])
    skills: Optional[str] = Field(None, examples=["python, fastapi, sql"])
    company: Optional[str] = None
    website: Optional[str] = None
    location: Optional[str] = None
    bio: Optional[str] = None
    githubusername: Optional[str] = None
    youtube: Optional[str] = None
    twitter: Optional[str] = None
    facebook: Optional[str] = None
    linkedin: Optional[str] = None
    instagram: Optional[str] = None


class ExperienceIn(BaseModel):
    """Body of ``POST /profile/experience``.

    The JSON keys ``from`` and ``to`` are reserved words in Python and
    are exposed as ``from_date``/``to_date`` through aliases.
    """

    model_config = ConfigDict(populate_by_name=True)

    title: Optional[str] = None
    company: Optional[str] = None
    location: Optional[str] = None
    from_date: Optional[str] = Field(None, alias="from", examples=["2020-01-01"])
    to_date: Optional[str] = Field(None, alias="to")
    current: Optional[bool] = False
    description: Optional[str] = None


class ExperienceRead(BaseModel):
    id: int
    user_id: int
    title: str
    company: str
    location: Optional[str] = None
    from_date: str
    to_date: Optional[str] = None
    current: bool = False
    description: Optional[str] = None


class ProfileRead(BaseModel):
    """A stored profile as returned by the upsert."""

    user_id: int
    company: Optional[str] = None
    website: Optional[str] = None
    location: Optional[str] = None
    status: str
    skills: List[str]
    bio: Optional[str] = None
    githubusername: Optional[str] = None
    social: Dict[str, str] = Field(default_factory=dict)


class OwnProfileRead(ProfileRead):
    """The caller's profile joined with their display name and avatar."""

    name: str
    avatar: Optional[str] = None


class ProfileWithExperience(OwnProfileRead):
    """A public profile listing entry."""

    experiences: List[ExperienceRead] = Field(default_factory=list)


class GithubRepo(BaseModel):
    name: str
    html_url: str
    description: Optional[str] = None
    stargazers_count: int = 0
    watchers_count: int = 0
    forks_count: int = 0
    language: Optional[str] = None
