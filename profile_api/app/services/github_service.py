"""
Client for the public GitHub REST API.

Used to show a developer's most recent repositories next to their
profile.  The call is synchronous (``requests``); the endpoint that
uses it is a plain ``def`` so FastAPI runs it in the threadpool.
"""

import logging
from typing import List

import requests

from profile_api.app.core.config import settings
from profile_api.app.core.errors import NotFoundError
from profile_api.app.schemas.profile import GithubRepo

logger = logging.getLogger(__name__)

NO_GITHUB_PROFILE_MSG = "No Github profile found"
REPO_COUNT = 5


class GithubService:
    """Fetch repositories for a GitHub username."""

    @classmethod
    def _headers(cls) -> dict:
        headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": settings.project_name,
        }
        if settings.github_token:
            headers["Authorization"] = f"Bearer {settings.github_token}"
        return headers

    @classmethod
    def latest_repos(cls, username: str) -> List[GithubRepo]:
        """Return the user's most recently created public repositories.

        Raises ``NotFoundError`` if GitHub does not answer with 200.
        Transport errors (``requests.RequestException``) propagate.
        """
        # Escape the whole name so it stays a single path segment.
        url = f"{settings.github_api_url.rstrip('/')}/users/{requests.utils.quote(username, safe='')}/repos"
        response = requests.get(
            url,
            params={"per_page": REPO_COUNT, "sort": "created", "direction": "desc"},
            headers=cls._headers(),
            timeout=settings.http_timeout,
        )
        if response.status_code != 200:
            logger.info("GitHub answered %s for user %s", response.status_code, username)
            raise NotFoundError(NO_GITHUB_PROFILE_MSG, status_code=404)
        return [GithubRepo(**repo) for repo in response.json()[:REPO_COUNT]]
