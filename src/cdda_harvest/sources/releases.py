"""
GitHub release client for the upstream game repository.
"""

import logging
import os
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import requests

from ..errors import ReleaseFetchError

DEFAULT_API_URL = "https://api.github.com"
DEFAULT_REPOSITORY = "CleverRaven/Cataclysm-DDA"
TOKEN_ENV_VAR = "GITHUB_TOKEN"


class ReleaseClient:
    """Lists releases and downloads release archives over the GitHub REST API."""

    def __init__(
        self,
        repository: str = DEFAULT_REPOSITORY,
        api_url: str = DEFAULT_API_URL,
        token: Optional[str] = None,
        timeout: int = 60,
        session: Optional[requests.Session] = None,
    ):
        """Initialize the client.

        Args:
            repository: ``owner/name`` of the upstream repository
            api_url: Base URL of the GitHub API
            token: API token; defaults to the ``GITHUB_TOKEN`` environment variable
            timeout: Request timeout in seconds
            session: Session to reuse (mainly for tests)
        """
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.repository = repository
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"Accept": "application/vnd.github+json"})

        token = token if token is not None else os.environ.get(TOKEN_ENV_VAR)
        if token:
            self.session.headers["Authorization"] = f"Bearer {token}"

    def _url(self, *parts: str) -> str:
        return "/".join((self.api_url, "repos", self.repository, *parts))

    def _get(self, url: str, **kwargs: Any) -> requests.Response:
        try:
            response = self.session.get(url, timeout=self.timeout, **kwargs)
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            raise ReleaseFetchError(f"GET {url} failed: {e}") from e
        return response

    def list_releases(self, per_page: int = 30) -> List[Dict[str, Any]]:
        """Return the most recent releases, newest first."""
        self.logger.info(f"Fetching release list for {self.repository}...")
        response = self._get(self._url("releases"), params={"per_page": per_page})
        try:
            releases = response.json()
        except ValueError as e:
            raise ReleaseFetchError(f"Release list is not JSON: {e}") from e
        if not isinstance(releases, list):
            raise ReleaseFetchError(f"Unexpected release list payload: {releases!r}")
        self.logger.debug(f"Found {len(releases)} releases")
        return releases

    def download_archive(self, tag: str) -> bytes:
        """Download the source zipball of a release tag."""
        url = self._url("zipball", quote(tag, safe=""))
        self.logger.info(f"Fetching source for build {tag}...")
        response = self._get(url)
        self.logger.debug(f"Downloaded {len(response.content)} bytes for {tag}")
        return response.content
