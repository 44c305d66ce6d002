"""Configuration for the GitHub REST transport."""

from __future__ import annotations

import dataclasses
import os

from ghstatus.errors import GitHubConfigError

_DEFAULT_API_URL = "https://api.github.com"
_DEFAULT_TIMEOUT_S = 20.0
_DEFAULT_USER_AGENT = "ghstatus/0.1"

_ALLOWED_SCHEMES = ("http://", "https://")


@dataclasses.dataclass(frozen=True, slots=True)
class GitHubConfig:
    """Connection settings for the GitHub REST API.

    Attributes
    ----------
    token
        Bearer token sent with every request. ``None`` means anonymous
        access, which is enough for reading public repositories.
    api_url
        Base URL of the REST API, without a trailing slash.
    timeout_s
        Request timeout in seconds.
    user_agent
        ``User-Agent`` header; GitHub rejects requests without one.

    """

    token: str | None = None
    api_url: str = _DEFAULT_API_URL
    timeout_s: float = _DEFAULT_TIMEOUT_S
    user_agent: str = _DEFAULT_USER_AGENT

    @staticmethod
    def _parse_api_url_from_env() -> str:
        raw_url = os.environ.get("GHSTATUS_GITHUB_API_URL")
        if raw_url is None:
            return _DEFAULT_API_URL

        api_url = raw_url.strip().rstrip("/")
        if not api_url.startswith(_ALLOWED_SCHEMES):
            raise GitHubConfigError.invalid_api_url(raw_url)
        return api_url

    @staticmethod
    def _parse_timeout_from_env() -> float:
        raw_timeout = os.environ.get("GHSTATUS_TIMEOUT_S")
        if raw_timeout is None:
            return _DEFAULT_TIMEOUT_S

        try:
            timeout_s = float(raw_timeout)
        except ValueError as exc:
            raise GitHubConfigError.invalid_timeout(raw_timeout) from exc

        if timeout_s <= 0:
            raise GitHubConfigError.invalid_timeout(raw_timeout)
        return timeout_s

    @classmethod
    def from_env(cls) -> GitHubConfig:
        """Build configuration from environment variables.

        Reads the following environment variables:

        - ``GHSTATUS_GITHUB_TOKEN``: Optional bearer token
        - ``GHSTATUS_GITHUB_API_URL``: Optional API base URL override
        - ``GHSTATUS_TIMEOUT_S``: Optional positive request timeout

        Raises
        ------
        GitHubConfigError
            If the API URL or timeout values are invalid.

        """
        token = os.environ.get("GHSTATUS_GITHUB_TOKEN", "").strip() or None
        return cls(
            token=token,
            api_url=cls._parse_api_url_from_env(),
            timeout_s=cls._parse_timeout_from_env(),
        )
