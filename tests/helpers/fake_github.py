"""In-memory stand-in for the GitHub commit status endpoints.

The fake keeps an append-only log of status reports per commit and answers
the three REST routes the client uses. Listing pages through ``Link`` headers
and failures use the status codes and messages GitHub sends. It plugs into
:class:`~ghstatus.transport.HttpxTransport` through ``httpx.MockTransport``.
"""

from __future__ import annotations

import datetime as dt
import json
import re
import typing as typ

import httpx

from ghstatus.config import GitHubConfig
from ghstatus.transport import HttpxTransport

API_URL = "https://api.github.test"

_BASE_TIME = dt.datetime(2024, 1, 1, tzinfo=dt.UTC)
_DEFAULT_PER_PAGE = 30
_VALID_STATES = frozenset({"error", "failure", "pending", "success"})

_STATUSES_ROUTE = re.compile(
    r"^/repos/(?P<owner>[^/]+)/(?P<repo>[^/]+)/commits/(?P<ref>.+)/statuses$"
)
_COMBINED_ROUTE = re.compile(
    r"^/repos/(?P<owner>[^/]+)/(?P<repo>[^/]+)/commits/(?P<ref>.+)/status$"
)
_CREATE_ROUTE = re.compile(
    r"^/repos/(?P<owner>[^/]+)/(?P<repo>[^/]+)/statuses/(?P<sha>[^/]+)$"
)


def _timestamp(offset: int) -> str:
    moment = _BASE_TIME + dt.timedelta(seconds=offset)
    return moment.strftime("%Y-%m-%dT%H:%M:%SZ")


def _error(status_code: int, message: str, **extra: object) -> httpx.Response:
    return httpx.Response(status_code, json={"message": message, **extra})


def combined_state(states: typ.Iterable[str]) -> str:
    """Aggregate context states the way GitHub does."""
    seen = set(states)
    if not seen:
        return "pending"
    if seen & {"error", "failure"}:
        return "failure"
    if "pending" in seen:
        return "pending"
    return "success"


class FakeCommitStatusService:
    """Single-repository fake of the commit status API."""

    def __init__(
        self,
        owner: str = "octo",
        repo: str = "reef",
        *,
        token: str | None = None,
        writable: bool = True,
    ) -> None:
        """Create an empty repository; ``token`` enables credential checks."""
        self.owner = owner
        self.repo = repo
        self.token = token
        self.writable = writable
        self.requests: list[httpx.Request] = []
        self._branches: dict[str, str] = {}
        self._log: dict[str, list[dict[str, typ.Any]]] = {}
        self._next_id = 1

    def add_commit(self, sha: str, *, branches: typ.Iterable[str] = ()) -> str:
        """Register a commit, optionally as the tip of some branches."""
        self._log.setdefault(sha, [])
        for branch in branches:
            self._branches[branch] = sha
        return sha

    def request_bodies(self) -> list[dict[str, typ.Any]]:
        """Return the decoded JSON bodies of all POST requests."""
        return [
            json.loads(request.content.decode("utf-8"))
            for request in self.requests
            if request.method == "POST"
        ]

    def transport(self, *, token: str | None = None) -> HttpxTransport:
        """Return an ``HttpxTransport`` served by this fake."""
        config = GitHubConfig(token=token, api_url=API_URL)
        return HttpxTransport(config, transport=httpx.MockTransport(self.handle))

    def handle(self, request: httpx.Request) -> httpx.Response:
        """Route a request to the matching endpoint."""
        self.requests.append(request)
        if self.token is not None and request.headers.get(
            "Authorization"
        ) != f"Bearer {self.token}":
            return _error(401, "Bad credentials")

        path = request.url.path
        if request.method == "GET" and (match := _STATUSES_ROUTE.match(path)):
            return self._list_statuses(request, match)
        if request.method == "GET" and (match := _COMBINED_ROUTE.match(path)):
            return self._combined_status(match)
        if request.method == "POST" and (match := _CREATE_ROUTE.match(path)):
            return self._create_status(request, match)
        return _error(404, "Not Found")

    def _is_this_repo(self, match: re.Match[str]) -> bool:
        return (match["owner"], match["repo"]) == (self.owner, self.repo)

    def _resolve(self, ref: str) -> str | None:
        if ref in self._log:
            return ref
        if ref in self._branches:
            return self._branches[ref]
        candidates = [sha for sha in self._log if sha.startswith(ref)]
        return candidates[0] if len(ref) >= 4 and len(candidates) == 1 else None

    def _history(self, sha: str) -> list[dict[str, typ.Any]]:
        # Newest first; ids grow with creation time so they break ties.
        return sorted(
            self._log[sha],
            key=lambda record: (record["created_at"], record["id"]),
            reverse=True,
        )

    def _list_statuses(
        self, request: httpx.Request, match: re.Match[str]
    ) -> httpx.Response:
        if not self._is_this_repo(match):
            return _error(404, "Not Found")
        sha = self._resolve(match["ref"])
        if sha is None:
            return _error(404, f"No commit found for SHA: {match['ref']}")

        per_page = int(request.url.params.get("per_page", _DEFAULT_PER_PAGE))
        page = int(request.url.params.get("page", 1))
        history = self._history(sha)
        start = (page - 1) * per_page
        body = history[start : start + per_page]
        headers: dict[str, str] = {}
        if start + per_page < len(history):
            next_url = request.url.copy_set_param("page", str(page + 1))
            headers["Link"] = f'<{next_url}>; rel="next"'
        return httpx.Response(200, json=body, headers=headers)

    def _combined_status(self, match: re.Match[str]) -> httpx.Response:
        if not self._is_this_repo(match):
            return _error(404, "Not Found")
        sha = self._resolve(match["ref"])
        if sha is None:
            return _error(404, f"No commit found for SHA: {match['ref']}")

        latest: dict[str, dict[str, typ.Any]] = {}
        for record in self._history(sha):
            latest.setdefault(record["context"], record)
        statuses = list(latest.values())
        return httpx.Response(
            200,
            json={
                "state": combined_state(record["state"] for record in statuses),
                "sha": sha,
                "total_count": len(statuses),
                "statuses": statuses,
                "repository": {
                    "id": 1296269,
                    "name": self.repo,
                    "full_name": f"{self.owner}/{self.repo}",
                    "owner": {"login": self.owner, "id": 583231, "type": "User"},
                    "private": False,
                },
                "commit_url": f"{API_URL}/repos/{self.owner}/{self.repo}/commits/{sha}",
                "url": f"{API_URL}/repos/{self.owner}/{self.repo}/commits/{sha}/status",
            },
        )

    def _create_status(
        self, request: httpx.Request, match: re.Match[str]
    ) -> httpx.Response:
        if not self._is_this_repo(match):
            return _error(404, "Not Found")
        if not self.writable:
            return _error(403, "Resource not accessible by integration")

        body = json.loads(request.content.decode("utf-8"))
        if body.get("state") not in _VALID_STATES:
            return _error(
                422,
                "Validation Failed",
                errors=[
                    {
                        "resource": "Status",
                        "field": "state",
                        "code": "custom",
                        "message": "state is not included in the list",
                    }
                ],
            )
        sha = match["sha"]
        if sha not in self._log:
            return _error(422, f"No commit found for SHA: {sha}")

        record_id = self._next_id
        self._next_id += 1
        record = {
            "url": f"{API_URL}/repos/{self.owner}/{self.repo}/statuses/{sha}",
            "id": record_id,
            "node_id": f"SC_{record_id:06d}",
            "state": body["state"],
            "description": body.get("description"),
            "target_url": body.get("target_url"),
            "context": body.get("context") or "default",
            "created_at": _timestamp(record_id),
            "updated_at": _timestamp(record_id),
            "creator": {"login": "octocat", "id": 1, "type": "User"},
        }
        self._log[sha].append(record)
        return httpx.Response(201, json=record)
