"""Commit status operations over the GitHub REST API.

The operations are plain coroutines over a :class:`~ghstatus.transport.Transport`;
:class:`CommitStatusClient` binds a transport for callers that prefer a
client object. Nothing is cached between calls.

Example:
>>> import asyncio
>>> from ghstatus.config import GitHubConfig
>>> from ghstatus.transport import HttpxTransport
>>> async def latest_state() -> str:
...     async with HttpxTransport(GitHubConfig.from_env()) as transport:
...         client = CommitStatusClient(transport)
...         combined = await client.get_combined("octo", "reef", "main")
...         return combined.state
>>> # asyncio.run(latest_state())

"""

from __future__ import annotations

import dataclasses
import typing as typ
from urllib.parse import quote

import msgspec

from ghstatus.errors import TransportHTTPError, TransportRequestError

from .errors import (
    CommitStatusAPIError,
    CommitStatusTransportError,
    CommitStatusValidationError,
    GitHubResponseShapeError,
)
from .models import CombinedCommitStatus, CommitStatus, NewCommitStatus
from .observability import CommitStatusEventLogger

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from ghstatus.transport import QueryParams, Transport

DEFAULT_PER_PAGE = 100
_MAX_PER_PAGE = 100

_event_logger = CommitStatusEventLogger()


def _segment(value: str, *, safe: str = "") -> str:
    return quote(value.strip(), safe=safe)


def _require(
    operation: str, params: cabc.Mapping[str, str], *names: str
) -> None:
    for name in names:
        if not params[name].strip():
            raise CommitStatusValidationError.empty_argument(
                name, operation=operation, params=params
            )


async def _send(
    transport: Transport,
    method: str,
    path: str,
    *,
    operation: str,
    params: cabc.Mapping[str, str],
    body: dict[str, typ.Any] | None = None,
    query: QueryParams | None = None,
) -> tuple[object, str | None]:
    """Send one request, mapping transport failures onto client errors."""
    try:
        response = await transport.send(method, path, body=body, params=query)
    except TransportHTTPError as exc:
        raise CommitStatusAPIError.from_http_error(
            exc, operation=operation, params=params
        ) from exc
    except TransportRequestError as exc:
        raise CommitStatusTransportError.from_request_error(
            exc, operation=operation, params=params
        ) from exc
    return response.json, response.next_url


_T = typ.TypeVar("_T")


def _decode(
    payload: object,
    target: type[_T],
    *,
    operation: str,
    params: cabc.Mapping[str, str],
) -> _T:
    try:
        return msgspec.convert(payload, type=target)
    except msgspec.ValidationError as exc:
        raise GitHubResponseShapeError.invalid(
            str(exc), operation=operation, params=params
        ) from exc


async def _fetch_all_pages(
    transport: Transport,
    path: str,
    *,
    operation: str,
    params: cabc.Mapping[str, str],
    per_page: int,
    max_pages: int | None,
) -> list[CommitStatus]:
    statuses: list[CommitStatus] = []
    url: str | None = path
    query: QueryParams | None = {"per_page": per_page}
    pages = 0
    while url is not None:
        payload, next_url = await _send(
            transport, "GET", url, operation=operation, params=params, query=query
        )
        statuses.extend(
            _decode(
                payload, list[CommitStatus], operation=operation, params=params
            )
        )
        pages += 1
        if max_pages is not None and pages >= max_pages:
            break
        # The next link already carries the query string.
        url, query = next_url, None
    return statuses


async def get_all(
    transport: Transport,
    owner: str,
    repo: str,
    ref: str,
    *,
    per_page: int = DEFAULT_PER_PAGE,
    max_pages: int | None = None,
) -> list[CommitStatus]:
    """Return every status recorded for ``ref``, most recent first.

    The order is the service's: reverse chronological across all contexts,
    so ``statuses[0]`` is the latest report. Pages are followed through the
    ``Link`` header until exhausted or ``max_pages`` pages were read.

    Parameters
    ----------
    transport
        Transport used to reach the API.
    owner, repo
        Repository coordinates.
    ref
        Full or short SHA, branch name, or tag.
    per_page
        Page size requested from the service (1-100).
    max_pages
        Optional upper bound on the number of pages read.

    Returns
    -------
    list[CommitStatus]
        All statuses, empty when none were reported.

    Raises
    ------
    CommitStatusValidationError
        If an argument is blank or a paging option is out of range.
    CommitStatusNotFoundError
        If the repository or reference is missing or not visible.
    CommitStatusAuthenticationError
        If credentials are missing or invalid.
    CommitStatusTransportError
        If the request did not complete.

    """
    operation = "get_all"
    params = {"owner": owner, "repo": repo, "ref": ref}
    _require(operation, params, "owner", "repo", "ref")
    if not 1 <= per_page <= _MAX_PER_PAGE:
        raise CommitStatusValidationError.invalid_page_size(
            per_page, operation=operation, params=params
        )
    if max_pages is not None and max_pages < 1:
        raise CommitStatusValidationError.invalid_max_pages(
            max_pages, operation=operation, params=params
        )

    path = (
        f"/repos/{_segment(owner)}/{_segment(repo)}"
        f"/commits/{_segment(ref, safe='/')}/statuses"
    )
    _event_logger.log_request_started(operation, params)
    try:
        statuses = await _fetch_all_pages(
            transport,
            path,
            operation=operation,
            params=params,
            per_page=per_page,
            max_pages=max_pages,
        )
    except Exception as exc:
        _event_logger.log_request_failed(operation, params, exc)
        raise
    _event_logger.log_request_completed(operation, params, count=len(statuses))
    return statuses


async def get_combined(
    transport: Transport, owner: str, repo: str, ref: str
) -> CombinedCommitStatus:
    """Return the combined status for ``ref``.

    The aggregate holds the latest status per context and the overall state
    computed by the service.

    Raises
    ------
    CommitStatusValidationError
        If an argument is blank.
    CommitStatusNotFoundError
        If the repository or reference is missing or not visible.
    CommitStatusAuthenticationError
        If credentials are missing or invalid.
    CommitStatusTransportError
        If the request did not complete.
    GitHubResponseShapeError
        If the body does not describe a combined status.

    """
    operation = "get_combined"
    params = {"owner": owner, "repo": repo, "ref": ref}
    _require(operation, params, "owner", "repo", "ref")

    path = (
        f"/repos/{_segment(owner)}/{_segment(repo)}"
        f"/commits/{_segment(ref, safe='/')}/status"
    )
    _event_logger.log_request_started(operation, params)
    try:
        payload, _ = await _send(
            transport, "GET", path, operation=operation, params=params
        )
        combined = _decode(
            payload, CombinedCommitStatus, operation=operation, params=params
        )
    except Exception as exc:
        _event_logger.log_request_failed(operation, params, exc)
        raise
    _event_logger.log_request_completed(
        operation, params, count=combined.total_count
    )
    return combined


async def create(
    transport: Transport,
    owner: str,
    repo: str,
    sha: str,
    new_status: NewCommitStatus,
) -> CommitStatus:
    """Record a new status on commit ``sha`` and return it.

    Each call appends a record, so repeating a call stores a second status.
    Reporting a different state under the same context is how a caller
    moves a commit from pending to success: the new record is listed first
    by :func:`get_all` and replaces the old one in :func:`get_combined`.

    Raises
    ------
    CommitStatusValidationError
        If an argument is blank, the state is invalid, or GitHub rejected
        the input (for example an unknown SHA).
    CommitStatusAuthenticationError
        If credentials are missing or invalid.
    CommitStatusAuthorizationError
        If the credentials cannot write to the repository.
    CommitStatusNotFoundError
        If the repository is missing or not visible.
    CommitStatusTransportError
        If the request did not complete.

    """
    operation = "create"
    params = {"owner": owner, "repo": repo, "sha": sha}
    _require(operation, params, "owner", "repo", "sha")
    try:
        body = new_status.to_payload()
    except ValueError as exc:
        raise CommitStatusValidationError.invalid_state(
            new_status.state, operation=operation, params=params
        ) from exc

    path = f"/repos/{_segment(owner)}/{_segment(repo)}/statuses/{_segment(sha)}"
    _event_logger.log_request_started(operation, params)
    try:
        payload, _ = await _send(
            transport, "POST", path, operation=operation, params=params, body=body
        )
        status = _decode(payload, CommitStatus, operation=operation, params=params)
    except Exception as exc:
        _event_logger.log_request_failed(operation, params, exc)
        raise
    _event_logger.log_request_completed(operation, params, count=1)
    return status


@dataclasses.dataclass(frozen=True, slots=True)
class CommitStatusClient:
    """Commit status operations bound to a transport."""

    transport: Transport

    async def get_all(
        self,
        owner: str,
        repo: str,
        ref: str,
        *,
        per_page: int = DEFAULT_PER_PAGE,
        max_pages: int | None = None,
    ) -> list[CommitStatus]:
        """See :func:`get_all`."""
        return await get_all(
            self.transport, owner, repo, ref, per_page=per_page, max_pages=max_pages
        )

    async def get_combined(
        self, owner: str, repo: str, ref: str
    ) -> CombinedCommitStatus:
        """See :func:`get_combined`."""
        return await get_combined(self.transport, owner, repo, ref)

    async def create(
        self, owner: str, repo: str, sha: str, new_status: NewCommitStatus
    ) -> CommitStatus:
        """See :func:`create`."""
        return await create(self.transport, owner, repo, sha, new_status)


__all__ = [
    "DEFAULT_PER_PAGE",
    "CommitStatusClient",
    "create",
    "get_all",
    "get_combined",
]
