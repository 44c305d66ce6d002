"""Typed models for GitHub commit statuses.

Read models decode straight from the REST payloads, so attribute names follow
the wire format. All structs are frozen: a status report never changes once
the service has recorded it, a newer report under the same context simply
supersedes it.
"""

from __future__ import annotations

import datetime as dt  # noqa: TC003
import enum

import msgspec

DEFAULT_CONTEXT = "default"


class CommitState(enum.StrEnum):
    """Lifecycle stage reported by a single commit status."""

    ERROR = "error"
    FAILURE = "failure"
    PENDING = "pending"
    SUCCESS = "success"


class UserRef(msgspec.Struct, kw_only=True, frozen=True):
    """Account that created a status or owns a repository."""

    login: str
    id: int
    type: str | None = None
    avatar_url: str | None = None
    html_url: str | None = None


class RepositoryRef(msgspec.Struct, kw_only=True, frozen=True):
    """Repository summary embedded in a combined status."""

    id: int
    name: str
    full_name: str
    owner: UserRef
    private: bool = False
    html_url: str | None = None
    description: str | None = None


class CommitStatus(msgspec.Struct, kw_only=True, frozen=True):
    """A single status report attached to a commit.

    Attributes
    ----------
    state
        Reported lifecycle stage.
    target_url
        Link to the system that produced the report.
    description
        Short human-readable summary.
    context
        Namespace of the report; the service fills in ``"default"`` when the
        creator supplied none.
    created_at, updated_at
        Server-assigned timestamps.
    id
        Server-assigned identifier, unique per report.
    creator
        Account that created the report.

    """

    id: int
    state: CommitState
    created_at: dt.datetime
    updated_at: dt.datetime
    context: str = DEFAULT_CONTEXT
    target_url: str | None = None
    description: str | None = None
    creator: UserRef | None = None
    url: str | None = None
    node_id: str | None = None
    avatar_url: str | None = None


class NewCommitStatus(msgspec.Struct, kw_only=True, frozen=True):
    """Input for creating a commit status.

    ``context`` left unset or empty lets the service apply its default
    context; it is never filled in locally.
    """

    state: CommitState
    target_url: str | None = None
    description: str | None = None
    context: str | None = None

    def to_payload(self) -> dict[str, str]:
        """Return the request body, omitting unset fields.

        Raises
        ------
        ValueError
            If ``state`` does not name a :class:`CommitState`.

        """
        payload = {"state": CommitState(self.state).value}
        if self.target_url is not None:
            payload["target_url"] = self.target_url
        if self.description is not None:
            payload["description"] = self.description
        if self.context:
            payload["context"] = self.context
        return payload


class CombinedCommitStatus(msgspec.Struct, kw_only=True, frozen=True):
    """Server-computed aggregate of the latest status per context.

    ``state`` is the overall outcome as reported by the service; it is not
    recomputed from ``statuses``.
    """

    state: CommitState
    sha: str
    total_count: int
    statuses: tuple[CommitStatus, ...]
    repository: RepositoryRef
    commit_url: str | None = None
    url: str | None = None

    def __post_init__(self) -> None:
        """Check that ``statuses`` holds exactly ``total_count`` entries."""
        if len(self.statuses) != self.total_count:
            msg = (
                f"total_count is {self.total_count} but "
                f"{len(self.statuses)} statuses were returned"
            )
            raise ValueError(msg)
