"""Commit status client, models, and errors."""

from __future__ import annotations

from .client import CommitStatusClient, create, get_all, get_combined
from .errors import (
    CommitStatusAPIError,
    CommitStatusAuthenticationError,
    CommitStatusAuthorizationError,
    CommitStatusError,
    CommitStatusNotFoundError,
    CommitStatusTransportError,
    CommitStatusValidationError,
    GitHubResponseShapeError,
)
from .models import (
    DEFAULT_CONTEXT,
    CombinedCommitStatus,
    CommitState,
    CommitStatus,
    NewCommitStatus,
    RepositoryRef,
    UserRef,
)
from .observability import CommitStatusEventLogger, CommitStatusEventType

__all__ = [
    "DEFAULT_CONTEXT",
    "CombinedCommitStatus",
    "CommitState",
    "CommitStatus",
    "CommitStatusAPIError",
    "CommitStatusAuthenticationError",
    "CommitStatusAuthorizationError",
    "CommitStatusClient",
    "CommitStatusError",
    "CommitStatusEventLogger",
    "CommitStatusEventType",
    "CommitStatusNotFoundError",
    "CommitStatusTransportError",
    "CommitStatusValidationError",
    "GitHubResponseShapeError",
    "NewCommitStatus",
    "RepositoryRef",
    "UserRef",
    "create",
    "get_all",
    "get_combined",
]
