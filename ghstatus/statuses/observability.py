"""Structured log events for commit status requests.

Events are emitted through femtologging as single-line ``key=value``
messages prefixed with the event type, for example::

    [statuses.request.completed] operation=get_all owner=octo repo=reef
    ref=main count=2

"""

from __future__ import annotations

import enum
import typing as typ

from ghstatus.logging import get_logger, log_error, log_info, log_warning

from .errors import CommitStatusAPIError

if typ.TYPE_CHECKING:
    import collections.abc as cabc

logger = get_logger(__name__)

_HTTP_SERVER_ERROR_THRESHOLD = 500


class CommitStatusEventType(enum.StrEnum):
    """Structured log event types for commit status requests."""

    REQUEST_STARTED = "statuses.request.started"
    REQUEST_COMPLETED = "statuses.request.completed"
    REQUEST_FAILED = "statuses.request.failed"


def _format_params(params: cabc.Mapping[str, str]) -> str:
    return " ".join(f"{key}={value}" for key, value in params.items())


class CommitStatusEventLogger:
    """Emit request lifecycle events for the commit status client.

    Client errors (4xx, local validation) are logged at WARNING since they
    are usually caused by the caller; server errors and transport failures
    are logged at ERROR.
    """

    def log_request_started(
        self, operation: str, params: cabc.Mapping[str, str]
    ) -> None:
        """Log the start of an operation."""
        log_info(
            logger,
            "[%s] operation=%s %s",
            CommitStatusEventType.REQUEST_STARTED,
            operation,
            _format_params(params),
        )

    def log_request_completed(
        self,
        operation: str,
        params: cabc.Mapping[str, str],
        *,
        count: int,
    ) -> None:
        """Log a successful operation with the number of statuses returned."""
        log_info(
            logger,
            "[%s] operation=%s %s count=%d",
            CommitStatusEventType.REQUEST_COMPLETED,
            operation,
            _format_params(params),
            count,
        )

    def log_request_failed(
        self,
        operation: str,
        params: cabc.Mapping[str, str],
        error: BaseException,
    ) -> None:
        """Log a failed operation with its status code and error type."""
        status_code = getattr(error, "status_code", None)
        is_client_error = isinstance(error, CommitStatusAPIError) and (
            status_code is None or status_code < _HTTP_SERVER_ERROR_THRESHOLD
        )
        log = log_warning if is_client_error else log_error
        log(
            logger,
            "[%s] operation=%s %s status_code=%s error_type=%s error=%s",
            CommitStatusEventType.REQUEST_FAILED,
            operation,
            _format_params(params),
            status_code,
            type(error).__name__,
            error,
        )
