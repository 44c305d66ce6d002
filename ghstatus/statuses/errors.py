"""Errors raised by the commit status client.

Every error records the operation that failed and the parameters it was
called with, so a caller can report ``get_combined(owner=..., ref=...)``
without threading that context through its own handlers.
"""

from __future__ import annotations

import typing as typ

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from ghstatus.errors import TransportHTTPError, TransportRequestError

_HTTP_BAD_REQUEST = 400
_HTTP_UNAUTHORIZED = 401
_HTTP_FORBIDDEN = 403
_HTTP_NOT_FOUND = 404
_HTTP_UNPROCESSABLE = 422


def _describe(operation: str, params: cabc.Mapping[str, str]) -> str:
    args = ", ".join(f"{key}={value!r}" for key, value in params.items())
    return f"{operation}({args})"


class CommitStatusError(RuntimeError):
    """Base exception for all commit status client errors.

    Attributes
    ----------
    operation
        Name of the client operation that failed.
    params
        Arguments the operation was called with.

    """

    def __init__(
        self,
        message: str,
        *,
        operation: str,
        params: cabc.Mapping[str, str] | None = None,
    ) -> None:
        """Initialise the error with its operation context."""
        self.operation = operation
        self.params = dict(params or {})
        super().__init__(message)


class CommitStatusAPIError(CommitStatusError):
    """Raised when GitHub answers with an error status code.

    Attributes
    ----------
    status_code
        HTTP status code of the response.
    message
        ``message`` field of the error body, when present.
    errors
        ``errors`` field of the error body, passed through unchanged.

    """

    def __init__(
        self,
        message: str,
        *,
        operation: str,
        params: cabc.Mapping[str, str] | None = None,
        status_code: int | None = None,
        api_message: str | None = None,
        errors: object = None,
    ) -> None:
        """Initialise with the response status and error payload."""
        super().__init__(message, operation=operation, params=params)
        self.status_code = status_code
        self.message = api_message
        self.errors = errors

    @classmethod
    def from_http_error(
        cls,
        error: TransportHTTPError,
        *,
        operation: str,
        params: cabc.Mapping[str, str],
    ) -> CommitStatusAPIError:
        """Map a transport HTTP error onto the matching error class.

        401 maps to :class:`CommitStatusAuthenticationError`, 403 to
        :class:`CommitStatusAuthorizationError`, 404 to
        :class:`CommitStatusNotFoundError`, and 400/422 to
        :class:`CommitStatusValidationError`. Other codes produce a plain
        :class:`CommitStatusAPIError`.
        """
        body = error.body if isinstance(error.body, dict) else {}
        raw_message = body.get("message")
        api_message = raw_message if isinstance(raw_message, str) else None
        error_cls = _STATUS_CODE_ERRORS.get(error.status_code, CommitStatusAPIError)
        text = f"{_describe(operation, params)} failed with HTTP {error.status_code}"
        if api_message:
            text = f"{text}: {api_message}"
        return error_cls(
            text,
            operation=operation,
            params=params,
            status_code=error.status_code,
            api_message=api_message,
            errors=body.get("errors"),
        )


class CommitStatusNotFoundError(CommitStatusAPIError):
    """The repository or reference does not exist or is not visible."""


class CommitStatusAuthenticationError(CommitStatusAPIError):
    """Credentials were missing or rejected."""


class CommitStatusAuthorizationError(CommitStatusAPIError):
    """Credentials were accepted but lack permission for the operation."""


class CommitStatusValidationError(CommitStatusAPIError, ValueError):
    """Input was rejected, either locally or by GitHub."""

    @classmethod
    def empty_argument(
        cls,
        name: str,
        *,
        operation: str,
        params: cabc.Mapping[str, str],
    ) -> CommitStatusValidationError:
        """Return an error for a blank required argument."""
        return cls(
            f"{_describe(operation, params)}: {name} must be non-empty",
            operation=operation,
            params=params,
        )

    @classmethod
    def invalid_state(
        cls,
        value: object,
        *,
        operation: str,
        params: cabc.Mapping[str, str],
    ) -> CommitStatusValidationError:
        """Return an error for a state outside the commit state enumeration."""
        return cls(
            f"{_describe(operation, params)}: invalid commit state {value!r}",
            operation=operation,
            params=params,
        )

    @classmethod
    def invalid_page_size(
        cls,
        value: int,
        *,
        operation: str,
        params: cabc.Mapping[str, str],
    ) -> CommitStatusValidationError:
        """Return an error for a per-page value GitHub would not honour."""
        return cls(
            f"{_describe(operation, params)}: per_page must be between 1 and "
            f"100, got {value}",
            operation=operation,
            params=params,
        )

    @classmethod
    def invalid_max_pages(
        cls,
        value: int,
        *,
        operation: str,
        params: cabc.Mapping[str, str],
    ) -> CommitStatusValidationError:
        """Return an error for a page limit below one."""
        return cls(
            f"{_describe(operation, params)}: max_pages must be positive, "
            f"got {value}",
            operation=operation,
            params=params,
        )


class CommitStatusTransportError(CommitStatusError):
    """The request never produced a response."""

    @classmethod
    def from_request_error(
        cls,
        error: TransportRequestError,
        *,
        operation: str,
        params: cabc.Mapping[str, str],
    ) -> CommitStatusTransportError:
        """Wrap a transport failure, keeping its message intact."""
        return cls(
            f"{_describe(operation, params)}: {error}",
            operation=operation,
            params=params,
        )


class GitHubResponseShapeError(CommitStatusError):
    """A successful response did not match the expected structure."""

    @classmethod
    def invalid(
        cls,
        detail: str,
        *,
        operation: str,
        params: cabc.Mapping[str, str],
    ) -> GitHubResponseShapeError:
        """Return an error for a body that failed to decode."""
        return cls(
            f"{_describe(operation, params)}: unexpected response shape: {detail}",
            operation=operation,
            params=params,
        )


_STATUS_CODE_ERRORS: dict[int, type[CommitStatusAPIError]] = {
    _HTTP_BAD_REQUEST: CommitStatusValidationError,
    _HTTP_UNAUTHORIZED: CommitStatusAuthenticationError,
    _HTTP_FORBIDDEN: CommitStatusAuthorizationError,
    _HTTP_NOT_FOUND: CommitStatusNotFoundError,
    _HTTP_UNPROCESSABLE: CommitStatusValidationError,
}
