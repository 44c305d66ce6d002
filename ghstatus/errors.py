"""Configuration and transport errors."""

from __future__ import annotations


class GitHubConfigError(RuntimeError):
    """Raised when GitHub client configuration is invalid."""

    @classmethod
    def invalid_api_url(cls, value: str) -> GitHubConfigError:
        """Return an error for an API URL without an http(s) scheme."""
        return cls(f"GHSTATUS_GITHUB_API_URL must be an http(s) URL, got {value!r}")

    @classmethod
    def invalid_timeout(cls, value: str) -> GitHubConfigError:
        """Return an error for a non-numeric or non-positive timeout."""
        return cls(f"GHSTATUS_TIMEOUT_S must be a positive number, got {value!r}")


class TransportError(RuntimeError):
    """Base class for failures raised by a transport."""


class TransportHTTPError(TransportError):
    """Raised when the service answers with a non-2xx status code.

    Attributes
    ----------
    status_code
        HTTP status code of the response.
    body
        Decoded JSON body, or the raw text when the body is not JSON.

    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int,
        body: object = None,
    ) -> None:
        """Initialise with the response status and body."""
        self.status_code = status_code
        self.body = body
        super().__init__(message)

    @classmethod
    def from_response(
        cls, method: str, path: str, status_code: int, body: object
    ) -> TransportHTTPError:
        """Return an error for a failed request."""
        return cls(
            f"{method} {path} returned HTTP {status_code}",
            status_code=status_code,
            body=body,
        )


class TransportRequestError(TransportError):
    """Raised when a request never produced a response."""

    @classmethod
    def timeout(cls, method: str, path: str) -> TransportRequestError:
        """Return an error for a request that timed out."""
        return cls(f"{method} {path} timed out")

    @classmethod
    def network_error(cls, method: str, path: str, detail: str) -> TransportRequestError:
        """Return an error for DNS, connection, or TLS failures."""
        return cls(f"{method} {path} failed: {detail}")
