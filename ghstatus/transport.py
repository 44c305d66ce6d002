"""HTTP transport used by the commit status client.

The client only depends on :class:`Transport`; :class:`HttpxTransport` is the
production implementation backed by ``httpx.AsyncClient``. Tests swap the
network out by passing an ``httpx.MockTransport`` as ``transport``.
"""

from __future__ import annotations

import dataclasses
import json
import typing as typ

import httpx

from ghstatus.config import GitHubConfig
from ghstatus.errors import TransportHTTPError, TransportRequestError
from ghstatus.logging import get_logger, log_debug

if typ.TYPE_CHECKING:
    import types

logger = get_logger(__name__)

_GITHUB_API_VERSION = "2022-11-28"

QueryParams = typ.Mapping[str, str | int]


@dataclasses.dataclass(frozen=True, slots=True)
class TransportResponse:
    """Successful response returned by :meth:`Transport.send`.

    Attributes
    ----------
    status_code
        HTTP status code, always 2xx. Redirects are followed before the
        response is returned.
    json
        Decoded JSON body, ``None`` for an empty body.
    next_url
        Absolute URL of the next page from the ``Link`` header, if any.

    """

    status_code: int
    json: object
    next_url: str | None = None


class Transport(typ.Protocol):
    """Black-box ``send(method, path, body)`` capability."""

    async def send(
        self,
        method: str,
        path: str,
        *,
        body: dict[str, typ.Any] | None = None,
        params: QueryParams | None = None,
    ) -> TransportResponse:
        """Send one request and return the decoded 2xx response.

        Raises
        ------
        TransportHTTPError
            If the service answers with a non-2xx status code.
        TransportRequestError
            If no response was received.

        """
        ...


def _decode_body(response: httpx.Response) -> object:
    if not response.content:
        return None
    try:
        return response.json()
    except json.JSONDecodeError:
        return response.text


def _next_link(response: httpx.Response) -> str | None:
    link = response.links.get("next")
    if not link:
        return None
    url = link.get("url")
    return url or None


class HttpxTransport:
    """:class:`Transport` implementation over ``httpx.AsyncClient``."""

    def __init__(
        self,
        config: GitHubConfig,
        *,
        http_client: httpx.AsyncClient | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialise the transport, creating an HTTP client when none is given.

        The created client follows redirects, which GitHub sends for renamed
        and transferred repositories.

        ``transport`` is passed to the created client and lets tests serve
        requests from ``httpx.MockTransport`` while keeping the configured
        base URL and headers. It is ignored when ``http_client`` is given.
        """
        self._config = config
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            base_url=config.api_url,
            timeout=config.timeout_s,
            headers=self._build_headers(config),
            transport=transport,
            follow_redirects=True,
        )

    @staticmethod
    def _build_headers(config: GitHubConfig) -> dict[str, str]:
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": _GITHUB_API_VERSION,
            "User-Agent": config.user_agent,
        }
        if config.token:
            headers["Authorization"] = f"Bearer {config.token}"
        return headers

    @property
    def config(self) -> GitHubConfig:
        """Read-only access to the transport configuration."""
        return self._config

    async def aclose(self) -> None:
        """Close any owned HTTP resources."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> HttpxTransport:
        """Enter an async context that closes the transport on exit."""
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: types.TracebackType | None,
    ) -> None:
        """Close owned resources."""
        await self.aclose()

    async def send(
        self,
        method: str,
        path: str,
        *,
        body: dict[str, typ.Any] | None = None,
        params: QueryParams | None = None,
    ) -> TransportResponse:
        """Send a request relative to the configured API URL.

        ``path`` may also be an absolute URL, as found in ``Link`` headers.
        """
        log_debug(logger, "%s %s params=%s", method, path, dict(params or {}))
        try:
            response = await self._client.request(
                method,
                path,
                json=body,
                params=dict(params) if params else None,
            )
        except httpx.TimeoutException as exc:
            raise TransportRequestError.timeout(method, path) from exc
        except httpx.RequestError as exc:
            raise TransportRequestError.network_error(method, path, str(exc)) from exc

        payload = _decode_body(response)
        if not response.is_success:
            raise TransportHTTPError.from_response(
                method, path, response.status_code, payload
            )
        return TransportResponse(
            status_code=response.status_code,
            json=payload,
            next_url=_next_link(response),
        )
