"""Per-request HTTP connection handling.

Every outbound request opens its own short-lived ``httpx.Client``. The client
and the response stream are released on every exit path; a transport passed
in by the caller is shared by all requests and left open.
"""

import time
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any

import httpx
import structlog

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ConnectionSettings:
    """Immutable settings applied to every outbound request.

    Attributes:
        timeout_seconds: Connect, read, write and pool timeout in seconds.
            Values <= 0 (or None) leave the httpx defaults in place.
        transport: Optional httpx transport, e.g. ``httpx.MockTransport``.
    """

    timeout_seconds: float | None = None
    transport: httpx.BaseTransport | None = None

    @property
    def timeout(self) -> httpx.Timeout | None:
        """Explicit timeout override, or None when the timeout is unset."""
        if self.timeout_seconds is None or self.timeout_seconds <= 0:
            return None
        return httpx.Timeout(self.timeout_seconds)

    def open_client(self) -> httpx.Client:
        """Create a new HTTP client; callers must close it (use ``with``)."""
        kwargs: dict[str, Any] = {}
        if self.transport is not None:
            kwargs["transport"] = _BorrowedTransport(self.transport)
        if (timeout := self.timeout) is not None:
            kwargs["timeout"] = timeout
        return httpx.Client(**kwargs)

    @contextmanager
    def post(
        self,
        url: str,
        log_url: str | None = None,
        **kwargs: Any,
    ) -> Iterator[httpx.Response]:
        """POST to ``url`` over a fresh connection and yield the response.

        The response body is not read; callers read it only when they need
        it. Keyword arguments are passed to ``httpx.Client.stream``.

        Args:
            url: Request URL.
            log_url: URL written to the logs instead of ``url``. Defaults to
                ``url`` without its query string.

        Raises:
            httpx.HTTPError: If the request could not be completed. The error
                is logged and re-raised unchanged.
        """
        start_time = time.time()
        log_url = log_url or _strip_query(url)
        try:
            logger.debug("Making API request", method="POST", url=log_url)
            with self.open_client() as client, client.stream(
                "POST", url, **kwargs
            ) as response:
                logger.debug(
                    "API request completed",
                    status_code=response.status_code,
                    duration_seconds=round(time.time() - start_time, 3),
                )
                yield response
        except httpx.HTTPError:
            logger.exception(
                "API request failed",
                url=log_url,
                duration_seconds=round(time.time() - start_time, 3),
            )
            raise


def read_text(response: httpx.Response) -> str:
    """Read the whole response body as text; empty when there is none."""
    response.read()
    return response.text


def _strip_query(url: str) -> str:
    # Keeps service tickets out of the logs
    return url.split("?", 1)[0]


class _BorrowedTransport(httpx.BaseTransport):
    """Forwards requests to a caller-owned transport without ever closing it.

    Closing the per-request ``httpx.Client`` closes its transport; the
    caller's transport is shared by concurrent calls and must stay open.
    """

    def __init__(self, transport: httpx.BaseTransport):
        self._transport = transport

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        return self._transport.handle_request(request)
