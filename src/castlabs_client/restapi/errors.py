"""Errors raised by the DRMtoday REST API client."""


class CastlabsError(Exception):
    """Raised when DRMtoday responds but rejects or garbles a request.

    Transport failures (connection refused, timeouts, broken streams) are not
    wrapped; they surface as the original ``httpx.HTTPError``.

    Attributes:
        status_code: HTTP status code of the response, if any.
        reason: HTTP reason phrase of the response, if any.
        body: Response body captured for diagnostics, if any.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        reason: str | None = None,
        body: str | None = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.reason = reason
        self.body = body
