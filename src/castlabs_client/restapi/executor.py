"""Authenticated JSON request execution.

Sends a JSON payload to a ticketed URL and checks the response against the
operation's response policy.
"""

from dataclasses import dataclass
from typing import Generic, TypeVar

import pydantic
import structlog

from .connection import ConnectionSettings, read_text
from .errors import CastlabsError
from .types import CastlabsModel

logger = structlog.get_logger(__name__)

ResponseT = TypeVar("ResponseT", bound=CastlabsModel)

_JSON_HEADERS = {
    "Accept": "application/json",
    "Content-Type": "application/json",
}


@dataclass(frozen=True)
class ResponsePolicy(Generic[ResponseT]):
    """What counts as success for one operation.

    Attributes:
        expected_status: Required status code, or None to accept any status.
        response_model: Model the body is decoded into, or None when the
            body is discarded.
        required_fields: Fields of the decoded model that must not be None.
    """

    expected_status: int | None
    response_model: type[ResponseT] | None = None
    required_fields: tuple[str, ...] = ()


class RequestExecutor:
    """POSTs JSON payloads to ticketed URLs."""

    def __init__(self, settings: ConnectionSettings):
        self._settings = settings

    def execute(
        self,
        ticketed_url: str,
        payload: CastlabsModel,
        policy: ResponsePolicy[ResponseT],
        action: str,
    ) -> ResponseT | None:
        """Send ``payload`` and validate the response against ``policy``.

        Args:
            ticketed_url: Target URL including the service ticket.
            payload: Request body.
            policy: Success status and response decoding for the operation.
            action: Short operation name used in error messages.

        Returns:
            The decoded response, or None if the policy has no response model.

        Raises:
            CastlabsError: On an unexpected status, an empty body where one is
                required, or a body that does not decode or lacks a
                required field.
            httpx.HTTPError: If the request could not be completed.
        """
        with self._settings.post(
            ticketed_url,
            content=payload.to_json(),
            headers=_JSON_HEADERS,
        ) as response:
            status_code = response.status_code
            reason = response.reason_phrase
            status_ok = policy.expected_status in (None, status_code)
            if status_ok and policy.response_model is None:
                return None
            # Empty when the server sent no body
            body = read_text(response)

        if not status_ok:
            logger.error(
                "API request rejected",
                action=action,
                status_code=status_code,
                reason=reason,
            )
            msg = (
                f"{action} failed: Response code={status_code}, "
                f"Reason={reason}, Body={body}"
            )
            raise CastlabsError(msg, status_code=status_code, reason=reason, body=body)

        if not body.strip():
            msg = f"Empty response entity from Castlabs. HTTP Status: {status_code}"
            raise CastlabsError(msg, status_code=status_code, reason=reason, body=body)

        msg = f"Unexpected response from Castlabs: {body}"
        try:
            decoded = policy.response_model.model_validate_json(body)
        except pydantic.ValidationError as exc:
            raise CastlabsError(
                msg,
                status_code=status_code,
                reason=reason,
                body=body,
            ) from exc

        if any(getattr(decoded, name) is None for name in policy.required_fields):
            raise CastlabsError(msg, status_code=status_code, reason=reason, body=body)
        return decoded
