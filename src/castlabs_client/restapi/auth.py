"""CAS ticket acquisition for the DRMtoday API.

DRMtoday authenticates every API call with a CAS service ticket. Obtaining
one takes two requests: a login that returns a ticket-granting ticket
location, and an exchange of that location for a ticket bound to a single
target URL.
"""

import httpx
import structlog

from .connection import ConnectionSettings, read_text
from .errors import CastlabsError

logger = structlog.get_logger(__name__)

LOGIN_PATH = "cas/v1/tickets"

_FORM_HEADERS = {"Accept": "*/*"}


class TicketAcquirer:
    """Performs the CAS login and service ticket exchange.

    Holds credentials and connection settings only; the ticket-granting
    location and service tickets are never stored.
    """

    def __init__(
        self,
        username: str,
        password: str,
        auth_base_url: str,
        settings: ConnectionSettings,
    ):
        """Initialize the ticket acquirer.

        Args:
            username: DRMtoday API username.
            password: DRMtoday API password.
            auth_base_url: Base URL of the CAS server, ending with "/".
            settings: Timeout and transport for outbound requests.
        """
        self._username = username
        self._password = password
        self.login_url = auth_base_url + LOGIN_PATH
        self._settings = settings

    def login(self) -> str:
        """Log in and return the ticket-granting ticket location.

        The response body is never read.

        Returns:
            URL of the ticket-granting ticket.

        Raises:
            CastlabsError: If the server does not answer 201 with a
                non-blank ``location`` header.
            httpx.HTTPError: If the request could not be completed.
        """
        form = {"username": self._username, "password": self._password}
        with self._settings.post(
            self.login_url, data=form, headers=_FORM_HEADERS
        ) as response:
            status_code = response.status_code
            reason = response.reason_phrase
            location = response.headers.get("location")

        if status_code != httpx.codes.CREATED:
            logger.error("Login rejected", status_code=status_code, reason=reason)
            msg = f"Login failed: Response code={status_code}, Reason={reason}"
            raise CastlabsError(msg, status_code=status_code, reason=reason)
        if location is None or not location.strip():
            msg = "No location header provided in API response"
            raise CastlabsError(msg, status_code=status_code, reason=reason)
        return location

    def get_service_ticket(self, ticket_granting_url: str, service_url: str) -> str:
        """Exchange a ticket-granting location for a service ticket.

        Args:
            ticket_granting_url: Location returned by :meth:`login`.
            service_url: URL the ticket will be valid for.

        Returns:
            The service ticket, exactly as returned by the server.

        Raises:
            CastlabsError: If the server does not answer 200.
            httpx.HTTPError: If the request could not be completed.
        """
        with self._settings.post(
            ticket_granting_url,
            log_url=_redact_ticket_granting_url(ticket_granting_url),
            data={"service": service_url},
            headers=_FORM_HEADERS,
        ) as response:
            body = read_text(response)
            status_code = response.status_code
            reason = response.reason_phrase

        if status_code != httpx.codes.OK:
            logger.error(
                "Ticket retrieval rejected",
                status_code=status_code,
                reason=reason,
            )
            msg = (
                f"Ticket retrieval failed: Response code={status_code}, "
                f"Reason={reason}, Body={body}"
            )
            raise CastlabsError(msg, status_code=status_code, reason=reason, body=body)
        return body

    def acquire_ticketed_url(self, url: str) -> str:
        """Log in and return ``url`` with a fresh service ticket appended.

        Args:
            url: Target resource URL.

        Returns:
            ``url + "?ticket=" + ticket``, usable for one call to ``url``.
        """
        ticket = self.get_service_ticket(self.login(), url)
        return f"{url}?ticket={ticket}"


def _redact_ticket_granting_url(url: str) -> str:
    # The path carries the ticket-granting ticket
    parsed = httpx.URL(url)
    return f"{parsed.scheme}://{parsed.netloc.decode()}/<ticket-granting-ticket>"
