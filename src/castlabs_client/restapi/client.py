"""DRMtoday REST API client.

Each public method logs in, obtains a service ticket for its endpoint and
sends one JSON request. Nothing is cached between calls, so a client can be
shared between threads.
"""

from typing import cast

import httpx
import structlog

from .auth import TicketAcquirer
from .connection import ConnectionSettings
from .executor import RequestExecutor, ResponsePolicy, ResponseT
from .types import (
    AddSubMerchantAccountRequest,
    AddSubMerchantAccountResponse,
    CastlabsModel,
    FairplayRequest,
    IngestAssetsResponse,
    IngestKeysRequest,
    LinkAccountToSubMerchantRequest,
    SharedSecretRequest,
    UpdateAuthorizationSettingsRequest,
)

logger = structlog.get_logger(__name__)

DEFAULT_AUTH_BASE_URL = "https://auth.drmtoday.com/"
DEFAULT_INGESTION_BASE_URL = "https://fe.drmtoday.com/"

# Timeouts <= 0 leave the httpx defaults in place.
DEFAULT_TIMEOUT = -1

_INGEST_POLICY = ResponsePolicy(httpx.codes.OK, IngestAssetsResponse)
# The add endpoint is judged by its body only, whatever the status code.
_ADD_SUB_MERCHANT_POLICY = ResponsePolicy(
    None,
    AddSubMerchantAccountResponse,
    required_fields=("sub_merchant_uuid",),
)
_NO_CONTENT_POLICY = ResponsePolicy(httpx.codes.NO_CONTENT)
_OK_POLICY = ResponsePolicy(httpx.codes.OK)


def _with_trailing_slash(url: str) -> str:
    return url if url.endswith("/") else url + "/"


class CastlabsClient:
    """HTTP client for the Castlabs DRMtoday API.

    Every operation performs a full CAS login and ticket exchange before its
    own request, i.e. three sequential round trips per call.
    """

    def __init__(
        self,
        username: str,
        password: str,
        auth_base_url: str = DEFAULT_AUTH_BASE_URL,
        ingestion_base_url: str = DEFAULT_INGESTION_BASE_URL,
        connection_timeout_seconds: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ):
        """Initialize the API client.

        Args:
            username: DRMtoday API username.
            password: DRMtoday API password.
            auth_base_url: CAS server base URL (default: production).
            ingestion_base_url: API base URL (default: production).
            connection_timeout_seconds: Timeout applied to connect, read,
                write and pool acquisition of every request. Values <= 0
                keep the httpx defaults.
            transport: Optional httpx transport used for every request.

        Raises:
            ValueError: If a credential or base URL is empty.
        """
        if not username or not password:
            msg = "username and password cannot be empty"
            raise ValueError(msg)
        if not auth_base_url or not ingestion_base_url:
            msg = "base URLs cannot be empty"
            raise ValueError(msg)

        self._auth_base_url = _with_trailing_slash(auth_base_url)
        self._ingestion_base_url = _with_trailing_slash(ingestion_base_url)

        settings = ConnectionSettings(
            timeout_seconds=connection_timeout_seconds,
            transport=transport,
        )
        self._tickets = TicketAcquirer(
            username=username,
            password=password,
            auth_base_url=self._auth_base_url,
            settings=settings,
        )
        self._executor = RequestExecutor(settings)

    @property
    def auth_base_url(self) -> str:
        """CAS server base URL, ending with "/"."""
        return self._auth_base_url

    @property
    def ingestion_base_url(self) -> str:
        """API base URL, ending with "/"."""
        return self._ingestion_base_url

    def get_url_with_ticket(self, url: str) -> str:
        """Return ``url`` with a freshly acquired service ticket appended."""
        return self._tickets.acquire_ticketed_url(url)

    def _call(
        self,
        path: str,
        payload: CastlabsModel,
        policy: ResponsePolicy[ResponseT],
        action: str,
    ) -> ResponseT | None:
        """Acquire a ticket for ``path`` and execute one request against it."""
        url = self._ingestion_base_url + path
        result = self._executor.execute(
            self.get_url_with_ticket(url),
            payload,
            policy,
            action,
        )
        logger.info("API operation completed", action=action, url=url)
        return result

    def ingest_keys(
        self,
        request: IngestKeysRequest,
        merchant_id: str,
    ) -> IngestAssetsResponse:
        """Ingest one or more keys into the DRMtoday key store.

        Args:
            request: Assets and keys to ingest.
            merchant_id: Merchant the keys belong to.

        Returns:
            The ingested assets as reported by DRMtoday.

        Raises:
            CastlabsError: If DRMtoday does not answer 200 with a body.
            httpx.HTTPError: If a request could not be completed.
        """
        response = self._call(
            f"frontend/api/keys/v2/ingest/{merchant_id}",
            request,
            _INGEST_POLICY,
            "Ingest",
        )
        # Policies with a response model never yield None
        return cast(IngestAssetsResponse, response)

    def add_sub_merchant_account(
        self,
        request: AddSubMerchantAccountRequest,
        merchant_uuid: str,
    ) -> AddSubMerchantAccountResponse:
        """Create a sub-merchant account under a reseller.

        The HTTP status is not checked; the call succeeds whenever the body
        decodes and names the new sub-merchant.

        Args:
            request: Sub-merchant details.
            merchant_uuid: UUID of the reseller merchant.

        Returns:
            The created sub-merchant.

        Raises:
            CastlabsError: If the body is empty or lacks ``subMerchantUuid``.
            httpx.HTTPError: If a request could not be completed.
        """
        response = self._call(
            f"frontend/rest/reselling/v1/reseller/{merchant_uuid}/submerchant/add",
            request,
            _ADD_SUB_MERCHANT_POLICY,
            "Add sub-merchant",
        )
        return cast(AddSubMerchantAccountResponse, response)

    def link_account_to_sub_merchant(
        self,
        request: LinkAccountToSubMerchantRequest,
        reseller_uuid: str,
    ) -> None:
        """Link an existing user or API account to a sub-merchant.

        Args:
            request: Account and sub-merchant to link.
            reseller_uuid: UUID of the reseller the sub-merchant was created
                under.

        Raises:
            CastlabsError: If DRMtoday does not answer 204.
            httpx.HTTPError: If a request could not be completed.
        """
        self._call(
            f"frontend/rest/reselling/v1/reseller/{reseller_uuid}"
            "/submerchant/linkAccount",
            request,
            _NO_CONTENT_POLICY,
            "Link account",
        )

    def update_authorization_settings(
        self,
        request: UpdateAuthorizationSettingsRequest,
        merchant_uuid: str,
    ) -> None:
        """Update the account authorization settings of a merchant.

        Raises:
            CastlabsError: If DRMtoday does not answer 200.
            httpx.HTTPError: If a request could not be completed.
        """
        self._call(
            f"frontend/rest/config/v1/{merchant_uuid}/auth/settings",
            request,
            _OK_POLICY,
            "Update authorization settings",
        )

    def add_shared_secret(
        self,
        request: SharedSecretRequest,
        merchant_uuid: str,
    ) -> None:
        """Add an upfront authorization shared secret to a merchant.

        Raises:
            CastlabsError: If DRMtoday does not answer 200.
            httpx.HTTPError: If a request could not be completed.
        """
        self._call(
            f"frontend/rest/config/v1/{merchant_uuid}/upfront/secret/add",
            request,
            _OK_POLICY,
            "Add shared secret",
        )

    def set_fairplay_configuration(
        self,
        request: FairplayRequest,
        merchant_uuid: str,
    ) -> None:
        """Set the Fairplay Streaming configuration of a merchant.

        Raises:
            CastlabsError: If DRMtoday does not answer 200.
            httpx.HTTPError: If a request could not be completed.
        """
        self._call(
            f"frontend/rest/config/v1/{merchant_uuid}/drm/fairplay",
            request,
            _OK_POLICY,
            "Set Fairplay configuration",
        )
