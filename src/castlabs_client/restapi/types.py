"""Request and response types for the DRMtoday REST API.

Pydantic models mirroring the JSON documents exchanged with DRMtoday. Field
names are snake_case in Python and camelCase on the wire. Unknown fields in
responses are ignored so that new server-side attributes do not break
decoding.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CastlabsModel(BaseModel):
    """Base model with camelCase JSON aliases."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_json(self) -> str:
        """Serialize using wire names, omitting unset optional fields."""
        return self.model_dump_json(by_alias=True, exclude_none=True)


# ---------------------------------------------------------------------------
# Key ingestion
# ---------------------------------------------------------------------------


class IngestKey(CastlabsModel):
    """A single content key for one stream of an asset.

    Key material (key_id, key, iv) is base64 encoded.
    """

    stream_type: str = "VIDEO_AUDIO"
    key_id: str | None = None
    key: str | None = None
    iv: str | None = None
    algorithm: str | None = None
    key_rotation_id: str | None = None


class Asset(CastlabsModel):
    """An asset (optionally a variant of one) and its keys."""

    type: str = "DashAsset"
    asset_id: str | None = None
    variant_id: str | None = None
    keys: list[IngestKey] = []


class IngestKeysRequest(CastlabsModel):
    """Body of a key ingest request."""

    assets: list[Asset] = []


class IngestAssetsResponse(CastlabsModel):
    """Assets as stored by DRMtoday after a key ingest."""

    assets: list[Asset] = []


# ---------------------------------------------------------------------------
# Reselling
# ---------------------------------------------------------------------------


class AddSubMerchantAccountRequest(CastlabsModel):
    """Create a sub-merchant under a reseller account."""

    name: str
    api_name_suffix: str | None = None


class AddSubMerchantAccountResponse(CastlabsModel):
    """Created sub-merchant. ``sub_merchant_uuid`` is absent on failure."""

    sub_merchant_uuid: str | None = None
    name: str | None = None
    api_name_suffix: str | None = None


class LinkAccountToSubMerchantRequest(CastlabsModel):
    """Link an existing user or API account to a sub-merchant."""

    account_type: str = "API"
    username: str
    sub_merchant_uuid: str


# ---------------------------------------------------------------------------
# Merchant configuration
# ---------------------------------------------------------------------------


class UpdateAuthorizationSettingsRequest(CastlabsModel):
    """Account authorization settings; None fields are left unchanged."""

    upfront_token_enabled: bool | None = None
    callback_enabled: bool | None = None
    callback_url: str | None = None
    allow_test_tokens: bool | None = None


class SharedSecretRequest(CastlabsModel):
    """Shared secret used to sign upfront authorization tokens."""

    secret_id: str
    secret: str
    description: str | None = None
    active: bool = True


class FairplayRequest(CastlabsModel):
    """Fairplay Streaming credentials for a merchant.

    ``ask`` is the application secret key; certificate and private key are
    PEM or base64 encoded DER.
    """

    ask: str
    certificate: str
    private_key: str
    pass_phrase: str | None = None
