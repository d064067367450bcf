"""Configuration and logging setup for the Castlabs client."""

import json
import logging
import os
import pathlib

import httpx
import pydantic
import structlog

from . import restapi

CONFIG_ENV_VAR = "CASTLABS_CLIENT_CONFIG_PATH"
logger = structlog.get_logger(__name__)


class ClientConfig(pydantic.BaseModel):
    """Configuration for the Castlabs DRMtoday client."""

    model_config = pydantic.ConfigDict(frozen=True)

    username: str = pydantic.Field(min_length=1, description="DRMtoday API username")
    password: str = pydantic.Field(min_length=1, description="DRMtoday API password")
    auth_base_url: str = pydantic.Field(
        restapi.DEFAULT_AUTH_BASE_URL,
        description="Base URL of the CAS authentication server",
    )
    ingestion_base_url: str = pydantic.Field(
        restapi.DEFAULT_INGESTION_BASE_URL,
        description="Base URL of the DRMtoday API",
    )
    connection_timeout_seconds: float = pydantic.Field(
        restapi.DEFAULT_TIMEOUT,
        description="Request timeout in seconds, <= 0 for the httpx default",
    )
    log_level: str = pydantic.Field("INFO", description="Logging level")


def configure_logging(log_level_name: str) -> None:
    """Configure structlog for logfmt output on stdout.

    Replaces the global structlog configuration, so it is meant for scripts
    and applications, not for libraries embedding the client.
    """
    log_level = getattr(logging, log_level_name.upper(), logging.INFO)
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.EventRenamer("msg"),
            structlog.processors.format_exc_info,
            structlog.processors.LogfmtRenderer(
                key_order=("timestamp", "level", "msg"),
            ),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def load_config(config_path: str) -> ClientConfig:
    """Load configuration from JSON file."""
    path = pathlib.Path(config_path)
    if not path.exists():
        msg = f"Configuration file not found: {config_path}"
        raise FileNotFoundError(msg)

    with path.open("r") as f:
        data = json.load(f)

    return ClientConfig(**data)


def create_client(
    config: ClientConfig,
    transport: httpx.BaseTransport | None = None,
) -> restapi.CastlabsClient:
    """Construct a DRMtoday client from validated config."""
    client = restapi.CastlabsClient(
        username=config.username,
        password=config.password,
        auth_base_url=config.auth_base_url,
        ingestion_base_url=config.ingestion_base_url,
        connection_timeout_seconds=config.connection_timeout_seconds,
        transport=transport,
    )
    logger.info(
        "Created DRMtoday client",
        auth_base_url=client.auth_base_url,
        ingestion_base_url=client.ingestion_base_url,
    )
    return client


def create_client_from_file(
    config_path: str | None = None,
    configure_logs: bool = False,
) -> restapi.CastlabsClient:
    """Create a client using a config path or environment default.

    Args:
        config_path: JSON config file; defaults to $CASTLABS_CLIENT_CONFIG_PATH
            or /config.json.
        configure_logs: Also set up process-wide structlog output at the
            configured log level. Leave False when the application owns
            logging setup.
    """
    resolved_path = config_path or os.environ.get(CONFIG_ENV_VAR, "/config.json")
    config = load_config(resolved_path)
    if configure_logs:
        configure_logging(config.log_level)
    return create_client(config)
