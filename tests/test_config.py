"""Tests for configuration loading and client construction."""

import json
from unittest.mock import patch

import pydantic
import pytest
import structlog

from castlabs_client import config, restapi
from fakes import SERVICE_TICKET, FakeDrmToday


@pytest.fixture(autouse=True)
def _reset_structlog():
    yield
    structlog.reset_defaults()


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "castlabs.json"
    path.write_text(
        json.dumps(
            {
                "username": "api-user",
                "password": "s3cret",
                "auth_base_url": "https://auth.example.com",
                "ingestion_base_url": "https://fe.example.com",
                "connection_timeout_seconds": 15,
                "log_level": "debug",
            },
        ),
    )
    return path


def test_load_config_reads_json(config_file):
    cfg = config.load_config(str(config_file))

    assert cfg.username == "api-user"
    assert cfg.auth_base_url == "https://auth.example.com"
    assert cfg.connection_timeout_seconds == 15


def test_load_config_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError, match="not found"):
        config.load_config(str(tmp_path / "missing.json"))


def test_config_defaults():
    cfg = config.ClientConfig(username="u", password="p")

    assert cfg.auth_base_url == restapi.DEFAULT_AUTH_BASE_URL
    assert cfg.ingestion_base_url == restapi.DEFAULT_INGESTION_BASE_URL
    assert cfg.connection_timeout_seconds == restapi.DEFAULT_TIMEOUT
    assert cfg.log_level == "INFO"


def test_config_requires_credentials():
    with pytest.raises(pydantic.ValidationError):
        config.ClientConfig(username="", password="p")


def test_config_is_immutable():
    cfg = config.ClientConfig(username="u", password="p")
    with pytest.raises(pydantic.ValidationError):
        cfg.username = "other"


def test_create_client_normalizes_urls(config_file):
    client = config.create_client(config.load_config(str(config_file)))

    assert client.auth_base_url == "https://auth.example.com/"
    assert client.ingestion_base_url == "https://fe.example.com/"


def test_created_client_uses_configured_timeout(config_file):
    fake_server = FakeDrmToday()
    fake_server.api = {"status_code": 200}
    client = config.create_client(
        config.load_config(str(config_file)),
        transport=fake_server.transport,
    )

    client.update_authorization_settings(
        restapi.types.UpdateAuthorizationSettingsRequest(callback_enabled=True),
        "merchant-1",
    )

    assert len(fake_server.requests) == 3
    assert all(r.extensions["timeout"]["read"] == 15 for r in fake_server.requests)
    assert str(fake_server.api_requests[0].url).endswith(f"?ticket={SERVICE_TICKET}")


def test_create_client_from_env(config_file, monkeypatch):
    monkeypatch.setenv(config.CONFIG_ENV_VAR, str(config_file))

    client = config.create_client_from_file()

    assert isinstance(client, restapi.CastlabsClient)
    assert client.ingestion_base_url == "https://fe.example.com/"


def test_create_client_from_explicit_path_wins(config_file, monkeypatch, tmp_path):
    monkeypatch.setenv(config.CONFIG_ENV_VAR, str(tmp_path / "missing.json"))

    client = config.create_client_from_file(str(config_file))

    assert client.auth_base_url == "https://auth.example.com/"


def test_create_client_from_file_leaves_logging_alone(config_file):
    """Global structlog setup is the application's choice by default."""
    with patch.object(config, "configure_logging") as configure_logging:
        config.create_client_from_file(str(config_file))

    configure_logging.assert_not_called()


def test_create_client_from_file_can_configure_logging(config_file):
    with patch.object(config, "configure_logging") as configure_logging:
        config.create_client_from_file(str(config_file), configure_logs=True)

    configure_logging.assert_called_once_with("debug")
