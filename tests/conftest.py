"""Shared fixtures for the DRMtoday client tests."""

import pytest

from castlabs_client import restapi
from fakes import AUTH_BASE_URL, INGESTION_BASE_URL, PASSWORD, USERNAME, FakeDrmToday


@pytest.fixture
def fake_server() -> FakeDrmToday:
    return FakeDrmToday()


@pytest.fixture
def api_client(fake_server: FakeDrmToday) -> restapi.CastlabsClient:
    """Client without trailing slashes on its base URLs."""
    return restapi.CastlabsClient(
        username=USERNAME,
        password=PASSWORD,
        auth_base_url=AUTH_BASE_URL,
        ingestion_base_url=INGESTION_BASE_URL,
        transport=fake_server.transport,
    )
