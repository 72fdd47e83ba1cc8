"""Shared fixtures for the Delcom client tests."""

import pytest

from delcom_client.core.client import DelcomApiClient, Session
from delcom_client.core.connectivity import StaticConnectivity
from delcom_client.storage.preferences import Preferences

from fakes import BASE_URL, FakeBackend


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def session() -> Session:
    return Session("test-token")


@pytest.fixture
def client(backend: FakeBackend, session: Session) -> DelcomApiClient:
    return DelcomApiClient(base_url=BASE_URL, session=session, transport=backend.transport)


@pytest.fixture
def online() -> StaticConnectivity:
    return StaticConnectivity(True)


@pytest.fixture
def preferences(tmp_path) -> Preferences:
    return Preferences.for_namespace(tmp_path, "ProfilePrefs")


@pytest.fixture
def image_file(tmp_path):
    path = tmp_path / "cover.jpg"
    path.write_bytes(b"\xff\xd8\xff\xe0fake-jpeg-bytes")
    return path
