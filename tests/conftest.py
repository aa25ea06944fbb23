from __future__ import annotations

import httpx
import pytest

from bekind_admin_sdk.config import ClientConfig
from bekind_admin_sdk.credential_store import MemoryCredentialStore
from bekind_admin_sdk.http_client import HttpGateway
from bekind_admin_sdk.session import SessionManager

AUTH_BASE_URL = "https://auth.example.test/api"
API_BASE_URL = "https://api.example.test/api/v1"


@pytest.fixture
def config() -> ClientConfig:
    return ClientConfig(env_name="test", auth_base_url=AUTH_BASE_URL, api_base_url=API_BASE_URL)


@pytest.fixture
def store() -> MemoryCredentialStore:
    return MemoryCredentialStore()


@pytest.fixture
def session(store: MemoryCredentialStore) -> SessionManager:
    manager = SessionManager(store)
    manager.bootstrap()
    return manager


@pytest.fixture
def make_gateway(config: ClientConfig, session: SessionManager):
    def _make(handler, **kwargs) -> HttpGateway:
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return HttpGateway(config, kwargs.pop("session", session), client=client, **kwargs)

    return _make
