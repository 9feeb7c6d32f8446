import sys
from pathlib import Path

import httpx
import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from ncm_client import NcmClient  # noqa: E402

BASE_URL = "https://ncm.test/api/v2"

NCM_ENV_VARS = (
    "CP_BASE_URL",
    "NCM_BASE_URL",
    "X_CP_API_ID",
    "X_CP_API_KEY",
    "X_ECM_API_ID",
    "X_ECM_API_KEY",
    "NCM_LOG_EVENTS",
    "NCM_RETRIES",
    "NCM_RETRY_BACKOFF_FACTOR",
    "NCM_RETRY_ON",
    "NCM_MAX_REDIRECTS",
    "NCM_TIMEOUT",
)


def pytest_configure(config):
    # Add custom markers for test organization
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )


@pytest.fixture(autouse=True)
def mock_env_vars(monkeypatch, tmp_path):
    """Isolate tests from the developer's environment.

    Clears every variable the settings read and runs each test from an
    empty directory so no stray ``.env`` file is picked up.
    """
    for name in NCM_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("LOG_LEVEL", "INFO")
    monkeypatch.chdir(tmp_path)
    yield


@pytest.fixture
def api_keys():
    """A complete set of API key headers."""
    return {
        "X-CP-API-ID": "b89a24a3",
        "X-CP-API-KEY": "4b1d77fe271241b1cfafab993ef0891d",
        "X-ECM-API-ID": "c71b3e68-33f5-4e69-9853-14989700f204",
        "X-ECM-API-KEY": "f1ca6cd41f326c00e23322795c063068274caa30",
    }


@pytest.fixture
def page_response():
    """Build a collection page response."""

    def _page(data, next_url=None, status_code=200):
        return httpx.Response(
            status_code, json={"data": data, "meta": {"next": next_url}}
        )

    return _page


@pytest.fixture
def make_client(api_keys):
    """Build clients backed by a mock transport; closed after the test."""
    clients = []

    def _make(handler, **kwargs):
        kwargs.setdefault("api_keys", api_keys)
        kwargs.setdefault("base_url", BASE_URL)
        kwargs.setdefault("sleep", lambda seconds: None)
        client = NcmClient(transport=httpx.MockTransport(handler), **kwargs)
        clients.append(client)
        return client

    yield _make
    for client in clients:
        client.close()
