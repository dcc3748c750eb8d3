import pytest
import respx

from api_client import LibraryApiClient
from config import settings
from token_store import TokenStore
from utils.ui_helpers import OUTPUT_MODE_ENV

BASE_URL = "http://library.test"


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    # Her test kendi token dosyasını ve sahte sunucu adresini kullanır
    monkeypatch.setattr(settings, "api_base_url", BASE_URL)
    monkeypatch.setattr(settings, "token_file", str(tmp_path / "session.json"))
    monkeypatch.setattr(settings, "http_retries", 1)
    monkeypatch.setattr(settings, "logout_on_verify_network_error", False)
    monkeypatch.setenv(OUTPUT_MODE_ENV, "plain")
    yield


@pytest.fixture
def mock_api():
    with respx.mock(base_url=BASE_URL, assert_all_called=False) as respx_mock:
        yield respx_mock


@pytest.fixture
def store(tmp_path):
    return TokenStore(tmp_path / "session.json")


@pytest.fixture
def client():
    api = LibraryApiClient(base_url=BASE_URL, retries=1)
    yield api
    api.close()
