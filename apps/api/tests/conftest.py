from collections.abc import Iterator

from fastapi import FastAPI
from fastapi.testclient import TestClient
import pytest

from docqa.config import get_settings
from docqa.main import create_app, get_generation_client


@pytest.fixture(autouse=True)
def reset_api_caches() -> Iterator[None]:
    get_settings.cache_clear()
    get_generation_client.cache_clear()
    yield
    get_settings.cache_clear()
    get_generation_client.cache_clear()


@pytest.fixture
def app(monkeypatch: pytest.MonkeyPatch) -> FastAPI:
    monkeypatch.setenv("ALLOWED_ORIGINS", "https://tarnglobal.com,app.example.org")
    monkeypatch.setenv("LLM_PROVIDER", "vertex")
    return create_app()


@pytest.fixture
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
