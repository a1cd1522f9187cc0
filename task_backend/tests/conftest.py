import pytest
from fastapi.testclient import TestClient

from src.api.main import create_app
from src.api.repositories import InMemoryRepository
from src.api.settings import Settings


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        port=3001,
        host="127.0.0.1",
        cors_allow_origins=["*"],
        api_key="demo-key-12345",
        log_level="INFO",
    )


@pytest.fixture()
def repo() -> InMemoryRepository:
    # Fresh seeded store per test: ids 1..3, next id 4
    return InMemoryRepository()


@pytest.fixture()
def client(settings, repo) -> TestClient:
    return TestClient(create_app(settings=settings, repository=repo))
