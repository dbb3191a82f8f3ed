from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from pressroom.adapters.memory_repo import InMemoryDocumentRepo
from pressroom.api.deps import Settings, get_document_repo, get_settings, get_sleeper
from pressroom.api.main import app

ROOT = Path(__file__).resolve().parents[2]
USER_ID = "22222222-2222-2222-2222-222222222222"


class NoSleep:
    def __init__(self) -> None:
        self.sleeps: list[float] = []

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)


@pytest.fixture
def document_repo() -> InMemoryDocumentRepo:
    return InMemoryDocumentRepo()


@pytest.fixture
def no_sleep() -> NoSleep:
    return NoSleep()


@pytest.fixture
def override_settings(tmp_path, document_repo, no_sleep):
    def _settings():
        s = Settings()
        s.data_dir = tmp_path / "data"
        s.media_dir = s.data_dir / "media"
        s.rules_path = ROOT / "rules.yaml"
        return s

    app.dependency_overrides[get_settings] = _settings
    app.dependency_overrides[get_document_repo] = lambda: document_repo
    app.dependency_overrides[get_sleeper] = lambda: no_sleep
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def client(override_settings) -> TestClient:
    return TestClient(app)


@pytest.fixture
def auth_headers() -> dict[str, str]:
    return {"X-User-Id": USER_ID}
