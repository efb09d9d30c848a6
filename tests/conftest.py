from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from task_api.main import create_app
from task_api.repositories import TaskStore
from task_api.settings import Settings


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        host="127.0.0.1",
        port=8080,
        log_level="INFO",
        cors_allow_origins=["*"],
    )


@pytest.fixture()
def store() -> TaskStore:
    """Fresh, empty store per test so id expectations start at 1."""
    return TaskStore()


@pytest.fixture()
def client(settings: Settings, store: TaskStore) -> TestClient:
    app = create_app(settings, store)
    return TestClient(app)
