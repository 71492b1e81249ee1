"""
Pytest configuration and shared fixtures for TinyLink tests.
"""

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from tinylink.config import Settings
from tinylink.database import build_engine
from tinylink.main import create_app
from tinylink.services.link_store import LinkStore


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings pointing at a throwaway SQLite file."""
    return Settings(
        DATABASE_URL=f"sqlite:///{tmp_path / 'tinylink_test.db'}",
        LOG_LEVEL="WARNING",
    )


@pytest.fixture
def store(settings: Settings):
    link_store = LinkStore(build_engine(settings))
    link_store.create_schema()
    yield link_store
    link_store.dispose()


@pytest.fixture
def client(settings: Settings, store: LinkStore):
    app = create_app(settings, store=store)
    with TestClient(app) as test_client:
        yield test_client
