"""Pytest configuration and shared fixtures."""

import pytest
from fastapi.testclient import TestClient

from podcatalog.api import create_app
from podcatalog.config import Settings
from podcatalog.storage import CatalogStore

IN_MEMORY_URL = "sqlite://"


@pytest.fixture
def settings() -> Settings:
    """Settings built from defaults only, ignoring any local .env file."""
    return Settings(_env_file=None)


@pytest.fixture
def empty_store():
    """An isolated in-memory store with tables but no rows."""
    store = CatalogStore(database_url=IN_MEMORY_URL, echo=False)
    store.create_schema()
    yield store
    store.close()


@pytest.fixture
def store():
    """An isolated in-memory store holding the seed data."""
    store = CatalogStore(database_url=IN_MEMORY_URL, echo=False)
    store.initialize()
    yield store
    store.close()


@pytest.fixture
def client(store, settings):
    return TestClient(create_app(store, settings))
