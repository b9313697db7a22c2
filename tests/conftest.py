import pytest
from fastapi.testclient import TestClient

from core.storage import get_store
from services.page import PageStore
from web import app


@pytest.fixture
def page_store(tmp_path):
    """Page store rooted in a temporary directory"""
    store = PageStore(tmp_path / "pages", tmp_path / "uploads")
    store.initialize()
    return store


@pytest.fixture
def client(page_store):
    """HTTP client whose handlers use the temporary page store"""
    app.dependency_overrides[get_store] = lambda: page_store
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
