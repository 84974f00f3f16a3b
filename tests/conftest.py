"""Shared fixtures: every test gets its own store and app."""
import pytest
from fastapi.testclient import TestClient

from main import create_app
from settings import Settings
from store import ChatStore


@pytest.fixture
def store():
    return ChatStore()


@pytest.fixture
def settings():
    return Settings(BASE_PATH="", INSTANCE_NAME="test")


@pytest.fixture
def app(settings, store):
    return create_app(settings, store)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c
