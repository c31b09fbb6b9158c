# tests/conftest.py

import mongomock
import pytest

from backend.app import create_app
from backend.config import TestConfig
from frontend.api import ApiClient
from frontend.session import Session

from .fakes import TEST_API_URL, FlaskTransport
from .helpers import bearer, register


@pytest.fixture()
def mongo_client():
    return mongomock.MongoClient()


@pytest.fixture()
def app(mongo_client):
    return create_app(TestConfig, mongo_client=mongo_client)


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def db(app):
    return app.extensions["mongo_db"]


@pytest.fixture()
def ada(client):
    return register(client)


@pytest.fixture()
def auth_headers(ada):
    return bearer(ada["token"])


@pytest.fixture()
def other_headers(client):
    return bearer(register(client, name="Bob", email="bob@example.com")["token"])


@pytest.fixture()
def transport(client):
    return FlaskTransport(client)


@pytest.fixture()
def session(tmp_path):
    return Session(tmp_path / "session.json")


@pytest.fixture()
def api(session, transport):
    return ApiClient(session, base_url=TEST_API_URL, http=transport)
