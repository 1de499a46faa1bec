import pytest
from fastapi.testclient import TestClient

from pickleball_engine.main import app


@pytest.fixture(name="client")
def client_fixture():
    """Provide a test client.

    The engine keeps no state between requests, so no dependency
    overrides are needed; every test gets a fresh client.
    """
    with TestClient(app) as client:
        yield client
