import pytest
from fastapi.testclient import TestClient

from prode.main import app


@pytest.fixture(name="client")
def client_fixture():
    """Provide a test client for the stateless API"""
    with TestClient(app) as client:
        yield client
