import pytest
from fastapi.testclient import TestClient

from feedrank.main import app

client = TestClient(app)


class PingingEs:
    def __init__(self, result=True, error: Exception | None = None):
        self.result = result
        self.error = error

    async def ping(self):
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture(autouse=True)
def reset_es():
    app.state.es = None
    yield
    app.state.es = None


def test_healthcheck_returns_200():
    response = client.get("/health")
    assert response.status_code == 200


def test_healthcheck_without_store():
    response = client.get("/health")
    assert response.json() == {"status": "ok", "elasticsearch": "unconfigured"}


def test_healthcheck_store_up():
    app.state.es = PingingEs()
    assert client.get("/health").json() == {"status": "ok", "elasticsearch": "up"}


def test_healthcheck_store_down_still_ok():
    app.state.es = PingingEs(result=False)
    assert client.get("/health").json()["elasticsearch"] == "down"

    app.state.es = PingingEs(error=ConnectionError("refused"))
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "elasticsearch": "down"}
