"""
Shared fixtures: Flask app/client wired to a fake Kibana client and a
temporary data directory, plus loaders for the sample responses in tests/data.
"""

import json
from pathlib import Path

import pytest

DATA_DIR = Path(__file__).parent / "data"

USER_HEADER = "X-Auth-Request-Email"
USER_EMAIL = "analyst@example.com"


def load_sample(name: str) -> dict:
    with (DATA_DIR / name).open(encoding="utf-8") as f:
        return json.load(f)


class FakeKibanaClient:
    base_url = "http://kibana.test:5601"

    def __init__(self, response=None, error=None):
        self.response = response or {}
        self.error = error
        self.calls = []

    def search(self, index, query):
        self.calls.append((index, query))
        if self.error:
            raise self.error
        return self.response

    def check_health(self):
        if self.error:
            raise self.error
        return {"status": "green"}


@pytest.fixture
def sample():
    return load_sample


@pytest.fixture
def fake_kibana():
    return FakeKibanaClient()


@pytest.fixture
def app(tmp_path, fake_kibana):
    """Create test Flask application."""
    from es2tabular import create_app

    app = create_app({
        "storage": {
            "dataDir": str(tmp_path / "data"),
            "allowedDomains": ["example.com"],
        },
    })
    app.config["TESTING"] = True
    app.extensions["kibana"] = fake_kibana
    return app


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture
def auth_headers():
    return {USER_HEADER: USER_EMAIL}
