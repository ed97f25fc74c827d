import base64

import pytest
import requests

from es2tabular.clients.kibana_client import KibanaClient
from es2tabular.errors import KibanaError
from es2tabular.models.kibana import KibanaSettings


class FakeResponse:
    def __init__(self, status_code=200, payload=None, reason="OK", text=""):
        self.status_code = status_code
        self.ok = status_code < 400
        self.reason = reason
        self.text = text
        self._payload = payload

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON")
        return self._payload


class FakeSession:
    def __init__(self, response):
        self.response = response
        self.requests = []

    def post(self, url, **kwargs):
        self.requests.append((url, kwargs))
        return self.response


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("KIBANA_HOST", "KIBANA_PORT", "KIBANA_PROTOCOL",
                 "KIBANA_USERNAME", "KIBANA_PASSWORD", "KIBANA_AUTH_TOKEN"):
        monkeypatch.delenv(name, raising=False)


def test_settings_defaults():
    settings = KibanaSettings()

    assert settings.base_url == "http://localhost:5601"
    assert settings.auth_token is None


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("KIBANA_HOST", "kibana.internal")
    monkeypatch.setenv("KIBANA_PORT", "443")
    monkeypatch.setenv("KIBANA_PROTOCOL", "https")
    monkeypatch.setenv("KIBANA_USERNAME", "  elastic \n")

    settings = KibanaSettings()

    assert settings.base_url == "https://kibana.internal:443"
    assert settings.username == "elastic"


def test_settings_from_config_beat_environment(monkeypatch):
    monkeypatch.setenv("KIBANA_HOST", "from-env")

    settings = KibanaSettings.model_validate({"host": "from-config", "authToken": "abc"})

    assert settings.host == "from-config"
    assert settings.auth_token == "abc"


def test_bearer_token_used_as_is():
    client = KibanaClient(KibanaSettings(auth_token="Bearer xyz"))

    headers = client.auth_headers()

    assert headers["Authorization"] == "Bearer xyz"
    assert headers["kbn-xsrf"] == "true"
    assert headers["Content-Type"] == "application/json"


def test_other_token_is_basic():
    client = KibanaClient(KibanaSettings(auth_token="ZWxhc3RpYzpzZWNyZXQ="))

    assert client.auth_headers()["Authorization"] == "Basic ZWxhc3RpYzpzZWNyZXQ="


def test_username_password_basic():
    client = KibanaClient(KibanaSettings(username="elastic", password="secret"))

    expected = base64.b64encode(b"elastic:secret").decode("ascii")
    assert client.auth_headers()["Authorization"] == f"Basic {expected}"


def test_no_credentials_no_authorization():
    client = KibanaClient(KibanaSettings(username="elastic", password="  "))

    assert "Authorization" not in client.auth_headers()


def test_search_goes_through_console_proxy():
    session = FakeSession(FakeResponse(payload={"hits": {"hits": []}}))
    client = KibanaClient(KibanaSettings(), session=session)

    result = client.search("logs-*", {"size": 0})

    url, kwargs = session.requests[0]
    assert result == {"hits": {"hits": []}}
    assert url == "http://localhost:5601/api/console/proxy?path=%2Flogs-%2A%2F_search&method=POST"
    assert kwargs["json"] == {"size": 0}
    assert kwargs["timeout"] == 60


def test_health_uses_get_method():
    session = FakeSession(FakeResponse(payload={"status": "green"}))
    client = KibanaClient(KibanaSettings(), session=session)

    assert client.check_health() == {"status": "green"}
    assert session.requests[0][0].endswith("path=%2F_cluster%2Fhealth&method=GET")


def test_error_response_raises_kibana_error():
    response = FakeResponse(status_code=400, reason="Bad Request", payload={"error": "parsing_exception"})
    client = KibanaClient(KibanaSettings(), session=FakeSession(response))

    with pytest.raises(KibanaError) as exc:
        client.search("logs", {"query": {"bogus": {}}})

    assert exc.value.status_code == 400
    assert exc.value.details == {"error": "parsing_exception"}
    assert str(exc.value) == "Kibana API error: 400 Bad Request"


def test_error_without_json_body_keeps_text():
    response = FakeResponse(status_code=502, reason="Bad Gateway", text="upstream down")
    client = KibanaClient(KibanaSettings(), session=FakeSession(response))

    with pytest.raises(KibanaError) as exc:
        client.check_health()

    assert exc.value.details == "upstream down"


class UnreachableSession:
    def post(self, url, **kwargs):
        raise requests.ConnectionError("Connection refused")


def test_connection_failure_raises_kibana_error():
    client = KibanaClient(KibanaSettings(), session=UnreachableSession())

    with pytest.raises(KibanaError) as exc:
        client.check_health()

    assert exc.value.status_code == 502
    assert "Connection refused" in exc.value.details


def test_non_json_success_body_raises_kibana_error():
    response = FakeResponse(status_code=200, text="<html>login</html>")
    client = KibanaClient(KibanaSettings(), session=FakeSession(response))

    with pytest.raises(KibanaError) as exc:
        client.search("logs", {})

    assert exc.value.status_code == 502
    assert exc.value.details == "<html>login</html>"
