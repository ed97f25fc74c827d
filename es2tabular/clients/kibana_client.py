"""
Kibana client for running Elasticsearch queries through Kibana's Console Proxy API.

Usage:
    from es2tabular.clients.kibana_client import KibanaClient
    from es2tabular.models.kibana import KibanaSettings

    client = KibanaClient(KibanaSettings())
    response = client.search("logs-*", {"size": 0, "aggs": {...}})
"""

import base64
import logging
from typing import Any, Dict, Optional
from urllib.parse import quote

import requests

from es2tabular.errors import KibanaError
from es2tabular.models.kibana import KibanaSettings

logger = logging.getLogger(__name__)

PROXY_PATH = "/api/console/proxy"


class KibanaClient:
    def __init__(self, settings: Optional[KibanaSettings] = None, session: Optional[requests.Session] = None):
        self.settings = settings or KibanaSettings()
        self.session = session or requests.Session()

    @property
    def base_url(self) -> str:
        return self.settings.base_url

    def auth_headers(self) -> Dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "kbn-xsrf": "true",
        }

        token = self.settings.auth_token
        if token:
            # "Bearer ..." is sent as-is, anything else is a Basic credential
            headers["Authorization"] = token if token.startswith("Bearer ") else f"Basic {token}"
        elif self.settings.username and self.settings.password:
            credentials = f"{self.settings.username}:{self.settings.password}".encode("utf-8")
            headers["Authorization"] = f"Basic {base64.b64encode(credentials).decode('ascii')}"

        return headers

    def proxy_url(self, path: str, method: str) -> str:
        return f"{self.base_url}{PROXY_PATH}?path={quote(path, safe='')}&method={method}"

    def _request(self, path: str, method: str, body: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        # The console proxy is always called with POST; `method` is forwarded to Elasticsearch
        url = self.proxy_url(path, method)
        try:
            response = self.session.post(
                url,
                json=body,
                headers=self.auth_headers(),
                timeout=self.settings.timeout,
                verify=self.settings.verify_ssl,
            )
        except requests.RequestException as e:
            logger.error("Kibana %s %s unreachable: %s", method, path, e)
            raise KibanaError(502, "Kibana unreachable", str(e)) from e

        if not response.ok:
            try:
                details = response.json()
            except ValueError:
                details = response.text
            logger.error("Kibana %s %s failed: %s %s", method, path, response.status_code, response.reason)
            raise KibanaError(response.status_code, response.reason or "", details)

        try:
            return response.json()
        except ValueError as e:
            logger.error("Kibana %s %s returned a non-JSON body", method, path)
            raise KibanaError(502, "Invalid JSON from Kibana", response.text) from e

    def search(self, index: str, query: Dict[str, Any]) -> Dict[str, Any]:
        """Runs `query` against `index` (e.g. 'my-index-*') and returns the raw response."""
        logger.info("Executing query on index: %s", index)
        return self._request(f"/{index}/_search", "POST", query)

    def check_health(self) -> Dict[str, Any]:
        return self._request("/_cluster/health", "GET")
