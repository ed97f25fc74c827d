from typing import Any, Dict

from es2tabular.clients.kibana_client import KibanaClient
from es2tabular.pipeline.core import Source


class KibanaSource(Source):
    def __init__(self, client: KibanaClient, index: str, query: Dict[str, Any]):
        """
        Args:
            client: Configured KibanaClient.
            index: Index pattern to search.
            query: Elasticsearch query body.
        """
        self.client = client
        self.index = index
        self.query = query

    def read(self) -> Dict[str, Any]:
        return self.client.search(self.index, self.query)
