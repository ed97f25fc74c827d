from typing import Any, Optional


class TabularError(Exception):
    """Base class for every error raised by es2tabular."""


class AggregationNotFound(TabularError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f'Aggregation "{name}" not found')


class NoDataError(TabularError):
    def __init__(self, message: str = "No aggregations or hits found in Elasticsearch output"):
        super().__init__(message)


class KibanaError(TabularError):
    def __init__(self, status_code: int, reason: str = "", details: Optional[Any] = None):
        self.status_code = status_code
        self.reason = reason
        self.details = details
        super().__init__(f"Kibana API error: {status_code} {reason}".rstrip())


class StorageError(TabularError):
    """Invalid file name or unusable storage location."""


class StoredFileNotFound(StorageError, FileNotFoundError):
    def __init__(self, filename: str):
        self.filename = filename
        super().__init__(f"File not found: {filename}")
