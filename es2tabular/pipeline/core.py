from abc import ABC, abstractmethod
from typing import Any, Dict


class Source(ABC):
    @abstractmethod
    def read(self) -> Dict[str, Any]:
        """
        Reads a raw Elasticsearch search response from an external system.
        """
        pass


class Transform(ABC):
    @abstractmethod
    def process(self, *args, **kwargs) -> Any:
        """
        Processes data. Input/Output depends on the specific transform step.
        """
        pass


class Sink(ABC):
    @abstractmethod
    def write(self, row: Dict[str, Any]) -> None:
        """
        Accepts a single row and adds it to the internal buffer.
        """
        pass

    @abstractmethod
    def flush(self) -> None:
        """
        Forces the buffer to be written to the destination system.
        """
        pass
