from typing import Any, List, Protocol
from remedy_finder.domain.models import RemedyRecord


class KeyValueStorePort(Protocol):
    def get(self, key: str, default: Any = None) -> Any:
        ...

    def set(self, key: str, value: Any) -> None:
        """
        Persists a JSON-serialisable value under key. Must not raise when the
        underlying storage is unavailable.
        """
        ...


class CatalogPort(Protocol):
    def load(self) -> List[RemedyRecord]:
        ...
