"""Search history with deduplication and a bounded size."""
import logging
import random
import string
import time
from typing import Callable, List, Optional, Sequence

from pydantic import ValidationError

from remedy_finder.application.ports import KeyValueStorePort
from remedy_finder.domain.models import SearchHistoryEntry
from remedy_finder.domain.normalizer import to_matching_keys


logger = logging.getLogger(__name__)


HISTORY_STORAGE_KEY = "remedy-finder-search-history"
DEFAULT_HISTORY_CAPACITY = 5

_ID_ALPHABET = string.ascii_lowercase + string.digits


def _now_ms() -> int:
    return int(time.time() * 1000)


def generate_entry_id(timestamp: int) -> str:
    suffix = "".join(random.choice(_ID_ALPHABET) for _ in range(6))
    return f"{timestamp}-{suffix}"


def symptoms_equal(symptoms1: Sequence[str], symptoms2: Sequence[str]) -> bool:
    """Order, case and accent insensitive comparison of two symptom lists."""
    if len(symptoms1) != len(symptoms2):
        return False
    return to_matching_keys(symptoms1) == to_matching_keys(symptoms2)


def parse_entry(raw) -> Optional[SearchHistoryEntry]:
    if not isinstance(raw, dict):
        return None
    try:
        return SearchHistoryEntry.model_validate(raw)
    except ValidationError:
        return None


class SearchHistoryStore:
    """Keeps the most recent searches, newest first."""

    def __init__(
        self,
        store: KeyValueStorePort,
        capacity: int = DEFAULT_HISTORY_CAPACITY,
        clock: Optional[Callable[[], int]] = None,
        storage_key: str = HISTORY_STORAGE_KEY,
    ):
        """
        Initialize SearchHistoryStore.

        Args:
            store: Key-value store holding the history slot
            capacity: Maximum number of entries kept
            clock: Returns the current time in epoch milliseconds
            storage_key: Name of the slot in the store
        """
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.store = store
        self.capacity = capacity
        self.clock = clock or _now_ms
        self.storage_key = storage_key

    def _load(self) -> List[SearchHistoryEntry]:
        raw = self.store.get(self.storage_key, [])
        if not isinstance(raw, list):
            logger.warning("History slot %s does not hold a list; ignoring it", self.storage_key)
            return []
        entries = []
        for item in raw:
            entry = parse_entry(item)
            if entry is None:
                logger.warning("Dropping invalid history entry: %r", item)
                continue
            entries.append(entry)
        return entries

    def _save(self, entries: List[SearchHistoryEntry]) -> None:
        self.store.set(self.storage_key, [e.to_storage() for e in entries])

    @property
    def history(self) -> List[SearchHistoryEntry]:
        return self._load()

    def add_search(
        self,
        symptoms: Sequence[str],
        result_count: int,
        allergens: Optional[Sequence[str]] = None,
        filtered_count: int = 0,
    ) -> Optional[SearchHistoryEntry]:
        """
        Record a search.

        A search with the same symptoms as an existing entry (ignoring order,
        case and accents) refreshes that entry and moves it to the front instead
        of creating a new one.

        Returns:
            The stored entry, or None if the search was rejected
        """
        if not symptoms or isinstance(symptoms, str):
            logger.warning("add_search: symptoms must be a non-empty list")
            return None
        symptoms = [s for s in symptoms if isinstance(s, str) and s.strip()]
        if not symptoms:
            logger.warning("add_search: symptoms must be a non-empty list")
            return None

        entries = self._load()
        now = self.clock()
        allergens = list(allergens or [])

        existing_index = next(
            (i for i, e in enumerate(entries) if symptoms_equal(e.symptoms, symptoms)),
            None,
        )

        if existing_index is not None:
            existing = entries.pop(existing_index)
            entry = existing.model_copy(update={
                "symptoms": list(symptoms),
                "allergens": allergens,
                "timestamp": now,
                "result_count": max(0, int(result_count)),
                "filtered_count": max(0, int(filtered_count)),
            })
            logger.info("Search already in history, moved to top: %s", symptoms)
        else:
            entry = SearchHistoryEntry(
                id=generate_entry_id(now),
                symptoms=list(symptoms),
                allergens=allergens,
                timestamp=now,
                result_count=max(0, int(result_count)),
                filtered_count=max(0, int(filtered_count)),
            )
            logger.info("New search added to history: %s", symptoms)

        entries.insert(0, entry)
        if len(entries) > self.capacity:
            entries = entries[:self.capacity]
            logger.info("History limited to %d entries", self.capacity)

        self._save(entries)
        return entry

    def remove_search(self, entry_id: str) -> bool:
        if not isinstance(entry_id, str):
            logger.warning("remove_search: id must be a string")
            return False
        entries = self._load()
        remaining = [e for e in entries if e.id != entry_id]
        self._save(remaining)
        removed = len(remaining) != len(entries)
        if removed:
            logger.info("Search removed from history: %s", entry_id)
        return removed

    def clear_history(self) -> None:
        self._save([])
        logger.info("History cleared")
