import logging
from typing import Iterable, List, Optional

from remedy_finder.application.ports import KeyValueStorePort
from remedy_finder.domain.models import RemedyRecord
from remedy_finder.domain.normalizer import dedupe_display, to_display_form, to_matching_key


logger = logging.getLogger(__name__)


MAX_SYMPTOMS = 5
SELECTED_SYMPTOMS_STORAGE_KEY = "remedy-finder-selected-symptoms"


def _clean(symptoms) -> List[str]:
    if not isinstance(symptoms, list):
        return []
    return [s for s in symptoms if isinstance(s, str) and s.strip()]


class SymptomSelection:
    """The symptoms currently picked by the user, at most MAX_SYMPTOMS."""

    def __init__(self, symptoms: Optional[Iterable[str]] = None, limit: int = MAX_SYMPTOMS):
        self.limit = limit
        self._symptoms: List[str] = []
        if symptoms:
            self.replace(symptoms)

    @property
    def symptoms(self) -> List[str]:
        return list(self._symptoms)

    @property
    def is_at_limit(self) -> bool:
        return len(self._symptoms) >= self.limit

    def contains(self, symptom: str) -> bool:
        key = to_matching_key(symptom)
        return any(to_matching_key(s) == key for s in self._symptoms)

    def add(self, symptom: str) -> bool:
        display = to_display_form(symptom)
        if not display:
            logger.warning("add: ignoring empty symptom")
            return False
        if self.is_at_limit:
            logger.info("add: selection already holds %d symptoms", self.limit)
            return False
        if self.contains(display):
            return False
        self._symptoms.append(display)
        return True

    def remove(self, symptom: str) -> bool:
        before = len(self._symptoms)
        self._symptoms = [s for s in self._symptoms if s != symptom]
        return len(self._symptoms) != before

    def replace(self, symptoms: Iterable[str]) -> None:
        self._symptoms = dedupe_display(symptoms)[:self.limit]

    def clear(self) -> None:
        self._symptoms = []


class SelectedSymptomsStore:
    """Last selected symptoms, kept so a reload does not lose the selection."""

    def __init__(self, store: KeyValueStorePort, storage_key: str = SELECTED_SYMPTOMS_STORAGE_KEY):
        self.store = store
        self.storage_key = storage_key

    def load(self) -> List[str]:
        return _clean(self.store.get(self.storage_key, []))

    def save(self, symptoms: Iterable[str]) -> None:
        self.store.set(self.storage_key, _clean(list(symptoms)))


def symptom_vocabulary(catalog: Iterable[RemedyRecord]) -> List[str]:
    """All symptoms the catalog knows about, deduplicated on matching keys, sorted."""
    vocabulary = dedupe_display(s for remedy in catalog for s in remedy.symptoms)
    return sorted(vocabulary, key=to_matching_key)


def suggest_symptoms(
    prefix: str,
    catalog: Iterable[RemedyRecord],
    exclude: Iterable[str] = (),
    limit: int = 10,
) -> List[str]:
    key = to_matching_key(prefix)
    if not key:
        return []
    excluded = {to_matching_key(s) for s in exclude}
    starts, contains = [], []
    for symptom in symptom_vocabulary(catalog):
        skey = to_matching_key(symptom)
        if skey in excluded:
            continue
        if skey.startswith(key):
            starts.append(symptom)
        elif key in skey:
            contains.append(symptom)
    return (starts + contains)[:limit]
