"""Unit tests for symptom selection and suggestions."""
import pytest

from remedy_finder.application.selection import (
    MAX_SYMPTOMS,
    SELECTED_SYMPTOMS_STORAGE_KEY,
    SelectedSymptomsStore,
    SymptomSelection,
    suggest_symptoms,
    symptom_vocabulary,
)
from remedy_finder.domain.models import RemedyRecord
from remedy_finder.infrastructure.storage.json_store import InMemoryKeyValueStore


@pytest.fixture
def catalog():
    return [
        RemedyRecord(id=0, name="Citron", symptoms=["nausée", "fatigue", "mal de gorge"]),
        RemedyRecord(id=1, name="Miel", symptoms=["Mal de gorge", "toux"]),
        RemedyRecord(id=2, name="Thym", symptoms=["toux", "rhume", "fatigue"]),
    ]


class TestSymptomSelection:
    """Test the selection model."""

    def test_add_normalizes(self):
        """Test symptoms are stored in display form."""
        selection = SymptomSelection()
        assert selection.add("  Mal-de-Tête ")
        assert selection.symptoms == ["mal de tête"]

    def test_add_rejects_duplicates(self):
        """Test accent and case variants count as the same symptom."""
        selection = SymptomSelection(["nausée"])
        assert not selection.add("NAUSEE")
        assert selection.contains("Nausee")
        assert selection.symptoms == ["nausée"]

    def test_limit(self):
        """Test no more than the limit can be selected."""
        selection = SymptomSelection()
        for symptom in ["a", "b", "c", "d", "e"]:
            assert selection.add(symptom)
        assert selection.is_at_limit
        assert not selection.add("f")
        assert len(selection.symptoms) == MAX_SYMPTOMS

    def test_remove_and_clear(self):
        """Test removing and clearing."""
        selection = SymptomSelection(["fatigue", "stress"])
        assert selection.remove("fatigue")
        assert not selection.remove("fatigue")
        assert selection.symptoms == ["stress"]
        selection.clear()
        assert selection.symptoms == []

    def test_replace_truncates(self):
        """Test replace dedupes and keeps the limit."""
        selection = SymptomSelection()
        selection.replace(["A", "a", "b", "c", "d", "e", "f"])
        assert selection.symptoms == ["a", "b", "c", "d", "e"]

    def test_empty_symptom_ignored(self):
        """Test blank input is not added."""
        selection = SymptomSelection()
        assert not selection.add("   ")
        assert not selection.add(None)


class TestSelectedSymptomsStore:
    """Test the persisted selection."""

    def test_save_and_load(self):
        """Test the selection reads back."""
        store = InMemoryKeyValueStore()
        selected = SelectedSymptomsStore(store)
        selected.save(["fatigue", "stress"])
        assert selected.load() == ["fatigue", "stress"]

    def test_corrupted_slot(self):
        """Test garbage in the slot loads as empty."""
        store = InMemoryKeyValueStore({SELECTED_SYMPTOMS_STORAGE_KEY: "fatigue"})
        assert SelectedSymptomsStore(store).load() == []

        store.set(SELECTED_SYMPTOMS_STORAGE_KEY, ["fatigue", 3, None, ""])
        assert SelectedSymptomsStore(store).load() == ["fatigue"]


class TestSuggestions:
    """Test symptom suggestions from the catalog."""

    def test_vocabulary(self, catalog):
        """Test vocabulary is deduplicated and sorted."""
        assert symptom_vocabulary(catalog) == [
            "fatigue", "mal de gorge", "nausée", "rhume", "toux",
        ]

    def test_prefix_first(self, catalog):
        """Test prefix matches come before substring matches."""
        assert suggest_symptoms("ma", catalog) == ["mal de gorge"]
        assert suggest_symptoms("u", catalog) == ["fatigue", "nausée", "rhume", "toux"]
        assert suggest_symptoms("r", catalog) == ["rhume", "mal de gorge"]
        assert suggest_symptoms("to", catalog) == ["toux"]

    def test_accent_insensitive(self, catalog):
        """Test the prefix ignores accents."""
        assert suggest_symptoms("NAUSE", catalog) == ["nausée"]

    def test_exclude_and_limit(self, catalog):
        """Test excluded symptoms and the limit."""
        assert suggest_symptoms("a", catalog, exclude=["Fatigue"]) == ["mal de gorge", "nausée"]
        assert len(suggest_symptoms("e", catalog, limit=2)) == 2

    def test_empty_prefix(self, catalog):
        """Test an empty prefix suggests nothing."""
        assert suggest_symptoms("  ", catalog) == []
