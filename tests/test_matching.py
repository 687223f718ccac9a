"""Unit tests for the remedy matcher."""
import pytest

from remedy_finder.domain.matching import (
    find_matches,
    generate_slug,
    get_remedy_by_slug,
)
from remedy_finder.domain.models import RemedyRecord


def make_remedy(id, name, symptoms, **kwargs):
    return RemedyRecord(id=id, name=name, symptoms=symptoms, **kwargs)


@pytest.fixture
def catalog():
    return [
        make_remedy(0, "Citron", ["nausée", "fatigue", "digestion"]),
        make_remedy(1, "Thé Vert", ["fatigue", "stress", "concentration"]),
        make_remedy(2, "Gingembre", ["nausée", "inflammation"]),
    ]


class TestFindMatches:
    """Test ranking of catalog remedies."""

    def test_ranks_by_match_count(self):
        """Test the three-remedy example: B before A, C excluded."""
        catalog = [
            make_remedy(0, "A", ["fatigue"]),
            make_remedy(1, "B", ["fatigue", "stress"]),
            make_remedy(2, "C", ["insomnie"]),
        ]
        results = find_matches(["fatigue", "stress"], catalog)

        assert [r.remedy.name for r in results] == ["B", "A"]
        assert results[0].match_count == 2
        assert results[1].match_count == 1

    def test_empty_query(self, catalog):
        """Test an empty query returns nothing."""
        assert find_matches([], catalog) == []

    def test_no_zero_overlap_results(self, catalog):
        """Test remedies without a shared symptom are never returned."""
        results = find_matches(["stress"], catalog)
        assert [r.remedy.name for r in results] == ["Thé Vert"]
        assert all(r.match_count >= 1 for r in results)

    def test_unknown_symptom(self, catalog):
        """Test a symptom nobody treats returns an empty list."""
        assert find_matches(["symptôme inexistant"], catalog) == []

    def test_accent_insensitive_keeps_user_spelling(self, catalog):
        """Test matching ignores accents and reports the user's spelling."""
        results = find_matches(["nausee", "Fatigue"], catalog)

        assert results[0].remedy.name == "Citron"
        assert results[0].matched_symptoms == ["nausee", "Fatigue"]

    def test_matched_symptoms_in_selection_order(self, catalog):
        """Test matched symptoms follow the selection order."""
        results = find_matches(["digestion", "fatigue", "nausée"], catalog)
        assert results[0].matched_symptoms == ["digestion", "fatigue", "nausée"]

    def test_duplicate_query_symptoms_count_once(self, catalog):
        """Test a repeated symptom is counted once."""
        results = find_matches(["fatigue", "FATIGUE"], catalog)
        assert all(r.match_count == 1 for r in results)

    def test_ties_keep_catalog_order(self):
        """Test equal scores keep catalog order, run after run."""
        catalog = [
            make_remedy(0, "Zinc", ["fatigue"]),
            make_remedy(1, "Citron", ["fatigue"]),
            make_remedy(2, "Aloe", ["fatigue"]),
        ]
        first = find_matches(["fatigue"], catalog)
        second = find_matches(["fatigue"], catalog)

        assert [r.remedy.name for r in first] == ["Zinc", "Citron", "Aloe"]
        assert [r.model_dump() for r in first] == [r.model_dump() for r in second]

    def test_results_are_not_recommended_yet(self, catalog):
        """Test the matcher leaves recommendation to the selector."""
        results = find_matches(["fatigue"], catalog)
        assert not any(r.is_recommended for r in results)

    def test_contraindicated_remedy_excluded(self):
        """Test a remedy bad for one of the symptoms is excluded."""
        catalog = [
            make_remedy(0, "Café noir", ["fatigue", "mal de tête"], badForSymptoms=["insomnie"]),
            make_remedy(1, "Camomille", ["insomnie", "stress"]),
            make_remedy(2, "Riz blanc", ["diarrhée"], badForSymptoms=["constipation"]),
        ]
        results = find_matches(["fatigue", "insomnie"], catalog)
        assert [r.remedy.name for r in results] == ["Camomille"]

        results = find_matches(["diarrhee", "constipation"], catalog)
        assert results == []

    def test_duplicate_catalog_symptoms_are_a_set(self):
        """Test duplicated symptoms inside a record count once."""
        catalog = [make_remedy(0, "Thym", ["toux", "toux", "Toux"])]
        results = find_matches(["toux"], catalog)
        assert results[0].match_count == 1


class TestLookups:
    """Test slug lookups."""

    def test_generate_slug(self):
        """Test slugs are accent-free and hyphenated."""
        assert generate_slug("Thé Vert") == "the-vert"
        assert generate_slug("  Menthe poivrée ") == "menthe-poivree"

    def test_get_by_slug(self, catalog):
        """Test lookup by slug."""
        assert get_remedy_by_slug(catalog, "the-vert").name == "Thé Vert"
        assert get_remedy_by_slug(catalog, "unknown") is None
        assert get_remedy_by_slug(catalog, None) is None
