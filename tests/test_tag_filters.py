"""Unit tests for tag filters."""
import pytest

from remedy_finder.domain.models import (
    AgeLimitFilter,
    AppliedFilterSet,
    MatchResult,
    PregnancyFilter,
    RemedyRecord,
    VerifiedFilter,
)
from remedy_finder.domain.tag_filters import active_filter_count, filter_by_tags


def _result(id, name, pregnancy_safe, verified, children_age):
    remedy = RemedyRecord(
        id=id,
        name=name,
        symptoms=["fatigue"],
        pregnancy_safe=pregnancy_safe,
        verified_by_professional=verified,
        children_age=children_age,
    )
    return MatchResult(remedy=remedy, match_count=1, matched_symptoms=["fatigue"])


@pytest.fixture
def results():
    return [
        _result(0, "Gingembre", True, True, None),
        _result(1, "Thym", None, False, None),
        _result(2, "Persil", False, True, 12),
        _result(3, "Camomille", True, False, None),
        _result(4, "Sauge", False, False, 18),
        _result(5, "Miel", True, True, 1),
    ]


def names(results):
    return [r.remedy.name for r in results]


class TestFilterByTags:
    """Test tag filtering."""

    def test_no_active_filter(self, results):
        """Test an inactive filter set keeps everything."""
        assert filter_by_tags(results, AppliedFilterSet()) == results

    def test_pregnancy_options_or(self, results):
        """Test options inside a category combine with OR."""
        filters = AppliedFilterSet(pregnancy=PregnancyFilter(safe=True, unknown=True))
        assert names(filter_by_tags(results, filters)) == ["Gingembre", "Thym", "Camomille", "Miel"]

    def test_pregnancy_unsafe(self, results):
        """Test the not-recommended option."""
        filters = AppliedFilterSet(pregnancy=PregnancyFilter(unsafe=True))
        assert names(filter_by_tags(results, filters)) == ["Persil", "Sauge"]

    def test_categories_and(self, results):
        """Test active categories combine with AND."""
        filters = AppliedFilterSet(
            pregnancy=PregnancyFilter(safe=True),
            verified=VerifiedFilter(verified=True),
        )
        assert names(filter_by_tags(results, filters)) == ["Gingembre", "Miel"]

    def test_traditional(self, results):
        """Test the traditional-use option."""
        filters = AppliedFilterSet(verified=VerifiedFilter(traditional=True))
        assert names(filter_by_tags(results, filters)) == ["Thym", "Camomille", "Sauge"]

    def test_age_options(self, results):
        """Test the children age options."""
        all_ages = AppliedFilterSet(age_limit=AgeLimitFilter(all_ages=True))
        assert names(filter_by_tags(results, all_ages)) == ["Gingembre", "Thym", "Camomille"]

        with_limit = AppliedFilterSet(age_limit=AgeLimitFilter(with_limit=True))
        assert names(filter_by_tags(results, with_limit)) == ["Persil", "Sauge", "Miel"]

    def test_suitable_for_age(self, results):
        """Test remedies usable by a child of a given age."""
        filters = AppliedFilterSet(age_limit=AgeLimitFilter(suitable_for_age=12))
        assert names(filter_by_tags(results, filters)) == [
            "Gingembre", "Thym", "Persil", "Camomille", "Miel",
        ]

    def test_idempotent(self, results):
        """Test filtering twice gives the same list."""
        filters = AppliedFilterSet(
            pregnancy=PregnancyFilter(safe=True, unsafe=True),
            age_limit=AgeLimitFilter(suitable_for_age=6),
        )
        once = filter_by_tags(results, filters)
        assert filter_by_tags(once, filters) == once

    def test_keeps_match_data(self, results):
        """Test match fields are untouched."""
        filters = AppliedFilterSet(verified=VerifiedFilter(verified=True))
        for r in filter_by_tags(results, filters):
            assert r.match_count == 1
            assert r.matched_symptoms == ["fatigue"]


def test_active_filter_count():
    """Test counting active options."""
    assert active_filter_count(AppliedFilterSet()) == 0
    filters = AppliedFilterSet(
        pregnancy=PregnancyFilter(safe=True, unknown=True),
        age_limit=AgeLimitFilter(suitable_for_age=3),
    )
    assert active_filter_count(filters) == 3
    assert filters.is_active
