import logging
import re
from typing import Dict, Iterable, List, Optional, Sequence

from .models import MatchResult, RemedyRecord
from .normalizer import to_matching_key


logger = logging.getLogger(__name__)


def find_matches(symptoms: Sequence[str], catalog: Iterable[RemedyRecord]) -> List[MatchResult]:
    """
    Rank catalog remedies against the selected symptoms.

    A remedy is returned only if it treats at least one selected symptom and is
    not contraindicated for any of them. Results are ordered by match count,
    ties keep catalog order.

    Args:
        symptoms: Selected symptoms in display form, in selection order
        catalog: Remedy records in catalog order

    Returns:
        List of MatchResult, none of them recommended yet
    """
    if not symptoms:
        return []

    # matching key -> display spelling, first selection wins
    query: Dict[str, str] = {}
    for symptom in symptoms:
        key = to_matching_key(symptom)
        if key and key not in query:
            query[key] = symptom.strip()
    if not query:
        return []

    results: List[MatchResult] = []
    for remedy in catalog:
        if not remedy.bad_for_keys.isdisjoint(query):
            logger.debug("Excluding %s: contraindicated for the query", remedy.name)
            continue
        keys = remedy.symptom_keys
        matched = [display for key, display in query.items() if key in keys]
        if not matched:
            continue
        results.append(
            MatchResult(remedy=remedy, match_count=len(matched), matched_symptoms=matched)
        )

    # sorted() is stable: equal scores stay in catalog order
    return sorted(results, key=lambda r: r.match_count, reverse=True)


def generate_slug(name: str) -> str:
    key = to_matching_key(name)
    key = re.sub(r"[^a-z0-9]+", "-", key)
    return key.strip("-")


def get_remedy_by_slug(catalog: Iterable[RemedyRecord], slug: str) -> Optional[RemedyRecord]:
    if not isinstance(slug, str) or not slug:
        return None
    target = generate_slug(slug)
    for remedy in catalog:
        if generate_slug(remedy.name) == target:
            return remedy
    return None
