"""Results route built after a submission, and its inverse."""
import logging
from typing import Iterable, List, Mapping, Sequence
from urllib.parse import parse_qs, quote

from pydantic import BaseModel

from remedy_finder.application.selection import MAX_SYMPTOMS
from remedy_finder.domain.normalizer import dedupe_display
from remedy_finder.infrastructure.validation.validators import (
    MAX_QUERY_LENGTH,
    validate_allergen_id,
    validate_symptom,
)


logger = logging.getLogger(__name__)


RESULTS_PATH = "/remedies"


class NavigationTarget(BaseModel):
    route: str
    symptoms: List[str]
    allergens: List[str] = []

    @property
    def payload(self) -> dict:
        return {"symptoms": list(self.symptoms), "allergens": list(self.allergens)}


class ResultsQuery(BaseModel):
    symptoms: List[str] = []
    allergens: List[str] = []


def build_results_route(symptoms: Sequence[str], allergens: Sequence[str] = ()) -> str:
    route = f"{RESULTS_PATH}?symptoms={quote(','.join(symptoms), safe='')}"
    if allergens:
        route += f"&allergies={quote(','.join(allergens), safe='')}"
    return route


def build_navigation_target(symptoms: Sequence[str], allergens: Sequence[str] = ()) -> NavigationTarget:
    return NavigationTarget(
        route=build_results_route(symptoms, allergens),
        symptoms=list(symptoms),
        allergens=list(allergens),
    )


def _split(param: str) -> List[str]:
    if not param or len(param) > MAX_QUERY_LENGTH:
        if param:
            logger.warning("Query parameter too long (%d > %d)", len(param), MAX_QUERY_LENGTH)
        return []
    return [p.strip() for p in param.split(",") if p.strip()]


def parse_symptoms_param(param: str) -> List[str]:
    valid = []
    for symptom in _split(param):
        is_valid, error = validate_symptom(symptom)
        if not is_valid:
            logger.warning("Dropping symptom %r from query: %s", symptom, error)
            continue
        valid.append(symptom)
    return dedupe_display(valid)[:MAX_SYMPTOMS]


def parse_allergies_param(param: str, known_allergens: Iterable[str]) -> List[str]:
    known = list(known_allergens)
    valid = []
    for allergen in _split(param):
        is_valid, error = validate_allergen_id(allergen, known)
        if not is_valid:
            logger.warning("Dropping allergen %r from query: %s", allergen, error)
            continue
        if allergen not in valid:
            valid.append(allergen)
    return valid


def parse_results_query(query, known_allergens: Iterable[str]) -> ResultsQuery:
    """
    Parse the query string of a results route.

    Args:
        query: Raw query string ("symptoms=...&allergies=...") or a mapping
        known_allergens: Allergen ids the catalog knows about

    Returns:
        Validated symptoms (display form) and allergen ids
    """
    if isinstance(query, str):
        params: Mapping = {k: v[0] for k, v in parse_qs(query.lstrip("?")).items()}
    else:
        params = query or {}
    return ResultsQuery(
        symptoms=parse_symptoms_param(params.get("symptoms", "")),
        allergens=parse_allergies_param(params.get("allergies", ""), known_allergens),
    )
