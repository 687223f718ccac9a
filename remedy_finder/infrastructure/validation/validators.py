"""Symptom and allergen validation functions."""
import re
from typing import Iterable, Sequence, Tuple

from remedy_finder.domain.normalizer import to_matching_key


MAX_SYMPTOM_LENGTH = 50
MAX_SYMPTOMS_PER_SEARCH = 5
MAX_QUERY_LENGTH = 200


def validate_symptom(symptom: str) -> Tuple[bool, str]:
    """
    Validate a single symptom entered by the user or read from a URL.

    Args:
        symptom: Symptom text to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not isinstance(symptom, str) or not symptom.strip():
        return False, "Symptom is required"

    symptom = symptom.strip()

    if len(symptom) > MAX_SYMPTOM_LENGTH:
        return False, f"Symptom is too long (max {MAX_SYMPTOM_LENGTH} characters)"

    # Letters (accented included), spaces, hyphens, underscores and apostrophes
    if not re.match(r"^[^\W\d]+(?:[\s\-_'’][^\W\d]+)*$", symptom):
        return False, "Symptom can only contain letters, spaces, hyphens, and apostrophes"

    return True, ""


def validate_symptom_list(symptoms: Sequence[str]) -> Tuple[bool, str]:
    """
    Validate the symptom list of a submission.

    Args:
        symptoms: Symptoms selected by the user

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not symptoms or isinstance(symptoms, str):
        return False, "Select at least one symptom"

    if len(symptoms) > MAX_SYMPTOMS_PER_SEARCH:
        return False, f"Select at most {MAX_SYMPTOMS_PER_SEARCH} symptoms"

    for symptom in symptoms:
        is_valid, error = validate_symptom(symptom)
        if not is_valid:
            return False, error

    keys = [to_matching_key(s) for s in symptoms]
    if len(set(keys)) != len(keys):
        return False, "Symptoms must not be repeated"

    return True, ""


def validate_allergen_id(allergen_id: str, known_allergens: Iterable[str]) -> Tuple[bool, str]:
    """
    Check that an allergen id is one the catalog knows about.

    Args:
        allergen_id: Allergen id (kebab-case)
        known_allergens: Known allergen ids

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not isinstance(allergen_id, str) or not allergen_id.strip():
        return False, "Allergen id must be a non-empty string"

    normalized = allergen_id.strip().lower()
    if not any(normalized == known.lower() for known in known_allergens):
        return False, f'Unknown allergen id "{allergen_id}"'

    return True, ""
