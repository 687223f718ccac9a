"""Symptom text normalization.

Two forms are produced for every symptom or allergen string:

- the display form keeps accents and is what the user sees and what history stores;
- the matching key drops accents and is used for every comparison.
"""
import re
import unicodedata
from typing import Iterable, List


_SEPARATORS = re.compile(r"[-_]")
_WHITESPACE = re.compile(r"\s+")


def to_display_form(text) -> str:
    if not isinstance(text, str):
        return ""
    text = _SEPARATORS.sub(" ", text)
    text = _WHITESPACE.sub(" ", text).strip()
    return text.lower()


def to_matching_key(text) -> str:
    display = to_display_form(text)
    decomposed = unicodedata.normalize("NFKD", display)
    return "".join(c for c in decomposed if not unicodedata.combining(c))


def to_matching_keys(items: Iterable[str]) -> List[str]:
    """Sorted matching keys, usable as an order-independent signature."""
    return sorted(to_matching_key(item) for item in items)


def dedupe_display(items: Iterable[str]) -> List[str]:
    seen = set()
    result: List[str] = []
    for item in items:
        key = to_matching_key(item)
        if not key or key in seen:
            continue
        seen.add(key)
        result.append(to_display_form(item))
    return result
