"""Allergy safety filtering of matched remedies."""
from typing import Iterable, List, NamedTuple

from .models import MatchResult, RemedyRecord
from .normalizer import to_matching_key


class AllergyPartition(NamedTuple):
    safe: List[MatchResult]
    unsafe: List[MatchResult]

    @property
    def filtered_count(self) -> int:
        return len(self.unsafe)


def _user_keys(user_allergens: Iterable[str]) -> set:
    return {to_matching_key(a) for a in user_allergens or [] if isinstance(a, str)} - {""}


def can_use(remedy: RemedyRecord, user_allergens: Iterable[str], is_filtering_enabled: bool) -> bool:
    """
    Check whether a remedy is safe for the user.

    Always True when filtering is disabled. Otherwise True iff the remedy
    shares no allergen with the user's set.
    """
    if not is_filtering_enabled:
        return True
    return remedy.allergen_keys.isdisjoint(_user_keys(user_allergens))


def matching_allergens(remedy: RemedyRecord, user_allergens: Iterable[str]) -> List[str]:
    keys = _user_keys(user_allergens)
    return [a for a in remedy.allergens if to_matching_key(a) in keys]


def partition_by_allergies(
    results: Iterable[MatchResult],
    user_allergens: Iterable[str],
    is_filtering_enabled: bool,
) -> AllergyPartition:
    safe: List[MatchResult] = []
    unsafe: List[MatchResult] = []
    allergens = list(user_allergens or [])
    for result in results:
        if can_use(result.remedy, allergens, is_filtering_enabled):
            safe.append(result)
        else:
            unsafe.append(result)
    return AllergyPartition(safe=safe, unsafe=unsafe)


def build_display_list(partition: AllergyPartition, show_filtered: bool = False) -> List[MatchResult]:
    """Safe results, preceded by the unsafe ones (tagged) when the user asks to see them."""
    base = [r.model_copy(update={"is_filtered": False}) for r in partition.safe]
    if show_filtered and partition.unsafe:
        flagged = [r.model_copy(update={"is_filtered": True}) for r in partition.unsafe]
        return flagged + base
    return base
