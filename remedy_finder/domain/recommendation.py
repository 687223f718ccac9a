from typing import Iterable, List, Optional

from .models import MatchResult


def select_recommended(results: Iterable[MatchResult]) -> List[MatchResult]:
    """Mark the first non-filtered result as recommended, every other one not."""
    selected: List[MatchResult] = []
    found = False
    for result in results:
        recommended = not found and not result.is_filtered
        if recommended:
            found = True
        if result.is_recommended != recommended:
            result = result.model_copy(update={"is_recommended": recommended})
        selected.append(result)
    return selected


def recommended_of(results: Iterable[MatchResult]) -> Optional[MatchResult]:
    for result in results:
        if result.is_recommended:
            return result
    return None
