"""
Property tag filters over matched remedies.

Categories combine with AND; the options inside one category combine with OR.
A category with no option selected imposes nothing.
"""
from typing import Iterable, List

from .models import AgeLimitFilter, AppliedFilterSet, MatchResult, PregnancyFilter, RemedyRecord, VerifiedFilter


def _pregnancy_active(f: PregnancyFilter) -> bool:
    return f.safe or f.unknown or f.unsafe


def _verified_active(f: VerifiedFilter) -> bool:
    return f.verified or f.traditional


def _age_active(f: AgeLimitFilter) -> bool:
    return f.all_ages or f.with_limit or f.suitable_for_age is not None


def _matches_pregnancy(remedy: RemedyRecord, f: PregnancyFilter) -> bool:
    return (
        (f.safe and remedy.pregnancy_safe is True)
        or (f.unknown and remedy.pregnancy_safe is None)
        or (f.unsafe and remedy.pregnancy_safe is False)
    )


def _matches_verified(remedy: RemedyRecord, f: VerifiedFilter) -> bool:
    return (
        (f.verified and remedy.verified_by_professional)
        or (f.traditional and not remedy.verified_by_professional)
    )


def _matches_age(remedy: RemedyRecord, f: AgeLimitFilter) -> bool:
    age = remedy.children_age
    if f.all_ages and age is None:
        return True
    if f.with_limit and age is not None:
        return True
    if f.suitable_for_age is not None and (age is None or age <= f.suitable_for_age):
        return True
    return False


def filter_by_tags(results: Iterable[MatchResult], filters: AppliedFilterSet) -> List[MatchResult]:
    results = list(results)
    if filters is None or not filters.is_active:
        return results

    pregnancy = _pregnancy_active(filters.pregnancy)
    verified = _verified_active(filters.verified)
    age = _age_active(filters.age_limit)

    kept = []
    for result in results:
        remedy = result.remedy
        if pregnancy and not _matches_pregnancy(remedy, filters.pregnancy):
            continue
        if verified and not _matches_verified(remedy, filters.verified):
            continue
        if age and not _matches_age(remedy, filters.age_limit):
            continue
        kept.append(result)
    return kept


def active_filter_count(filters: AppliedFilterSet) -> int:
    flags = [
        filters.pregnancy.safe,
        filters.pregnancy.unknown,
        filters.pregnancy.unsafe,
        filters.verified.verified,
        filters.verified.traditional,
        filters.age_limit.all_ages,
        filters.age_limit.with_limit,
        filters.age_limit.suitable_for_age is not None,
    ]
    return sum(1 for flag in flags if flag)
