from typing import List, Optional
from pydantic import BaseModel, Field

from remedy_finder.application.navigation import NavigationTarget
from remedy_finder.domain.models import MatchResult, SearchHistoryEntry


class SearchOutcome(BaseModel):
    symptoms: List[str]
    allergens: List[str] = []
    results: List[MatchResult]
    filtered_count: int = Field(0, ge=0)
    target: NavigationTarget
    history_entry: Optional[SearchHistoryEntry] = None

    @property
    def result_count(self) -> int:
        return len(self.results)


class ResultsView(BaseModel):
    symptoms: List[str]
    matched: List[MatchResult]
    safe_count: int  # matches that pass allergy filtering
    filtered_count: int  # matches hidden by allergy filtering
    results: List[MatchResult]  # final display list, tag-filtered, with recommendation
    recommended: Optional[MatchResult] = None

    @property
    def has_matching_remedies(self) -> bool:
        return self.safe_count > 0
