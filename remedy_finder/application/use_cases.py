import logging
import random
import time
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from remedy_finder.application.history import SearchHistoryStore
from remedy_finder.application.navigation import NavigationTarget, build_navigation_target
from remedy_finder.application.schemas import ResultsView, SearchOutcome
from remedy_finder.domain.matching import find_matches
from remedy_finder.domain.models import AppliedFilterSet, RemedyRecord
from remedy_finder.domain.recommendation import recommended_of, select_recommended
from remedy_finder.domain.safety import build_display_list, partition_by_allergies
from remedy_finder.domain.tag_filters import filter_by_tags


logger = logging.getLogger(__name__)


DEFAULT_SEARCH_DELAY: Tuple[float, float] = (0.3, 0.5)


class ResultsPipeline:
    """Match, allergy filter, tag filter and recommend, in that order."""

    def run(
        self,
        symptoms: Sequence[str],
        catalog: Iterable[RemedyRecord],
        allergens: Sequence[str] = (),
        is_filtering_enabled: bool = False,
        filters: Optional[AppliedFilterSet] = None,
        show_filtered: bool = False,
    ) -> ResultsView:
        matched = find_matches(symptoms, catalog)
        partition = partition_by_allergies(matched, allergens, is_filtering_enabled)
        display = build_display_list(partition, show_filtered=show_filtered)
        display = filter_by_tags(display, filters or AppliedFilterSet())
        display = select_recommended(display)
        return ResultsView(
            symptoms=list(symptoms),
            matched=matched,
            safe_count=len(partition.safe),
            filtered_count=partition.filtered_count,
            results=display,
            recommended=recommended_of(display),
        )


class RemedySearchUseCase:
    def __init__(
        self,
        catalog: List[RemedyRecord],
        history: Optional[SearchHistoryStore] = None,
        delay_range: Tuple[float, float] = DEFAULT_SEARCH_DELAY,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.catalog = catalog
        self.history = history
        self.delay_range = delay_range
        self.sleep = sleep

    def _searching_delay(self) -> None:
        low, high = self.delay_range
        if high <= 0:
            return
        self.sleep(random.uniform(max(0.0, low), high))

    def submit(
        self,
        symptoms: Sequence[str],
        allergens: Optional[Sequence[str]] = None,
        is_filtering_enabled: bool = False,
        navigate: Optional[Callable[[NavigationTarget], None]] = None,
    ) -> Optional[SearchOutcome]:
        """
        Run a search for the selected symptoms.

        The history entry is written before navigate is called, so a caller
        that tears its view down on navigation does not lose it.

        Returns:
            SearchOutcome, or None when no symptom was selected
        """
        if not symptoms:
            logger.warning("Cannot submit without symptoms")
            return None

        symptoms = list(symptoms)
        self._searching_delay()

        results = find_matches(symptoms, self.catalog)

        # allergies only count when filtering is on
        allergens_to_save = list(allergens or []) if is_filtering_enabled else []
        filtered_count = 0
        if allergens_to_save:
            filtered_count = partition_by_allergies(results, allergens_to_save, True).filtered_count

        entry = None
        if self.history is not None:
            entry = self.history.add_search(
                symptoms,
                len(results),
                allergens=allergens_to_save,
                filtered_count=filtered_count,
            )

        target = build_navigation_target(symptoms, allergens_to_save)
        if navigate is not None:
            navigate(target)

        logger.info(
            "Search for %s: %d remedies found, %d hidden by allergies",
            symptoms, len(results), filtered_count,
        )
        for r in results:
            logger.debug(
                "  %s (%s): %d match(es) on %s",
                r.remedy.name, r.remedy.type, r.match_count, ", ".join(r.matched_symptoms),
            )

        return SearchOutcome(
            symptoms=symptoms,
            allergens=allergens_to_save,
            results=results,
            filtered_count=filtered_count,
            target=target,
            history_entry=entry,
        )
