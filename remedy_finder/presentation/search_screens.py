"""Symptom picking and search submission on the home page."""
import logging
from typing import Callable, Iterable, List

import streamlit as st

from remedy_finder.application.navigation import NavigationTarget
from remedy_finder.application.selection import (
    MAX_SYMPTOMS,
    SelectedSymptomsStore,
    SymptomSelection,
    suggest_symptoms,
)
from remedy_finder.application.use_cases import RemedySearchUseCase
from remedy_finder.domain.models import RemedyRecord
from remedy_finder.infrastructure.validation.validators import validate_symptom, validate_symptom_list


logger = logging.getLogger(__name__)


MAX_SUGGESTIONS = 6


def get_selection() -> SymptomSelection:
    """Selection for this session, restored from the last saved one on first use."""
    if "symptom_selection" not in st.session_state:
        stored = SelectedSymptomsStore(st.session_state.local_store).load()
        st.session_state.symptom_selection = SymptomSelection(stored)
    return st.session_state.symptom_selection


def _save_selection(selection: SymptomSelection) -> None:
    SelectedSymptomsStore(st.session_state.local_store).save(selection.symptoms)


def add_symptom(symptom: str) -> bool:
    """
    Validate and add a symptom to the selection.

    Returns:
        True if the symptom was added, False otherwise (reason shown to the user)
    """
    selection = get_selection()

    is_valid, error = validate_symptom(symptom)
    if not is_valid:
        st.error(f"❌ {error}")
        return False

    if selection.is_at_limit:
        st.warning(f"You can select up to {MAX_SYMPTOMS} symptoms")
        return False

    if not selection.add(symptom):
        st.info("This symptom is already selected")
        return False

    _save_selection(selection)
    return True


def remove_symptom(symptom: str) -> None:
    selection = get_selection()
    if selection.remove(symptom):
        _save_selection(selection)


def restore_symptoms(symptoms: Iterable[str]) -> None:
    """Replace the selection, e.g. when a history entry is reused."""
    selection = get_selection()
    selection.replace(symptoms)
    _save_selection(selection)


def show_symptom_picker(catalog: List[RemedyRecord]) -> List[str]:
    """
    Display the selected symptoms and the autocomplete field.

    Returns:
        The symptoms currently selected
    """
    selection = get_selection()
    symptoms = selection.symptoms

    st.markdown(f"**Your symptoms** ({len(symptoms)}/{MAX_SYMPTOMS})")
    if symptoms:
        for col, symptom in zip(st.columns(len(symptoms)), symptoms):
            with col:
                if st.button(f"✕ {symptom}", key=f"remove_symptom_{symptom}"):
                    remove_symptom(symptom)
                    st.rerun()

    query = st.text_input(
        "Add a symptom",
        placeholder="e.g. fatigue, stress",
        disabled=selection.is_at_limit,
        key="symptom_query",
    )
    if not query or not query.strip():
        return selection.symptoms

    suggestions = suggest_symptoms(query, catalog, exclude=symptoms, limit=MAX_SUGGESTIONS)
    for suggestion in suggestions:
        if st.button(f"+ {suggestion}", key=f"suggest_{suggestion}"):
            if add_symptom(suggestion):
                st.rerun()

    if not suggestions:
        st.caption("No known symptom starts with this text")
        if st.button(f"+ {query.strip()}", key="add_typed_symptom"):
            if add_symptom(query):
                st.rerun()

    return selection.symptoms


def submit_search(usecase: RemedySearchUseCase, navigate: Callable[[NavigationTarget], None]) -> bool:
    """
    Validate the selection and run the search.

    Returns:
        True if the search ran and navigation happened, False otherwise
    """
    symptoms = get_selection().symptoms
    is_valid, error = validate_symptom_list(symptoms)
    if not is_valid:
        st.error(f"❌ {error}")
        logger.warning("Search refused: %s", error)
        return False

    with st.spinner("Searching..."):
        outcome = usecase.submit(
            symptoms,
            allergens=st.session_state.user_allergies,
            is_filtering_enabled=st.session_state.allergy_filtering,
            navigate=navigate,
        )
    return outcome is not None
