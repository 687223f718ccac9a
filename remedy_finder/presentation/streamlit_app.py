import logging
import os

import streamlit as st

from remedy_finder.infrastructure.config import Settings
from remedy_finder.infrastructure.catalog.json_catalog import JsonCatalogLoader, load_allergens
from remedy_finder.infrastructure.storage.session_store import create_local_store
from remedy_finder.application.history import SearchHistoryStore
from remedy_finder.application.navigation import NavigationTarget, parse_results_query
from remedy_finder.application.use_cases import RemedySearchUseCase, ResultsPipeline
from remedy_finder.domain.models import (
    AgeLimitFilter,
    AppliedFilterSet,
    MatchResult,
    PregnancyFilter,
    VerifiedFilter,
)
from remedy_finder.domain.matching import generate_slug, get_remedy_by_slug
from remedy_finder.domain.safety import matching_allergens
from remedy_finder.presentation.search_screens import (
    restore_symptoms,
    show_symptom_picker,
    submit_search,
)
from remedy_finder.presentation.triage_screens import show_triage_screen


logger = logging.getLogger(__name__)


DISCLAIMER = (
    "⚕️ **DISCLAIMER:** The remedies listed here are traditional uses and do NOT replace "
    "medical advice. If your symptoms persist or get worse, see a healthcare professional."
)


@st.cache_resource
def _load_catalog(path: str):
    return JsonCatalogLoader(path).load()


@st.cache_resource
def _load_allergens(path: str):
    return load_allergens(path)


def _init_session_state(settings: Settings):
    if "local_store" not in st.session_state:
        st.session_state.local_store = create_local_store(settings, st.session_state)
    if "page" not in st.session_state:
        st.session_state.page = "home"
    if "user_allergies" not in st.session_state:
        st.session_state.user_allergies = []
    if "allergy_filtering" not in st.session_state:
        st.session_state.allergy_filtering = False
    if "show_filtered" not in st.session_state:
        st.session_state.show_filtered = False


def _history(settings: Settings) -> SearchHistoryStore:
    return SearchHistoryStore(st.session_state.local_store, capacity=settings.history_capacity)


def _navigate(target: NavigationTarget) -> None:
    st.query_params.from_dict({k: v for k, v in _route_params(target).items() if v})
    st.session_state.search_payload = target.payload
    st.session_state.page = "results"


def _route_params(target: NavigationTarget) -> dict:
    return {
        "symptoms": ",".join(target.symptoms),
        "allergies": ",".join(target.allergens),
    }


def _render_sidebar(settings: Settings, allergens):
    st.sidebar.title("⚙️ Settings")

    st.sidebar.markdown("### Allergies")
    names = {a.id: a.name for a in allergens}
    st.session_state.user_allergies = st.sidebar.multiselect(
        "My allergies",
        options=list(names.keys()),
        default=[a for a in st.session_state.user_allergies if a in names],
        format_func=lambda allergen_id: names[allergen_id],
    )
    st.session_state.allergy_filtering = st.sidebar.toggle(
        "Hide remedies containing my allergens",
        value=st.session_state.allergy_filtering,
    )

    st.sidebar.divider()
    _render_history(settings)


def _render_history(settings: Settings):
    history = _history(settings)
    entries = history.history
    st.sidebar.markdown(f"### 🕘 Recent searches (last {settings.history_capacity})")
    if not entries:
        st.sidebar.caption("No search yet")
        return

    for entry in entries:
        col1, col2 = st.sidebar.columns([4, 1])
        label = ", ".join(entry.symptoms)
        if entry.filtered_count:
            label += f" ({entry.result_count} found, {entry.filtered_count} hidden)"
        else:
            label += f" ({entry.result_count} found)"
        with col1:
            if st.button(label, key=f"reuse_{entry.id}", use_container_width=True):
                restore_symptoms(entry.symptoms)
                st.session_state.page = "home"
                st.rerun()
        with col2:
            if st.button("✕", key=f"remove_{entry.id}"):
                history.remove_search(entry.id)
                st.rerun()

    if st.sidebar.button("Clear history", use_container_width=True):
        history.clear_history()
        st.rerun()


def _render_home(settings: Settings, catalog):
    st.markdown("# 🌿 Natural Remedy Finder")
    st.info(DISCLAIMER)

    symptoms = show_symptom_picker(catalog)

    if st.button("🔍 Find remedies", disabled=not symptoms, use_container_width=True):
        usecase = RemedySearchUseCase(
            catalog=catalog,
            history=_history(settings),
            delay_range=settings.search_delay,
        )
        if submit_search(usecase, _navigate):
            st.rerun()


def _render_filters() -> AppliedFilterSet:
    with st.expander("Filter by tags"):
        col1, col2, col3 = st.columns(3)
        with col1:
            st.markdown("**Pregnancy**")
            pregnancy = PregnancyFilter(
                safe=st.checkbox("Safe", key="f_preg_safe"),
                unknown=st.checkbox("Ask a professional", key="f_preg_unknown"),
                unsafe=st.checkbox("Not recommended", key="f_preg_unsafe"),
            )
        with col2:
            st.markdown("**Recognition**")
            verified = VerifiedFilter(
                verified=st.checkbox("Verified by a professional", key="f_verified"),
                traditional=st.checkbox("Traditional use", key="f_traditional"),
            )
        with col3:
            st.markdown("**Children**")
            all_ages = st.checkbox("All ages", key="f_all_ages")
            with_limit = st.checkbox("With an age limit", key="f_with_limit")
            age = st.number_input("Suitable for a child aged", min_value=0, max_value=18,
                                  value=None, step=1, key="f_age")
            age_limit = AgeLimitFilter(all_ages=all_ages, with_limit=with_limit,
                                       suitable_for_age=int(age) if age is not None else None)
    return AppliedFilterSet(pregnancy=pregnancy, verified=verified, age_limit=age_limit)


def _render_result(result: MatchResult, allergies):
    remedy = result.remedy
    title = f"### {remedy.name}"
    if result.is_recommended:
        title += " ⭐ Recommended"
    if result.is_filtered:
        title = f"### ⚠️ {remedy.name}"
    st.markdown(title)
    if result.is_filtered:
        st.warning("Contains your allergens: " + ", ".join(matching_allergens(remedy, allergies)))
    st.caption(f"Matches: {', '.join(result.matched_symptoms)} ({result.match_count})")
    if remedy.description:
        st.markdown(remedy.description)
    if remedy.properties:
        st.markdown("**Properties:** " + ", ".join(p.name for p in remedy.properties))
    if st.button("Details", key=f"details_{remedy.id}"):
        st.query_params["remedy"] = generate_slug(remedy.name)
        st.session_state.page = "detail"
        st.rerun()
    st.divider()


def _render_detail(catalog, allergies):
    if st.button("← Back to results"):
        if "remedy" in st.query_params:
            del st.query_params["remedy"]
        st.session_state.page = "results"
        st.rerun()

    remedy = get_remedy_by_slug(catalog, st.query_params.get("remedy"))
    if remedy is None:
        st.warning("This remedy does not exist.")
        return

    st.markdown(f"# {remedy.name}")
    if remedy.type:
        st.caption(remedy.type)
    offending = matching_allergens(remedy, allergies)
    if offending:
        st.warning("⚠️ Contains your allergens: " + ", ".join(offending))
    if remedy.description:
        st.markdown(remedy.description)

    st.markdown("**Treats:** " + ", ".join(remedy.symptoms))
    if remedy.pregnancy_safe is True:
        st.markdown("🤰 Safe during pregnancy")
    elif remedy.pregnancy_safe is False:
        st.markdown("🤰 Not recommended during pregnancy")
    else:
        st.markdown("🤰 Pregnancy: ask a healthcare professional")
    if remedy.children_age is not None:
        st.markdown(f"👶 From {remedy.children_age} years old")
    else:
        st.markdown("👶 No age limit")
    st.markdown("✅ Verified by a professional" if remedy.verified_by_professional else "📜 Traditional use")

    if remedy.uses:
        st.markdown("### How to use")
        for use in remedy.uses:
            st.markdown(f"- {use.form or ''}: {use.dose or ''}, {use.frequency or ''}")
    if remedy.contraindications:
        st.markdown("### Contraindications")
        for item in remedy.contraindications:
            st.markdown(f"- {item}")
    if remedy.tips:
        st.markdown("### Tips")
        for tip in remedy.tips:
            st.markdown(f"- {tip}")
    sources = remedy.sources.scientific + remedy.sources.traditional
    if sources:
        st.markdown("### Sources")
        for source in sources:
            st.markdown(f"- [{source.title}]({source.url})" if source.url else f"- {source.title}")


def _current_allergies(allergens):
    query = parse_results_query(dict(st.query_params), [a.id for a in allergens])
    return query, query.allergens or st.session_state.user_allergies


def _render_results(catalog, allergens):
    if st.button("← New search"):
        st.session_state.page = "home"
        st.query_params.clear()
        st.rerun()

    if not show_triage_screen():
        return

    query, allergies = _current_allergies(allergens)
    symptoms = query.symptoms or st.session_state.get("search_payload", {}).get("symptoms", [])

    st.markdown("# Remedy results")
    if symptoms:
        st.markdown(f"Natural remedies for: **{', '.join(symptoms)}**")

    filters = _render_filters()
    view = ResultsPipeline().run(
        symptoms,
        catalog,
        allergens=allergies,
        is_filtering_enabled=st.session_state.allergy_filtering,
        filters=filters,
        show_filtered=st.session_state.show_filtered,
    )

    if view.filtered_count and allergies:
        st.info(f"{view.filtered_count} remedy(ies) hidden because of your allergies.")
        st.session_state.show_filtered = st.toggle(
            "Show hidden remedies", value=st.session_state.show_filtered
        )
        if not view.has_matching_remedies:
            st.warning("Every matching remedy contains one of your allergens.")

    if not view.results:
        st.warning("No remedy found for these symptoms.")
        return

    st.markdown(f"**{len(view.results)}** remedy(ies) found")
    for result in view.results:
        _render_result(result, allergies)


def main():
    settings = Settings()
    logging.basicConfig(level=os.environ.get("LOG_LEVEL", settings.log_level))

    st.set_page_config(
        page_title="Natural Remedy Finder",
        page_icon="🌿",
        layout="centered",
        initial_sidebar_state="expanded",
    )

    catalog = _load_catalog(settings.catalog_path)
    allergens = _load_allergens(settings.allergens_path)
    _init_session_state(settings)

    # A shared results URL opens straight on the results page
    if "symptoms" in st.query_params and st.session_state.page == "home" \
            and "search_payload" not in st.session_state:
        st.session_state.page = "detail" if "remedy" in st.query_params else "results"

    _render_sidebar(settings, allergens)

    if st.session_state.page == "detail":
        if show_triage_screen():
            _render_detail(catalog, _current_allergies(allergens)[1])
    elif st.session_state.page == "results":
        _render_results(catalog, allergens)
    else:
        _render_home(settings, catalog)


if __name__ == "__main__":
    main()
