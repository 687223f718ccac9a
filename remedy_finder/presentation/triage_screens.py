"""Red-flag triage screens shown before remedy results."""
import streamlit as st

from remedy_finder.application.triage import (
    RedFlagTriageGate,
    TriageSessionRepository,
    TriageState,
)
from remedy_finder.domain.rules import EMERGENCY_CONTACTS
from remedy_finder.infrastructure.storage.session_store import SessionStateKeyValueStore


TRIAGE_DISCLAIMER = (
    "I understand that natural remedies do not replace a medical consultation, "
    "and that I should see a healthcare professional if my symptoms persist or get worse."
)


def _get_gate() -> RedFlagTriageGate:
    if "triage_gate" not in st.session_state:
        sessions = TriageSessionRepository(SessionStateKeyValueStore(st.session_state))
        st.session_state.triage_gate = RedFlagTriageGate(sessions)
    return st.session_state.triage_gate


def show_emergency_screen() -> None:
    """Display emergency contacts after a red-flag answer."""
    st.markdown("# 🚨 Please seek medical advice")
    st.error(
        "Your answers suggest your situation may need a healthcare professional "
        "rather than a home remedy."
    )
    for contact in EMERGENCY_CONTACTS:
        st.markdown(f"- **{contact.name}**: 📞 {contact.phone} ({contact.description})")

    if st.button("Back to home", use_container_width=True):
        reset_triage()


def show_questionnaire(gate: RedFlagTriageGate) -> bool:
    """
    Display the triage questionnaire.

    Returns:
        True if the gate was passed without red flags, False otherwise
    """
    st.markdown("# 🩺 A few questions first")
    st.markdown("Before showing remedies, please answer these questions.")

    for question in gate.questions:
        labels = {opt.id: opt.label for opt in question.options}
        current = gate.answers.get(question.id)
        choice = st.radio(
            question.question,
            options=list(labels.keys()),
            format_func=lambda option_id, labels=labels: labels[option_id],
            index=list(labels.keys()).index(current) if current in labels else None,
            key=f"triage_{question.id}",
        )
        if choice is not None:
            gate.set_answer(question.id, choice)

    gate.set_disclaimer_accepted(
        st.checkbox(TRIAGE_DISCLAIMER, value=gate.disclaimer_accepted, key="triage_disclaimer")
    )

    submit = st.button("See remedies", disabled=not gate.can_complete, use_container_width=True)
    if not submit:
        return False

    state = gate.complete()
    if state == TriageState.REDIRECTED:
        st.session_state.triage_redirected = True
        st.rerun()
        return False
    return state == TriageState.VALIDATED


def show_triage_screen() -> bool:
    """
    Gate result viewing for the current session.

    Returns:
        True if results may be shown, False otherwise
    """
    gate = _get_gate()

    # A session validated earlier unlocks results without asking again
    if gate.sessions.is_session_validated():
        return True

    if st.session_state.get("triage_redirected", False):
        show_emergency_screen()
        return False

    return show_questionnaire(gate)


def reset_triage():
    """Start the questionnaire over, e.g. on a fresh navigation after a redirect."""
    # triage_gate, triage_redirected and the widget keys
    for key in list(st.session_state.keys()):
        if str(key).startswith("triage_"):
            del st.session_state[key]
    st.session_state.page = "home"
    st.rerun()
