import logging
import time
from enum import Enum
from typing import Callable, Dict, Optional, Sequence

from pydantic import ValidationError

from remedy_finder.application.ports import KeyValueStorePort
from remedy_finder.domain.models import RedFlagsResult, TriageQuestion, TriageSession
from remedy_finder.domain.rules import RED_FLAG_QUESTIONS, evaluate_red_flags


logger = logging.getLogger(__name__)


TRIAGE_SESSION_STORAGE_KEY = "remedy-finder-red-flags-session"


class TriageState(str, Enum):
    UNANSWERED = "unanswered"
    EVALUATED = "evaluated"
    VALIDATED = "validated"
    REDIRECTED = "redirected"


class TriageSessionRepository:
    """Triage outcome for the current browsing session. Backed by session-scoped storage."""

    def __init__(self, store: KeyValueStorePort, storage_key: str = TRIAGE_SESSION_STORAGE_KEY):
        self.store = store
        self.storage_key = storage_key

    def save(self, session: TriageSession) -> None:
        self.store.set(self.storage_key, session.model_dump(by_alias=True))

    def load(self) -> Optional[TriageSession]:
        raw = self.store.get(self.storage_key)
        if not isinstance(raw, dict):
            return None
        try:
            return TriageSession.model_validate(raw)
        except ValidationError as e:
            logger.warning("Ignoring malformed triage session: %s", e)
            return None

    def is_session_validated(self) -> bool:
        session = self.load()
        return session is not None and session.validated is True

    def clear(self) -> None:
        self.store.set(self.storage_key, None)


class RedFlagTriageGate:
    """
    Short questionnaire that must be passed before results are shown.

    Flow: unanswered -> evaluated (all answered, disclaimer accepted)
    -> validated (no red flag) or redirected (red flag, terminal).
    """

    def __init__(
        self,
        sessions: TriageSessionRepository,
        questions: Sequence[TriageQuestion] = RED_FLAG_QUESTIONS,
        clock: Optional[Callable[[], int]] = None,
    ):
        self.sessions = sessions
        self.questions = list(questions)
        self.clock = clock or (lambda: int(time.time() * 1000))
        self.start_new()

    def start_new(self):
        self.answers: Dict[str, str] = {}
        self.disclaimer_accepted = False
        self.state = TriageState.UNANSWERED

    def _question(self, question_id: str) -> Optional[TriageQuestion]:
        for q in self.questions:
            if q.id == question_id:
                return q
        return None

    def set_answer(self, question_id: str, option_id: str) -> bool:
        if self.state in (TriageState.VALIDATED, TriageState.REDIRECTED):
            logger.warning("set_answer: triage already %s", self.state.value)
            return False
        question = self._question(question_id)
        if question is None or question.option(option_id) is None:
            logger.warning("set_answer: unknown answer %s=%s", question_id, option_id)
            return False
        self.answers[question_id] = option_id
        return True

    def accept_disclaimer(self) -> None:
        self.set_disclaimer_accepted(True)

    def set_disclaimer_accepted(self, accepted: bool) -> bool:
        """Tick or untick the disclaimer. Ignored once the gate has finished."""
        if self.state in (TriageState.VALIDATED, TriageState.REDIRECTED):
            return False
        self.disclaimer_accepted = bool(accepted)
        return True

    @property
    def all_questions_answered(self) -> bool:
        return all(q.id in self.answers for q in self.questions)

    def evaluate(self) -> RedFlagsResult:
        return evaluate_red_flags(self.answers, self.questions)

    @property
    def has_red_flags(self) -> bool:
        return self.evaluate().emergency

    @property
    def can_complete(self) -> bool:
        return (
            self.state == TriageState.UNANSWERED
            and self.all_questions_answered
            and self.disclaimer_accepted
        )

    def complete(
        self,
        on_validated: Optional[Callable[[TriageSession], None]] = None,
        on_emergency: Optional[Callable[[RedFlagsResult], None]] = None,
    ) -> TriageState:
        """
        Pass the gate.

        Blocked until every question is answered and the disclaimer accepted;
        the current state is returned unchanged in that case. A red flag
        redirects without validating the session, so triage runs again on the
        next visit.
        """
        if not self.can_complete:
            logger.warning(
                "complete: blocked (state=%s, answered=%s, disclaimer=%s)",
                self.state.value, self.all_questions_answered, self.disclaimer_accepted,
            )
            return self.state

        self.state = TriageState.EVALUATED
        result = self.evaluate()

        if result.emergency:
            self.state = TriageState.REDIRECTED
            logger.info("Red flags raised: %s", result.triggered)
            if on_emergency:
                on_emergency(result)
            return self.state

        session = TriageSession(
            validated=True,
            timestamp=self.clock(),
            answers=dict(self.answers),
            has_red_flags=False,
        )
        self.sessions.save(session)
        self.state = TriageState.VALIDATED
        logger.info("Triage validated for this session")
        if on_validated:
            on_validated(session)
        return self.state
