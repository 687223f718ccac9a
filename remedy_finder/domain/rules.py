from typing import List, Mapping, Sequence

from .models import EmergencyContact, RedFlagsResult, TriageOption, TriageQuestion


RED_FLAG_QUESTIONS: List[TriageQuestion] = [
    TriageQuestion(
        id="intensity",
        question="How intense is the pain?",
        options=[
            TriageOption(id="low", label="Low"),
            TriageOption(id="moderate", label="Moderate"),
            TriageOption(id="severe", label="Severe or very severe", is_red_flag=True),
        ],
    ),
    TriageQuestion(
        id="duration",
        question="How long have you had these symptoms?",
        options=[
            TriageOption(id="hours", label="A few hours"),
            TriageOption(id="days", label="1-2 days"),
            TriageOption(id="persistent", label="More than 48h without improvement", is_red_flag=True),
        ],
    ),
    TriageQuestion(
        id="fever",
        question="Do you have a fever?",
        options=[
            TriageOption(id="no", label="No"),
            TriageOption(id="yes", label="Yes", is_red_flag=True),
        ],
    ),
    TriageQuestion(
        id="vomiting",
        question="Are you vomiting severely or persistently?",
        options=[
            TriageOption(id="no", label="No"),
            TriageOption(id="yes", label="Yes", is_red_flag=True),
        ],
    ),
]


EMERGENCY_CONTACTS: List[EmergencyContact] = [
    EmergencyContact(name="SAMU", phone="15", description="Medical emergency"),
    EmergencyContact(name="Fire brigade", phone="18", description="Emergency rescue"),
    EmergencyContact(name="European emergency number", phone="112", description="Emergencies"),
    EmergencyContact(name="SOS Médecins", phone="3624", description="Home doctor visit"),
]


def evaluate_red_flags(
    answers: Mapping[str, str],
    questions: Sequence[TriageQuestion] = RED_FLAG_QUESTIONS,
) -> RedFlagsResult:
    triggered: List[str] = []
    answers = answers or {}

    for question in questions:
        option = question.option(answers.get(question.id))
        if option is not None and option.is_red_flag:
            triggered.append(question.id)

    return RedFlagsResult(triggered=triggered, emergency=bool(triggered))
