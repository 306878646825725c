# server/prompts.py
# ---------------------------------------------------------
# Prompt builders for the Phi tools.
#
# Callers of llm.generate_content pass a finished prompt;
# persona framing and the output-language instruction are
# added here.
# ---------------------------------------------------------

from typing import Literal, Optional

from .account_models import Language
from .scholarship_models import SearchParams

Action = Literal["evaluate", "rewrite"]

# Button labels of the tool screens, reused as the prompt's verb.
ACTION_TEXT = {
    Language.EN: {
        "evaluate": "Evaluate",
        "rewrite": "Rewrite and improve",
    },
    Language.AR: {
        "evaluate": "قيّم",
        "rewrite": "أعد كتابة وحسّن",
    },
}


def action_text(action: Action, lang: Language) -> str:
    return ACTION_TEXT[Language(lang)][action]


def language_name(lang: Language) -> str:
    return "Arabic" if Language(lang) is Language.AR else "English"


def cv_prompt(action: Action, cv_text: str, lang: Language) -> str:
    return (
        "Act as an expert career coach for the Phi platform. "
        f"{action_text(action, lang)} the following CV: \n\n---\n\n"
        f"{cv_text}\n\n---\n\n"
        f"(Respond in {language_name(lang)})"
    )


def sop_prompt(action: Action, sop_text: str, lang: Language, style: str = "academic") -> str:
    return (
        "Act as an expert academic advisor for Phi. "
        f"{action_text(action, lang)} the following Statement of Purpose (SOP). "
        f"The writing style should be {style}.\n\n---\n\n"
        f"{sop_text}\n\n---\n\n"
        f"(Respond in {language_name(lang)})"
    )


def interview_question_prompt(lang: Language) -> str:
    return (
        "Generate a common behavioral interview question appropriate for a "
        "university student applying for scholarships. "
        f"The question should be in {language_name(lang)}. "
        "For example: 'Tell me about a time you faced a challenge.' or "
        "'Describe a situation where you demonstrated leadership skills.'"
    )


def interview_feedback_prompt(question: str, answer: str, lang: Language) -> str:
    return (
        "Act as an interview coach for Phi. "
        f'The user was asked the question: "{question}". '
        f'The user provided the answer: "{answer}". '
        "Provide constructive feedback on this answer. "
        f"(Provide feedback in {language_name(lang)})"
    )


def certificate_prompt(
    name: str,
    issuer: str,
    duration: str,
    description: str,
    lang: Language,
) -> str:
    return (
        "Generate a short (for a CV) and a long (for LinkedIn/SOP) professional "
        f"description for the following certificate in {language_name(lang)}.\n"
        f"- Certificate Name: {name}\n"
        f"- Issued by: {issuer}\n"
        f"- Duration: {duration}\n"
        f"- User's description: {description}\n\n"
        'Return the result as a JSON object with two keys: "short" and "long".'
    )


_SCHOLARSHIP_FIELDS = (
    "For each scholarship, provide the following details adhering strictly to "
    "the JSON schema: id (unique integer), title (en/ar), university, country "
    '(en/ar), countryCode (ISO 3166-1 alpha-2, e.g., "US", "DE"), deadline '
    "(YYYY-MM-DD format), level (en/ar), specialty (en/ar), isOpen, "
    "isOpeningSoon, a concise summary (en/ar), a list of 3-4 requirements "
    "(en/ar), a list of 3-4 benefits (en/ar), and a realistic application link.\n\n"
    "Return ONLY a JSON array of objects that validates against the provided "
    "schema. Do not include any other text or explanations."
)


def homepage_scholarships_prompt(lang: Language) -> str:
    return (
        'Act as an expert scholarship database API for the "Phi" platform. '
        "Generate a list of 6 popular and highly diverse scholarships that are "
        "currently open (isOpen: true) or will be opening soon (isOpeningSoon: true).\n"
        "Ensure a wide variety of academic fields (e.g., Arts, STEM, Business, "
        "Health) and geographical locations (e.g., Europe, North America, Asia, "
        "Middle East).\n"
        f"The user's preferred language is {language_name(lang)}.\n\n"
        "IMPORTANT: You MUST generate all text content (titles, summaries, "
        "requirements, etc.) in BOTH English and Arabic for each scholarship.\n\n"
        f"{_SCHOLARSHIP_FIELDS}"
    )


def _filter_value(value: Optional[str]) -> Optional[str]:
    if not value or value == "all":
        return None
    return value


def search_query(params: SearchParams) -> str:
    """'<text> in <specialty> for <level> level', skipping empty or 'all' filters."""
    parts = [params.text or ""]
    specialty = _filter_value(params.specialty)
    level = _filter_value(params.level)
    if specialty:
        parts.append(f"in {specialty}")
    if level:
        parts.append(f"for {level} level")
    return " ".join(p for p in parts if p).strip()


def search_scholarships_prompt(params: SearchParams, lang: Language) -> str:
    return (
        'Act as an expert scholarship database API for the "Phi" platform. '
        "A student is searching for scholarships. Based on their query, generate "
        "a list of 6 realistic, distinct, and relevant scholarships.\n"
        f'The user\'s query is: "{search_query(params)}".\n'
        f"The user's preferred language is {language_name(lang)}.\n\n"
        "IMPORTANT: You MUST generate all text content (titles, summaries, "
        "requirements, etc.) in BOTH English and Arabic for each scholarship, "
        "regardless of the user's preferred language.\n\n"
        f"{_SCHOLARSHIP_FIELDS}"
    )
