# server/llm.py
# ---------------------------------------------------------
# Phi Assistant: the single gateway to the completion API.
#
# Public helpers used by routes:
#   - generate_content(prompt)                      -> str
#   - get_interview_question(lang)                  -> str
#   - get_certificate_description(...)             -> CertificateDescription
#   - fetch_homepage_scholarships(lang)             -> list[Scholarship]
#   - search_scholarships(params, lang)             -> list[Scholarship]
#
# Text and certificate helpers raise AssistantUnavailable on
# any failure. Scholarship list helpers return [] instead.
# ---------------------------------------------------------

import json
import logging
import re
from datetime import datetime
from typing import Any, List, Optional

from anthropic import Anthropic
from dateutil import parser as dateparser
from pydantic import TypeAdapter, ValidationError

from . import config, prompts
from .account_models import Language
from .scholarship_models import CertificateDescription, Scholarship, SearchParams

logger = logging.getLogger(__name__)

MODEL = config.MODEL

client: Optional[Anthropic] = None
if config.ANTHROPIC_API_KEY:
    client = Anthropic(api_key=config.ANTHROPIC_API_KEY)
    logger.info("Anthropic client initialized; model: %s", MODEL)
else:
    logger.warning("No ANTHROPIC_API_KEY found; Phi Assistant calls will fail.")


class AssistantUnavailable(Exception):
    """The completion service could not produce a usable answer."""

    def __init__(self, message: str = "Failed to generate content from Phi Assistant."):
        super().__init__(message)


# -------------------------------------------------------------------
# Output schemas (sent to the model inside the system prompt)
# -------------------------------------------------------------------

CERTIFICATE_SCHEMA = (
    "Return ONLY valid JSON matching this schema:\n"
    "{\n"
    '  "short": string,\n'
    '  "long": string\n'
    "}\n"
)

_BILINGUAL = '{"en": string, "ar": string}'
_BILINGUAL_LIST = '{"en": [string, ...], "ar": [string, ...]}'

SCHOLARSHIP_LIST_SCHEMA = (
    "Return ONLY a valid JSON array; every item matches this schema:\n"
    "{\n"
    '  "id": number,\n'
    f'  "title": {_BILINGUAL},\n'
    '  "university": string,\n'
    f'  "country": {_BILINGUAL},\n'
    '  "countryCode": string,\n'
    '  "deadline": string,\n'
    f'  "level": {_BILINGUAL},\n'
    f'  "specialty": {_BILINGUAL},\n'
    '  "isOpen": boolean,\n'
    '  "isOpeningSoon": boolean,\n'
    f'  "summary": {_BILINGUAL},\n'
    f'  "requirements": {_BILINGUAL_LIST},\n'
    f'  "benefits": {_BILINGUAL_LIST},\n'
    '  "applyLink": string\n'
    "}\n"
)

_certificate_adapter = TypeAdapter(CertificateDescription)
_scholarship_list_adapter = TypeAdapter(List[Scholarship])

_DEFAULT_A = datetime(2000, 1, 1)
_DEFAULT_B = datetime(2001, 2, 2)


# -------------------------------------------------------------------
# Shared helpers
# -------------------------------------------------------------------

def _coerce_json(raw: str) -> Any:
    """
    Models often wrap JSON in ```json fences or add extra prose.
    Strip fences and grab the first {...} or [...] block.
    """
    s = raw.strip()

    if s.startswith("```"):
        lines = s.splitlines()
        if lines and lines[0].strip().startswith("```"):
            lines = lines[1:]
        if lines and lines[-1].strip().startswith("```"):
            lines = lines[:-1]
        s = "\n".join(lines).strip()

    if s and s[0] not in "[{":
        m = re.search(r"(\[.*\]|\{.*\})", s, flags=re.S)
        if m:
            s = m.group(0)

    return json.loads(s)


def _complete(prompt: str, op: str, system: Optional[str] = None) -> str:
    """One round trip to the completion API; returns the reply text."""
    if client is None:
        logger.error("[%s] no completion client configured", op)
        raise AssistantUnavailable()

    kwargs = {
        "model": MODEL,
        "max_tokens": config.MAX_TOKENS,
        "messages": [{"role": "user", "content": prompt}],
    }
    if system:
        kwargs["system"] = system

    try:
        message = client.messages.create(**kwargs)
        text = "".join(
            getattr(block, "text", "") for block in (message.content or [])
        )
    except Exception as exc:
        logger.error("[%s] completion API error: %r", op, exc)
        raise AssistantUnavailable() from exc

    if not text.strip():
        logger.error("[%s] empty completion", op)
        raise AssistantUnavailable()
    return text


def generate_structured(prompt: str, schema: str, adapter: TypeAdapter, op: str) -> Any:
    """Completion constrained to `schema`, validated with `adapter`."""
    system = "You are a precise JSON-only API. " + schema
    raw = _complete(prompt, op, system=system)
    logger.debug("[%s] raw JSON (first 200 chars): %s", op, raw[:200])
    try:
        return adapter.validate_python(_coerce_json(raw))
    except (ValueError, ValidationError) as exc:
        logger.error("[%s] reply did not match schema: %r", op, exc)
        raise AssistantUnavailable() from exc


def normalize_date_like(s: Optional[str]) -> Optional[str]:
    """
    Coerce a full date string into YYYY-MM-DD.

    Partial dates ("March 2027") and unparseable text come back as given.
    """
    if not s:
        return s
    try:
        # Parse against two defaults: any part taken from a default differs.
        first = dateparser.parse(s, fuzzy=True, default=_DEFAULT_A)
        second = dateparser.parse(s, fuzzy=True, default=_DEFAULT_B)
    except (ValueError, OverflowError):
        return s
    if first.date() != second.date():
        return s
    return first.strftime("%Y-%m-%d")


# -------------------------------------------------------------------
# Free-text completion
# -------------------------------------------------------------------

def generate_content(prompt: str) -> str:
    logger.info("Calling Phi Assistant (%d prompt chars)", len(prompt))
    return _complete(prompt, "generate_content")


def get_interview_question(lang: Language) -> str:
    return generate_content(prompts.interview_question_prompt(lang)).strip()


# -------------------------------------------------------------------
# Structured completion
# -------------------------------------------------------------------

def get_certificate_description(
    name: str,
    issuer: str,
    duration: str,
    description: str,
    lang: Language,
) -> CertificateDescription:
    prompt = prompts.certificate_prompt(name, issuer, duration, description, lang)
    return generate_structured(
        prompt, CERTIFICATE_SCHEMA, _certificate_adapter, "certificate_description"
    )


def _scholarship_list(prompt: str, op: str) -> List[Scholarship]:
    # "No results" is an acceptable outcome here, so failures become [].
    try:
        items = generate_structured(
            prompt, SCHOLARSHIP_LIST_SCHEMA, _scholarship_list_adapter, op
        )
    except AssistantUnavailable:
        logger.warning("[%s] returning empty scholarship list", op)
        return []
    return [
        s.model_copy(update={"deadline": normalize_date_like(s.deadline)})
        for s in items
    ]


def fetch_homepage_scholarships(lang: Language) -> List[Scholarship]:
    return _scholarship_list(
        prompts.homepage_scholarships_prompt(lang), "homepage_scholarships"
    )


def search_scholarships(params: SearchParams, lang: Language) -> List[Scholarship]:
    return _scholarship_list(
        prompts.search_scholarships_prompt(params, lang), "scholarship_search"
    )
