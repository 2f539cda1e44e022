"""Summary-confirmation detection for bot replies.

A generated summary ends with a fixed confirmation question ("Does this
accurately capture your thoughts?"). Front ends use this classifier's verdict
(returned as ``is_summary`` by the message endpoint) to decide whether to open
the review dialog.

Pure functions, no I/O. Each survey type has its own rule because each
summary template has a different shape. Bump ``CLASSIFIER_VERSION`` whenever a
rule changes so stored verdicts can be told apart.

The detection is heuristic: a reply that paraphrases the confirmation or
drops the section headers is missed, and a long structured recap that happens
to ask "does this capture it" is caught.
"""

import re
from collections.abc import Callable

CLASSIFIER_VERSION = "2"

MIN_SUMMARY_LENGTH = 500
MIN_SECTION_HEADERS = 3

_BOLD_HEADER_RE = re.compile(r"\*\*[A-Z][^*]+\*\*")
_BOLD_COLON_HEADER_RE = re.compile(r"\*\*[A-Z][^*]+:\*\*")

WORKSHOP_SECTIONS: tuple[str, ...] = (
    "workshop feedback",
    "nexted interest",
    "ai concerns",
    "technical comfort",
    "course ideas",
    "recommended follow-up",
)


def has_confirmation(message: str) -> bool:
    """True if the text asks the participant to confirm the summary."""
    lower = message.lower()
    asks = "does this" in lower or "does that" in lower
    about_accuracy = "capture" in lower or "accurate" in lower
    return asks and about_accuracy


def count_bold_headers(message: str) -> int:
    return len(_BOLD_HEADER_RE.findall(message))


def _workshop(message: str) -> bool:
    lower = message.lower()
    sections = sum(1 for name in WORKSHOP_SECTIONS if name in lower)
    return sections >= MIN_SECTION_HEADERS


def _faculty(message: str) -> bool:
    headers = len(_BOLD_COLON_HEADER_RE.findall(message))
    looks_like_summary = all(word in message for word in ("Usage", "Interest", "Concerns"))
    return headers >= MIN_SECTION_HEADERS and looks_like_summary


def _adoption(message: str) -> bool:
    lower = message.lower()
    return (
        count_bold_headers(message) >= MIN_SECTION_HEADERS
        and "course" in lower
        and "concern" in lower
        and len(message) > MIN_SUMMARY_LENGTH
    )


def _creative_curriculum(message: str) -> bool:
    return (
        count_bold_headers(message) >= MIN_SECTION_HEADERS
        and "course" in message.lower()
        and len(message) > MIN_SUMMARY_LENGTH
    )


_RULES: dict[str, Callable[[str], bool]] = {
    "workshop": _workshop,
    "faculty": _faculty,
    "adoption": _adoption,
    "creative-curriculum": _creative_curriculum,
}


def is_summary_message(message: str, survey_type: str) -> bool:
    """Return True if ``message`` looks like a complete summary awaiting confirmation.

    Unknown survey types fall back to the creative-curriculum rule, the most
    generic of the four.
    """
    if not message or not has_confirmation(message):
        return False
    rule = _RULES.get(survey_type, _creative_curriculum)
    return rule(message)
