"""Survey type registry."""

from chatsurvey.core.exceptions import UnknownSurveyError
from chatsurvey.surveys.adoption import ADOPTION
from chatsurvey.surveys.base import Phase, PromptContext, SessionDigest, SurveyDefinition
from chatsurvey.surveys.creative_curriculum import CREATIVE_CURRICULUM
from chatsurvey.surveys.faculty import FACULTY
from chatsurvey.surveys.workshop import WORKSHOP

SURVEYS: dict[str, SurveyDefinition] = {
    s.key: s for s in (WORKSHOP, FACULTY, ADOPTION, CREATIVE_CURRICULUM)
}

SURVEY_TYPES: tuple[str, ...] = tuple(SURVEYS)


def get_survey(survey_type: str) -> SurveyDefinition:
    try:
        return SURVEYS[survey_type]
    except KeyError:
        raise UnknownSurveyError(survey_type) from None


def resolve_survey_types(survey_type: str) -> list[str]:
    """Expand ``all`` to every survey type; validate anything else."""
    if survey_type == "all":
        return list(SURVEY_TYPES)
    get_survey(survey_type)
    return [survey_type]


__all__ = [
    "SURVEYS",
    "SURVEY_TYPES",
    "Phase",
    "PromptContext",
    "SessionDigest",
    "SurveyDefinition",
    "get_survey",
    "resolve_survey_types",
]
