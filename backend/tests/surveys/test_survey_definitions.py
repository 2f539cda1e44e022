"""Unit tests for survey definitions: registry, phase selection and prompt assembly."""

import pytest

from chatsurvey.core.exceptions import UnknownSurveyError
from chatsurvey.domain.transcript import Message, Participant, Summary, Transcript
from chatsurvey.surveys import (
    SURVEY_TYPES,
    PromptContext,
    SessionDigest,
    get_survey,
    resolve_survey_types,
)

pytestmark = pytest.mark.unit


class TestRegistry:
    def test_all_survey_types(self):
        assert set(SURVEY_TYPES) == {"workshop", "faculty", "adoption", "creative-curriculum"}

    def test_unknown_type(self):
        with pytest.raises(UnknownSurveyError):
            get_survey("bogus")

    def test_resolve_all(self):
        assert resolve_survey_types("all") == list(SURVEY_TYPES)

    def test_resolve_single(self):
        assert resolve_survey_types("faculty") == ["faculty"]

    def test_resolve_unknown(self):
        with pytest.raises(UnknownSurveyError):
            resolve_survey_types("bogus")

    @pytest.mark.parametrize("survey_type", SURVEY_TYPES)
    def test_greeting_names_participant(self, survey_type):
        assert "Maya" in get_survey(survey_type).greeting("Maya")

    def test_only_creative_curriculum_supports_login(self):
        assert [key for key in SURVEY_TYPES if get_survey(key).supports_login] == ["creative-curriculum"]

    def test_course_report_surveys(self):
        assert {key for key in SURVEY_TYPES if get_survey(key).supports_course_report} == {
            "adoption",
            "creative-curriculum",
        }


class TestPhaseSelection:
    @pytest.mark.parametrize(
        "count,expected",
        [
            (1, "ai_awareness"),
            (3, "ai_awareness"),
            (4, "teaching_interest"),
            (7, "teaching_interest"),
            (8, "concerns"),
            (12, "support_needs"),
            (15, "nexted_services"),
            (18, "nexted_services"),
            (19, "background"),
            (40, "background"),
        ],
    )
    def test_faculty_sections_by_message_count(self, count, expected):
        assert get_survey("faculty").select_phase(count).name == expected

    @pytest.mark.parametrize("count,expected", [(1, "context"), (6, "deep_dive"), (15, "deep_dive"), (16, "wrap_up")])
    def test_adoption_phases(self, count, expected):
        assert get_survey("adoption").select_phase(count).name == expected

    @pytest.mark.parametrize(
        "count,expected",
        [(1, "opening"), (6, "exploring"), (16, "synthesizing"), (23, "synthesizing"), (24, "wrap_up")],
    )
    def test_creative_curriculum_phases(self, count, expected):
        assert get_survey("creative-curriculum").select_phase(count).name == expected

    def test_workshop_wrap_up(self):
        workshop = get_survey("workshop")
        assert workshop.select_phase(19).name == "explore"
        assert workshop.select_phase(20).name == "wrap_up"


class TestSystemPrompt:
    def test_faculty_prompt_includes_current_section(self):
        faculty = get_survey("faculty")
        prompt = faculty.build_system_prompt(PromptContext(message_count=9, phase=faculty.select_phase(9)))

        assert prompt.startswith(faculty.base_prompt)
        assert "Concerns & Barriers" in prompt
        assert "True or False" in prompt

    def test_workshop_explore_phase_adds_nothing(self):
        workshop = get_survey("workshop")
        prompt = workshop.build_system_prompt(PromptContext(message_count=2, phase=workshop.select_phase(2)))

        assert prompt == workshop.base_prompt

    def test_stuck_and_checkin_directives(self):
        c3 = get_survey("creative-curriculum")
        prompt = c3.build_system_prompt(
            PromptContext(message_count=5, stuck=True, checkin_due=True, elapsed_minutes=10.4)
        )

        assert "PARTICIPANT SEEMS STUCK" in prompt
        assert "About 10 minutes have passed" in prompt

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("I don't know, honestly", True),
            ("I don’t know", True),
            ("Not sure about that one", True),
            ("Can we skip this?", True),
            ("It's a lab course for 40 sophomores", False),
        ],
    )
    def test_stuck_detection(self, text, expected):
        assert get_survey("creative-curriculum").is_stuck([text]) is expected

    def test_surveys_without_signals_never_stuck(self):
        assert not get_survey("workshop").is_stuck(["I don't know"])


class TestGenerationPrompts:
    @pytest.mark.parametrize("survey_type", SURVEY_TYPES)
    def test_summary_instruction_ends_with_confirmation(self, survey_type):
        survey = get_survey(survey_type)
        instruction = survey.build_summary_instruction()

        assert instruction.startswith("Based on the conversation above")
        assert survey.confirmation_question in instruction

    def test_analysis_prompt_lists_sessions(self):
        prompt = get_survey("workshop").build_analysis_prompt(
            [
                SessionDigest("Ada", "Summary A", ["first answer"]),
                SessionDigest("Grace", "Summary B", []),
            ]
        )

        assert "2 completed" in prompt
        assert "SESSION 1 - Ada" in prompt
        assert "- first answer" in prompt
        assert "SESSION 2 - Grace" in prompt

    def test_course_report_prompt(self):
        transcript = Transcript(
            session_id="s",
            survey_type="adoption",
            participant=Participant(name="Ada", email="ada@example.edu"),
            conversation=[Message(role="user", content="BIOL 101")],
            summary=Summary(initial="initial", confirmed="confirmed text", user_edits=None),
        )

        prompt = get_survey("adoption").build_course_report_prompt(transcript)

        assert "Ada" in prompt
        assert "confirmed text" in prompt
        assert "PARTICIPANT EDITS:\nNone" in prompt
        assert "USER: BIOL 101" in prompt

    def test_course_report_prompt_unavailable_for_workshop(self):
        with pytest.raises(ValueError):
            get_survey("workshop").build_course_report_prompt(None)

    def test_info_hides_keywords(self):
        info = get_survey("adoption").info()

        assert info["survey_type"] == "adoption"
        assert info["topics"][0] == {"id": "course", "label": "The course"}
