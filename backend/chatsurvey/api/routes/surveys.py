"""Participant-facing routes, one router per survey type.

Every survey type exposes the same endpoints under ``/api/<survey_type>``;
``/login`` only exists for types that support resume.
"""

from fastapi import APIRouter, Depends

from chatsurvey.api.deps import get_survey_service
from chatsurvey.api.schemas.survey import (
    CompleteRequest,
    CompleteResponse,
    ConversationMessage,
    LoginRequest,
    LoginResponse,
    MessageRequest,
    MessageResponse,
    StartRequest,
    StartResponse,
    SummaryRequest,
    SummaryResponse,
    SurveyInfoResponse,
)
from chatsurvey.services.survey_service import SurveyService
from chatsurvey.surveys import SurveyDefinition


def build_survey_router(survey: SurveyDefinition) -> APIRouter:
    router = APIRouter(prefix=f"/{survey.key}", tags=[survey.key])
    survey_type = survey.key

    @router.get("/info", response_model=SurveyInfoResponse)
    async def survey_info():
        """Title, duration, topics and front-end flags for this survey."""
        return survey.info()

    @router.post("/start", response_model=StartResponse)
    async def start_session(body: StartRequest, service: SurveyService = Depends(get_survey_service)):
        """Create a session and return the greeting."""
        result = await service.start(survey_type, body.name, body.email, body.password)
        return StartResponse(session_id=result.session_id, message=result.message)

    @router.post("/message", response_model=MessageResponse)
    async def send_message(body: MessageRequest, service: SurveyService = Depends(get_survey_service)):
        """Record the participant's message and return the bot's reply."""
        result = await service.message(survey_type, body.session_id, body.message)
        return MessageResponse(
            message=result.message,
            is_summary=result.is_summary,
            covered_topics=result.covered_topics,
        )

    @router.post("/summary", response_model=SummaryResponse)
    async def generate_summary(body: SummaryRequest, service: SurveyService = Depends(get_survey_service)):
        summary = await service.summary(survey_type, body.session_id)
        return SummaryResponse(summary=summary)

    @router.post("/complete", response_model=CompleteResponse)
    async def complete_session(body: CompleteRequest, service: SurveyService = Depends(get_survey_service)):
        """Store the confirmed summary and close the session."""
        await service.complete(survey_type, body.session_id, body.summary, body.user_edits)
        return CompleteResponse(success=True)

    if survey.supports_login:

        @router.post("/login", response_model=LoginResponse)
        async def resume_session(body: LoginRequest, service: SurveyService = Depends(get_survey_service)):
            """Resume the latest in-progress session for this email."""
            result = await service.login(survey_type, body.email, body.password)
            return LoginResponse(
                session_id=result.session_id,
                conversation=[ConversationMessage(**m.model_dump()) for m in result.conversation],
                message=result.message,
            )

    return router
