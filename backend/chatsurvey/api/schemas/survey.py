"""Pydantic schemas for the participant-facing survey API."""

from pydantic import BaseModel, Field


class StartRequest(BaseModel):
    name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=1)
    password: str | None = Field(None, description="Enables resume for survey types that support login")


class StartResponse(BaseModel):
    session_id: str
    message: str


class MessageRequest(BaseModel):
    session_id: str = Field(..., min_length=1)
    message: str = Field(..., min_length=1)


class MessageResponse(BaseModel):
    message: str
    is_summary: bool = Field(False, description="Reply is a summary awaiting the participant's confirmation")
    covered_topics: list[str] = Field(default_factory=list, description="Topic ids the bot has raised so far")


class SummaryRequest(BaseModel):
    session_id: str = Field(..., min_length=1)


class SummaryResponse(BaseModel):
    summary: str


class CompleteRequest(BaseModel):
    session_id: str = Field(..., min_length=1)
    summary: str | None = None
    user_edits: str | None = None


class CompleteResponse(BaseModel):
    success: bool


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class ConversationMessage(BaseModel):
    role: str
    content: str
    timestamp: str


class LoginResponse(BaseModel):
    session_id: str
    conversation: list[ConversationMessage]
    message: str


class TopicInfo(BaseModel):
    id: str
    label: str


class SurveyInfoResponse(BaseModel):
    survey_type: str
    title: str
    description: str
    estimated_duration: str
    supports_login: bool
    show_timer: bool
    show_progress: bool
    topics: list[TopicInfo]
    phases: list[str]
