"""Admin API Pydantic schemas."""

from pydantic import BaseModel, Field

# ---------- Sessions ----------


class SessionListItem(BaseModel):
    survey_type: str
    filename: str
    participant: dict
    status: str
    start_time: str
    completed_time: str | None = None


class SessionListResponse(BaseModel):
    sessions: list[SessionListItem]


class DeleteSessionResponse(BaseModel):
    success: bool
    message: str


class DeleteAllResponse(BaseModel):
    success: bool
    deleted_count: int
    message: str


# ---------- Analysis ----------


class AnalysisResponse(BaseModel):
    analysis: str


class CourseReportResponse(BaseModel):
    report: str


# ---------- Saved reports ----------


class SaveAnalysisRequest(BaseModel):
    survey_type: str = Field(..., min_length=1)
    analysis: str = Field(..., min_length=1)


class SaveCourseReportRequest(BaseModel):
    survey_type: str = Field(..., min_length=1)
    filename: str = Field(..., min_length=1, description="Transcript the report was generated from")
    participant_name: str = ""
    report: str = Field(..., min_length=1)


class SaveReportResponse(BaseModel):
    success: bool
    filename: str


class ReportInfo(BaseModel):
    filename: str
    created: str
    size: int


class ReportListResponse(BaseModel):
    analysis: list[ReportInfo]
    courses: list[ReportInfo]


class SuccessResponse(BaseModel):
    success: bool
