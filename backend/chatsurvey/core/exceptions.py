class SurveyError(Exception):
    """Base exception for the survey service."""

    status_code: int = 500
    public_message: str = "Internal server error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.public_message)


class NotFoundError(SurveyError):
    """Raised when a session, transcript or report does not exist."""

    status_code = 404
    public_message = "Session not found"


class CorruptDataError(SurveyError):
    """Raised when a stored transcript is not valid structured data."""

    public_message = "Stored session data is unreadable"


class StorageError(SurveyError):
    """Raised when a directory or file cannot be created, written or removed."""

    public_message = "Failed to write session data"


class InvalidFilenameError(SurveyError):
    """Raised when a filename could escape its storage directory."""

    status_code = 400
    public_message = "Invalid filename"


class UnknownSurveyError(SurveyError):
    """Raised for a survey type that does not exist."""

    status_code = 400
    public_message = "Invalid survey type"

    def __init__(self, survey_type: str):
        self.survey_type = survey_type
        super().__init__(f"Invalid survey type: {survey_type}")


class InvalidCredentialsError(SurveyError):
    """Raised when a resume login presents the wrong password."""

    status_code = 401
    public_message = "Invalid email or password"


class LLMServiceError(SurveyError):
    """Raised when the text-generation API call fails."""

    public_message = "Text generation failed"


class NothingToAnalyzeError(SurveyError):
    """Raised when an analysis is requested with no usable sessions."""

    status_code = 400
    public_message = "No sessions to analyze"


class CourseReportUnavailableError(SurveyError):
    """Raised when a course report cannot be generated for a transcript."""

    status_code = 400
    public_message = "Course report unavailable"


class UnknownReportTypeError(SurveyError):
    """Raised for a saved-report category other than ``analysis`` / ``courses``."""

    status_code = 400
    public_message = "Invalid report type"

    def __init__(self, report_type: str):
        self.report_type = report_type
        super().__init__(f"Invalid report type: {report_type}")
