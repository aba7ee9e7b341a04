from fastapi import status

UNKNOWN_AI_ERROR_MESSAGE = "An unknown error occurred while contacting the AI."


class BaseAppException(Exception):
    """Base class for all app-specific exceptions."""
    def __init__(self, message: str, status_code: int = status.HTTP_400_BAD_REQUEST):
        self.message = message
        self.status_code = status_code
        super().__init__(message)

class BusinessValidationException(BaseAppException):
    """Invalid input or business rule violation."""
    def __init__(self, message: str):
        super().__init__(message, status.HTTP_422_UNPROCESSABLE_ENTITY)

class AIProcessingException(BaseAppException):
    """Gemini or AI processing failure."""
    def __init__(self, message: str = "AI model processing failed"):
        super().__init__(message, status.HTTP_502_BAD_GATEWAY)

class GroundedQueryException(AIProcessingException):
    """Maps-grounded Gemini call failed (transport, auth or malformed response)."""
    def __init__(self, message: str = UNKNOWN_AI_ERROR_MESSAGE):
        super().__init__(message or UNKNOWN_AI_ERROR_MESSAGE)

class SessionNotFoundException(BaseAppException):
    """Unknown or expired query session."""
    def __init__(self, session_id: str):
        super().__init__(f"Session '{session_id}' not found or expired", status.HTTP_404_NOT_FOUND)
        self.session_id = session_id

class LocationAlreadyResolvedException(BaseAppException):
    """Location is captured once per session; a second report is rejected."""
    def __init__(self, message: str = "Location has already been resolved for this session"):
        super().__init__(message, status.HTTP_409_CONFLICT)
