"""
Application error taxonomy.

Services raise these; the handlers registered in ``main.py`` turn them into
``{"message": ..., "error": ...}`` responses. The diagnostic ``error`` field
is only sent outside production.
"""

from typing import Any, Dict, Optional


class AppError(Exception):
    status_code = 500
    message = "Internal server error"

    def __init__(self, message: Optional[str] = None, detail: Optional[str] = None):
        self.message = message or self.message
        self.detail = detail
        super().__init__(self.message)

    def to_payload(self, include_detail: bool) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"message": self.message}
        if include_detail and self.detail:
            payload["error"] = self.detail
        return payload


class NotFoundError(AppError):
    """Record is absent or is not owned by the caller."""

    status_code = 404
    message = "Resume not found"


class SchemaInvalidError(AppError):
    """The table lacks the minimal column set needed for the operation."""

    status_code = 500
    message = (
        "Database schema error. Please ensure the resumes table has the required "
        "columns (user_id, summary, experience, education, skills)."
    )


class ServiceUnavailableError(AppError):
    """An external collaborator (LLM, image host) failed."""

    status_code = 500
    message = "External service unavailable"


class ValidationError(AppError):
    status_code = 400
    message = "Invalid input"
