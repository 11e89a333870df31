"""
Application error taxonomy

Services raise these; app.main renders them as JSON responses.
"""
from typing import List, Optional


class QuizAppError(Exception):
    """Base class for errors that map to a client-facing HTTP status"""

    status_code = 500
    error = "internal_server_error"

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        super().__init__(message)
        self.message = message
        self.errors = errors or []


class ValidationError(QuizAppError):
    """Malformed input or a violated data-model invariant"""

    status_code = 400
    error = "validation_error"


class NotFoundError(QuizAppError):
    """Requested quiz, question or attempt does not exist"""

    status_code = 404
    error = "not_found"


class AuthenticationError(QuizAppError):
    """Missing or invalid caller identity"""

    status_code = 401
    error = "authentication_error"


class AuthorizationError(QuizAppError):
    """Caller may not access the requested resource"""

    status_code = 403
    error = "authorization_error"
