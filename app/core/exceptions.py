"""Domain errors raised by services and dependencies.

Each error knows the HTTP status and machine-readable code it maps to; the
handlers registered in ``app.main`` turn them into the standard error envelope.
"""
from __future__ import annotations

from typing import Any, Optional

from fastapi import status


class AppError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code: str = "SERVER_ERROR"
    default_message: str = "Server error"

    def __init__(self, message: Optional[str] = None, *, data: Any = None):
        self.message = message or self.default_message
        self.data = data
        super().__init__(self.message)


class UnauthorizedError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    error_code = "UNAUTHORIZED"
    default_message = "Unauthorized"


class AdminRequiredError(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    error_code = "ADMIN_REQUIRED"
    default_message = "Admin access required"


class ForbiddenError(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    error_code = "FORBIDDEN"
    default_message = "Forbidden"


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    error_code = "NOT_FOUND"
    default_message = "Resource not found"


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    error_code = "VALIDATION_ERROR"
    default_message = "Invalid request"


class ConflictError(AppError):
    status_code = status.HTTP_409_CONFLICT
    error_code = "CONFLICT"
    default_message = "Resource already exists"


class ServerError(AppError):
    pass


class MissingFieldsError(ValidationError):
    error_code = "MISSING_FIELDS"
    default_message = "Missing required fields"


class ReasoningTooShortError(ValidationError):
    error_code = "REASONING_TOO_SHORT"

    def __init__(self, min_words: int, actual_words: int):
        super().__init__(
            f"Reasoning must be at least {min_words} words",
            data={"min_words": min_words, "actual_words": actual_words},
        )


class RoundNotActiveError(ValidationError):
    error_code = "ROUND_NOT_ACTIVE"
    default_message = "Round is not active"


class NoRoundsFoundError(ValidationError):
    error_code = "NO_ROUNDS_FOUND"
    default_message = "No rounds found for this game session"


class QuestionNotFoundError(NotFoundError):
    error_code = "QUESTION_NOT_FOUND"
    default_message = "Question not found"
