"""Custom exceptions and error codes."""

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Standardized error codes for the API."""

    # Authentication errors (401)
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_TOKEN = "INVALID_TOKEN"
    TOKEN_EXPIRED = "TOKEN_EXPIRED"

    # Not found errors (404)
    TASK_NOT_FOUND = "TASK_NOT_FOUND"

    # Validation errors (400)
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_STAT = "INVALID_STAT"
    INSUFFICIENT_POINTS = "INSUFFICIENT_POINTS"

    # Conflict errors (409)
    TASK_ALREADY_COMPLETED = "TASK_ALREADY_COMPLETED"
    CONCURRENT_MODIFICATION = "CONCURRENT_MODIFICATION"

    # Rate limiting (429)
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"

    # Server errors (500/503)
    INTERNAL_ERROR = "INTERNAL_ERROR"
    REPOSITORY_UNAVAILABLE = "REPOSITORY_UNAVAILABLE"


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Any | None = None,
    ) -> None:
        self.error_code = error_code
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)


class AuthenticationError(AppException):
    """Authentication failed."""

    def __init__(
        self,
        message: str = "Authentication required",
        error_code: ErrorCode = ErrorCode.UNAUTHORIZED,
    ) -> None:
        super().__init__(
            error_code=error_code,
            message=message,
            status_code=401,
        )


class TaskNotFoundError(AppException):
    """Task is not part of the profile's known tasks."""

    def __init__(self, task_id: int) -> None:
        super().__init__(
            error_code=ErrorCode.TASK_NOT_FOUND,
            message=f"Task not found: {task_id}",
            status_code=404,
            details={"task_id": task_id},
        )


class TaskAlreadyCompletedError(AppException):
    """Task reward has already been claimed."""

    def __init__(self, task_id: int) -> None:
        super().__init__(
            error_code=ErrorCode.TASK_ALREADY_COMPLETED,
            message=f"Task already completed: {task_id}",
            status_code=409,
            details={"task_id": task_id},
        )


class InvalidStatError(AppException):
    """Stat name is not one of the known character stats."""

    def __init__(self, stat: str, allowed: list[str]) -> None:
        super().__init__(
            error_code=ErrorCode.INVALID_STAT,
            message=f"Unknown stat: {stat}",
            status_code=400,
            details={"stat": stat, "allowed": allowed},
        )


class InsufficientPointsError(AppException):
    """No level points left to spend."""

    def __init__(self, level_points: int = 0) -> None:
        super().__init__(
            error_code=ErrorCode.INSUFFICIENT_POINTS,
            message="Not enough level points",
            status_code=400,
            details={"level_points": level_points},
        )


class ConcurrentModificationError(AppException):
    """Profile was modified by another request since it was read."""

    def __init__(self, user_id: str, expected_version: int | None = None) -> None:
        # Not serialized into the response body
        self.user_id = user_id
        self.expected_version = expected_version
        super().__init__(
            error_code=ErrorCode.CONCURRENT_MODIFICATION,
            message="Profile was modified concurrently, please retry",
            status_code=409,
        )


class RepositoryUnavailableError(AppException):
    """Persistence layer failed or timed out."""

    def __init__(self, message: str = "Profile storage is unavailable") -> None:
        super().__init__(
            error_code=ErrorCode.REPOSITORY_UNAVAILABLE,
            message=message,
            status_code=503,
        )
