from typing import Any, Optional
from fastapi import status


class BaseAPIException(Exception):
    """
    Parent class for every custom error raised by the application.
    Handlers in app.core.handlers turn it into the standard error payload.
    """
    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[Any] = None,
    ):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)

# =========================================================
# 1. COMMON ERRORS
# =========================================================

class BadRequestException(BaseAPIException):
    """400: the request is well-formed but cannot be honoured"""
    def __init__(self, message: str = "Bad Request", code: str = "BAD_REQUEST", details: Any = None):
        super().__init__(
            message=message,
            code=code,
            status_code=status.HTTP_400_BAD_REQUEST,
            details=details
        )


class NotFoundError(BaseAPIException):
    """404: the referenced resource does not exist"""
    def __init__(self, message: str = "Resource not found"):
        super().__init__(
            message=message,
            code="NOT_FOUND",
            status_code=status.HTTP_404_NOT_FOUND
        )


class InternalError(BaseAPIException):
    """500: unexpected failure, the message is never shown to clients"""
    def __init__(self, message: str = "Internal server error"):
        super().__init__(
            message=message,
            code="INTERNAL_SERVER_ERROR",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
        )

# =========================================================
# 2. STUDENT DOMAIN ERRORS
# =========================================================

class StudentNotFoundError(NotFoundError):
    def __init__(self, student_id: int):
        self.student_id = student_id
        super().__init__(f"Student with id {student_id}, does not exists!")


class DuplicateEmailError(BadRequestException):
    """
    400: another student already uses this email.
    Raised by the service pre-check and when the database unique
    constraint rejects a write.
    """
    def __init__(self, email: str):
        self.email = email
        super().__init__(
            message=f"Student with email {email}, already exists!",
            code="DUPLICATE_EMAIL"
        )


class QueryError(BadRequestException):
    """400: unknown sort field or malformed filter"""
    def __init__(self, message: str, details: Any = None):
        super().__init__(
            message=message,
            code="INVALID_QUERY",
            details=details
        )
