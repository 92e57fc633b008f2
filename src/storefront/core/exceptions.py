from typing import Optional, Dict, Any
import traceback
import sys


class BaseAPIException(Exception):
    def __init__(self,
        message: str,
        status_code: int = 500,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        internal_message: Optional[str] = None):
        self.message = message  # User-facing message
        self.internal_message = internal_message or message  # Internal/debug message
        self.status_code = status_code
        self.error_code = error_code or self.__class__.__name__.replace('Error', '').upper()
        self.details = details or {}

        # Capture stack trace for debugging
        self.traceback = traceback.format_exc() if sys.exc_info()[0] else None

        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for JSON response"""
        body: Dict[str, Any] = {
            "error": self.message,
            "code": self.error_code,
        }
        if self.details:
            body["details"] = self.details
        return body


class ValidationError(BaseAPIException):
    """Raised when request validation fails"""

    def __init__(
        self,
        message: str = "Validation failed",
        field_errors: Optional[Dict[str, Any]] = None
    ):
        details = {"field_errors": field_errors} if field_errors else {}
        super().__init__(message, 400, "VALIDATION_ERROR", details)


class NotFoundError(BaseAPIException):
    """Raised when a requested resource is not found"""

    def __init__(self, resource: str = "Resource"):
        super().__init__(f"{resource} not found", 404, "NOT_FOUND")


class UnauthorizedError(BaseAPIException):
    """Raised when the caller is not authenticated"""

    def __init__(self, message: str = "Authentication required", error_code: str = "UNAUTHORIZED"):
        super().__init__(message, 401, error_code)


class InvalidCredentialsError(UnauthorizedError):
    """
    Login failure.

    Unknown email and wrong password both raise this with the same message so
    callers cannot probe which accounts exist.
    """

    def __init__(self):
        super().__init__("Invalid credentials", "INVALID_CREDENTIALS")


class MissingTokenError(UnauthorizedError):
    def __init__(self):
        super().__init__("Missing token", "MISSING_TOKEN")


class InvalidTokenError(UnauthorizedError):
    def __init__(self):
        super().__init__("Invalid or expired token", "INVALID_TOKEN")


class ConflictError(BaseAPIException):
    """Raised when there's a conflict with the current state"""

    def __init__(self, message: str = "Resource conflict", conflict_field: Optional[str] = None):
        details = {"conflict_field": conflict_field} if conflict_field else {}
        super().__init__(message, 409, "CONFLICT", details)


class DatabaseError(BaseAPIException):
    """Raised when database operations fail"""

    def __init__(self, message: str = "Database operation failed", operation: Optional[str] = None):
        # Don't expose internal database details to users
        super().__init__(
            "Server error",
            500,
            "DATABASE_ERROR",
            internal_message=f"{message} ({operation})" if operation else message,
        )


class InternalServerError(BaseAPIException):
    """Raised for unexpected internal errors"""

    def __init__(self, message: str = "An unexpected error occurred"):
        # Don't expose internal details to users
        super().__init__(
            "Server error",
            500,
            "INTERNAL_ERROR",
            internal_message=message
        )


def field_errors_from(messages: Any) -> Dict[str, Any]:
    """Normalise marshmallow/pydantic error payloads into a field -> messages dict."""
    if isinstance(messages, dict):
        return messages
    if isinstance(messages, list):
        return {"_schema": messages}
    return {"_schema": [str(messages)]}
