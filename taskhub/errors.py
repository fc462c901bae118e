"""
Application error kinds.

Every failure the services report is an AppError carrying one ErrorKind.
The kind decides the HTTP status; the message is shown to the client.
"""
from enum import Enum
from typing import Optional


class ErrorKind(Enum):
    """Closed set of failure kinds. Value is the name shown in responses."""
    ILLEGAL_ARGUMENT = ("IllegalArgumentError", 400, "Illegal Argument Error")
    INVALID_EMAIL_FORMAT = ("InvalidEmailFormatError", 400, "Invalid email format")
    INVALID_PASSWORD = ("InvalidPasswordError", 400, "Invalid credentials")
    INVALID_JWT_TOKEN = ("InvalidJwtTokenError", 400, "Invalid JWT token")
    EMAIL_ALREADY_EXISTS = ("EmailAlreadyExistsError", 409, "Email is already in use")
    TASK_ALREADY_EXISTS = ("TaskAlreadyExistsError", 409, "Task already exists for user")
    TASK_NOT_FOUND = ("TaskNotFoundError", 404, "Task not found")
    USER_NOT_FOUND = ("UserNotFoundError", 404, "User not found")
    NO_HANDLER_FOUND = ("NoHandlerFoundError", 404, "No Handler Found")
    ACCESS_DENIED = ("AccessDeniedError", 403, "Access Denied")
    AUTHENTICATION_CREDENTIALS_NOT_FOUND = (
        "AuthenticationCredentialsNotFoundError", 401, "Authentication Credentials Not Found"
    )
    INSUFFICIENT_AUTHENTICATION = ("InsufficientAuthenticationError", 401, "Insufficient Authentication")

    def __init__(self, label: str, status_code: int, default_message: str):
        self.label = label
        self.status_code = status_code
        self.default_message = default_message


class AppError(Exception):
    """A classified application failure."""

    def __init__(self, kind: ErrorKind, message: Optional[str] = None):
        self.kind = kind
        self.message = message or kind.default_message
        super().__init__(self.message)

    @property
    def status_code(self) -> int:
        return self.kind.status_code

    def __str__(self) -> str:
        return f"{self.kind.label}: {self.message}"


def format_error(error: Exception) -> str:
    """Render an error as '<TypeName>: <message>' without internals."""
    if isinstance(error, AppError):
        return str(error)
    return f"{error.__class__.__name__}: {error}"


def status_for(error: Exception, default: int = 500) -> int:
    if isinstance(error, AppError):
        return error.status_code
    return default
