"""
Payload validation for the auth, user and task services.

Each check raises AppError at the first problem it finds.
"""
import logging
import re
from typing import Optional

from taskhub.errors import AppError, ErrorKind

logger = logging.getLogger(__name__)

EMAIL_PATTERN = r"^[\w.-]+@([\w-]+\.)+[\w-]{2,4}$"
_email_re = re.compile(EMAIL_PATTERN, re.ASCII)

# bcrypt ignores everything past 72 bytes
MAX_PASSWORD_BYTES = 72


def _require(value: Optional[str], message: str) -> None:
    if not value:
        raise AppError(ErrorKind.ILLEGAL_ARGUMENT, message)


def validate_email_format(email: Optional[str]) -> None:
    if not email or not _email_re.fullmatch(email):
        logger.warning("Invalid email format")
        raise AppError(ErrorKind.INVALID_EMAIL_FORMAT)


def validate_passwords(password: Optional[str], confirmation: Optional[str]) -> None:
    """Both present, equal, and within the hashable length."""
    if not password or not confirmation:
        raise AppError(ErrorKind.INVALID_PASSWORD, "Passwords can't have empty value")
    if password != confirmation:
        raise AppError(ErrorKind.INVALID_PASSWORD, "Passwords do not match")
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise AppError(ErrorKind.INVALID_PASSWORD, f"Password must be at most {MAX_PASSWORD_BYTES} bytes")


def validate_login(payload) -> None:
    if payload is None:
        raise AppError(ErrorKind.ILLEGAL_ARGUMENT, "Login payload is missing")
    _require(payload.email, "Login email is empty")
    _require(payload.password, "Login password is empty")


def validate_registration(payload) -> None:
    if payload is None:
        raise AppError(ErrorKind.ILLEGAL_ARGUMENT, "Registration payload is missing")
    _require(payload.email, "Registration email is empty")
    _require(payload.password, "Registration password is empty")
    _require(payload.password_confirmation, "Registration password confirmation is empty")
    validate_passwords(payload.password, payload.password_confirmation)


def validate_password_update(payload) -> None:
    if payload is None:
        raise AppError(ErrorKind.ILLEGAL_ARGUMENT, "Password update payload is missing")
    _require(payload.current_password, "Current password is empty")
    _require(payload.new_password, "New password is empty")
    _require(payload.new_password_confirmation, "New password confirmation is empty")
    if payload.new_password != payload.new_password_confirmation:
        raise AppError(ErrorKind.ILLEGAL_ARGUMENT, "Passwords do not match")


def validate_deletion(payload) -> None:
    if payload is None:
        raise AppError(ErrorKind.ILLEGAL_ARGUMENT, "Deletion payload is missing")
    _require(payload.email, "Deletion email is empty")
    _require(payload.current_password, "Deletion password is empty")


def validate_task_payload(payload) -> None:
    if payload is None:
        raise AppError(ErrorKind.ILLEGAL_ARGUMENT, "Task payload is missing")
    _require(payload.name, "Task name cannot be empty")
    _require(payload.description, "Task description cannot be empty")


def ensure_same_user(authenticated_user_id: Optional[int], user_id: Optional[int]) -> None:
    """The authenticated user may only act on its own resources."""
    if not authenticated_user_id or not user_id or authenticated_user_id != user_id:
        logger.warning("User %s tried to act on user %s", authenticated_user_id, user_id)
        raise AppError(ErrorKind.ACCESS_DENIED, "User is not authorized to perform this action")
