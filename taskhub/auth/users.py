"""
User management service.

This module provides:
- Request/response models for the auth and user endpoints
- UserService: profile lookup, password change, account deletion
"""
import asyncio
from typing import Optional

from taskhub.auth.models import User
from taskhub.auth.passwords import BCryptPasswordEncoder
from taskhub.auth.repository import UserRepository
from taskhub.base_microservice import ApiModel, BaseMicroservice
from taskhub.errors import AppError, ErrorKind
from taskhub.validation import (
    validate_deletion,
    validate_password_update,
    validate_passwords,
)


class LoginRequest(ApiModel):
    email: str = ""
    password: str = ""


class RegisterRequest(ApiModel):
    email: str = ""
    password: str = ""
    password_confirmation: str = ""


class PasswordUpdateRequest(ApiModel):
    current_password: str = ""
    new_password: str = ""
    new_password_confirmation: str = ""


class UserDeletionRequest(ApiModel):
    email: str = ""
    current_password: str = ""


class UserOut(ApiModel):
    """Public view of a user."""
    user_id: int
    email: str


class AuthResult(ApiModel):
    """Returned by login and registration."""
    user_id: int
    email: str
    jwt_token: str


class UserService(BaseMicroservice):
    """
    Operations an authenticated user performs on their own account.
    """

    def __init__(self, user_repository: UserRepository, password_encoder: BCryptPasswordEncoder):
        super().__init__("users")
        self.user_repository = user_repository
        self.password_encoder = password_encoder

    @staticmethod
    def to_out(user: User) -> UserOut:
        return UserOut(user_id=user.user_id, email=user.email)

    async def get_user(self, user_id: int) -> UserOut:
        user = await self._load(user_id)
        return self.to_out(user)

    async def update_password(self, user_id: int, update_data: Optional[PasswordUpdateRequest]) -> UserOut:
        """
        Replace the user's password hash.

        Args:
            user_id: Owner of the account
            update_data: Current password plus the new password twice

        Returns:
            The updated user

        Raises:
            AppError: On validation failure or wrong current password
        """
        validate_password_update(update_data)
        user = await self._load(user_id)

        if not await self._password_matches(update_data.current_password, user.password_hash):
            raise AppError(ErrorKind.INVALID_PASSWORD, "Current password is incorrect")
        if update_data.new_password == update_data.current_password:
            raise AppError(
                ErrorKind.INVALID_PASSWORD,
                "New password cannot be the same as the current password",
            )
        validate_passwords(update_data.new_password, update_data.new_password_confirmation)

        user.password_hash = await asyncio.to_thread(self.password_encoder.encode, update_data.new_password)
        updated = await self.user_repository.update(user)

        self.log_event("user.password.updated", {"user_id": updated.user_id})
        return self.to_out(updated)

    async def delete_user(self, user_id: int, deletion_data: Optional[UserDeletionRequest]) -> None:
        """Delete the account (and its tasks) after re-checking the credentials."""
        validate_deletion(deletion_data)
        user = await self._load(user_id)

        if deletion_data.email != user.email:
            raise AppError(ErrorKind.ILLEGAL_ARGUMENT, "Email does not match the account")
        if not await self._password_matches(deletion_data.current_password, user.password_hash):
            raise AppError(ErrorKind.INVALID_PASSWORD, "Invalid current password")

        await self.user_repository.delete(user.user_id)
        self.log_event("user.deleted", {"user_id": user.user_id})

    async def _load(self, user_id: int) -> User:
        user = await self.user_repository.get_by_id(user_id)
        if user is None:
            raise AppError(ErrorKind.USER_NOT_FOUND, f"User {user_id} not found")
        return user

    async def _password_matches(self, password: str, password_hash: str) -> bool:
        try:
            return await asyncio.to_thread(self.password_encoder.matches, password, password_hash)
        except ValueError as e:
            self.log_error(e, context="Password matching")
            raise AppError(ErrorKind.INVALID_PASSWORD, "Matcher failed matching process") from e
