"""
Authentication service: login and registration.

Both flows validate everything before touching the store and end by
issuing a token whose subject is the user's email.
"""
import asyncio
from typing import Optional

from taskhub.auth.jwt import JwtService
from taskhub.auth.passwords import BCryptPasswordEncoder
from taskhub.auth.repository import UserRepository
from taskhub.auth.users import AuthResult, LoginRequest, RegisterRequest
from taskhub.base_microservice import BaseMicroservice
from taskhub.errors import AppError, ErrorKind
from taskhub.validation import validate_email_format, validate_login, validate_registration


class AuthenticationService(BaseMicroservice):
    """
    Orchestrates credential checks, user creation and token issuance.
    """

    def __init__(
        self,
        user_repository: UserRepository,
        jwt_service: JwtService,
        password_encoder: BCryptPasswordEncoder,
    ):
        super().__init__("auth")
        self.user_repository = user_repository
        self.jwt_service = jwt_service
        self.password_encoder = password_encoder

    async def login(self, login_data: Optional[LoginRequest]) -> AuthResult:
        """
        Authenticate a user and return a token.

        Args:
            login_data: Email and password

        Returns:
            AuthResult with user id, email and token

        Raises:
            AppError: ILLEGAL_ARGUMENT for a bad payload or unknown email,
                INVALID_PASSWORD for a wrong password
        """
        validate_login(login_data)

        user = await self.user_repository.get_by_email(login_data.email)
        if user is None:
            self.log_event("user.login.failed", {"email": login_data.email, "reason": "unknown email"})
            raise AppError(ErrorKind.ILLEGAL_ARGUMENT, "failed to retrieve user")

        try:
            matches = await asyncio.to_thread(self.password_encoder.matches, login_data.password, user.password_hash)
        except ValueError as e:
            self.log_error(e, context="User login")
            raise AppError(ErrorKind.INVALID_PASSWORD, "Invalid credentials") from e

        if not matches:
            self.log_event("user.login.failed", {"email": login_data.email, "reason": "wrong password"})
            raise AppError(ErrorKind.INVALID_PASSWORD, "Invalid credentials")

        token = self.jwt_service.generate_token(user.email)
        self.log_event("user.login", {"user_id": user.user_id})
        return AuthResult(user_id=user.user_id, email=user.email, jwt_token=token)

    async def register(self, user_data: Optional[RegisterRequest]) -> AuthResult:
        """
        Register a new user and return a token.

        Nothing is persisted until every check has passed.

        Raises:
            AppError: ILLEGAL_ARGUMENT, INVALID_PASSWORD, INVALID_EMAIL_FORMAT
                or EMAIL_ALREADY_EXISTS
        """
        validate_registration(user_data)
        validate_email_format(user_data.email)

        existing = await self.user_repository.get_by_email(user_data.email)
        if existing is not None:
            raise AppError(ErrorKind.EMAIL_ALREADY_EXISTS)

        password_hash = await asyncio.to_thread(self.password_encoder.encode, user_data.password)
        new_user = await self.user_repository.create(user_data.email, password_hash)

        token = self.jwt_service.generate_token(new_user.email)
        self.log_event("user.registered", {"user_id": new_user.user_id, "email": new_user.email})
        return AuthResult(user_id=new_user.user_id, email=new_user.email, jwt_token=token)
