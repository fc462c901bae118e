"""
Authentication middleware.

This module provides:
- JwtAuthGate: the bearer-token check run before every protected route
- AuthenticatedUser: the typed identity handed to route handlers
- AuthenticatedRoute: route class that runs the gate before the body is read
- get_current_user: FastAPI dependency wiring the gate to the request

Every rejection is a 401.
"""
import logging
from dataclasses import dataclass
from typing import Callable, Optional

from fastapi import Request, Response
from fastapi.routing import APIRoute

from taskhub.auth.jwt import JwtService
from taskhub.auth.repository import UserRepository
from taskhub.errors import AppError, ErrorKind

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer"


@dataclass(frozen=True)
class AuthenticatedUser:
    """The user resolved from a valid token, scoped to one request."""
    user_id: int
    email: str


def _reject(message: str) -> AppError:
    return AppError(ErrorKind.INSUFFICIENT_AUTHENTICATION, message)


def strip_bearer(authorization: str) -> str:
    """Return the token part of an Authorization header value."""
    value = authorization.strip()
    if value == BEARER_PREFIX:
        return ""
    if value.startswith(BEARER_PREFIX + " "):
        return value[len(BEARER_PREFIX) + 1:].strip()
    return value


class JwtAuthGate:
    """
    Resolves the Authorization header to a user, or rejects the request.

    The checks run in a fixed order and the first failure wins.
    """

    def __init__(self, jwt_service: JwtService, user_repository: UserRepository):
        self.jwt_service = jwt_service
        self.user_repository = user_repository

    async def authenticate(self, authorization: Optional[str]) -> AuthenticatedUser:
        if not authorization or not authorization.strip():
            logger.warning("Authorization header is missing")
            raise _reject("authorization header required")

        token = strip_bearer(authorization)
        if not token:
            logger.warning("Bearer token is missing from Authorization header")
            raise _reject("bearer token required")

        try:
            claims = self.jwt_service.extract_claims(token)
        except AppError:
            logger.warning("Failed to extract claims from token")
            raise _reject("invalid token")

        subject = claims.get("sub")
        if not isinstance(subject, str) or not subject:
            logger.warning("Token has no usable subject")
            raise _reject("invalid token subject")

        if not self.jwt_service.validate_token(token, subject):
            logger.warning("Invalid or expired token")
            raise _reject("invalid or expired token")

        try:
            user = await self.user_repository.get_by_email(subject)
        except Exception as e:
            logger.warning(f"User lookup failed: {e.__class__.__name__}")
            raise AppError(ErrorKind.AUTHENTICATION_CREDENTIALS_NOT_FOUND, "user not found") from e
        if user is None:
            logger.warning("No user found for token subject")
            raise AppError(ErrorKind.AUTHENTICATION_CREDENTIALS_NOT_FOUND, "user not found")

        logger.debug("Authenticated user %s", user.user_id)
        return AuthenticatedUser(user_id=user.user_id, email=user.email)


async def authenticate_request(request: Request) -> AuthenticatedUser:
    gate: JwtAuthGate = request.app.state.container.auth_gate
    return await gate.authenticate(request.headers.get("Authorization"))


class AuthenticatedRoute(APIRoute):
    """
    Route class for protected routers.

    The gate runs before FastAPI parses the body, so an unauthenticated
    request is answered 401 whatever its payload looks like.
    """

    def get_route_handler(self) -> Callable:
        route_handler = super().get_route_handler()

        async def authenticated_route_handler(request: Request) -> Response:
            request.state.current_user = await authenticate_request(request)
            return await route_handler(request)

        return authenticated_route_handler


async def get_current_user(request: Request) -> AuthenticatedUser:
    """FastAPI dependency: the user resolved for this request."""
    current_user = getattr(request.state, "current_user", None)
    if current_user is None:
        current_user = await authenticate_request(request)
    return current_user
