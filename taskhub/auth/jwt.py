"""
JWT token handling for authentication.

This module provides functionality for:
- Issuing signed, time-limited access tokens
- Extracting claims from tokens
- Validating tokens against an expected subject

The subject claim is the user's email.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Optional

import jwt
from jwt.exceptions import PyJWTError

from taskhub.errors import AppError, ErrorKind

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = 15


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class JwtService:
    """
    Issues and checks HS256 tokens.

    The signing key is fixed at construction and never changes.
    """

    def __init__(
        self,
        secret_key: str,
        expire_minutes: int = ACCESS_TOKEN_EXPIRE_MINUTES,
        clock: Callable[[], datetime] = utcnow,
    ):
        if not secret_key:
            raise ValueError("JWT secret key must not be empty")
        self._secret_key = secret_key
        self.expire_minutes = expire_minutes
        self._clock = clock

    def generate_token(self, subject: str) -> str:
        """
        Create a token for the given subject.

        Args:
            subject: The user's email

        Returns:
            Encoded JWT token string
        """
        now = self._clock()
        expires = now + timedelta(minutes=self.expire_minutes)
        claims = {
            "sub": subject,
            "iat": int(now.timestamp()),
            "exp": int(expires.timestamp()),
        }
        token = jwt.encode(claims, self._secret_key, algorithm=ALGORITHM)
        logger.debug("Generated token expiring at %s", expires.isoformat())
        return token

    def extract_claims(self, token: str) -> Dict[str, Any]:
        """
        Verify the token signature and return its claims.

        Expired tokens that are otherwise well-formed and correctly signed
        still return their claims, so callers can tell "expired" apart
        from "malformed".

        Raises:
            AppError(INVALID_JWT_TOKEN): bad signature or structure
        """
        try:
            return jwt.decode(
                token,
                self._secret_key,
                algorithms=[ALGORITHM],
                options={"verify_exp": False, "verify_iat": False, "verify_sub": False},
            )
        except PyJWTError as e:
            logger.warning("Failed to parse token: %s", e.__class__.__name__)
            raise AppError(ErrorKind.INVALID_JWT_TOKEN, "invalid token") from e

    def is_token_expired(self, claims: Dict[str, Any]) -> bool:
        """True if the claims carry no usable expiry or it is at/before now."""
        exp = claims.get("exp")
        if exp is None or isinstance(exp, bool):
            logger.warning("Token expiration is missing")
            return True
        try:
            expires_at = datetime.fromtimestamp(float(exp), tz=timezone.utc)
        except (TypeError, ValueError, OverflowError):
            return True
        return expires_at <= self._clock()

    def validate_token(self, token: Optional[str], subject: Optional[str]) -> bool:
        """
        Check that the token belongs to subject and has not expired.

        Any extraction error counts as invalid.
        """
        if not token or not subject:
            logger.warning("Token or subject missing during validation")
            return False

        try:
            claims = self.extract_claims(token)
        except AppError:
            return False

        claim_subject = claims.get("sub")
        if not isinstance(claim_subject, str) or not claim_subject:
            logger.warning("Subject claim is missing in the token")
            return False

        subject_matches = claim_subject == subject
        not_expired = not self.is_token_expired(claims)
        logger.debug("Token validation: subject_matches=%s not_expired=%s", subject_matches, not_expired)
        return subject_matches and not_expired
