"""
Password hashing.

Wraps bcrypt with a fixed work factor.
"""
import logging

import bcrypt

logger = logging.getLogger(__name__)

DEFAULT_ROUNDS = 10


class BCryptPasswordEncoder:
    """Hash and verify passwords with bcrypt."""

    def __init__(self, rounds: int = DEFAULT_ROUNDS):
        self.rounds = rounds

    def encode(self, password: str) -> str:
        """Hash a password. Library errors propagate."""
        return bcrypt.hashpw(
            password.encode("utf-8"),
            bcrypt.gensalt(rounds=self.rounds)
        ).decode("utf-8")

    def matches(self, password: str, password_hash: str) -> bool:
        """
        Check a password against a stored hash.

        Returns False on mismatch. Raises ValueError if the stored hash
        is malformed.
        """
        if not password_hash:
            raise ValueError("stored password hash is empty")
        try:
            return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
        except ValueError:
            logger.warning("Stored password hash could not be parsed")
            raise
