"""
User model.

A user owns zero or more tasks; deleting a user removes its tasks.
"""
from sqlalchemy import BigInteger, Column, String

from taskhub.base_microservice import Base


class User(Base):
    """Registered account. The password hash never leaves the service layer."""
    __tablename__ = "users"

    user_id = Column(BigInteger, primary_key=True, autoincrement=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)

    def __repr__(self) -> str:
        return f"<User user_id={self.user_id} email={self.email!r}>"
