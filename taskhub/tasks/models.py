"""
Task model.

Task names are unique per owner, not globally.
"""
from sqlalchemy import BigInteger, Column, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import backref, relationship

from taskhub.auth.models import User
from taskhub.base_microservice import Base


class Task(Base):
    """A task owned by exactly one user."""
    __tablename__ = "tasks"
    __table_args__ = (
        UniqueConstraint("user_id", "name", name="uq_tasks_user_id_name"),
    )

    task_id = Column(BigInteger, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    user_id = Column(
        BigInteger,
        ForeignKey("users.user_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # Relationships
    user = relationship(
        User,
        backref=backref("tasks", cascade="all, delete-orphan", passive_deletes=True),
    )

    def __repr__(self) -> str:
        return f"<Task task_id={self.task_id} user_id={self.user_id} name={self.name!r}>"
