"""
User account model.
"""

from sqlalchemy import Column, Text, TIMESTAMP, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid

from domain.models.database import Base


class User(Base):
    """Registered user. ``password`` always holds a digest, never plaintext."""

    __tablename__ = "users"
    __table_args__ = (
        UniqueConstraint("email", name="uq_users_email"),
        UniqueConstraint("phone", name="uq_users_phone"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    email = Column(Text, nullable=False)
    name = Column(Text, nullable=False)
    phone = Column(Text, nullable=False)
    password = Column(Text, nullable=False)
    created_at = Column(
        TIMESTAMP(timezone=True), server_default=func.now(), nullable=False
    )

    meal_plans = relationship("MealPlan", back_populates="user", passive_deletes="all")

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email}>"
