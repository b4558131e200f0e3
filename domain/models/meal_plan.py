"""
Meal planning models.
"""

from sqlalchemy import Column, Text, TIMESTAMP, ForeignKey, Integer, CheckConstraint, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid

from domain.models.database import Base


class MealPlan(Base):
    """Date range of planned meals owned by a user"""

    __tablename__ = "meal_plans"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(
        Uuid,
        ForeignKey("users.id", ondelete="RESTRICT", onupdate="CASCADE"),
        nullable=False,
        index=True,
    )
    start_date = Column(TIMESTAMP(timezone=True), nullable=False)
    end_date = Column(TIMESTAMP(timezone=True), nullable=False)
    created_at = Column(
        TIMESTAMP(timezone=True), server_default=func.now(), nullable=False
    )

    user = relationship("User", back_populates="meal_plans")
    # Meals keep the plan alive: deleting a plan that still has meals is rejected by the store
    meals = relationship("Meal", back_populates="plan", passive_deletes="all")


class Meal(Base):
    """Single meal with its macro breakdown"""

    __tablename__ = "meals"
    __table_args__ = (
        CheckConstraint(
            "calories >= 0 AND carbs >= 0 AND protein >= 0 AND fat >= 0",
            name="ck_meals_non_negative",
        ),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(Text, nullable=False)
    calories = Column(Integer, nullable=False)
    carbs = Column(Integer, nullable=False)
    protein = Column(Integer, nullable=False)
    fat = Column(Integer, nullable=False)
    created_at = Column(
        TIMESTAMP(timezone=True), server_default=func.now(), nullable=False
    )
    plan_id = Column(
        Uuid,
        ForeignKey("meal_plans.id", ondelete="RESTRICT", onupdate="CASCADE"),
        nullable=False,
        index=True,
    )

    plan = relationship("MealPlan", back_populates="meals")
