"""
Domain schemas package - Pydantic models for validation.
"""

from domain.schemas.user_schemas import (
    UserCreate,
    UserUpdate,
    UserLogin,
    UserResponse,
    UserId,
)
from domain.schemas.meal_schemas import (
    MealPlanCreate,
    MealPlanUpdate,
    MealPlanResponse,
    MealCreate,
    MealUpdate,
    MealResponse,
    PlanId,
    MealId,
)

__all__ = [
    # User schemas
    "UserCreate",
    "UserUpdate",
    "UserLogin",
    "UserResponse",
    "UserId",
    # Meal plan schemas
    "MealPlanCreate",
    "MealPlanUpdate",
    "MealPlanResponse",
    # Meal schemas
    "MealCreate",
    "MealUpdate",
    "MealResponse",
    "PlanId",
    "MealId",
]
