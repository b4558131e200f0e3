"""
Domain models package - SQLAlchemy ORM models.
"""

from domain.models.database import (
    Base,
    create_db_engine,
    create_session_factory,
    init_database,
    dispose_engine,
)
from domain.models.user import User
from domain.models.meal_plan import MealPlan, Meal

__all__ = [
    # Database
    "Base",
    "create_db_engine",
    "create_session_factory",
    "init_database",
    "dispose_engine",
    # User models
    "User",
    # Meal plan models
    "MealPlan",
    "Meal",
]
