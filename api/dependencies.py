"""
API dependencies for dependency injection
"""

from typing import Generator
from fastapi import Depends, Request
from sqlalchemy.orm import Session

from repositories import UserRepository, MealPlanRepository, MealRepository
from services.password import PasswordHasher


def get_db_session(request: Request) -> Generator[Session, None, None]:
    """
    Database session dependency for FastAPI routes.

    One session per request, opened from the factory the application
    created at startup and closed once the response is sent.
    """
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


def get_password_hasher(request: Request) -> PasswordHasher:
    return request.app.state.password_hasher


def get_user_repository(
    db: Session = Depends(get_db_session),
    hasher: PasswordHasher = Depends(get_password_hasher),
) -> UserRepository:
    return UserRepository(db, hasher)


def get_meal_plan_repository(db: Session = Depends(get_db_session)) -> MealPlanRepository:
    return MealPlanRepository(db)


def get_meal_repository(db: Session = Depends(get_db_session)) -> MealRepository:
    return MealRepository(db)
