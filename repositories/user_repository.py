"""
User Repository - Data access layer for user-related operations
"""

import logging
from typing import Any, Mapping, Optional
from uuid import UUID
from sqlalchemy.orm import Session

from repositories.base import BaseRepository
from domain.models import User
from services.password import PasswordHasher
from app.exceptions import AppError

logger = logging.getLogger("mealtrack.users")

INVALID_CREDENTIALS = "Invalid credentials"


class UserRepository(BaseRepository[User]):
    """Repository for user data access. Passwords are hashed on every write."""

    entity_name = "User"
    in_use_message = "User still has meal plans"

    def __init__(self, db: Session, hasher: PasswordHasher):
        super().__init__(db, User)
        self.hasher = hasher

    def find_by_email(self, email: str) -> Optional[User]:
        """Get user by email, or None"""
        return self.db.query(User).filter(User.email == email).first()

    def find_by_phone(self, phone: str) -> Optional[User]:
        """Get user by phone number, or None"""
        return self.db.query(User).filter(User.phone == phone).first()

    def create_user(self, data: Mapping[str, Any]) -> User:
        """
        Create a new user.

        Raises:
            AppError: BAD_REQUEST when the email or phone is already in use
        """
        values = dict(data)
        values["password"] = self.hasher.hash(values["password"])
        user = self.create(User(**values))
        logger.info(f"user_created user_id={user.id}")
        return user

    def update_by_id(self, user_id: UUID, values: Mapping[str, Any]) -> User:
        """
        Update user fields; a new password is hashed before it is stored.

        Raises:
            AppError: NOT_FOUND if the user doesn't exist,
                BAD_REQUEST if the update violates a uniqueness constraint
        """
        update_data = dict(values)
        if update_data.get("password"):
            update_data["password"] = self.hasher.hash(update_data["password"])

        user = super().update_by_id(user_id, update_data)
        logger.info(f"user_updated user_id={user_id} fields={sorted(update_data)}")
        return user

    def delete_by_id(self, user_id: UUID) -> None:
        super().delete_by_id(user_id)
        logger.info(f"user_deleted user_id={user_id}")

    def login(self, email: str, password: str) -> User:
        """
        Check credentials.

        Unknown email and wrong password raise the same error. The unknown
        email path still pays for one derivation.

        Raises:
            AppError: BAD_REQUEST "Invalid credentials"
        """
        user = self.find_by_email(email)
        if user is None:
            self.hasher.hash(password)
            logger.info("login_failed reason=credentials")
            raise AppError.bad_request(INVALID_CREDENTIALS)

        if not self.hasher.verify(user.password, password):
            logger.info("login_failed reason=credentials")
            raise AppError.bad_request(INVALID_CREDENTIALS)

        logger.info(f"login_succeeded user_id={user.id}")
        return user
