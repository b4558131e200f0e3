"""User management routes"""

from fastapi import APIRouter, Depends, Response, status
from typing import List

from api.dependencies import get_user_repository
from domain.schemas.user_schemas import (
    UserCreate,
    UserId,
    UserLogin,
    UserResponse,
    UserUpdate,
)
from repositories import UserRepository

router = APIRouter(prefix="/users", tags=["Users"])


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def register_user(
    user: UserCreate, users: UserRepository = Depends(get_user_repository)
):
    """Register a new user. Duplicate email or phone is rejected by the store."""
    return users.create_user(user.model_dump())


@router.post("/login", response_model=UserResponse)
def login(credentials: UserLogin, users: UserRepository = Depends(get_user_repository)):
    """Check an email/password pair and return the matching user"""
    return users.login(credentials.email, credentials.password)


@router.get("", response_model=List[UserResponse])
def get_all_users(users: UserRepository = Depends(get_user_repository)):
    return users.find_all()


@router.get("/{user_id}", response_model=UserResponse)
def get_user(user_id: UserId, users: UserRepository = Depends(get_user_repository)):
    return users.find_by_id(user_id)


@router.put("/{user_id}", response_model=UserResponse)
def update_user(
    user_id: UserId,
    changes: UserUpdate,
    users: UserRepository = Depends(get_user_repository),
):
    """Partially update a user; only the fields sent are changed."""
    return users.update_by_id(user_id, changes.model_dump(exclude_unset=True))


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(user_id: UserId, users: UserRepository = Depends(get_user_repository)):
    users.delete_by_id(user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
