from pydantic import (
    AfterValidator,
    BaseModel,
    EmailStr,
    Field,
    ValidationError,
    ValidationInfo,
    WrapValidator,
    field_validator,
)
from pydantic_core import PydanticCustomError
from typing import Annotated, Any, Callable, Optional
from datetime import datetime
from uuid import UUID

PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 20


def not_blank(message: str) -> Callable[[str], str]:
    """Trim the value and reject it with ``message`` when nothing is left."""

    def check(value: str) -> str:
        value = value.strip()
        if not value:
            raise PydanticCustomError("blank", message)
        return value

    return check


def with_message(error_type: str, message: str) -> WrapValidator:
    """Report any failure of the wrapped type as a single ``message``"""

    def wrap(value, handler):
        try:
            return handler(value)
        except ValidationError:
            raise PydanticCustomError(error_type, message)

    return WrapValidator(wrap)


def _password_length(value: str) -> str:
    value = value.strip()
    if not PASSWORD_MIN_LENGTH <= len(value) <= PASSWORD_MAX_LENGTH:
        raise PydanticCustomError(
            "password_length",
            "Password must be between {min} and {max} characters",
            {"min": PASSWORD_MIN_LENGTH, "max": PASSWORD_MAX_LENGTH},
        )
    return value


def reject_null(value, info: ValidationInfo):
    """Optional fields may be omitted but not sent as null"""
    if value is None:
        raise PydanticCustomError(
            "null_value", "{field} cannot be null", {"field": info.field_name}
        )
    return value


def required() -> Any:
    # A missing field is validated as an empty one so it gets the field's own message
    return Field("", validate_default=True)


Email = Annotated[EmailStr, with_message("email", "Email must be valid")]
Password = Annotated[str, AfterValidator(_password_length)]
UserId = Annotated[UUID, with_message("uuid", "Valid user ID is required")]


class UserCreate(BaseModel):
    email: Email = required()
    name: Annotated[str, AfterValidator(not_blank("Name is required"))] = required()
    phone: Annotated[str, AfterValidator(not_blank("Phone number is required"))] = required()
    password: Password = required()


class UserUpdate(BaseModel):
    email: Optional[Email] = None
    name: Optional[Annotated[str, AfterValidator(not_blank("Name cannot be empty"))]] = None
    phone: Optional[Annotated[str, AfterValidator(not_blank("Phone cannot be empty"))]] = None
    password: Optional[Password] = None

    @field_validator("*", mode="before")
    @classmethod
    def check_not_null(cls, value, info: ValidationInfo):
        return reject_null(value, info)


class UserLogin(BaseModel):
    email: Email = required()
    password: Annotated[str, AfterValidator(not_blank("Password is required"))] = required()


class UserResponse(BaseModel):
    """Public representation of a user; the password digest is never included"""

    id: UUID
    email: str
    name: str
    phone: str
    created_at: datetime

    model_config = {"from_attributes": True}
