from __future__ import annotations

from datetime import datetime, timezone
from typing import Annotated, Optional
from uuid import UUID

from pydantic import AfterValidator, BaseModel, Field, ValidationInfo, field_validator
from pydantic_core import PydanticCustomError

from domain.schemas.user_schemas import UserId, not_blank, reject_null, with_message

# Largest value a 32-bit INTEGER column holds
MACRO_MAX = 2_147_483_647

Macro = Annotated[int, Field(ge=0, le=MACRO_MAX)]
MealName = Annotated[str, AfterValidator(not_blank("Name is required"))]
PlanId = Annotated[UUID, with_message("uuid", "Valid meal plan ID is required")]
MealId = Annotated[UUID, with_message("uuid", "Valid meal ID is required")]


def _as_utc(value: datetime) -> datetime:
    # Naive datetimes (SQLite returns these) are taken to be UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def to_utc(value: datetime) -> datetime:
    """Same instant, expressed in UTC"""
    return _as_utc(value).astimezone(timezone.utc)


UtcDatetime = Annotated[datetime, AfterValidator(to_utc)]


def is_valid_date_range(start_date: datetime, end_date: datetime) -> bool:
    return _as_utc(start_date) <= _as_utc(end_date)


def _check_end_date(end_date: Optional[datetime], info: ValidationInfo):
    start_date = info.data.get("start_date")
    if start_date is not None and end_date is not None:
        if not is_valid_date_range(start_date, end_date):
            raise PydanticCustomError(
                "date_range", "End date must not be before start date"
            )
    return end_date


class MealPlanCreate(BaseModel):
    user_id: UserId
    start_date: UtcDatetime
    end_date: UtcDatetime

    @field_validator("end_date")
    @classmethod
    def check_date_range(cls, value, info: ValidationInfo):
        return _check_end_date(value, info)


class MealPlanUpdate(BaseModel):
    start_date: Optional[UtcDatetime] = None
    end_date: Optional[UtcDatetime] = None

    @field_validator("*", mode="before")
    @classmethod
    def check_not_null(cls, value, info: ValidationInfo):
        return reject_null(value, info)

    @field_validator("end_date")
    @classmethod
    def check_date_range(cls, value, info: ValidationInfo):
        return _check_end_date(value, info)


class MealPlanResponse(BaseModel):
    id: UUID
    user_id: UUID
    start_date: UtcDatetime
    end_date: UtcDatetime
    created_at: datetime

    model_config = {"from_attributes": True}


class MealCreate(BaseModel):
    name: MealName
    calories: Macro
    carbs: Macro
    protein: Macro
    fat: Macro
    plan_id: PlanId


class MealUpdate(BaseModel):
    """Partial meal update; a meal cannot be moved to another plan"""

    name: Optional[MealName] = None
    calories: Optional[Macro] = None
    carbs: Optional[Macro] = None
    protein: Optional[Macro] = None
    fat: Optional[Macro] = None

    @field_validator("*", mode="before")
    @classmethod
    def check_not_null(cls, value, info: ValidationInfo):
        return reject_null(value, info)


class MealResponse(BaseModel):
    id: UUID
    name: str
    calories: int
    carbs: int
    protein: int
    fat: int
    plan_id: UUID
    created_at: datetime

    model_config = {"from_attributes": True}
