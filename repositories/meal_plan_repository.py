"""
Meal Plan Repository - Data access layer for meal plan operations
"""

import logging
from typing import Any, List, Mapping
from uuid import UUID
from sqlalchemy.orm import Session

from repositories.base import BaseRepository
from domain.models import MealPlan
from domain.schemas.meal_schemas import is_valid_date_range
from app.exceptions import AppError

logger = logging.getLogger("mealtrack.meal_plans")


class MealPlanRepository(BaseRepository[MealPlan]):
    """Repository for meal plan data access"""

    entity_name = "Meal plan"
    missing_reference_message = "User does not exist"
    missing_reference_field = "user_id"
    in_use_message = "Meal plan still has meals"

    def __init__(self, db: Session):
        super().__init__(db, MealPlan)

    def create_plan(self, data: Mapping[str, Any]) -> MealPlan:
        """
        Create a meal plan.

        Raises:
            AppError: BAD_REQUEST when the owning user does not exist
        """
        plan = self.create(MealPlan(**data))
        logger.info(f"meal_plan_created plan_id={plan.id} user_id={plan.user_id}")
        return plan

    def find_by_user(self, user_id: UUID) -> List[MealPlan]:
        """Get all meal plans for a user, earliest start first"""
        return (
            self.db.query(MealPlan)
            .filter(MealPlan.user_id == user_id)
            .order_by(MealPlan.start_date, MealPlan.id)
            .all()
        )

    def update_by_id(self, plan_id: UUID, values: Mapping[str, Any]) -> MealPlan:
        """
        Update the date range of a plan; the merged range must stay ordered.

        Raises:
            AppError: NOT_FOUND if the plan doesn't exist,
                BAD_REQUEST if start_date would fall after end_date
        """
        plan = self.find_by_id(plan_id)
        start_date = values.get("start_date", plan.start_date)
        end_date = values.get("end_date", plan.end_date)
        if not is_valid_date_range(start_date, end_date):
            raise AppError.bad_request(
                "End date must not be before start date", field="end_date"
            )

        plan = super().update_by_id(plan_id, values)
        logger.info(f"meal_plan_updated plan_id={plan_id} fields={sorted(values)}")
        return plan

    def delete_by_id(self, plan_id: UUID) -> None:
        """
        Delete a plan.

        Raises:
            AppError: NOT_FOUND if the plan doesn't exist,
                BAD_REQUEST while meals still reference it
        """
        super().delete_by_id(plan_id)
        logger.info(f"meal_plan_deleted plan_id={plan_id}")
