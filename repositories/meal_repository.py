"""
Meal Repository - Data access layer for meals
"""

import logging
from typing import Any, List, Mapping
from uuid import UUID
from sqlalchemy.orm import Session

from repositories.base import BaseRepository
from domain.models import Meal

logger = logging.getLogger("mealtrack.meals")


class MealRepository(BaseRepository[Meal]):
    """Repository for meal data access"""

    entity_name = "Meal"
    missing_reference_message = "Meal plan does not exist"
    missing_reference_field = "plan_id"

    def __init__(self, db: Session):
        super().__init__(db, Meal)

    def create_meal(self, data: Mapping[str, Any]) -> Meal:
        """Create a meal inside an existing plan"""
        meal = self.create(Meal(**data))
        logger.info(f"meal_created meal_id={meal.id} plan_id={meal.plan_id}")
        return meal

    def find_by_plan(self, plan_id: UUID) -> List[Meal]:
        """Get the meals of a plan in creation order"""
        return (
            self.db.query(Meal)
            .filter(Meal.plan_id == plan_id)
            .order_by(Meal.created_at, Meal.id)
            .all()
        )

    def update_by_id(self, meal_id: UUID, values: Mapping[str, Any]) -> Meal:
        meal = super().update_by_id(meal_id, values)
        logger.info(f"meal_updated meal_id={meal_id} fields={sorted(values)}")
        return meal

    def delete_by_id(self, meal_id: UUID) -> None:
        super().delete_by_id(meal_id)
        logger.info(f"meal_deleted meal_id={meal_id}")
