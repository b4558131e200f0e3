"""Meal plan routes"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Response, status

from api.dependencies import get_meal_plan_repository, get_meal_repository
from domain.schemas.meal_schemas import (
    MealPlanCreate,
    MealPlanResponse,
    MealPlanUpdate,
    MealResponse,
    PlanId,
)
from domain.schemas.user_schemas import UserId
from repositories import MealPlanRepository, MealRepository

router = APIRouter(prefix="/meal-plans", tags=["Meal Plans"])


@router.post("", response_model=MealPlanResponse, status_code=status.HTTP_201_CREATED)
def create_meal_plan(
    body: MealPlanCreate, plans: MealPlanRepository = Depends(get_meal_plan_repository)
):
    return plans.create_plan(body.model_dump())


@router.get("", response_model=List[MealPlanResponse])
def list_meal_plans(
    user_id: Optional[UserId] = None,
    plans: MealPlanRepository = Depends(get_meal_plan_repository),
):
    """All meal plans, or only those of ``user_id`` when given"""
    if user_id is not None:
        return plans.find_by_user(user_id)
    return plans.find_all()


@router.get("/{plan_id}", response_model=MealPlanResponse)
def get_meal_plan(
    plan_id: PlanId, plans: MealPlanRepository = Depends(get_meal_plan_repository)
):
    return plans.find_by_id(plan_id)


@router.get("/{plan_id}/meals", response_model=List[MealResponse])
def list_plan_meals(
    plan_id: PlanId,
    plans: MealPlanRepository = Depends(get_meal_plan_repository),
    meals: MealRepository = Depends(get_meal_repository),
):
    plans.find_by_id(plan_id)
    return meals.find_by_plan(plan_id)


@router.put("/{plan_id}", response_model=MealPlanResponse)
def update_meal_plan(
    plan_id: PlanId,
    changes: MealPlanUpdate,
    plans: MealPlanRepository = Depends(get_meal_plan_repository),
):
    return plans.update_by_id(plan_id, changes.model_dump(exclude_unset=True))


@router.delete("/{plan_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_meal_plan(
    plan_id: PlanId, plans: MealPlanRepository = Depends(get_meal_plan_repository)
):
    """Delete a plan. Plans that still have meals cannot be deleted."""
    plans.delete_by_id(plan_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
