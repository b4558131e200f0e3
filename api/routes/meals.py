"""Meal routes"""

from fastapi import APIRouter, Depends, Response, status

from api.dependencies import get_meal_repository
from domain.schemas.meal_schemas import MealCreate, MealId, MealResponse, MealUpdate
from repositories import MealRepository

router = APIRouter(prefix="/meals", tags=["Meals"])


@router.post("", response_model=MealResponse, status_code=status.HTTP_201_CREATED)
def create_meal(body: MealCreate, meals: MealRepository = Depends(get_meal_repository)):
    return meals.create_meal(body.model_dump())


@router.get("/{meal_id}", response_model=MealResponse)
def get_meal(meal_id: MealId, meals: MealRepository = Depends(get_meal_repository)):
    return meals.find_by_id(meal_id)


@router.put("/{meal_id}", response_model=MealResponse)
def update_meal(
    meal_id: MealId,
    changes: MealUpdate,
    meals: MealRepository = Depends(get_meal_repository),
):
    return meals.update_by_id(meal_id, changes.model_dump(exclude_unset=True))


@router.delete("/{meal_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_meal(meal_id: MealId, meals: MealRepository = Depends(get_meal_repository)):
    meals.delete_by_id(meal_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
