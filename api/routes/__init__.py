"""API routes package"""

from . import users, meal_plans, meals, health

__all__ = ["users", "meal_plans", "meals", "health"]
