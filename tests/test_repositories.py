"""
Tests for the repository classes.

This test suite validates the data access layer against a real (SQLite)
database session:
- UserRepository: CRUD, password hashing, login, uniqueness translation
- MealPlanRepository: CRUD, owner reference, date range, restricted delete
- MealRepository: CRUD and plan reference
- BaseRepository: translation of store failures into domain errors
"""

import pytest
import uuid
from datetime import datetime, timedelta, timezone
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from test_fixtures import unique_email, unique_phone
from repositories import UserRepository, MealPlanRepository, MealRepository
from app.exceptions import AppError, ErrorKind


START = datetime(2026, 10, 19, tzinfo=timezone.utc)


def new_user_data(**overrides) -> dict:
    data = {
        "email": unique_email("sarah"),
        "name": "Sarah Martinez",
        "phone": unique_phone(),
        "password": "password123",
    }
    data.update(overrides)
    return data


@pytest.fixture
def users(db_session: Session, hasher) -> UserRepository:
    return UserRepository(db_session, hasher)


@pytest.fixture
def plans(db_session: Session) -> MealPlanRepository:
    return MealPlanRepository(db_session)


@pytest.fixture
def meals(db_session: Session) -> MealRepository:
    return MealRepository(db_session)


@pytest.fixture
def plan(users, plans):
    owner = users.create_user(new_user_data())
    return plans.create_plan(
        {"user_id": owner.id, "start_date": START, "end_date": START + timedelta(days=6)}
    )


def meal_data(plan_id, **overrides) -> dict:
    data = {
        "name": "Oatmeal with berries",
        "calories": 350,
        "carbs": 60,
        "protein": 12,
        "fat": 7,
        "plan_id": plan_id,
    }
    data.update(overrides)
    return data


# =============================================================================
# USER REPOSITORY TESTS
# =============================================================================


def test_user_create_hashes_password(users, hasher):
    """
    Verifies:
    - create_user() assigns a UUID and creation timestamp
    - the stored password is a digest of the plaintext
    """
    user = users.create_user(new_user_data(password="password123"))

    assert isinstance(user.id, uuid.UUID)
    assert user.created_at is not None
    assert user.password != "password123"
    assert hasher.verify(user.password, "password123")


def test_user_duplicate_email(users):
    """
    Verifies:
    - first registration succeeds
    - second registration with the same email raises BAD_REQUEST naming email
    """
    email = unique_email("duplicate")
    users.create_user(new_user_data(email=email))

    with pytest.raises(AppError) as exc_info:
        users.create_user(new_user_data(email=email))

    assert exc_info.value.kind == ErrorKind.BAD_REQUEST
    assert exc_info.value.message == "email is already in use"
    assert exc_info.value.field == "email"


def test_user_duplicate_phone(users):
    phone = unique_phone()
    users.create_user(new_user_data(phone=phone))

    with pytest.raises(AppError) as exc_info:
        users.create_user(new_user_data(phone=phone))

    assert exc_info.value.message == "phone is already in use"


def test_session_usable_after_duplicate(users):
    """A rejected insert is rolled back; the session keeps working"""
    email = unique_email("rollback")
    users.create_user(new_user_data(email=email))
    with pytest.raises(AppError):
        users.create_user(new_user_data(email=email))

    other = users.create_user(new_user_data())
    assert users.find_by_id(other.id).email == other.email


def test_user_find_by_id_missing_raises(users):
    with pytest.raises(AppError) as exc_info:
        users.find_by_id(uuid.uuid4())

    assert exc_info.value.kind == ErrorKind.NOT_FOUND
    assert exc_info.value.message == "User not found"


def test_user_find_by_email_and_phone(users):
    user = users.create_user(new_user_data())

    assert users.find_by_email(user.email).id == user.id
    assert users.find_by_phone(user.phone).id == user.id
    assert users.find_by_email(unique_email("nobody")) is None
    assert users.find_by_phone(unique_phone()) is None


def test_user_find_all(users):
    created = {users.create_user(new_user_data()).id for _ in range(3)}

    assert {u.id for u in users.find_all()} == created
    assert len(users.find_all(limit=2)) == 2


def test_user_update_fields(users):
    user = users.create_user(new_user_data())

    updated = users.update_by_id(user.id, {"name": "Sarah M. Martinez"})

    assert updated.name == "Sarah M. Martinez"
    assert users.find_by_id(user.id).name == "Sarah M. Martinez"


def test_user_update_rehashes_password(users, hasher):
    user = users.create_user(new_user_data(password="password123"))

    updated = users.update_by_id(user.id, {"password": "newPassword1"})

    assert updated.password != "newPassword1"
    assert hasher.verify(updated.password, "newPassword1")
    assert not hasher.verify(updated.password, "password123")


def test_user_update_missing_raises(users):
    with pytest.raises(AppError) as exc_info:
        users.update_by_id(uuid.uuid4(), {"name": "Ghost"})

    assert exc_info.value.kind == ErrorKind.NOT_FOUND


def test_user_update_to_taken_email(users):
    first = users.create_user(new_user_data())
    second = users.create_user(new_user_data())

    with pytest.raises(AppError) as exc_info:
        users.update_by_id(second.id, {"email": first.email})

    assert exc_info.value.message == "email is already in use"


def test_user_delete(users):
    """
    Verifies:
    - delete_by_id() removes the row
    - find_by_id() then raises NOT_FOUND while find_by_email() returns None
    - deleting again raises NOT_FOUND
    """
    user = users.create_user(new_user_data())

    users.delete_by_id(user.id)

    with pytest.raises(AppError) as exc_info:
        users.find_by_id(user.id)
    assert exc_info.value.kind == ErrorKind.NOT_FOUND
    assert users.find_by_email(user.email) is None

    with pytest.raises(AppError) as exc_info:
        users.delete_by_id(user.id)
    assert exc_info.value.kind == ErrorKind.NOT_FOUND


def test_user_delete_with_meal_plans_is_rejected(users, plans, plan):
    with pytest.raises(AppError) as exc_info:
        users.delete_by_id(plan.user_id)

    assert exc_info.value.kind == ErrorKind.BAD_REQUEST
    assert exc_info.value.message == "User still has meal plans"


# =============================================================================
# LOGIN TESTS
# =============================================================================


def test_login_success(users):
    user = users.create_user(new_user_data(password="password123"))

    assert users.login(user.email, "password123").id == user.id


def test_login_failures_are_indistinguishable(users):
    """
    Verifies:
    - unknown email and wrong password raise the same error kind and message
    """
    user = users.create_user(new_user_data(password="password123"))

    with pytest.raises(AppError) as unknown:
        users.login(unique_email("nobody"), "password123")
    with pytest.raises(AppError) as wrong:
        users.login(user.email, "wrongPassword")

    assert unknown.value.kind == wrong.value.kind == ErrorKind.BAD_REQUEST
    assert unknown.value.message == wrong.value.message == "Invalid credentials"
    assert unknown.value.to_dict() == wrong.value.to_dict()


# =============================================================================
# MEAL PLAN REPOSITORY TESTS
# =============================================================================


def test_meal_plan_create_and_find(plans, plan):
    found = plans.find_by_id(plan.id)

    assert found.user_id == plan.user_id
    assert [p.id for p in plans.find_by_user(plan.user_id)] == [plan.id]
    assert plans.find_by_user(uuid.uuid4()) == []


def test_meal_plan_requires_existing_user(plans):
    with pytest.raises(AppError) as exc_info:
        plans.create_plan(
            {"user_id": uuid.uuid4(), "start_date": START, "end_date": START}
        )

    assert exc_info.value.kind == ErrorKind.BAD_REQUEST
    assert exc_info.value.field == "user_id"


def test_meal_plan_update_keeps_range_ordered(plans, plan):
    """
    Verifies:
    - moving end_date before the stored start_date is rejected
    - a valid new range is stored
    """
    with pytest.raises(AppError) as exc_info:
        plans.update_by_id(plan.id, {"end_date": START - timedelta(days=1)})
    assert exc_info.value.field == "end_date"

    updated = plans.update_by_id(
        plan.id,
        {"start_date": START + timedelta(days=7), "end_date": START + timedelta(days=13)},
    )
    assert updated.end_date.date() == (START + timedelta(days=13)).date()


def test_meal_plan_delete_restricted_while_meals_exist(plans, meals, plan):
    meal = meals.create_meal(meal_data(plan.id))

    with pytest.raises(AppError) as exc_info:
        plans.delete_by_id(plan.id)
    assert exc_info.value.message == "Meal plan still has meals"

    meals.delete_by_id(meal.id)
    plans.delete_by_id(plan.id)
    with pytest.raises(AppError):
        plans.find_by_id(plan.id)


# =============================================================================
# MEAL REPOSITORY TESTS
# =============================================================================


def test_meal_crud(meals, plan):
    meal = meals.create_meal(meal_data(plan.id))
    assert meals.find_by_id(meal.id).calories == 350

    updated = meals.update_by_id(meal.id, {"calories": 400, "fat": 9})
    assert (updated.calories, updated.fat) == (400, 9)
    assert [m.id for m in meals.find_by_plan(plan.id)] == [meal.id]

    meals.delete_by_id(meal.id)
    with pytest.raises(AppError) as exc_info:
        meals.find_by_id(meal.id)
    assert exc_info.value.message == "Meal not found"


def test_meal_requires_existing_plan(meals):
    with pytest.raises(AppError) as exc_info:
        meals.create_meal(meal_data(uuid.uuid4()))

    assert exc_info.value.kind == ErrorKind.BAD_REQUEST
    assert exc_info.value.field == "plan_id"


def test_meal_negative_macros_are_rejected_by_store(meals, plan):
    """CHECK violations are not domain errors and propagate unchanged"""
    with pytest.raises(IntegrityError):
        meals.create_meal(meal_data(plan.id, calories=-1))


# =============================================================================
# FAILURE TRANSLATION
# =============================================================================


def test_row_deleted_before_write_is_not_found(users, db_session, monkeypatch):
    user = users.create_user(new_user_data())

    def vanished():
        raise StaleDataError("UPDATE statement on table 'users' expected to update 1 row(s)")

    monkeypatch.setattr(db_session, "commit", vanished)

    with pytest.raises(AppError) as exc_info:
        users.update_by_id(user.id, {"name": "Late Writer"})
    assert exc_info.value.kind == ErrorKind.NOT_FOUND


def test_rejected_delete_keeps_row(users, plan):
    """A delete refused by a foreign key is rolled back; the row stays readable"""
    with pytest.raises(AppError):
        users.delete_by_id(plan.user_id)

    assert users.find_by_id(plan.user_id).id == plan.user_id


def test_deleted_row_is_not_served_from_session(users, db_session):
    user = users.create_user(new_user_data())
    users.find_by_id(user.id)

    users.delete_by_id(user.id)

    assert db_session.get(type(user), user.id) is None
    with pytest.raises(AppError) as exc_info:
        users.find_by_id(user.id)
    assert exc_info.value.message == "User not found"
