"""
Tests for user accounts and the household planning profile.

This test suite covers:
- Account creation with default profile settings
- Partial profile updates sent one onboarding step at a time
- Deletion cascading to everything the user owns
- Error envelopes for duplicates and unknown users
"""

import uuid

import pytest
from sqlalchemy.orm import Session

from test_fixtures import client, db_session, make_user, unique_email, create_user
from domain.constants import DEFAULT_HOUSEHOLD_SIZE, DEFAULT_WEEKLY_BUDGET
from domain.schemas.pantry_schemas import PantryItemCreate
from domain.schemas.user_schemas import ProfileUpdateRequest
from repositories import PantryRepository, UserRepository
from services.pantry_service import PantryService
from services.profile_service import ProfileService
from app.exceptions import NotFoundError, ServiceValidationError


# =============================================================================
# ROUTE TESTS (service mocked)
# =============================================================================


def test_users_list_and_get_and_delete(monkeypatch):
    """
    Verifies:
    - GET /users maps every profile
    - GET /users/{id} folds the cooking minutes into cooking_time_preference
    - DELETE /users/{id} echoes the deleted id
    """
    user = make_user(weekly_budget=120.0)

    monkeypatch.setattr(ProfileService, "list_users", lambda db: [user])
    r = client.get("/users")
    assert r.status_code == 200
    assert r.json()[0]["email"] == user.email

    monkeypatch.setattr(ProfileService, "get_user", lambda db, uid: user)
    r2 = client.get(f"/users/{user.user_id}")
    assert r2.status_code == 200
    body = r2.json()
    assert body["weekly_budget"] == 120.0
    assert body["cooking_time_preference"] == {"weekday": 30, "weekend": 60}

    monkeypatch.setattr(ProfileService, "delete_user", lambda db, uid: True)
    r3 = client.delete(f"/users/{user.user_id}")
    assert r3.status_code == 200
    assert r3.json() == {"status": "ok", "deleted": str(user.user_id)}


def test_create_user_rejects_invalid_email():
    r = client.post("/users", json={"email": "not-an-email"})
    assert r.status_code == 422
    body = r.json()
    assert body["success"] is False
    assert body["error"]["code"] == "VALIDATION_ERROR"


def test_get_unknown_user_returns_not_found_envelope(monkeypatch):
    def missing(db, uid):
        raise NotFoundError(f"User not found: {uid}")

    monkeypatch.setattr(ProfileService, "get_user", missing)
    r = client.get(f"/users/{uuid.uuid4()}")
    assert r.status_code == 404
    assert r.json()["error"]["code"] == "NOT_FOUND"
    assert "timestamp" in r.json()


# =============================================================================
# INTEGRATION TESTS (SQLite)
# =============================================================================


def test_create_user_applies_profile_defaults(db_session: Session):
    """
    Verifies:
    - new users get the default budget and household size
    - email is normalized to lowercase
    - onboarding starts incomplete
    """
    user = ProfileService.create_user(db_session, "  Sarah.Martinez@Example.com ", "Sarah")

    assert user.email == "sarah.martinez@example.com"
    assert user.household_size == DEFAULT_HOUSEHOLD_SIZE
    assert float(user.weekly_budget) == DEFAULT_WEEKLY_BUDGET
    assert user.onboarding_completed is False


def test_duplicate_email_is_rejected(db_session: Session):
    email = unique_email("dup")
    ProfileService.create_user(db_session, email)

    with pytest.raises(ServiceValidationError):
        ProfileService.create_user(db_session, email.upper())


def test_partial_profile_update_leaves_other_fields(db_session: Session):
    """
    Verifies:
    - only fields present in the request change
    - list fields are stripped and de-duplicated
    """
    user = create_user(db_session, weekly_budget=200, household_size=2)

    updated = ProfileService.update_profile(
        db_session,
        user.user_id,
        ProfileUpdateRequest(dietary_restrictions=["Vegetarian", " Vegetarian ", "Nut-Free"]),
    )

    assert updated.dietary_restrictions == ["Vegetarian", "Nut-Free"]
    assert float(updated.weekly_budget) == 200
    assert updated.household_size == 2


def test_update_profile_unknown_user(db_session: Session):
    with pytest.raises(NotFoundError):
        ProfileService.update_profile(
            db_session, uuid.uuid4(), ProfileUpdateRequest(household_size=3)
        )


def test_delete_user_removes_owned_records(db_session: Session):
    user = create_user(db_session)
    PantryService.add_item(db_session, user.user_id, PantryItemCreate(name="Rice"))

    assert ProfileService.delete_user(db_session, user.user_id) is True
    assert UserRepository(db_session).get_by_id(user.user_id) is None
    assert PantryRepository(db_session).get_by_user_id(user.user_id) == []


def test_user_routes_against_database(db_session: Session):
    """
    End-to-end: POST then PATCH then GET through the API on the shared SQLite engine.
    """
    r = client.post("/users", json={"email": unique_email("emma"), "display_name": "Emma"})
    assert r.status_code == 201
    user_id = r.json()["user_id"]

    r2 = client.patch(
        f"/users/{user_id}",
        json={"weekly_budget": 95.5, "onboarding_completed": True},
    )
    assert r2.status_code == 200
    assert r2.json()["weekly_budget"] == 95.5
    assert r2.json()["onboarding_completed"] is True

    r3 = client.patch(f"/users/{user_id}", json={"household_size": 0})
    assert r3.status_code == 422
