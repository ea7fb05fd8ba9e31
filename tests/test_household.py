"""
Tests for household members and preference aggregation.

This test suite covers:
- Member CRUD through the service and the /household routes
- Per-member recipe feedback
- Merging restrictions, allergens, dislikes and cuisines across members
"""

import uuid
from types import SimpleNamespace

import pytest
from sqlalchemy.orm import Session

from test_fixtures import client, db_session, create_user
from domain.enums import MemberRelationship
from domain.schemas.household_schemas import (
    HouseholdMemberCreate,
    HouseholdMemberUpdate,
    MemberFeedbackCreate,
)
from services.household_service import HouseholdService
from app.exceptions import NotFoundError


def _member(name, **fields):
    defaults = dict(
        name=name,
        dietary_restrictions=[],
        allergens=[],
        disliked_ingredients=[],
        cuisine_preferences=[],
        advanced_nutrition=None,
    )
    defaults.update(fields)
    return SimpleNamespace(**defaults)


# =============================================================================
# AGGREGATION
# =============================================================================


def test_aggregate_preferences_unions_constraints_in_first_seen_order():
    members = [
        _member(
            "Alex",
            dietary_restrictions=["Vegetarian"],
            allergens=["peanuts"],
            cuisine_preferences=["Italian", "Thai"],
        ),
        _member(
            "Sam",
            dietary_restrictions=["Vegetarian", "Gluten-Free"],
            allergens=["shellfish", "peanuts"],
            disliked_ingredients=["olives"],
            cuisine_preferences=["Italian"],
        ),
    ]

    prefs = HouseholdService.aggregate_preferences(members)

    assert prefs.all_dietary_restrictions == ["Vegetarian", "Gluten-Free"]
    assert prefs.all_allergens == ["peanuts", "shellfish"]
    assert prefs.all_disliked_ingredients == ["olives"]
    assert prefs.cuisine_preferences == {"Italian": 2, "Thai": 1}
    assert prefs.nutrition_requirements == []


def test_aggregate_preferences_collects_enabled_nutrition_only():
    members = [
        _member(
            "Alex",
            advanced_nutrition={
                "enabled": True,
                "daily_calories": 2200,
                "macros": {"protein": 150, "carbs": 200, "fat": 70},
            },
        ),
        _member("Sam", advanced_nutrition={"enabled": False, "daily_calories": 1800}),
    ]

    prefs = HouseholdService.aggregate_preferences(members)

    assert len(prefs.nutrition_requirements) == 1
    requirement = prefs.nutrition_requirements[0]
    assert requirement.name == "Alex"
    assert requirement.daily_calories == 2200
    assert requirement.macros.protein == 150


def test_aggregate_preferences_empty_household():
    prefs = HouseholdService.aggregate_preferences([])
    assert prefs.all_dietary_restrictions == []
    assert prefs.cuisine_preferences == {}


# =============================================================================
# MEMBER CRUD (SQLite)
# =============================================================================


def test_add_update_and_delete_member(db_session: Session):
    """
    Verifies:
    - add_member stores the relationship under its ORM column name
    - an update trims the name and leaves omitted fields alone
    - delete removes the member
    """
    user = create_user(db_session)
    member = HouseholdService.add_member(
        db_session,
        user.user_id,
        HouseholdMemberCreate(
            name="  Lily ", age=7, relationship=MemberRelationship.CHILD, allergens=["peanuts"]
        ),
    )
    assert member.name == "Lily"
    assert member.relationship_type == MemberRelationship.CHILD
    assert member.meal_preferences["breakfast"] is True

    updated = HouseholdService.update_member(
        db_session, member.member_id, HouseholdMemberUpdate(name=" Lily Rose ", age=8)
    )
    assert updated.name == "Lily Rose"
    assert updated.age == 8
    assert updated.allergens == ["peanuts"]

    assert HouseholdService.delete_member(db_session, member.member_id) is True
    with pytest.raises(NotFoundError):
        HouseholdService.get_member(db_session, member.member_id)


def test_add_member_for_unknown_user(db_session: Session):
    with pytest.raises(NotFoundError):
        HouseholdService.add_member(
            db_session, uuid.uuid4(), HouseholdMemberCreate(name="Ghost")
        )


def test_member_feedback_roundtrip(db_session: Session):
    user = create_user(db_session)
    member = HouseholdService.add_member(
        db_session, user.user_id, HouseholdMemberCreate(name="Sam")
    )

    HouseholdService.add_feedback(
        db_session,
        member.member_id,
        MemberFeedbackCreate(
            recipe_name="Veggie Stir Fry", rating=4, liked_ingredients=["tofu"]
        ),
    )

    entries = HouseholdService.list_feedback(db_session, member.member_id)
    assert len(entries) == 1
    assert entries[0].recipe_name == "Veggie Stir Fry"
    assert entries[0].would_eat_again is True


def test_household_routes(db_session: Session):
    """
    End-to-end through /household: add two members, read merged preferences.
    """
    user = create_user(db_session)

    r = client.post(
        f"/household/members?user_id={user.user_id}",
        json={"name": "Alex", "relationship": "spouse", "dietary_restrictions": ["Vegan"]},
    )
    assert r.status_code == 201
    assert r.json()["relationship"] == "spouse"
    member_id = r.json()["member_id"]

    client.post(
        f"/household/members?user_id={user.user_id}",
        json={"name": "Sam", "allergens": ["sesame"]},
    )

    r2 = client.get(f"/household/preferences?user_id={user.user_id}")
    assert r2.status_code == 200
    assert r2.json()["all_dietary_restrictions"] == ["Vegan"]
    assert r2.json()["all_allergens"] == ["sesame"]

    r3 = client.delete(f"/household/members/{member_id}")
    assert r3.json() == {"status": "ok", "removed": member_id}

    r4 = client.get(f"/household/members/{member_id}")
    assert r4.status_code == 404


def test_add_member_rejects_blank_name():
    r = client.post(f"/household/members?user_id={uuid.uuid4()}", json={"name": "   "})
    assert r.status_code == 422


@pytest.mark.parametrize("name", ["   ", None])
def test_update_member_rejects_blank_name(db_session: Session, name):
    """
    Verifies:
    - a blank or null name on update is a 422, not a silent no-op
    - the stored name is unchanged
    """
    user = create_user(db_session)
    member = HouseholdService.add_member(
        db_session, user.user_id, HouseholdMemberCreate(name="Lily")
    )

    r = client.patch(f"/household/members/{member.member_id}", json={"name": name})

    assert r.status_code == 422
    assert r.json()["error"]["code"] == "VALIDATION_ERROR"
    assert client.get(f"/household/members/{member.member_id}").json()["name"] == "Lily"
