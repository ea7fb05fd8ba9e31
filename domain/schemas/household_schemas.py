from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from domain.enums import MemberRelationship, PortionSize, SpicePreference


class Macros(BaseModel):
    protein: float = Field(..., ge=0)
    carbs: float = Field(..., ge=0)
    fat: float = Field(..., ge=0)
    fiber: Optional[float] = Field(None, ge=0)


class AdvancedNutrition(BaseModel):
    enabled: bool = False
    daily_calories: Optional[int] = Field(None, ge=500, le=10000)
    macros: Optional[Macros] = None


class MealPreferences(BaseModel):
    breakfast: bool = True
    lunch: bool = True
    dinner: bool = True
    snacks: bool = True


class HouseholdMemberCreate(BaseModel):
    name: str = Field(..., max_length=100)
    age: Optional[int] = Field(None, ge=0, le=120)
    relationship: MemberRelationship = MemberRelationship.OTHER
    dietary_restrictions: List[str] = []
    cuisine_preferences: List[str] = []
    allergens: List[str] = []
    disliked_ingredients: List[str] = []
    favorite_ingredients: List[str] = []
    meal_preferences: MealPreferences = Field(default_factory=MealPreferences)
    portion_size: PortionSize = PortionSize.REGULAR
    spice_preference: SpicePreference = SpicePreference.MILD
    advanced_nutrition: Optional[AdvancedNutrition] = None
    notes: Optional[str] = None

    @field_validator("name")
    def name_not_blank(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Member name is required")
        return v


class HouseholdMemberUpdate(BaseModel):
    """Partial update; omitted fields are left untouched."""

    name: Optional[str] = Field(None, max_length=100)
    age: Optional[int] = Field(None, ge=0, le=120)
    relationship: Optional[MemberRelationship] = None
    dietary_restrictions: Optional[List[str]] = None
    cuisine_preferences: Optional[List[str]] = None
    allergens: Optional[List[str]] = None
    disliked_ingredients: Optional[List[str]] = None
    favorite_ingredients: Optional[List[str]] = None
    meal_preferences: Optional[MealPreferences] = None
    portion_size: Optional[PortionSize] = None
    spice_preference: Optional[SpicePreference] = None
    advanced_nutrition: Optional[AdvancedNutrition] = None
    notes: Optional[str] = None

    @field_validator("name")
    def name_not_blank(cls, v):
        v = (v or "").strip()
        if not v:
            raise ValueError("Member name cannot be blank")
        return v


class HouseholdMemberResponse(BaseModel):
    member_id: UUID
    user_id: UUID
    name: str
    age: Optional[int] = None
    relationship: MemberRelationship
    dietary_restrictions: List[str]
    cuisine_preferences: List[str]
    allergens: List[str]
    disliked_ingredients: List[str]
    favorite_ingredients: List[str]
    meal_preferences: MealPreferences
    portion_size: PortionSize
    spice_preference: SpicePreference
    advanced_nutrition: Optional[AdvancedNutrition] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class MemberFeedbackCreate(BaseModel):
    recipe_name: str = Field(..., min_length=1, max_length=200)
    rating: int = Field(..., ge=1, le=5)
    liked_ingredients: List[str] = []
    disliked_ingredients: List[str] = []
    would_eat_again: bool = True
    comment: Optional[str] = None


class MemberFeedbackResponse(BaseModel):
    feedback_id: UUID
    member_id: UUID
    recipe_name: str
    rating: int
    liked_ingredients: List[str]
    disliked_ingredients: List[str]
    would_eat_again: bool
    comment: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class NutritionRequirement(BaseModel):
    name: str
    daily_calories: Optional[int] = None
    macros: Optional[Macros] = None


class HouseholdPreferences(BaseModel):
    """Union of member constraints used when prompting for a plan"""

    all_dietary_restrictions: List[str] = []
    all_allergens: List[str] = []
    all_disliked_ingredients: List[str] = []
    cuisine_preferences: Dict[str, int] = {}
    nutrition_requirements: List[NutritionRequirement] = []
