from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional, List
from datetime import datetime
from uuid import UUID

from domain.enums import CookingSkillLevel


def _clean_list(values: Optional[List[str]]) -> Optional[List[str]]:
    if values is None:
        return None
    seen: List[str] = []
    for v in values:
        v = v.strip()
        if v and v not in seen:
            seen.append(v)
    return seen


class UserCreate(BaseModel):
    email: EmailStr
    display_name: Optional[str] = None


class ProfileUpdateRequest(BaseModel):
    """Partial profile update; omitted fields are left untouched."""

    display_name: Optional[str] = None
    household_size: Optional[int] = Field(None, ge=1, le=20)
    dietary_restrictions: Optional[List[str]] = None
    cuisine_preferences: Optional[List[str]] = None
    cooking_skill_level: Optional[CookingSkillLevel] = None
    weekly_budget: Optional[float] = Field(None, gt=0, le=10000)
    weekday_cooking_minutes: Optional[int] = Field(None, ge=5, le=240)
    weekend_cooking_minutes: Optional[int] = Field(None, ge=5, le=480)
    goals: Optional[List[str]] = None
    onboarding_completed: Optional[bool] = None

    @field_validator("dietary_restrictions", "cuisine_preferences", "goals")
    def dedupe(cls, v):
        return _clean_list(v)


class CookingTimePreference(BaseModel):
    weekday: int
    weekend: int


class UserProfileResponse(BaseModel):
    user_id: UUID
    email: str
    display_name: Optional[str] = None
    household_size: int
    dietary_restrictions: List[str] = []
    cuisine_preferences: List[str] = []
    cooking_skill_level: CookingSkillLevel
    weekly_budget: float
    cooking_time_preference: CookingTimePreference
    goals: List[str] = []
    onboarding_completed: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
