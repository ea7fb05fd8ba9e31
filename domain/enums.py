"""
Domain enums for the MealPlanner application.
Contains all enumeration types used across the domain models.
"""

import enum


class CookingSkillLevel(str, enum.Enum):
    """How comfortable the household cook is in the kitchen"""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class MemberRelationship(str, enum.Enum):
    """Relationship of a household member to the account owner"""

    SELF = "self"
    SPOUSE = "spouse"
    PARTNER = "partner"
    CHILD = "child"
    PARENT = "parent"
    ROOMMATE = "roommate"
    OTHER = "other"


class PortionSize(str, enum.Enum):
    SMALL = "small"
    REGULAR = "regular"
    LARGE = "large"


class SpicePreference(str, enum.Enum):
    NONE = "none"
    MILD = "mild"
    MEDIUM = "medium"
    HOT = "hot"


class MealType(str, enum.Enum):
    """Meal slots within a day"""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"


class BudgetStatus(str, enum.Enum):
    """Plan cost relative to the weekly budget"""

    UNDER = "under"
    AT = "at"
    OVER = "over"


class FeedbackRating(str, enum.Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"


class CalendarEventType(str, enum.Enum):
    """Household events that change what gets cooked on a given day"""

    EATING_OUT = "eating_out"
    DATE_NIGHT = "date_night"
    ORDERING_IN = "ordering_in"
    TRAVEL = "travel"
    PARTY = "party"
    LEFTOVERS = "leftovers"
    MEAL_PREP = "meal_prep"
    BUSY_DAY = "busy_day"
    KIDS_ONLY = "kids_only"
    ADULTS_ONLY = "adults_only"
    CUSTOM = "custom"


class RecurrenceFrequency(str, enum.Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class PaymentMethodType(str, enum.Enum):
    CARD = "card"
    PAYPAL = "paypal"
    APPLE_PAY = "apple_pay"
    GOOGLE_PAY = "google_pay"


class SubstitutionPreference(str, enum.Enum):
    ALLOW = "allow"
    ASK = "ask"
    NEVER = "never"


class CommunicationPreference(str, enum.Enum):
    TEXT = "text"
    APP = "app"
    NONE = "none"


class BagPreference(str, enum.Enum):
    PAPER = "paper"
    PLASTIC = "plastic"
    REUSABLE = "reusable"


class OrderStatus(str, enum.Enum):
    """Lifecycle of a simulated grocery delivery order"""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    PREPARING = "preparing"
    DELIVERING = "delivering"
    DELIVERED = "delivered"


class StoreType(str, enum.Enum):
    INSTACART = "instacart"
    WALMART = "walmart"
    AMAZON = "amazon"
