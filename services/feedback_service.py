from collections import Counter
from typing import List, Optional
from uuid import UUID
from sqlalchemy.orm import Session
import logging

from domain.enums import FeedbackRating
from domain.models import MealFeedback
from domain.schemas.feedback_schemas import (
    FeedbackStats,
    MealFeedbackCreate,
    MealFeedbackResponse,
    ReasonCount,
    RecipePreference,
)
from repositories import MealFeedbackRepository, UserRepository
from app.exceptions import NotFoundError

logger = logging.getLogger("mealplanner.feedback")

RATING_SCORES = {FeedbackRating.POSITIVE: 5, FeedbackRating.NEGATIVE: 2}
TOP_REASONS = 5
RECENT_FEEDBACK = 5


class FeedbackService:
    @staticmethod
    def submit_feedback(db: Session, data: MealFeedbackCreate) -> MealFeedback:
        if not UserRepository(db).exists(data.user_id):
            raise NotFoundError(f"User not found: {data.user_id}")
        try:
            feedback = MealFeedbackRepository(db).create(MealFeedback(**data.model_dump()))
        except Exception:
            db.rollback()
            logger.exception(f"feedback_submit_failed user_id={data.user_id}")
            raise
        logger.info(
            f"feedback_submitted feedback_id={feedback.feedback_id} "
            f"recipe={feedback.recipe_name!r} rating={feedback.rating.value}"
        )
        return feedback

    @staticmethod
    def get_meal_feedback(db: Session, user_id: UUID, meal_id: UUID) -> Optional[MealFeedback]:
        return MealFeedbackRepository(db).get_latest_for_meal(user_id, meal_id)

    @staticmethod
    def list_user_feedback(
        db: Session, user_id: UUID, limit: Optional[int] = None
    ) -> List[MealFeedback]:
        return MealFeedbackRepository(db).get_by_user_id(user_id, limit)

    @staticmethod
    def get_preferences(db: Session, user_id: UUID) -> List[RecipePreference]:
        """Average score per recipe (positive counts 5, negative 2)"""
        scores = {}
        for feedback in MealFeedbackRepository(db).get_by_user_id(user_id):
            scores.setdefault(feedback.recipe_name, []).append(RATING_SCORES[feedback.rating])
        return [
            RecipePreference(
                recipe_name=name,
                average_score=round(sum(values) / len(values), 2),
                count=len(values),
            )
            for name, values in scores.items()
        ]

    @staticmethod
    def get_stats(db: Session, user_id: UUID) -> FeedbackStats:
        entries = MealFeedbackRepository(db).get_by_user_id(user_id)
        positive = sum(1 for f in entries if f.rating == FeedbackRating.POSITIVE)
        reasons = Counter(reason for f in entries for reason in f.reasons or [])
        return FeedbackStats(
            total=len(entries),
            positive=positive,
            negative=len(entries) - positive,
            top_reasons=[
                ReasonCount(reason=reason, count=count)
                for reason, count in reasons.most_common(TOP_REASONS)
            ],
            recent=[MealFeedbackResponse.model_validate(f) for f in entries[:RECENT_FEEDBACK]],
        )
