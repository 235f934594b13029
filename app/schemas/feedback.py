from datetime import datetime
from typing import Literal, Optional
from uuid import UUID
from pydantic import Field
from app.models.ai_interaction import FeatureType, ReviewStatus
from app.schemas.base import CamelModel
from app.schemas.user import UserSummary


class FeedbackCreate(CamelModel):
    interaction_id: UUID
    rating: int = Field(ge=1, le=5)
    comment: Optional[str] = None
    improvement_suggestions: Optional[str] = None
    review_status: Optional[Literal["accurate", "inaccurate", "needs-review"]] = None


class InteractionSummary(CamelModel):
    id: str
    feature_type: FeatureType
    prompt: str
    created_at: datetime


class Feedback(CamelModel):
    id: str
    interaction_id: str
    user_id: str
    rating: int
    comment: str
    improvement_suggestions: str
    created_at: datetime


class FeedbackDetail(Feedback):
    interaction: Optional[InteractionSummary] = None
    user: Optional[UserSummary] = None


class FeedbackResponse(CamelModel):
    success: bool = True
    feedback: Feedback
    review_status: ReviewStatus


class FeedbackListResponse(CamelModel):
    success: bool = True
    feedback: list[FeedbackDetail]
