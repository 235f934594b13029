from datetime import datetime, timezone
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from app.db.database import get_db
from app.api.auth import require_permission
from app.api.filters import parse_filter
from app.models.ai_interaction import AIInteraction, FeatureType, ReviewStatus
from app.models.feedback import Feedback
from app.models.user import User
from app.schemas.feedback import Feedback as FeedbackSchema, FeedbackCreate, FeedbackDetail, FeedbackListResponse, FeedbackResponse
from typing import Optional
import logging

logger = logging.getLogger(__name__)
router = APIRouter()


def review_status_for_rating(rating: int) -> ReviewStatus:
    if rating >= 4:
        return ReviewStatus.ACCURATE
    if rating <= 2:
        return ReviewStatus.INACCURATE
    return ReviewStatus.NEEDS_REVIEW


@router.post("", response_model=FeedbackResponse)
async def submit_feedback(
    data: FeedbackCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission("feedback:ai"))
):
    interaction = db.get(AIInteraction, str(data.interaction_id))
    if not interaction:
        raise HTTPException(status_code=404, detail="Interaction not found")

    feedback = Feedback(
        interaction_id=interaction.id,
        user_id=current_user.id,
        rating=data.rating,
        comment=data.comment or "",
        improvement_suggestions=data.improvement_suggestions or "",
    )
    db.add(feedback)

    review_status = ReviewStatus(data.review_status) if data.review_status else review_status_for_rating(data.rating)
    interaction.review_status = review_status
    interaction.reviewer_id = current_user.id
    interaction.reviewer_feedback = data.comment or None
    interaction.reviewed_at = datetime.now(timezone.utc)

    db.commit()
    db.refresh(feedback)
    logger.info(f"Interaction {interaction.id} reviewed by {current_user.id} as {review_status.value}")

    return {"feedback": FeedbackSchema.model_validate(feedback), "review_status": review_status}


@router.get("", response_model=FeedbackListResponse)
async def list_feedback(
    interactionId: Optional[str] = None,
    featureType: Optional[str] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission("view:reports"))
):
    feature_filter = parse_filter(featureType, FeatureType, "feature type")

    query = db.query(Feedback)
    if interactionId:
        query = query.filter(Feedback.interaction_id == interactionId)
    if feature_filter:
        query = query.join(Feedback.interaction).filter(AIInteraction.feature_type == feature_filter)

    feedback = query.order_by(Feedback.created_at.desc()).all()
    return {"feedback": [FeedbackDetail.model_validate(item) for item in feedback]}
