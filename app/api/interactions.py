from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from app.db.database import get_db
from app.api.auth import get_current_user
from app.api.filters import parse_filter
from app.core.permissions import has_permission
from app.models.ai_interaction import AIInteraction, FeatureType, ReviewStatus
from app.models.user import User, UserRole
from app.schemas.ai import Interaction, InteractionListResponse, InteractionResponse
from app.schemas.user import MessageResponse
from typing import Optional
import logging

logger = logging.getLogger(__name__)
router = APIRouter()


def load_interaction(db: Session, interaction_id: str, user: User) -> AIInteraction:
    interaction = db.get(AIInteraction, interaction_id)
    if not interaction:
        raise HTTPException(status_code=404, detail="Interaction not found")
    # Reviewers read every interaction, everyone else only their own
    if interaction.user_id != user.id and not has_permission(user, "validate:ai"):
        raise HTTPException(status_code=403, detail="Access denied")
    return interaction


@router.get("", response_model=InteractionListResponse)
async def get_interactions(
    featureType: Optional[str] = None,
    reviewStatus: Optional[str] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    feature_filter = parse_filter(featureType, FeatureType, "feature type")
    status_filter = parse_filter(reviewStatus, ReviewStatus, "review status")

    query = db.query(AIInteraction)
    if not has_permission(current_user, "validate:ai"):
        query = query.filter(AIInteraction.user_id == current_user.id)
    if feature_filter:
        query = query.filter(AIInteraction.feature_type == feature_filter)
    if status_filter:
        query = query.filter(AIInteraction.review_status == status_filter)

    interactions = query.order_by(AIInteraction.created_at.desc()).all()
    return {"interactions": [Interaction.model_validate(i) for i in interactions]}


@router.get("/{interaction_id}", response_model=InteractionResponse)
async def get_interaction(
    interaction_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return {"interaction": Interaction.model_validate(load_interaction(db, interaction_id, current_user))}


@router.delete("/{interaction_id}", response_model=MessageResponse)
async def delete_interaction(
    interaction_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    interaction = db.get(AIInteraction, interaction_id)
    if not interaction:
        raise HTTPException(status_code=404, detail="Interaction not found")
    if interaction.user_id != current_user.id and UserRole(current_user.role) != UserRole.ADMIN:
        raise HTTPException(status_code=403, detail="Access denied")

    db.delete(interaction)
    db.commit()
    logger.info(f"Interaction {interaction_id} deleted by {current_user.id}")
    return {"message": "Interaction successfully deleted"}
