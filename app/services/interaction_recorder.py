import logging
from typing import Any, Dict, Optional
from sqlalchemy.orm import Session
from app.models.ai_interaction import AIInteraction, FeatureType, ReviewStatus
from app.models.user import User

logger = logging.getLogger(__name__)


def record_interaction(
    db: Session,
    user: User,
    feature_type: FeatureType,
    prompt: str,
    response: str,
    context: Optional[Dict[str, Any]] = None,
    source_citations: Optional[list[str]] = None,
    document_id: Optional[str] = None,
) -> AIInteraction:
    """Persist one feature invocation; every record starts out pending SME review."""
    interaction = AIInteraction(
        feature_type=feature_type,
        user_id=user.id,
        document_id=document_id,
        prompt=prompt,
        response=response,
        context=context or {},
        review_status=ReviewStatus.PENDING,
        source_citations=source_citations or [],
    )
    db.add(interaction)
    db.commit()
    db.refresh(interaction)
    logger.info(f"Recorded {feature_type.value} interaction {interaction.id} for user {user.id}")
    return interaction
