import enum
import uuid
from sqlalchemy import Column, String, DateTime, ForeignKey, Text, JSON, Enum
from sqlalchemy.orm import relationship
from datetime import datetime, timezone
from app.db.database import Base

class FeatureType(str, enum.Enum):
    REGULATORY_QA = "regulatory-qa"
    SUMMARIZATION = "summarization"
    COMPARISON = "comparison"
    CONTRACT_REVIEW = "contract-review"
    POLICY_DRAFTING = "policy-drafting"
    CONTROL_DESIGN = "control-design"
    ALIGNMENT_GAP = "alignment-gap"

class ReviewStatus(str, enum.Enum):
    PENDING = "pending"
    ACCURATE = "accurate"
    INACCURATE = "inaccurate"
    NEEDS_REVIEW = "needs-review"

class AIInteraction(Base):
    __tablename__ = "ai_interactions"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    feature_type = Column(
        Enum(FeatureType, name="featuretype", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        index=True,
    )
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    document_id = Column(String(36), ForeignKey("documents.id", ondelete="SET NULL"), nullable=True)
    prompt = Column(Text, nullable=False)
    context = Column(JSON, nullable=False, default=dict)
    response = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    review_status = Column(
        Enum(ReviewStatus, name="reviewstatus", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=ReviewStatus.PENDING,
        index=True,
    )
    reviewer_id = Column(String(36), ForeignKey("users.id"), nullable=True)
    reviewer_feedback = Column(Text, nullable=True)
    reviewed_at = Column(DateTime(timezone=True), nullable=True)
    source_citations = Column(JSON, nullable=False, default=list)

    user = relationship("User", back_populates="interactions", foreign_keys=[user_id])
    reviewer = relationship("User", foreign_keys=[reviewer_id])
    document = relationship("Document")
    feedback = relationship(
        "Feedback", back_populates="interaction", cascade="all, delete-orphan"
    )
