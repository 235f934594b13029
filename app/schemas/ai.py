from datetime import datetime
from typing import Any, Literal, Optional
from uuid import UUID
from pydantic import Field
from app.models.ai_interaction import FeatureType, ReviewStatus
from app.schemas.base import CamelModel
from app.schemas.document import Document


class RegulatoryQARequest(CamelModel):
    query: str = Field(min_length=1)
    document_ids: Optional[list[UUID]] = None


class ContractReviewRequest(CamelModel):
    contract_id: UUID
    regulatory_ids: Optional[list[UUID]] = None


class SummarizationOptions(CamelModel):
    max_length: Optional[int] = Field(default=None, gt=0)
    focus: Optional[list[str]] = None


class SummarizationRequest(CamelModel):
    document_id: UUID
    options: Optional[SummarizationOptions] = None


class ComparisonRequest(CamelModel):
    document_ids: list[UUID] = Field(min_length=2)
    comparison_type: Literal["differences", "similarities", "both"] = "both"


class PolicyDraftingRequest(CamelModel):
    name: str = Field(min_length=1)
    regulatory_ids: list[UUID] = Field(min_length=1)
    industry: Optional[str] = None
    company_size: Optional[str] = None
    content_requirements: Optional[str] = None


class ControlDesignRequest(CamelModel):
    name: str = Field(min_length=1)
    policy_ids: list[UUID] = Field(min_length=1)
    risk_category: Optional[str] = None
    control_type: Optional[Literal["preventive", "detective", "corrective", "directive"]] = None


class AlignmentGapRequest(CamelModel):
    framework_ids: list[UUID] = Field(min_length=1)
    company_document_ids: list[UUID] = Field(min_length=1)
    analysis_type: Literal["compliance", "maturity", "risk"] = "compliance"


class Interaction(CamelModel):
    id: str
    feature_type: FeatureType
    user_id: str
    document_id: Optional[str] = None
    prompt: str
    context: dict[str, Any] = {}
    response: str
    created_at: datetime
    review_status: ReviewStatus
    reviewer_id: Optional[str] = None
    reviewer_feedback: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    source_citations: list[str] = []


class InteractionResponse(CamelModel):
    success: bool = True
    interaction: Interaction


class InteractionListResponse(CamelModel):
    success: bool = True
    interactions: list[Interaction]


class ContractReviewResponse(InteractionResponse):
    analysis_result: dict[str, Any]


class SummarizationResponse(InteractionResponse):
    summary: str


class ComparisonResponse(InteractionResponse):
    comparison_result: dict[str, Any]


class PolicyDraftingResponse(InteractionResponse):
    policy_document: Document
    policy_draft: str


class ControlDesignResponse(InteractionResponse):
    control_document: Document
    control_design: dict[str, Any]


class AlignmentGapResponse(InteractionResponse):
    analysis: dict[str, Any]
