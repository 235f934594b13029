from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from app.db.database import get_db
from app.api.auth import require_permission
from app.core.errors import APIError
from app.models.ai_interaction import FeatureType
from app.models.document import Document, DocumentType, ProcessingStatus
from app.models.user import User
from app.schemas.ai import (
    AlignmentGapRequest,
    AlignmentGapResponse,
    ComparisonRequest,
    ComparisonResponse,
    ContractReviewRequest,
    ContractReviewResponse,
    ControlDesignRequest,
    ControlDesignResponse,
    Interaction,
    InteractionResponse,
    PolicyDraftingRequest,
    PolicyDraftingResponse,
    RegulatoryQARequest,
    SummarizationRequest,
    SummarizationResponse,
)
from app.schemas.document import Document as DocumentSchema
from app.services.ai_service import AIService, get_ai_service
from app.services.compliance_analyzer import ComplianceAnalyzer, document_ref
from app.services.interaction_recorder import record_interaction
from typing import Iterable, Optional
from uuid import UUID
import logging

logger = logging.getLogger(__name__)
router = APIRouter()
analyzer = ComplianceAnalyzer()

use_ai = require_permission("use:ai")


def fetch_documents(
    db: Session,
    ids: Iterable[UUID],
    types: Optional[set[DocumentType]] = None,
) -> list[Document]:
    """Load documents in request order, keeping only those of the given types."""
    wanted = list(dict.fromkeys(str(doc_id) for doc_id in ids))
    if not wanted:
        return []
    query = db.query(Document).filter(Document.id.in_(wanted))
    if types:
        query = query.filter(Document.type.in_(types))
    found = {doc.id: doc for doc in query.all()}
    return [found[doc_id] for doc_id in wanted if doc_id in found]


def require_all(documents: list[Document], ids: Iterable[UUID], label: str) -> None:
    if len(documents) != len({str(doc_id) for doc_id in ids}):
        raise APIError(404, f"One or more {label} documents not found", "NOT_FOUND")


def interaction_payload(interaction) -> dict:
    return {"interaction": Interaction.model_validate(interaction)}


@router.post("/regulatory-qa", response_model=InteractionResponse)
async def regulatory_qa(
    data: RegulatoryQARequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(use_ai),
    ai_service: AIService = Depends(get_ai_service)
):
    context = {}
    references = []
    if data.document_ids:
        regulations = fetch_documents(db, data.document_ids, {DocumentType.REGULATION})
        references = [document_ref(doc) for doc in regulations]
        context["documentReferences"] = references

    system_prompt = "You are a regulatory compliance assistant. Answer precisely and cite the regulations you rely on."
    if references:
        system_prompt += " Relevant documents: " + ", ".join(ref["name"] for ref in references) + "."

    result = await ai_service.complete(
        [{"role": "user", "content": data.query}],
        system_prompt=system_prompt,
    )

    interaction = record_interaction(
        db,
        current_user,
        FeatureType.REGULATORY_QA,
        prompt=data.query,
        response=result["response"],
        context=context,
        source_citations=[ref["name"] for ref in references] or ["GDPR Article 17", "Financial Record Keeping Regulation 45-106"],
    )
    return interaction_payload(interaction)


@router.post("/contract-review", response_model=ContractReviewResponse)
async def contract_review(
    data: ContractReviewRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(use_ai)
):
    contracts = fetch_documents(db, [data.contract_id], {DocumentType.CONTRACT})
    if not contracts:
        raise HTTPException(status_code=404, detail="Contract not found")
    contract = contracts[0]

    regulations = fetch_documents(db, data.regulatory_ids or [], {DocumentType.REGULATION})
    analysis_result = analyzer.review_contract(contract, regulations)

    interaction = record_interaction(
        db,
        current_user,
        FeatureType.CONTRACT_REVIEW,
        prompt=f"Analyze contract {contract.name} for compliance issues",
        response=analyzer.encode(analysis_result),
        context={
            "contractId": contract.id,
            "contractName": contract.name,
            "regulatoryDocuments": [document_ref(doc) for doc in regulations],
        },
        source_citations=analyzer.contract_citations(),
        document_id=contract.id,
    )
    return {**interaction_payload(interaction), "analysis_result": analysis_result}


@router.post("/summarization", response_model=SummarizationResponse)
async def summarization(
    data: SummarizationRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(use_ai),
    ai_service: AIService = Depends(get_ai_service)
):
    documents = fetch_documents(db, [data.document_id])
    if not documents:
        raise APIError(404, "Document not found", "NOT_FOUND")
    document = documents[0]
    options = data.options.model_dump(by_alias=True, exclude_none=True) if data.options else None

    prompt = f"Summarize document: {document.name}"
    if data.options and data.options.max_length:
        prompt += f" with max length {data.options.max_length} words"
    if data.options and data.options.focus:
        prompt += f", focusing on {', '.join(data.options.focus)}"

    result = await ai_service.complete(
        [{"role": "user", "content": prompt}],
        system_prompt=(
            f"You summarize {document.type.value} documents for compliance teams. "
            f"The document is {document.file_size / 1024:.1f}KB in size."
        ),
    )

    interaction = record_interaction(
        db,
        current_user,
        FeatureType.SUMMARIZATION,
        prompt=prompt,
        response=result["response"],
        context={"documentId": document.id, "documentName": document.name, "options": options},
        source_citations=[f"{document.name} - full document"],
        document_id=document.id,
    )
    return {**interaction_payload(interaction), "summary": result["response"]}


@router.post("/comparison", response_model=ComparisonResponse)
async def comparison(
    data: ComparisonRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(use_ai)
):
    documents = fetch_documents(db, data.document_ids)
    require_all(documents, data.document_ids, "comparison")
    if len(documents) < 2:
        raise HTTPException(status_code=400, detail="At least two distinct documents required")

    comparison_result = analyzer.compare(documents, data.comparison_type)
    names = [doc.name for doc in documents]

    interaction = record_interaction(
        db,
        current_user,
        FeatureType.COMPARISON,
        prompt=f"Compare documents: {' and '.join(names)} for {data.comparison_type}",
        response=analyzer.encode(comparison_result),
        context={
            "documentIds": [doc.id for doc in documents],
            "documentNames": names,
            "comparisonType": data.comparison_type,
        },
        source_citations=[f"{name} - full document" for name in names],
    )
    return {**interaction_payload(interaction), "comparison_result": comparison_result}


@router.post("/policy-drafting", response_model=PolicyDraftingResponse)
async def policy_drafting(
    data: PolicyDraftingRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(use_ai)
):
    regulations = fetch_documents(db, data.regulatory_ids, {DocumentType.REGULATION})
    require_all(regulations, data.regulatory_ids, "regulatory")

    policy_draft = analyzer.draft_policy(
        data.name,
        regulations,
        industry=data.industry,
        company_size=data.company_size,
        content_requirements=data.content_requirements,
    )

    policy_document = Document(
        name=data.name,
        type=DocumentType.POLICY,
        tags=["Draft", "AI-Generated", *[doc.name for doc in regulations]],
        uploaded_by_id=current_user.id,
        processing_status=ProcessingStatus.COMPLETED,
        file_size=len(policy_draft.encode("utf-8")),
        content_type="text/markdown",
    )
    db.add(policy_document)
    db.commit()
    db.refresh(policy_document)

    prompt = f"Draft {data.name} policy based on regulatory requirements"
    if data.industry:
        prompt += f" for {data.industry} industry"

    interaction = record_interaction(
        db,
        current_user,
        FeatureType.POLICY_DRAFTING,
        prompt=prompt,
        response=policy_draft,
        context={
            "policyName": data.name,
            "regulatoryDocuments": [document_ref(doc) for doc in regulations],
            "industry": data.industry,
            "companySize": data.company_size,
            "contentRequirements": data.content_requirements,
        },
        source_citations=[doc.name for doc in regulations],
        document_id=policy_document.id,
    )
    return {
        **interaction_payload(interaction),
        "policy_document": DocumentSchema.model_validate(policy_document),
        "policy_draft": policy_draft,
    }


@router.post("/control-design", response_model=ControlDesignResponse)
async def control_design(
    data: ControlDesignRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(use_ai)
):
    policies = fetch_documents(db, data.policy_ids, {DocumentType.POLICY})
    require_all(policies, data.policy_ids, "policy")

    control = analyzer.design_control(
        data.name, policies, risk_category=data.risk_category, control_type=data.control_type
    )
    encoded = analyzer.encode(control)

    control_document = Document(
        name=data.name,
        type=DocumentType.CONTROL,
        tags=["Draft", "AI-Generated", control["controlType"], control["riskCategory"]],
        uploaded_by_id=current_user.id,
        processing_status=ProcessingStatus.COMPLETED,
        file_size=len(encoded.encode("utf-8")),
        content_type="application/json",
    )
    db.add(control_document)
    db.commit()
    db.refresh(control_document)

    interaction = record_interaction(
        db,
        current_user,
        FeatureType.CONTROL_DESIGN,
        prompt=(
            f"Design {data.control_type or 'a'} control named \"{data.name}\" for "
            f"{data.risk_category or 'organizational data protection'}"
        ),
        response=encoded,
        context={
            "controlName": data.name,
            "policyDocuments": [document_ref(doc) for doc in policies],
            "riskCategory": data.risk_category,
            "controlType": data.control_type,
        },
        source_citations=[doc.name for doc in policies],
        document_id=control_document.id,
    )
    return {
        **interaction_payload(interaction),
        "control_document": DocumentSchema.model_validate(control_document),
        "control_design": control,
    }


@router.post("/alignment-gap", response_model=AlignmentGapResponse)
async def alignment_gap(
    data: AlignmentGapRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(use_ai)
):
    frameworks = fetch_documents(db, data.framework_ids, {DocumentType.REGULATION})
    require_all(frameworks, data.framework_ids, "framework")

    company_documents = fetch_documents(
        db, data.company_document_ids, {DocumentType.POLICY, DocumentType.CONTROL}
    )
    require_all(company_documents, data.company_document_ids, "company")

    analysis = analyzer.analyze_alignment(frameworks, company_documents, data.analysis_type)

    interaction = record_interaction(
        db,
        current_user,
        FeatureType.ALIGNMENT_GAP,
        prompt=(
            f"Perform {data.analysis_type} analysis between "
            f"{', '.join(doc.name for doc in frameworks)} and company documents"
        ),
        response=analyzer.encode(analysis),
        context={
            "frameworkDocuments": [document_ref(doc) for doc in frameworks],
            "companyDocuments": [document_ref(doc, "type") for doc in company_documents],
            "analysisType": data.analysis_type,
        },
        source_citations=[doc.name for doc in frameworks] + [doc.name for doc in company_documents],
    )
    return {**interaction_payload(interaction), "analysis": analysis}
