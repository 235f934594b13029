from fastapi import APIRouter, BackgroundTasks, Depends, File, Form, UploadFile, HTTPException
from sqlalchemy.orm import Session
from app.db.database import SessionLocal, get_db
from app.services.document_processor import DocumentProcessor
from app.api.filters import parse_filter
from app.models.ai_interaction import AIInteraction
from app.models.document import Document, DocumentType, ProcessingStatus
from app.core.config import settings
from app.core.errors import APIError
from app.core.permissions import can_access_document, can_delete_document, can_view_all_documents
from app.api.auth import get_current_user, require_permission
from app.models.user import User
from app.schemas.document import (
    DocumentCreate,
    DocumentListResponse,
    DocumentResponse,
    DocumentUpdate,
    DocumentWithOwner,
    DownloadResponse,
    ProcessDocumentRequest,
)
from app.schemas.user import MessageResponse
from typing import Optional
import logging
from sqlalchemy import func, or_, String
from storage.storage import StorageError, StorageProvider, get_storage_provider

logger = logging.getLogger(__name__)
router = APIRouter()
document_processor = DocumentProcessor(SessionLocal)


def get_document_processor() -> DocumentProcessor:
    return document_processor


def load_document(db: Session, document_id: str, user: User) -> Document:
    """Fetch a document the user may see; 404 when missing, 403 when not theirs."""
    document = db.get(Document, document_id)
    if not document:
        raise HTTPException(status_code=404, detail="Document not found")
    if not can_access_document(user, document):
        raise HTTPException(status_code=403, detail="Access denied")
    return document


def escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def document_response(document: Document) -> dict:
    return {"document": DocumentWithOwner.model_validate(document)}


@router.get("", response_model=DocumentListResponse)
async def get_documents(
    type: Optional[str] = "all",
    jurisdiction: Optional[str] = None,
    search: Optional[str] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission("read:documents"))
):
    type_filter = parse_filter(type, DocumentType, "document type")

    query = db.query(Document)
    # Admins and managers see every document, everyone else only their own uploads
    if not can_view_all_documents(current_user):
        query = query.filter(Document.uploaded_by_id == current_user.id)
    if type_filter:
        query = query.filter(Document.type == type_filter)
    if jurisdiction and jurisdiction != "all":
        query = query.filter(Document.jurisdiction == jurisdiction)
    if search:
        pattern = f"%{escape_like(search.lower())}%"
        query = query.filter(
            or_(
                func.lower(Document.name).like(pattern, escape="\\"),
                func.lower(Document.tags.cast(String)).like(pattern, escape="\\"),
            )
        )

    documents = query.order_by(Document.upload_date.desc()).all()
    return {"documents": [DocumentWithOwner.model_validate(doc) for doc in documents]}


@router.post("", response_model=DocumentResponse)
async def create_document(
    data: DocumentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission("upload:documents"))
):
    document = Document(
        name=data.name,
        type=data.type,
        jurisdiction=data.jurisdiction,
        tags=data.tags or [],
        uploaded_by_id=current_user.id,
        processing_status=ProcessingStatus.PENDING,
        file_url=None,
        file_size=data.file_size or 0,
        content_type=data.content_type or "application/pdf",
    )
    db.add(document)
    db.commit()
    db.refresh(document)
    logger.info(f"Document {document.id} created by {current_user.id}")
    return document_response(document)


@router.post("/upload", response_model=DocumentResponse)
async def upload_document(
    file: UploadFile = File(...),
    type: DocumentType = Form(...),
    name: Optional[str] = Form(None),
    jurisdiction: Optional[str] = Form(None),
    tags: Optional[str] = Form(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission("upload:documents")),
    storage: StorageProvider = Depends(get_storage_provider)
):
    content_type = file.content_type or storage.guess_content_type(file.filename or "")
    if content_type not in settings.ALLOWED_CONTENT_TYPES:
        raise HTTPException(status_code=400, detail=f"File type not supported: {content_type}")

    file_content = await file.read()
    if len(file_content) > settings.MAX_UPLOAD_SIZE:
        raise APIError(413, f"File exceeds the maximum size of {settings.MAX_UPLOAD_SIZE} bytes")
    if not file_content:
        raise HTTPException(status_code=400, detail="Uploaded file is empty")

    filename = file.filename or "document"
    try:
        file_path = await storage.upload_file(file_content, filename, content_type)
    except StorageError as e:
        logger.error(f"Upload error: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to store file")

    document = Document(
        name=name or filename,
        type=type,
        jurisdiction=jurisdiction,
        tags=[tag.strip() for tag in tags.split(",") if tag.strip()] if tags else [],
        uploaded_by_id=current_user.id,
        processing_status=ProcessingStatus.PENDING,
        file_url=file_path,
        file_size=len(file_content),
        content_type=content_type,
    )
    db.add(document)
    db.commit()
    db.refresh(document)
    logger.info(f"Document {document.id} uploaded by {current_user.id} ({len(file_content)} bytes)")
    return document_response(document)


@router.post("/process", response_model=MessageResponse)
async def process_document(
    data: ProcessDocumentRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    processor: DocumentProcessor = Depends(get_document_processor)
):
    document = load_document(db, data.document_id, current_user)
    processor.start_processing(db, document)
    background_tasks.add_task(processor.complete_processing, document.id)
    return {"message": "Document processing started"}


@router.get("/{document_id}", response_model=DocumentResponse)
async def get_document(
    document_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return document_response(load_document(db, document_id, current_user))


@router.patch("/{document_id}", response_model=DocumentResponse)
async def update_document(
    document_id: str,
    data: DocumentUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    document = load_document(db, document_id, current_user)

    if data.name is not None:
        document.name = data.name
    if data.tags is not None:
        document.tags = data.tags
    if data.jurisdiction is not None:
        document.jurisdiction = data.jurisdiction

    db.commit()
    db.refresh(document)
    return document_response(document)


@router.delete("/{document_id}", response_model=MessageResponse)
async def delete_document(
    document_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    storage: StorageProvider = Depends(get_storage_provider)
):
    document = db.get(Document, document_id)
    if not document:
        raise HTTPException(status_code=404, detail="Document not found")
    if not can_delete_document(current_user, document):
        raise HTTPException(status_code=403, detail="Access denied")

    if document.file_url:
        success = await storage.delete_file(document.file_url)
        if not success:
            raise HTTPException(status_code=500, detail="Failed to delete file from storage")

    db.query(AIInteraction).filter(AIInteraction.document_id == document.id).update(
        {AIInteraction.document_id: None}, synchronize_session=False
    )
    db.delete(document)
    db.commit()
    logger.info(f"Document {document_id} deleted by {current_user.id}")

    return {"message": "Document successfully deleted"}


@router.get("/{document_id}/download", response_model=DownloadResponse)
async def download_document(
    document_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    storage: StorageProvider = Depends(get_storage_provider)
):
    document = load_document(db, document_id, current_user)
    if not document.file_url:
        raise HTTPException(status_code=404, detail="Document has no stored file")

    try:
        url = await storage.get_file_url(document.file_url)
    except StorageError:
        raise HTTPException(status_code=500, detail="Error accessing file")
    return {"url": url, "expires_in": settings.PRESIGNED_URL_EXPIRES_IN}


@router.post("/{document_id}/process", response_model=MessageResponse)
async def process_document_by_id(
    document_id: str,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    processor: DocumentProcessor = Depends(get_document_processor)
):
    document = load_document(db, document_id, current_user)
    processor.start_processing(db, document)
    background_tasks.add_task(processor.complete_processing, document.id)
    return {"message": "Document processing started"}
