from datetime import datetime
from typing import Optional
from pydantic import Field
from app.models.document import DocumentType, ProcessingStatus
from app.schemas.base import CamelModel
from app.schemas.user import UserSummary


class DocumentCreate(CamelModel):
    name: str = Field(min_length=1)
    type: DocumentType
    jurisdiction: Optional[str] = None
    tags: Optional[list[str]] = None
    file_size: Optional[int] = Field(default=None, gt=0)
    content_type: Optional[str] = None


class DocumentUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1)
    tags: Optional[list[str]] = None
    jurisdiction: Optional[str] = None


class ProcessDocumentRequest(CamelModel):
    document_id: str = Field(min_length=1)


class Document(CamelModel):
    id: str
    name: str
    type: DocumentType
    jurisdiction: Optional[str] = None
    tags: list[str] = []
    uploaded_by_id: str
    upload_date: datetime
    processing_status: ProcessingStatus
    file_url: Optional[str] = None
    file_size: int
    content_type: str


class DocumentWithOwner(Document):
    uploaded_by: Optional[UserSummary] = None


class DocumentResponse(CamelModel):
    success: bool = True
    document: DocumentWithOwner


class DocumentListResponse(CamelModel):
    success: bool = True
    documents: list[DocumentWithOwner]


class DownloadResponse(CamelModel):
    success: bool = True
    url: str
    expires_in: int
