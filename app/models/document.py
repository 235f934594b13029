import enum
import uuid
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, JSON, Enum
from sqlalchemy.orm import relationship
from datetime import datetime, timezone
from app.db.database import Base

class DocumentType(str, enum.Enum):
    REGULATION = "regulation"
    CONTRACT = "contract"
    POLICY = "policy"
    CONTROL = "control"
    DISCLOSURE = "disclosure"

class ProcessingStatus(str, enum.Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"

class Document(Base):
    __tablename__ = "documents"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String, nullable=False)
    type = Column(
        Enum(DocumentType, name="documenttype", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        index=True,
    )
    jurisdiction = Column(String, nullable=True)
    tags = Column(JSON, nullable=False, default=list)
    uploaded_by_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    upload_date = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    processing_status = Column(
        Enum(ProcessingStatus, name="processingstatus", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=ProcessingStatus.PENDING,
    )
    file_url = Column(String, nullable=True)
    file_size = Column(Integer, nullable=False, default=0)
    content_type = Column(String, nullable=False, default="application/pdf")

    uploaded_by = relationship("User", back_populates="documents")
