import asyncio
import logging
from typing import Callable
from sqlalchemy.orm import Session
from app.core.config import settings
from app.models.document import Document, ProcessingStatus

logger = logging.getLogger(__name__)


class DocumentProcessor:
    """Drives the processing lifecycle of uploaded documents.

    Processing is simulated: a document moves to ``processing`` when requested
    and to ``completed`` once the configured delay has elapsed.
    """

    def __init__(self, session_factory: Callable[[], Session], delay_seconds: float | None = None):
        self.session_factory = session_factory
        self.delay_seconds = (
            settings.DOCUMENT_PROCESSING_DELAY_SECONDS if delay_seconds is None else delay_seconds
        )

    def start_processing(self, db: Session, document: Document) -> Document:
        document.processing_status = ProcessingStatus.PROCESSING
        db.commit()
        db.refresh(document)
        logger.info(f"Document {document.id} processing started")
        return document

    async def complete_processing(self, document_id: str) -> None:
        if self.delay_seconds > 0:
            await asyncio.sleep(self.delay_seconds)

        db = self.session_factory()
        try:
            document = db.get(Document, document_id)
            if document is None:
                logger.warning(f"Document {document_id} was deleted before processing completed")
                return
            # Only advance documents still waiting on this run
            if document.processing_status != ProcessingStatus.PROCESSING:
                logger.info(
                    f"Document {document_id} is {document.processing_status.value}, skipping completion"
                )
                return
            document.processing_status = ProcessingStatus.COMPLETED
            db.commit()
            logger.info(f"Document {document_id} processing completed")
        except Exception as e:
            db.rollback()
            logger.error(f"Error completing processing for document {document_id}: {str(e)}")
            raise
        finally:
            db.close()

    def recover_interrupted(self) -> int:
        """Reset documents left in ``processing`` by a previous run back to ``pending``."""
        db = self.session_factory()
        try:
            count = (
                db.query(Document)
                .filter(Document.processing_status == ProcessingStatus.PROCESSING)
                .update({Document.processing_status: ProcessingStatus.PENDING}, synchronize_session=False)
            )
            db.commit()
            if count:
                logger.warning(f"Reset {count} interrupted document(s) to pending")
            return count
        finally:
            db.close()
