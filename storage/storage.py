from abc import ABC, abstractmethod
from functools import lru_cache
import boto3
from botocore.exceptions import ClientError
from app.core.config import settings
import logging
import uuid
from botocore.config import Config

logger = logging.getLogger(__name__)

class StorageError(Exception):
    pass

class StorageProvider(ABC):
    @abstractmethod
    async def upload_file(self, file_data: bytes, filename: str, content_type: str | None = None) -> str:
        """Store the bytes and return the object key used to reference them."""

    @abstractmethod
    async def get_file_url(self, file_path: str) -> str:
        pass

    @abstractmethod
    async def delete_file(self, file_path: str) -> bool:
        pass

    @staticmethod
    def build_key(filename: str) -> str:
        return f"documents/{uuid.uuid4()}/{filename}"

    @staticmethod
    def guess_content_type(filename: str) -> str:
        ext = filename.rsplit('.', 1)[-1].lower() if '.' in filename else ''
        content_types = {
            'pdf': 'application/pdf',
            'doc': 'application/msword',
            'docx': 'application/vnd.openxmlformats-officedocument.wordprocessingml.document',
            'txt': 'text/plain',
            'md': 'text/markdown',
            'json': 'application/json',
        }
        return content_types.get(ext, 'application/octet-stream')

class S3StorageProvider(StorageProvider):
    def __init__(self):
        self.s3 = boto3.client(
            's3',
            aws_access_key_id=settings.AWS_ACCESS_KEY_ID,
            aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
            region_name=settings.AWS_REGION,
            config=Config(
                region_name=settings.AWS_REGION,
                signature_version='s3v4'
            )
        )
        self.bucket = settings.AWS_BUCKET_NAME

    async def upload_file(self, file_data: bytes, filename: str, content_type: str | None = None) -> str:
        file_path = self.build_key(filename)
        try:
            self.s3.put_object(
                Bucket=self.bucket,
                Key=file_path,
                Body=file_data,
                ContentType=content_type or self.guess_content_type(filename),
                Metadata={"original-name": filename},
            )
            return file_path
        except ClientError as e:
            logger.error(f"Error uploading file to S3: {str(e)}")
            raise StorageError(f"Failed to upload file: {str(e)}") from e

    async def get_file_url(self, file_path: str) -> str:
        try:
            return self.s3.generate_presigned_url(
                'get_object',
                Params={
                    'Bucket': self.bucket,
                    'Key': file_path,
                },
                ExpiresIn=settings.PRESIGNED_URL_EXPIRES_IN,
            )
        except ClientError as e:
            logger.error(f"Error generating presigned URL: {str(e)}")
            raise StorageError(f"Failed to generate file URL: {str(e)}") from e

    async def delete_file(self, file_path: str) -> bool:
        try:
            self.s3.delete_object(Bucket=self.bucket, Key=file_path)
            return True
        except ClientError as e:
            logger.error(f"Error deleting file from S3: {str(e)}")
            return False

class InMemoryStorageProvider(StorageProvider):
    """Keeps objects in process memory; used in development and tests."""

    def __init__(self):
        self.files: dict[str, tuple[bytes, str]] = {}

    async def upload_file(self, file_data: bytes, filename: str, content_type: str | None = None) -> str:
        file_path = self.build_key(filename)
        self.files[file_path] = (file_data, content_type or self.guess_content_type(filename))
        return file_path

    async def get_file_url(self, file_path: str) -> str:
        if file_path not in self.files:
            raise StorageError(f"File not found: {file_path}")
        return f"memory://{file_path}"

    async def delete_file(self, file_path: str) -> bool:
        # Missing keys count as deleted, matching S3 delete_object
        if self.files.pop(file_path, None) is None:
            logger.warning(f"File already absent from memory storage: {file_path}")
        return True

@lru_cache
def get_storage_provider() -> StorageProvider:
    if settings.STORAGE_PROVIDER.upper() == "S3":
        if settings.AWS_BUCKET_NAME:
            return S3StorageProvider()
        logger.warning("S3 storage selected but AWS_BUCKET_NAME is not set, using in-memory storage")
    return InMemoryStorageProvider()
