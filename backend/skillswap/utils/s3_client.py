"""
AWS S3 client for profile picture and skill media uploads
"""

import uuid
from typing import Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from fastapi import UploadFile

from ..config import settings
from ..core.exceptions import StorageError, UploadTooLargeError, ValidationError
from ..core.logging import get_logger

logger = get_logger(__name__)


class S3Client:
    def __init__(self, client=None, bucket_name: Optional[str] = None, base_url: Optional[str] = None):
        """
        Wrap a boto3 S3 client.

        ``client`` defaults to one built from the AWS settings; bucket and
        public base URL default to the configured values.
        """
        self.bucket_name = bucket_name or settings.s3_bucket_name
        self.region = settings.aws_region
        if client is None:
            client = boto3.client(
                's3',
                aws_access_key_id=settings.aws_access_key_id,
                aws_secret_access_key=settings.aws_secret_access_key,
                region_name=self.region,
            )
        self.s3_client = client
        self.base_url = (
            base_url
            or settings.s3_base_url
            or f"https://{self.bucket_name}.s3.{self.region}.amazonaws.com"
        ).rstrip("/")

    async def upload_file(
        self,
        file: UploadFile,
        folder: str = "uploads",
        custom_filename: Optional[str] = None,
    ) -> str:
        """
        Upload ``file`` under ``folder`` and return its public URL.

        Raises UploadTooLargeError above ``max_upload_size`` and
        ValidationError for extensions outside ``allowed_image_extensions``.
        """
        try:
            content = await file.read()
            if len(content) > settings.max_upload_size:
                raise UploadTooLargeError(
                    f"File size {len(content)} exceeds maximum allowed size {settings.max_upload_size}"
                )

            file_extension = self._get_file_extension(file.filename)
            allowed_exts = settings.get_allowed_image_extensions()
            if file_extension.lstrip('.') not in allowed_exts:
                raise ValidationError(
                    f"File type {file_extension or '(none)'} not allowed. "
                    f"Allowed types: {', '.join(sorted(allowed_exts))}"
                )

            filename = f"{custom_filename or uuid.uuid4().hex}{file_extension}"
            s3_key = f"{folder.strip('/')}/{filename}"
            object_args = dict(
                Bucket=self.bucket_name,
                Key=s3_key,
                Body=content,
                ContentType=file.content_type or "application/octet-stream",
                ContentDisposition="inline",
            )

            # Buckets with ACLs disabled reject public-read; those rely on a bucket policy
            try:
                self.s3_client.put_object(ACL='public-read', **object_args)
            except ClientError as acl_error:
                logger.warning(f"Failed to upload with ACL, retrying without: {acl_error}")
                self.s3_client.put_object(**object_args)

            s3_url = f"{self.base_url}/{s3_key}"
            logger.debug(f"Uploaded {file.filename} to {s3_url}")
            return s3_url

        except (ClientError, BotoCoreError) as e:
            logger.error(f"S3 upload error: {e}")
            raise StorageError("Failed to upload file")
        finally:
            await file.seek(0)

    @staticmethod
    def _get_file_extension(filename: Optional[str]) -> str:
        if not filename or '.' not in filename:
            return ""
        return f".{filename.rsplit('.', 1)[-1].lower()}"


_s3_client_instance: Optional[S3Client] = None


def get_s3_client() -> S3Client:
    """Get or create the S3 client (lazy initialization)"""
    global _s3_client_instance
    if _s3_client_instance is None:
        if not settings.s3_bucket_name:
            raise StorageError("File storage is not configured")
        _s3_client_instance = S3Client()
        logger.info(f"S3 storage initialized for bucket {settings.s3_bucket_name}")
    return _s3_client_instance
