"""S3 service for uploaded study material."""

import boto3
from botocore.exceptions import ClientError

from eduassist.config import get_settings

settings = get_settings()


class StorageError(Exception):
    """An S3 operation failed."""


class S3Service:
    """Service for storing and retrieving uploaded files in S3."""

    def __init__(self):
        """Initialize S3 client with credentials from settings."""
        client_kwargs = {
            "aws_access_key_id": settings.aws_access_key_id,
            "aws_secret_access_key": settings.aws_secret_access_key,
            "region_name": settings.aws_s3_region,
        }
        # Support MinIO / LocalStack by pointing to a custom endpoint
        if settings.aws_s3_endpoint_url:
            client_kwargs["endpoint_url"] = settings.aws_s3_endpoint_url

        self.s3_client = boto3.client("s3", **client_kwargs)
        self.bucket = settings.aws_s3_bucket

    @staticmethod
    def build_key(user_id, unique_id, file_name: str) -> str:
        """Object key for a user's upload. ``file_name`` is reduced to its basename."""
        safe_name = file_name.replace("\\", "/").rsplit("/", 1)[-1] or "upload"
        return f"users/{user_id}/uploads/{unique_id}_{safe_name}"

    async def upload_file(self, file_key: str, file_data: bytes, content_type: str) -> None:
        """
        Upload a file to S3 (server-side upload).

        Raises:
            StorageError: If S3 operation fails
        """
        try:
            self.s3_client.put_object(
                Bucket=self.bucket,
                Key=file_key,
                Body=file_data,
                ContentType=content_type,
            )
        except ClientError as e:
            raise StorageError(f"Failed to upload file to S3: {str(e)}") from e

    async def delete_file(self, file_key: str) -> None:
        """
        Delete a file from S3.

        Raises:
            StorageError: If S3 operation fails
        """
        try:
            self.s3_client.delete_object(Bucket=self.bucket, Key=file_key)
        except ClientError as e:
            raise StorageError(f"Failed to delete file from S3: {str(e)}") from e


# Singleton instance
s3_service = S3Service()
