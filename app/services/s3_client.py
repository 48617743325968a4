"""
S3 client service for storing processed media and signing retrieval URLs.
"""

import logging
import os
from typing import BinaryIO, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from app.config import get_settings
from app.errors import StoreError

logger = logging.getLogger(__name__)


class S3Client:
    """
    Service for interacting with AWS S3 (or an S3-compatible store).

    Objects are written under caller-supplied keys; writing an existing key
    overwrites it. Failures surface as StoreError with no retry.
    """

    def __init__(
        self,
        bucket: Optional[str] = None,
        region: Optional[str] = None,
        access_key_id: Optional[str] = None,
        secret_access_key: Optional[str] = None,
        endpoint_url: Optional[str] = None,
    ):
        """
        Initialize S3 client.

        Args:
            bucket: S3 bucket name (defaults to settings)
            region: AWS region (defaults to settings)
            access_key_id: AWS access key (defaults to settings/env)
            secret_access_key: AWS secret key (defaults to settings/env)
            endpoint_url: Custom endpoint for S3-compatible stores
        """
        settings = get_settings()

        self.bucket = bucket or settings.s3_bucket
        self.region = region or settings.aws_region

        # Build client kwargs
        client_kwargs = {"region_name": self.region}

        endpoint_url = endpoint_url or settings.s3_endpoint_url
        if endpoint_url:
            client_kwargs["endpoint_url"] = endpoint_url

        if access_key_id and secret_access_key:
            client_kwargs["aws_access_key_id"] = access_key_id
            client_kwargs["aws_secret_access_key"] = secret_access_key
        elif settings.aws_access_key_id and settings.aws_secret_access_key:
            client_kwargs["aws_access_key_id"] = settings.aws_access_key_id
            client_kwargs["aws_secret_access_key"] = settings.aws_secret_access_key

        self._client = boto3.client("s3", **client_kwargs)
        logger.info(f"S3 client initialized for bucket: {self.bucket}")

    def upload_file(self, local_path: str, s3_key: str, content_type: str) -> str:
        """
        Upload a local file to S3 under ``s3_key``.

        Args:
            local_path: Local file path
            s3_key: S3 key to upload to
            content_type: Content type stored with the object

        Returns:
            S3 key where the file was uploaded

        Raises:
            StoreError: If the upload fails
        """
        logger.info(f"Uploading {local_path} to s3://{self.bucket}/{s3_key}")

        try:
            self._client.upload_file(
                local_path,
                self.bucket,
                s3_key,
                ExtraArgs={"ContentType": content_type},
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to upload to S3: {e}")
            raise StoreError(f"Failed to upload {s3_key}: {e}") from e

        file_size = os.path.getsize(local_path)
        logger.info(f"Uploaded {file_size / 1024 / 1024:.2f} MB to {s3_key}")
        return s3_key

    def upload_fileobj(self, fileobj: BinaryIO, s3_key: str, content_type: str) -> str:
        """
        Stream a file-like object to S3 under ``s3_key``.

        Raises:
            StoreError: If the upload fails
        """
        logger.info(f"Uploading stream to s3://{self.bucket}/{s3_key}")

        try:
            self._client.upload_fileobj(
                fileobj,
                self.bucket,
                s3_key,
                ExtraArgs={"ContentType": content_type},
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to upload to S3: {e}")
            raise StoreError(f"Failed to upload {s3_key}: {e}") from e

        return s3_key

    def delete_object(self, s3_key: str) -> None:
        """
        Delete an object. Deleting a missing key is not an error in S3.

        Raises:
            StoreError: If the delete request fails
        """
        logger.info(f"Deleting s3://{self.bucket}/{s3_key}")
        try:
            self._client.delete_object(Bucket=self.bucket, Key=s3_key)
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to delete from S3: {e}")
            raise StoreError(f"Failed to delete {s3_key}: {e}") from e

    def get_presigned_url(
        self,
        s3_key: str,
        expires_in: int = 3600,
        client_method: str = "get_object",
    ) -> str:
        """
        Generate a presigned URL for an object.

        Args:
            s3_key: S3 key
            expires_in: URL expiration time in seconds (default 1 hour)
            client_method: S3 operation the URL authorizes

        Returns:
            Presigned URL

        Raises:
            StoreError: If signing fails
        """
        logger.debug(f"Generating presigned URL for {s3_key}")
        try:
            return self._client.generate_presigned_url(
                client_method,
                Params={"Bucket": self.bucket, "Key": s3_key},
                ExpiresIn=expires_in,
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to presign {s3_key}: {e}")
            raise StoreError(f"Failed to sign {s3_key}: {e}") from e
