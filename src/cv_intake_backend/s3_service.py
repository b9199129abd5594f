"""
S3 service module for storing normalized uploads.

This module provides functionality for:
- Uploading a local file to an S3-compatible bucket (e.g. DigitalOcean Spaces)
  with public-read visibility
- Building the public URL of the stored object from the configured endpoint,
  bucket and key

The endpoint, region, credentials and bucket name are configured via the
DO_SPACES_* environment variables. Any failure, whether opening the file or
talking to the backend, is reported as a single StoreError.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from .configuration import StorageConfig
from .exceptions import StoreError
from .models import StoredArtifact

logger = logging.getLogger(__name__)


class BaseUploader(ABC):
    """Contract for object storage adapters."""

    @abstractmethod
    def upload(self, path: Path) -> StoredArtifact:
        """Persist a local file and return where it can be fetched from.

        Raises:
            StoreError: if the file cannot be read or the backend rejects it.
        """


class S3Uploader(BaseUploader):
    """
    Stores files in a single bucket, keyed by their base name.

    Args:
        client: boto3 S3 client
        endpoint: Public endpoint URL used to build object URLs
        bucket: Target bucket name
        acl: Canned ACL applied to every object (default: public-read)
    """

    def __init__(self, client: Any, endpoint: str, bucket: str, acl: str = "public-read") -> None:
        self._client = client
        self.endpoint = endpoint.rstrip("/")
        self.bucket = bucket
        self.acl = acl

    @classmethod
    def from_config(cls, storage: StorageConfig) -> "S3Uploader":
        """
        Create an uploader with a static-credential client for the configured endpoint.

        Note:
            Credentials are not tested here; errors surface on the first upload.
        """
        client = boto3.client(
            "s3",
            region_name=storage.region or None,
            endpoint_url=storage.endpoint or None,
            aws_access_key_id=storage.access_key or None,
            aws_secret_access_key=storage.secret_key or None,
        )
        return cls(client, endpoint=storage.endpoint, bucket=storage.bucket, acl=storage.acl)

    def object_url(self, key: str) -> str:
        return f"{self.endpoint}/{self.bucket}/{key}"

    def upload(self, path: Path) -> StoredArtifact:
        key = path.name
        try:
            with path.open("rb") as body:
                logger.info(f"Uploading {path} to s3://{self.bucket}/{key}")
                self._client.put_object(Bucket=self.bucket, Key=key, Body=body, ACL=self.acl)
        except OSError as e:
            logger.error(f"Could not open {path} for upload: {e}")
            raise StoreError(f"Could not open {path}: {e}") from e
        except (ClientError, BotoCoreError) as e:
            logger.error(f"S3 upload failed: {e}")
            raise StoreError(f"S3 upload failed: {e}") from e

        logger.info(f"Upload successful: s3://{self.bucket}/{key}")
        return StoredArtifact(key=key, url=self.object_url(key))
