"""S3 client configuration and the S3 listing adapter.

This module provides S3 client configuration and management functionality
with support for multiple authentication methods and S3-compatible services,
plus ``S3ObjectStoreClient``, which exposes a boto3 client through the
single-page listing contract the listing engine drives.

Authentication Methods Supported:
    1. Explicit credentials (access_key_id, secret_access_key)
    2. AWS CLI profiles (aws_profile)
    3. IAM roles / environment variables (no explicit credentials)
    4. Temporary credentials (session_token)

S3-Compatible Services:
    Supports custom endpoints for services like MinIO or the GCS
    interoperability endpoint via endpoint_url.
"""

from typing import Any, Dict, Optional
from urllib.parse import urlparse

import boto3
from pydantic import BaseModel, ConfigDict, Field

from prefix_manifest.core import get_logger
from prefix_manifest.core.exceptions import InvalidTokenError, ValidationError
from prefix_manifest.objectstorage.listing.token_codec import decode_resumption_token
from prefix_manifest.objectstorage.store import (
    ListPage,
    StoreObject,
    is_directory_placeholder,
)

logger = get_logger(__name__)


class S3ClientConfig(BaseModel):
    """Configuration for S3 client connections.

    Authentication Priority:
        1. If aws_profile is provided, use profile-based authentication
        2. If explicit credentials are provided, use them
        3. Otherwise, fall back to default AWS credential chain

    Example:
        # AWS profile
        config = S3ClientConfig(aws_profile="my-profile")

        # MinIO endpoint
        config = S3ClientConfig(
            endpoint_url="http://localhost:9000",
            access_key_id="minioadmin",
            secret_access_key="minioadmin"
        )
    """

    model_config = ConfigDict(extra="forbid")

    access_key_id: Optional[str] = Field(None, description="AWS access key ID")
    secret_access_key: Optional[str] = Field(None, description="AWS secret access key")
    session_token: Optional[str] = Field(
        None, description="AWS session token for temporary credentials"
    )
    region_name: str = Field("us-east-1", description="AWS region name")
    endpoint_url: Optional[str] = Field(
        None, description="Custom S3 endpoint URL for S3-compatible services"
    )
    aws_profile: Optional[str] = Field(
        None, description="AWS CLI profile name to use for credentials"
    )


class S3ClientManager:
    """Manages S3 client connections and provides utility methods."""

    def __init__(self, config: S3ClientConfig):
        """Initialize S3 client manager.

        Args:
            config: S3 client configuration
        """
        self.config = config
        self._client = None
        logger.info("S3 client manager initialized", region=config.region_name)

    @property
    def client(self):
        """Get or create S3 client instance."""
        if self._client is None:
            self._client = self._create_client()
        return self._client

    def _create_client(self):
        """Create boto3 S3 client with the configured settings."""
        kwargs: Dict[str, Any] = {
            "region_name": self.config.region_name,
        }

        if self.config.endpoint_url:
            kwargs["endpoint_url"] = self.config.endpoint_url

        if self.config.aws_profile:
            session = boto3.Session(profile_name=self.config.aws_profile)
            client = session.client("s3", **kwargs)  # type: ignore
            logger.info(
                "S3 client created with profile", profile=self.config.aws_profile
            )
        else:
            if self.config.access_key_id and self.config.secret_access_key:
                kwargs.update(
                    {
                        "aws_access_key_id": self.config.access_key_id,
                        "aws_secret_access_key": self.config.secret_access_key,
                    }
                )
                if self.config.session_token:
                    kwargs["aws_session_token"] = self.config.session_token
                logger.info("S3 client created with explicit credentials")
            else:
                logger.info("S3 client created with default credential chain")

            client = boto3.client("s3", **kwargs)  # type: ignore

        return client

    def store_client(self) -> "S3ObjectStoreClient":
        """Wrap the managed boto3 client for the listing engine."""
        return S3ObjectStoreClient(self.client)

    @staticmethod
    def parse_s3_path(s3_path: str) -> tuple[str, str]:
        """Parse S3 path into bucket and prefix components.

        Args:
            s3_path: S3 path in format s3://bucket/prefix or s3://bucket

        Returns:
            Tuple of (bucket_name, prefix)

        Raises:
            ValidationError: If path format is invalid
        """
        if not s3_path.startswith("s3://"):
            raise ValidationError(f"S3 path must start with 's3://': {s3_path}")

        parsed = urlparse(s3_path)
        bucket = parsed.netloc
        prefix = parsed.path.lstrip("/")

        if not bucket:
            raise ValidationError(f"Invalid S3 path, missing bucket: {s3_path}")

        logger.debug("S3 path parsed", bucket=bucket, prefix=prefix)
        return bucket, prefix


class S3ObjectStoreClient:
    """Single-page listing over a boto3 S3 client.

    Pagination is left to the caller: each call issues exactly one
    ``list_objects_v2`` request so that every page fetch can be retried on
    its own. boto3 errors propagate unchanged for classification upstream.

    A resumption token is sent as ``StartAfter`` with the path it encodes;
    any other token is an S3 continuation token from a previous page.
    """

    def __init__(self, client, page_size: Optional[int] = None):
        self.client = client
        self.page_size = page_size

    def list_page(
        self, bucket: str, prefix: str, token: Optional[str] = None
    ) -> ListPage:
        kwargs: Dict[str, Any] = {"Bucket": bucket, "Prefix": prefix}
        if token:
            try:
                kwargs["StartAfter"] = decode_resumption_token(token)
            except InvalidTokenError:
                kwargs["ContinuationToken"] = token
        if self.page_size:
            kwargs["MaxKeys"] = self.page_size

        response = self.client.list_objects_v2(**kwargs)

        objects = tuple(
            StoreObject(
                path=obj["Key"],
                size_bytes=obj.get("Size", 0),
                is_directory_marker=is_directory_placeholder(obj["Key"]),
            )
            for obj in response.get("Contents", [])
        )
        next_token = None
        if response.get("IsTruncated"):
            next_token = response.get("NextContinuationToken")

        logger.debug(
            "S3 page listed",
            bucket=bucket,
            prefix=prefix,
            object_count=len(objects),
            has_next=next_token is not None,
        )
        return ListPage(objects=objects, next_token=next_token)

    def describe_bucket(self, bucket: str) -> dict[str, Any]:
        response = self.client.get_bucket_location(Bucket=bucket)
        return {
            "name": bucket,
            "location": response.get("LocationConstraint") or "us-east-1",
        }

    def object_size(self, bucket: str, path: str) -> int:
        response = self.client.head_object(Bucket=bucket, Key=path)
        return int(response["ContentLength"])
