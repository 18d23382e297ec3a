"""Object storage listing for S3-compatible services."""

from .clients import S3ClientConfig, S3ClientManager, S3ObjectStoreClient
from .listing import (
    ListingOutcome,
    ListingStatus,
    ObjectLister,
    RetryPolicy,
    encode_resumption_token,
)
from .store import ListPage, ObjectStoreClient, StoreObject

__all__ = [
    "ListPage",
    "ListingOutcome",
    "ListingStatus",
    "ObjectLister",
    "ObjectStoreClient",
    "RetryPolicy",
    "S3ClientConfig",
    "S3ClientManager",
    "S3ObjectStoreClient",
    "StoreObject",
    "encode_resumption_token",
]
