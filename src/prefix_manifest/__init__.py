"""Incremental object listing and partitioned manifests.

This package lists the objects under a prefix in an S3-compatible object
store and turns them into a manifest: an ordered list of files split into
contiguous partitions, one per parallel reader. Listings can resume after
the last path seen by a previous run.

Key Features:
    - Resumable prefix listing through encoded page tokens
    - Retry with backoff for transient store errors
    - Greedy size-based partitioning into tasks
    - CLI interface

Recommended Usage:
    >>> from prefix_manifest import ListingConfig, S3ClientConfig, S3ClientManager
    >>> from prefix_manifest import build_manifest
    >>> client = S3ClientManager(S3ClientConfig(aws_profile="prod")).store_client()
    >>> config = ListingConfig(bucket="logs", path_prefix="2024/", min_task_size=2**20)
    >>> manifest = build_manifest(client, config)
    >>> manifest.partition_paths(0)
"""

__version__ = "0.1.0"

from .core.exceptions import (
    ConfigurationError,
    InvalidTokenError,
    PathTooLongError,
    PrefixManifestError,
    TransientStoreError,
    ValidationError,
)
from .manifest import Manifest, ManifestBuilder, ObjectEntry, Partition
from .objectstorage import (
    ListingOutcome,
    ListingStatus,
    ObjectLister,
    ObjectStoreClient,
    RetryPolicy,
    S3ClientConfig,
    S3ClientManager,
    S3ObjectStoreClient,
    encode_resumption_token,
)
from .schemas import ListingConfig
from .unified import build_manifest, next_config_diff

__all__ = [
    # Errors
    "ConfigurationError",
    "InvalidTokenError",
    "PathTooLongError",
    "PrefixManifestError",
    "TransientStoreError",
    "ValidationError",
    # Manifest
    "Manifest",
    "ManifestBuilder",
    "ObjectEntry",
    "Partition",
    # Listing
    "ListingOutcome",
    "ListingStatus",
    "ObjectLister",
    "ObjectStoreClient",
    "RetryPolicy",
    "encode_resumption_token",
    # S3
    "S3ClientConfig",
    "S3ClientManager",
    "S3ObjectStoreClient",
    # Run-level operations
    "ListingConfig",
    "build_manifest",
    "next_config_diff",
]
