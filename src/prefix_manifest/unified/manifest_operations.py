"""Manifest operations that tie configuration, listing and partitioning together."""

from functools import partial
from typing import Any, Optional

from prefix_manifest.core import get_logger
from prefix_manifest.core.exceptions import TransientStoreError
from prefix_manifest.manifest import Manifest, ManifestBuilder
from prefix_manifest.objectstorage.listing import ObjectLister, RetryPolicy
from prefix_manifest.objectstorage.store import ObjectStoreClient
from prefix_manifest.schemas import ListingConfig

logger = get_logger(__name__)


def new_builder(config: ListingConfig) -> ManifestBuilder:
    """Create a manifest builder with the configured partitioning bounds."""
    return ManifestBuilder(
        min_partition_size=config.min_task_size,
        max_partitions=config.max_task_count,
        path_match_pattern=config.path_match_pattern,
        total_file_count_limit=config.total_file_count_limit,
    )


def build_manifest(
    client: ObjectStoreClient,
    config: ListingConfig,
    retry_policy: Optional[RetryPolicy] = None,
) -> Manifest:
    """
    Build the manifest for one run.

    Explicit ``paths`` are used as given, in order, with their sizes looked
    up on the store. Otherwise the bucket is listed under ``path_prefix``,
    resuming after ``last_path``.

    Args:
        client: Authenticated store client
        config: Listing configuration
        retry_policy: Policy for store calls

    Returns:
        Finalized manifest

    Raises:
        ConfigurationError: If the listing cannot proceed with this
            configuration
    """
    retry_policy = retry_policy or RetryPolicy()
    builder = new_builder(config)

    if config.paths:
        logger.info(
            "Building manifest from explicit paths",
            bucket=config.bucket,
            path_count=len(config.paths),
        )
        for path in config.paths:
            try:
                size = retry_policy.execute(
                    partial(client.object_size, config.bucket, path),
                    context={"bucket": config.bucket, "path": path},
                )
            except TransientStoreError as e:
                logger.warning(
                    "Could not get file size",
                    bucket=config.bucket,
                    path=path,
                    error=str(e),
                )
                continue
            if size > 0:
                builder.add(path, size)
            else:
                logger.debug("Skipping empty object", path=path)
        return builder.build()

    lister = ObjectLister(client, retry_policy)
    lister.list_files(
        bucket=config.bucket,
        prefix=config.path_prefix,
        last_path=config.last_path,
        stop_when_empty=config.stop_when_file_not_found,
        builder=builder,
    )
    return builder.build()


def next_config_diff(config: ListingConfig, manifest: Manifest) -> dict[str, Any]:
    """
    Return the configuration changes for the next incremental run.

    The next run resumes after the last path of this manifest, or after the
    previous resumption point when nothing new was listed.
    """
    if not config.incremental:
        return {}
    return {"last_path": manifest.next_last_path(config.last_path)}
