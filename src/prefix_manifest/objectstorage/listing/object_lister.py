"""Paginated prefix listing with resumption and empty-object filtering."""

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum
from functools import partial
from typing import Optional

from prefix_manifest.core import get_logger, get_tracer
from prefix_manifest.core.exceptions import ConfigurationError, TransientStoreError
from prefix_manifest.core.observability import is_debug_enabled
from prefix_manifest.manifest import ManifestBuilder, ObjectEntry
from prefix_manifest.objectstorage.listing.retry import RetryPolicy
from prefix_manifest.objectstorage.listing.token_codec import build_start_token
from prefix_manifest.objectstorage.store import (
    ListPage,
    ObjectStoreClient,
    StoreObject,
)

logger = get_logger(__name__)
tracer = get_tracer(__name__)


class ListingStatus(str, Enum):
    """Result kind of one listing run."""

    SUCCESS = "success"
    EMPTY_RESULT = "empty_result"
    FAILURE = "failure"


@dataclass(frozen=True)
class ListingOutcome:
    """Result of one listing run.

    A FAILURE still carries the entries gathered before the store gave up.
    """

    status: ListingStatus
    entries: tuple[ObjectEntry, ...] = field(default_factory=tuple)
    error: Optional[TransientStoreError] = None

    @classmethod
    def from_entries(cls, entries: tuple[ObjectEntry, ...]) -> "ListingOutcome":
        if entries:
            return cls(status=ListingStatus.SUCCESS, entries=entries)
        return cls(status=ListingStatus.EMPTY_RESULT)

    @classmethod
    def failure(
        cls, entries: tuple[ObjectEntry, ...], error: TransientStoreError
    ) -> "ListingOutcome":
        return cls(status=ListingStatus.FAILURE, entries=entries, error=error)


class ObjectLister:
    """Lists the objects under a prefix, one page at a time.

    Pages are fetched strictly in token order, each through the retry
    policy, so a failed fetch is retried without re-reading earlier pages.
    """

    def __init__(
        self, client: ObjectStoreClient, retry_policy: Optional[RetryPolicy] = None
    ):
        """Initialize object lister.

        Args:
            client: Authenticated store client
            retry_policy: Policy wrapping each page fetch
        """
        self.client = client
        self.retry_policy = retry_policy or RetryPolicy()

    def iter_pages(
        self, bucket: str, prefix: str = "", start_token: Optional[str] = None
    ) -> Iterator[ListPage]:
        """Yield listing pages, following the token chain until it ends.

        Raises:
            ConfigurationError: On a permanent store error
            TransientStoreError: When a page fetch exhausts its retries
        """
        token = start_token
        while True:
            page = self.retry_policy.execute(
                partial(self.client.list_page, bucket, prefix, token),
                context={"bucket": bucket, "prefix": prefix, "last_path": token or ""},
            )
            yield page
            if not page.next_token:
                return
            token = page.next_token

    def iter_objects(
        self, bucket: str, prefix: str = "", start_token: Optional[str] = None
    ) -> Iterator[StoreObject]:
        """Yield every object under the prefix as one stream."""
        for page in self.iter_pages(bucket, prefix, start_token):
            yield from page.objects

    def list_outcome(
        self,
        bucket: str,
        prefix: Optional[str] = None,
        last_path: Optional[str] = None,
        stop_when_empty: bool = False,
    ) -> ListingOutcome:
        """List objects with a positive size under a prefix.

        Args:
            bucket: Bucket name
            prefix: Path prefix, the whole bucket if None
            last_path: Resume listing after this path
            stop_when_empty: Fail if the listing holds no file, directory
                placeholders aside

        Returns:
            ListingOutcome; transient store failures are reported as a
            FAILURE outcome with the entries gathered so far

        Raises:
            ConfigurationError: If the resumption path cannot be encoded,
                the store rejects the request, or stop_when_empty is set
                and no file exists
        """
        prefix = prefix or ""
        start_token = build_start_token(last_path)

        with tracer.start_as_current_span("list_objects") as span:
            span.set_attribute("bucket", bucket)
            span.set_attribute("prefix", prefix)

            if is_debug_enabled(__name__):
                self._log_bucket_info(bucket)

            logger.info(
                "Listing objects",
                bucket=bucket,
                prefix=prefix,
                last_path=last_path,
                stop_when_empty=stop_when_empty,
            )

            entries: list[ObjectEntry] = []
            file_found = False
            try:
                for obj in self.iter_objects(bucket, prefix, start_token):
                    if not file_found and not obj.is_directory_marker:
                        file_found = True
                    if obj.size_bytes > 0:
                        entries.append(ObjectEntry(obj.path, obj.size_bytes))
                    else:
                        logger.debug("Skipping empty object", path=obj.path)
            except TransientStoreError as e:
                logger.warning(
                    "Could not get file list from bucket",
                    bucket=bucket,
                    prefix=prefix,
                    entry_count=len(entries),
                    error=str(e),
                )
                span.set_attribute("entry_count", len(entries))
                return ListingOutcome.failure(tuple(entries), e)

            if stop_when_empty and not file_found:
                raise ConfigurationError(
                    'No file is found. "stop_when_file_not_found" option is "true". '
                    f"bucket:{bucket}, prefix:{prefix}"
                )

            span.set_attribute("entry_count", len(entries))
            logger.info(
                "Objects listed", bucket=bucket, prefix=prefix, entry_count=len(entries)
            )
            return ListingOutcome.from_entries(tuple(entries))

    def list_files(
        self,
        bucket: str,
        prefix: Optional[str] = None,
        last_path: Optional[str] = None,
        stop_when_empty: bool = False,
        builder: Optional[ManifestBuilder] = None,
    ) -> ManifestBuilder:
        """List objects into a manifest builder.

        Transient failures never raise here: the builder receives whatever
        was listed before the store gave up.
        """
        builder = builder if builder is not None else ManifestBuilder()
        outcome = self.list_outcome(bucket, prefix, last_path, stop_when_empty)
        for entry in outcome.entries:
            builder.add(entry.path, entry.size_bytes)
        return builder

    def _log_bucket_info(self, bucket: str) -> None:
        try:
            info = self.client.describe_bucket(bucket)
        except Exception as e:
            logger.debug("Could not describe bucket", bucket=bucket, error=str(e))
            return
        logger.debug("Bucket info", **info)
