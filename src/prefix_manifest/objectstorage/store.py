"""Store client contract used by the listing engine."""

from dataclasses import dataclass, field
from typing import Any, Optional, Protocol

DIRECTORY_SEPARATOR = "/"


@dataclass(frozen=True)
class StoreObject:
    """A single object as reported by one listing page.

    Attributes:
        path: Object key within the bucket
        size_bytes: Object size reported by the store
        is_directory_marker: True for "folder" placeholder objects
    """

    path: str
    size_bytes: int
    is_directory_marker: bool = False


@dataclass(frozen=True)
class ListPage:
    """One page of a prefix listing and the token for the next page."""

    objects: tuple[StoreObject, ...] = field(default_factory=tuple)
    next_token: Optional[str] = None


class ObjectStoreClient(Protocol):
    """Protocol for an authenticated, single-page object listing client."""

    def list_page(
        self, bucket: str, prefix: str, token: Optional[str] = None
    ) -> ListPage:
        """Fetch the page of objects under prefix that starts at token."""
        ...

    def describe_bucket(self, bucket: str) -> dict[str, Any]:
        """Return bucket metadata for diagnostic logging."""
        ...

    def object_size(self, bucket: str, path: str) -> int:
        """Return the size in bytes of a single object."""
        ...


def is_directory_placeholder(path: str) -> bool:
    """Check whether a path names a directory placeholder rather than a file."""
    return path.endswith(DIRECTORY_SEPARATOR)
