"""Accumulates listed objects and partitions them into tasks."""

import re
from typing import Optional

from prefix_manifest.core import get_logger
from prefix_manifest.manifest.models import Manifest, ObjectEntry, Partition

logger = get_logger(__name__)


class ManifestBuilder:
    """Builds a Manifest from objects in listing order.

    Entries keep the order they are added in. ``build`` groups them with a
    greedy scan: the current partition is closed as soon as its aggregate
    size reaches ``min_partition_size``. Once ``max_partitions - 1``
    partitions are closed, the last one takes every remaining entry.
    """

    def __init__(
        self,
        min_partition_size: int = 0,
        max_partitions: Optional[int] = None,
        path_match_pattern: Optional[str] = None,
        total_file_count_limit: Optional[int] = None,
    ):
        """Initialize manifest builder.

        Args:
            min_partition_size: Minimum aggregate bytes per partition
            max_partitions: Maximum number of partitions, unbounded if None
            path_match_pattern: Regex a path must match to be added
            total_file_count_limit: Maximum number of entries to accept
        """
        if min_partition_size < 0:
            raise ValueError(
                f"min_partition_size must not be negative, got {min_partition_size}"
            )
        if max_partitions is not None and max_partitions < 1:
            raise ValueError(f"max_partitions must be at least 1, got {max_partitions}")

        self.min_partition_size = min_partition_size
        self.max_partitions = max_partitions
        self.path_match_pattern = (
            re.compile(path_match_pattern) if path_match_pattern else None
        )
        self.total_file_count_limit = total_file_count_limit
        self._entries: list[ObjectEntry] = []
        self._built = False

    def __len__(self) -> int:
        return len(self._entries)

    def add(self, path: str, size_bytes: int) -> bool:
        """Append one object.

        Args:
            path: Object path
            size_bytes: Object size, must be positive

        Returns:
            True if the object was added, False if it was filtered out by
            the path pattern or the file count limit
        """
        if self._built:
            raise RuntimeError("Cannot add entries to a built manifest")

        if self.path_match_pattern and not self.path_match_pattern.search(path):
            logger.debug("Path does not match pattern", path=path)
            return False
        if (
            self.total_file_count_limit is not None
            and len(self._entries) >= self.total_file_count_limit
        ):
            logger.debug("File count limit reached", path=path)
            return False

        self._entries.append(ObjectEntry(path=path, size_bytes=size_bytes))
        return True

    def build(self) -> Manifest:
        """Finalize the manifest and its partition plan.

        Can only be called once.
        """
        if self._built:
            raise RuntimeError("Manifest has already been built")
        self._built = True

        entries = tuple(self._entries)
        partitions = tuple(self._partition(entries))

        logger.info(
            "Manifest built",
            entry_count=len(entries),
            task_count=len(partitions),
            min_partition_size=self.min_partition_size,
            max_partitions=self.max_partitions,
        )
        return Manifest(entries=entries, partitions=partitions)

    def _partition(self, entries: tuple[ObjectEntry, ...]) -> list[Partition]:
        partitions: list[Partition] = []
        start = 0
        current_size = 0

        for index, entry in enumerate(entries):
            current_size += entry.size_bytes
            last_slot = (
                self.max_partitions is not None
                and len(partitions) == self.max_partitions - 1
            )
            if current_size >= self.min_partition_size and not last_slot:
                partitions.append(Partition(len(partitions), start, index + 1))
                start = index + 1
                current_size = 0

        if start < len(entries):
            partitions.append(Partition(len(partitions), start, len(entries)))

        return partitions
