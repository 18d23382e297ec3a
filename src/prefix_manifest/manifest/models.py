"""Manifest data model."""

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass(frozen=True)
class ObjectEntry:
    """A discovered object that will be read by a worker.

    Attributes:
        path: Object key within the bucket
        size_bytes: Object size, always positive
    """

    path: str
    size_bytes: int

    def __post_init__(self):
        if self.size_bytes <= 0:
            raise ValueError(
                f"Manifest entries must have a positive size: "
                f"{self.path} has {self.size_bytes} bytes"
            )


@dataclass(frozen=True)
class Partition:
    """A contiguous, half-open range of manifest entries assigned to one task."""

    task_index: int
    start: int
    stop: int

    def __len__(self) -> int:
        return self.stop - self.start


@dataclass(frozen=True)
class Manifest:
    """Ordered object entries and their partition plan.

    Built once by ManifestBuilder and never mutated afterwards, so the
    partitions can be handed to independent workers.
    """

    entries: tuple[ObjectEntry, ...] = field(default_factory=tuple)
    partitions: tuple[Partition, ...] = field(default_factory=tuple)

    def __len__(self) -> int:
        return len(self.entries)

    @property
    def task_count(self) -> int:
        return len(self.partitions)

    @property
    def total_bytes(self) -> int:
        return sum(entry.size_bytes for entry in self.entries)

    @property
    def last_path(self) -> Optional[str]:
        """Path of the last listed entry, or None for an empty manifest."""
        return self.entries[-1].path if self.entries else None

    def partition_entries(self, task_index: int) -> tuple[ObjectEntry, ...]:
        """Return the entries assigned to one task."""
        partition = self.partitions[task_index]
        return self.entries[partition.start : partition.stop]

    def partition_paths(self, task_index: int) -> list[str]:
        return [entry.path for entry in self.partition_entries(task_index)]

    def next_last_path(self, previous: Optional[str]) -> Optional[str]:
        """Return the path a following run should resume after."""
        return self.last_path if self.entries else previous

    def to_dict(self) -> dict[str, Any]:
        """Serialize to JSON-compatible data for task distribution."""
        return {
            "entries": [
                {"path": entry.path, "size_bytes": entry.size_bytes}
                for entry in self.entries
            ],
            "partitions": [
                {
                    "task_index": partition.task_index,
                    "start": partition.start,
                    "stop": partition.stop,
                }
                for partition in self.partitions
            ],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Manifest":
        """Rebuild a manifest serialized with to_dict.

        Raises:
            ValueError: If the partitions do not cover the entries exactly
                once, in order
        """
        entries = tuple(ObjectEntry(**entry) for entry in data.get("entries", []))
        partitions = tuple(
            Partition(**partition) for partition in data.get("partitions", [])
        )

        expected_start = 0
        for index, partition in enumerate(partitions):
            if (
                partition.task_index != index
                or partition.start != expected_start
                or partition.stop <= partition.start
            ):
                raise ValueError(f"Partition {index} is out of sequence: {partition}")
            expected_start = partition.stop
        if expected_start != len(entries):
            raise ValueError(
                f"Partitions cover {expected_start} of {len(entries)} entries"
            )

        return cls(entries=entries, partitions=partitions)
