"""Topics, partitions and offsets, and lists of them."""

from __future__ import annotations

import copy as _copy
import enum
from dataclasses import dataclass
from typing import Dict, Iterator, List, Mapping, Optional, Tuple

PARTITION_UNASSIGNED = -1

OFFSET_BEGINNING = -2
OFFSET_END = -1
OFFSET_STORED = -1000
OFFSET_INVALID = -1001
OFFSET_TAIL_BASE = -2000

_INVALID_ARGUMENT = "InvalidArgument"
_UNKNOWN_PARTITION = "UnknownPartition"


class KafkaError(Exception):
    """Base class for errors reported by this package."""

    description = "Kafka error"

    def __init__(self, code: str) -> None:
        super().__init__(f"{self.description}: {code}")
        self.code = code

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, KafkaError):
            return NotImplemented
        return type(self) is type(other) and self.code == other.code

    def __hash__(self) -> int:
        return hash((type(self), self.code))


class SetPartitionOffsetError(KafkaError):
    """Setting the offset of a partition failed."""

    description = "Set partition offset error"


class OffsetFetchError(KafkaError):
    """An offset fetch reported an error for a partition."""

    description = "Offset fetch error"


class OffsetKind(enum.Enum):
    """The kinds of offset that can be expressed."""

    BEGINNING = "beginning"
    END = "end"
    STORED = "stored"
    INVALID = "invalid"
    OFFSET = "offset"
    OFFSET_TAIL = "offset_tail"


_SPECIAL_RAW = {
    OffsetKind.BEGINNING: OFFSET_BEGINNING,
    OffsetKind.END: OFFSET_END,
    OffsetKind.STORED: OFFSET_STORED,
    OffsetKind.INVALID: OFFSET_INVALID,
}
_RAW_SPECIAL = {raw: kind for kind, raw in _SPECIAL_RAW.items()}


@dataclass(frozen=True)
class Offset:
    """A Kafka offset.

    ``value`` is set for the ``OFFSET`` and ``OFFSET_TAIL`` kinds only.
    Negative values are allowed here but cannot be converted to raw offsets.
    """

    kind: OffsetKind
    value: Optional[int] = None

    def __post_init__(self) -> None:
        numeric = self.kind in (OffsetKind.OFFSET, OffsetKind.OFFSET_TAIL)
        if numeric and not isinstance(self.value, int):
            raise TypeError(f"{self.kind.value} offset needs an integer value")
        if not numeric and self.value is not None:
            raise ValueError(f"{self.kind.value} offset takes no value")

    @classmethod
    def beginning(cls) -> "Offset":
        """Start consuming from the beginning of the partition."""
        return cls(OffsetKind.BEGINNING)

    @classmethod
    def end(cls) -> "Offset":
        """Start consuming from the end of the partition."""
        return cls(OffsetKind.END)

    @classmethod
    def stored(cls) -> "Offset":
        """Start consuming from the stored offset."""
        return cls(OffsetKind.STORED)

    @classmethod
    def invalid(cls) -> "Offset":
        """An unassigned or invalid offset."""
        return cls(OffsetKind.INVALID)

    @classmethod
    def at(cls, value: int) -> "Offset":
        """A specific offset."""
        return cls(OffsetKind.OFFSET, value)

    @classmethod
    def tail(cls, value: int) -> "Offset":
        """An offset relative to the end of the partition."""
        return cls(OffsetKind.OFFSET_TAIL, value)

    @classmethod
    def from_raw(cls, raw_offset: int) -> "Offset":
        """Decode the integer representation of an offset."""
        kind = _RAW_SPECIAL.get(raw_offset)
        if kind is not None:
            return cls(kind)
        if raw_offset <= OFFSET_TAIL_BASE:
            return cls.tail(OFFSET_TAIL_BASE - raw_offset)
        return cls.at(raw_offset)

    def to_raw(self) -> Optional[int]:
        """Encode the offset as an integer, or ``None`` if it cannot be."""
        if self.kind in _SPECIAL_RAW:
            return _SPECIAL_RAW[self.kind]
        if self.kind is OffsetKind.OFFSET:
            return self.value if self.value >= 0 else None
        return OFFSET_TAIL_BASE - self.value if self.value > 0 else None

    def __repr__(self) -> str:
        if self.value is None:
            return f"Offset.{self.kind.name.lower()}()"
        if self.kind is OffsetKind.OFFSET:
            return f"Offset.at({self.value})"
        return f"Offset.tail({self.value})"


class TopicPartitionListElem:
    """One topic/partition entry of a list, with its offset and error."""

    __slots__ = ("topic", "partition", "_offset", "error")

    def __init__(
        self,
        topic: str,
        partition: int,
        offset: Optional[Offset] = None,
        error: Optional[str] = None,
    ) -> None:
        self.topic = topic
        self.partition = partition
        self._offset = Offset.invalid()
        self.error = error
        if offset is not None:
            self.set_offset(offset)

    @property
    def offset(self) -> Offset:
        """The offset of this entry."""
        return self._offset

    def set_offset(self, offset: Offset) -> None:
        """Set the offset, raising if it cannot be represented."""
        raw = offset.to_raw()
        if raw is None:
            raise SetPartitionOffsetError(_INVALID_ARGUMENT)
        self._offset = Offset.from_raw(raw)

    def check_error(self) -> None:
        """Raise the error recorded for this entry, if any."""
        if self.error is not None:
            raise OffsetFetchError(self.error)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TopicPartitionListElem):
            return NotImplemented
        return (
            self.topic == other.topic
            and self.partition == other.partition
            and self.offset == other.offset
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return (
            f"TopicPartitionListElem(topic={self.topic!r}, "
            f"partition={self.partition}, offset={self.offset!r})"
        )


class TopicPartitionList:
    """An ordered list of topics and partitions with optional offsets."""

    def __init__(self, capacity: int = 5) -> None:
        if capacity < 0:
            raise ValueError("capacity cannot be negative")
        self._capacity = capacity
        self._elems: List[TopicPartitionListElem] = []

    @classmethod
    def from_topic_map(
        cls, topic_map: Mapping[Tuple[str, int], Offset]
    ) -> "TopicPartitionList":
        """Build a list from a mapping of (topic, partition) to offset."""
        tpl = cls(len(topic_map))
        for (topic, partition), offset in topic_map.items():
            tpl.add_partition_offset(topic, partition, offset)
        return tpl

    @property
    def capacity(self) -> int:
        """The number of entries the list holds before it grows."""
        return self._capacity

    def add_topic_unassigned(self, topic: str) -> TopicPartitionListElem:
        """Add a topic with unassigned partitions."""
        return self.add_partition(topic, PARTITION_UNASSIGNED)

    def add_partition(self, topic: str, partition: int) -> TopicPartitionListElem:
        """Add a topic and partition; the new entry is returned."""
        if len(self._elems) >= self._capacity:
            self._capacity += max(self._capacity, 1)
        elem = TopicPartitionListElem(topic, partition)
        self._elems.append(elem)
        return elem

    def add_partition_range(
        self, topic: str, start_partition: int, stop_partition: int
    ) -> None:
        """Add partitions ``start_partition`` through ``stop_partition``, inclusive."""
        for partition in range(start_partition, stop_partition + 1):
            self.add_partition(topic, partition)

    def set_partition_offset(self, topic: str, partition: int, offset: Offset) -> None:
        """Set the offset of an entry already in the list."""
        raw = offset.to_raw()
        if raw is None:
            raise SetPartitionOffsetError(_INVALID_ARGUMENT)
        elem = self.find_partition(topic, partition)
        if elem is None:
            raise SetPartitionOffsetError(_UNKNOWN_PARTITION)
        elem.set_offset(offset)

    def add_partition_offset(self, topic: str, partition: int, offset: Offset) -> None:
        """Add a topic and partition with the given offset."""
        self.add_partition(topic, partition)
        self.set_partition_offset(topic, partition, offset)

    def find_partition(
        self, topic: str, partition: int
    ) -> Optional[TopicPartitionListElem]:
        """Return the first entry for ``topic`` and ``partition``, or ``None``."""
        return next(
            (e for e in self._elems if e.topic == topic and e.partition == partition),
            None,
        )

    def set_all_offsets(self, offset: Offset) -> None:
        """Set every entry to ``offset``."""
        for elem in self._elems:
            elem.set_offset(offset)

    def elements(self) -> List[TopicPartitionListElem]:
        """Return all entries."""
        return list(self._elems)

    def elements_for_topic(self, topic: str) -> List[TopicPartitionListElem]:
        """Return the entries that belong to ``topic``."""
        return [e for e in self._elems if e.topic == topic]

    def to_topic_map(self) -> Dict[Tuple[str, int], Offset]:
        """Return a mapping of (topic, partition) to offset."""
        return {(e.topic, e.partition): e.offset for e in self._elems}

    def copy(self) -> "TopicPartitionList":
        """Return an independent copy of the list."""
        new = TopicPartitionList(self._capacity)
        new._elems = [_copy.copy(e) for e in self._elems]
        return new

    def __copy__(self) -> "TopicPartitionList":
        return self.copy()

    def __len__(self) -> int:
        return len(self._elems)

    def __iter__(self) -> Iterator[TopicPartitionListElem]:
        return iter(self._elems)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TopicPartitionList):
            return NotImplemented
        if len(self) != len(other):
            return False
        for elem in self._elems:
            other_elem = other.find_partition(elem.topic, elem.partition)
            if other_elem is None or elem != other_elem:
                return False
        return True

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        body = "".join(
            f"({e.topic}, {e.partition}): {e.offset!r}, " for e in self._elems
        )
        return f"TPL {{{body}}}"