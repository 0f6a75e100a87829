"""Building blocks of the client statistics: windows, partitions, groups."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Mapping, Type, TypeVar

_T = TypeVar("_T")

_INT_RANGES = {
    "i32": (-(2**31), 2**31 - 1),
    "i64": (-(2**63), 2**63 - 1),
}


class StatisticsError(ValueError):
    """A statistics document does not have the expected shape."""


def _i32() -> Any:
    return field(metadata={"kind": "i32"})


def _i64() -> Any:
    return field(metadata={"kind": "i64"})


def _bool() -> Any:
    return field(metadata={"kind": "bool"})


def _str() -> Any:
    return field(metadata={"kind": "str"})


def _convert(owner: str, key: str, kind: str, value: Any) -> Any:
    if kind in _INT_RANGES:
        if isinstance(value, bool) or not isinstance(value, int):
            raise StatisticsError(
                f"{owner}.{key}: expected an integer, got {type(value).__name__}"
            )
        low, high = _INT_RANGES[kind]
        if not low <= value <= high:
            raise StatisticsError(f"{owner}.{key}: {value} is out of range for {kind}")
        return value
    if kind == "bool":
        if not isinstance(value, bool):
            raise StatisticsError(
                f"{owner}.{key}: expected a boolean, got {type(value).__name__}"
            )
        return value
    if kind == "str":
        if not isinstance(value, str):
            raise StatisticsError(
                f"{owner}.{key}: expected a string, got {type(value).__name__}"
            )
        return value
    raise AssertionError(f"unknown field kind {kind!r}")


def _parse(cls: Type[_T], data: Any) -> _T:
    """Build a dataclass of plain scalar fields from a decoded JSON object.

    Every field is required; keys the class does not know are ignored.
    """
    owner = cls.__name__
    if not isinstance(data, Mapping):
        raise StatisticsError(f"{owner}: expected an object, got {type(data).__name__}")
    values = {}
    for f in fields(cls):  # type: ignore[arg-type]
        key = f.metadata.get("key", f.name)
        if key not in data:
            raise StatisticsError(f"{owner}: missing field {key!r}")
        values[f.name] = _convert(owner, key, f.metadata["kind"], data[key])
    return cls(**values)


@dataclass(frozen=True)
class Window:
    """Rolling window statistics, sampled estimates from an HDR histogram."""

    min: int = _i64()
    max: int = _i64()
    avg: int = _i64()
    sum: int = _i64()
    cnt: int = _i64()
    stddev: int = _i64()
    hdrsize: int = _i64()
    p50: int = _i64()
    p75: int = _i64()
    p90: int = _i64()
    p95: int = _i64()
    p99: int = _i64()
    p99_99: int = _i64()
    outofrange: int = _i64()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Window":
        """Build a window from its decoded JSON object."""
        return _parse(cls, data)


@dataclass(frozen=True)
class TopicPartition:
    """A topic and partition specifier."""

    topic: str = _str()
    partition: int = _i32()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TopicPartition":
        """Build a topic/partition from its decoded JSON object."""
        return _parse(cls, data)


@dataclass(frozen=True)
class Partition:
    """Per-partition statistics."""

    partition: int = _i32()
    broker: int = _i32()
    leader: int = _i32()
    desired: bool = _bool()
    unknown: bool = _bool()
    msgq_cnt: int = _i64()
    msgq_bytes: int = _i64()
    xmit_msgq_cnt: int = _i64()
    xmit_msgq_bytes: int = _i64()
    fetchq_cnt: int = _i64()
    fetchq_size: int = _i64()
    fetch_state: str = _str()
    query_offset: int = _i64()
    next_offset: int = _i64()
    app_offset: int = _i64()
    stored_offset: int = _i64()
    committed_offset: int = _i64()
    eof_offset: int = _i64()
    lo_offset: int = _i64()
    hi_offset: int = _i64()
    ls_offset: int = _i64()
    consumer_lag: int = _i64()
    txmsgs: int = _i64()
    txbytes: int = _i64()
    rxmsgs: int = _i64()
    rxbytes: int = _i64()
    msgs: int = _i64()
    rx_ver_drops: int = _i64()
    msgs_inflight: int = _i64()
    next_ack_seq: int = _i64()
    next_err_seq: int = _i64()
    acked_msgid: int = _i64()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Partition":
        """Build partition statistics from their decoded JSON object."""
        return _parse(cls, data)


@dataclass(frozen=True)
class ConsumerGroup:
    """Consumer group manager statistics."""

    state: str = _str()
    stateage: int = _i64()
    join_state: str = _str()
    rebalance_age: int = _i64()
    rebalance_cnt: int = _i64()
    rebalance_reason: str = _str()
    assignment_size: int = _i32()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ConsumerGroup":
        """Build consumer group statistics from their decoded JSON object."""
        return _parse(cls, data)


@dataclass(frozen=True)
class ExactlyOnceSemantics:
    """Idempotent and transactional producer statistics."""

    idemp_state: str = _str()
    idemp_stateage: int = _i64()
    txn_state: str = _str()
    txn_stateage: int = _i64()
    txn_may_enq: bool = _bool()
    producer_id: int = _i64()
    producer_epoch: int = _i64()
    epoch_cnt: int = _i64()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ExactlyOnceSemantics":
        """Build exactly-once statistics from their decoded JSON object."""
        return _parse(cls, data)