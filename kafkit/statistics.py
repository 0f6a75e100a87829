"""Client and broker statistics as reported by the client library.

The statistics arrive as a JSON document; :func:`parse_statistics` turns it
into a :class:`Statistics` tree. Every field the document is expected to
carry is required, except the ones typed ``Optional``. Unknown keys are
ignored.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional, TypeVar, Union

from kafkit.stats_types import (
    ConsumerGroup,
    ExactlyOnceSemantics,
    Partition,
    StatisticsError,
    TopicPartition,
    Window,
)

__all__ = [
    "Broker",
    "Topic",
    "Statistics",
    "StatisticsError",
    "parse_statistics",
]

_V = TypeVar("_V")

_I32 = (-(2**31), 2**31 - 1)
_I64 = (-(2**63), 2**63 - 1)
_INT_KEY = re.compile(r"[+-]?[0-9]+")


class _Fields:
    """Typed access to the keys of one decoded JSON object."""

    def __init__(self, owner: str, data: Any) -> None:
        if not isinstance(data, Mapping):
            raise StatisticsError(
                f"{owner}: expected an object, got {type(data).__name__}"
            )
        self.owner = owner
        self.data = data

    def _get(self, key: str) -> Any:
        try:
            return self.data[key]
        except KeyError:
            raise StatisticsError(f"{self.owner}: missing field {key!r}") from None

    def _int(self, key: str, value: Any, bounds: tuple, kind: str) -> int:
        if isinstance(value, bool) or not isinstance(value, int):
            raise StatisticsError(
                f"{self.owner}.{key}: expected an integer, got {type(value).__name__}"
            )
        low, high = bounds
        if not low <= value <= high:
            raise StatisticsError(f"{self.owner}.{key}: {value} is out of range for {kind}")
        return value

    def i32(self, key: str) -> int:
        return self._int(key, self._get(key), _I32, "i32")

    def i64(self, key: str) -> int:
        return self._int(key, self._get(key), _I64, "i64")

    def opt_i64(self, key: str) -> Optional[int]:
        value = self.data.get(key)
        if value is None:
            return None
        return self._int(key, value, _I64, "i64")

    def str(self, key: str) -> str:
        value = self._get(key)
        if not isinstance(value, str):
            raise StatisticsError(
                f"{self.owner}.{key}: expected a string, got {type(value).__name__}"
            )
        return value

    def obj(self, key: str, parse: Callable[[Any], _V]) -> _V:
        return parse(self._get(key))

    def opt_obj(self, key: str, parse: Callable[[Any], _V]) -> Optional[_V]:
        value = self.data.get(key)
        if value is None:
            return None
        return parse(value)

    def str_map(self, key: str, parse: Callable[[Any], _V]) -> Dict[str, _V]:
        return {k: parse(v) for k, v in self._mapping(key).items()}

    def i32_map(self, key: str, parse: Callable[[Any], _V]) -> Dict[int, _V]:
        result: Dict[int, _V] = {}
        for raw_key, value in self._mapping(key).items():
            if not _INT_KEY.fullmatch(raw_key):
                raise StatisticsError(
                    f"{self.owner}.{key}: key {raw_key!r} is not an integer"
                )
            number = int(raw_key)
            if not _I32[0] <= number <= _I32[1]:
                raise StatisticsError(
                    f"{self.owner}.{key}: key {raw_key!r} is out of range for i32"
                )
            result[number] = parse(value)
        return result

    def i64_map(self, key: str) -> Dict[str, int]:
        return {
            k: self._int(f"{key}.{k}", v, _I64, "i64")
            for k, v in self._mapping(key).items()
        }

    def _mapping(self, key: str) -> Mapping[str, Any]:
        value = self._get(key)
        if not isinstance(value, Mapping):
            raise StatisticsError(
                f"{self.owner}.{key}: expected an object, got {type(value).__name__}"
            )
        return value


@dataclass(frozen=True)
class Broker:
    """Per-broker statistics."""

    name: str
    nodeid: int
    nodename: str
    source: str
    state: str
    stateage: int
    outbuf_cnt: int
    outbuf_msg_cnt: int
    waitresp_cnt: int
    waitresp_msg_cnt: int
    tx: int
    txbytes: int
    txerrs: int
    txretries: int
    req_timeouts: int
    rx: int
    rxbytes: int
    rxerrs: int
    rxcorriderrs: int
    rxpartial: int
    req: Dict[str, int]
    zbuf_grow: int
    buf_grow: int
    wakeups: Optional[int]
    connects: Optional[int]
    disconnects: Optional[int]
    int_latency: Optional[Window]
    outbuf_latency: Optional[Window]
    rtt: Optional[Window]
    throttle: Optional[Window]
    toppars: Dict[str, TopicPartition]

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Broker":
        """Build broker statistics from their decoded JSON object."""
        f = _Fields(cls.__name__, data)
        return cls(
            name=f.str("name"),
            nodeid=f.i32("nodeid"),
            nodename=f.str("nodename"),
            source=f.str("source"),
            state=f.str("state"),
            stateage=f.i64("stateage"),
            outbuf_cnt=f.i64("outbuf_cnt"),
            outbuf_msg_cnt=f.i64("outbuf_msg_cnt"),
            waitresp_cnt=f.i64("waitresp_cnt"),
            waitresp_msg_cnt=f.i64("waitresp_msg_cnt"),
            tx=f.i64("tx"),
            txbytes=f.i64("txbytes"),
            txerrs=f.i64("txerrs"),
            txretries=f.i64("txretries"),
            req_timeouts=f.i64("req_timeouts"),
            rx=f.i64("rx"),
            rxbytes=f.i64("rxbytes"),
            rxerrs=f.i64("rxerrs"),
            rxcorriderrs=f.i64("rxcorriderrs"),
            rxpartial=f.i64("rxpartial"),
            req=f.i64_map("req"),
            zbuf_grow=f.i64("zbuf_grow"),
            buf_grow=f.i64("buf_grow"),
            wakeups=f.opt_i64("wakeups"),
            connects=f.opt_i64("connects"),
            disconnects=f.opt_i64("disconnects"),
            int_latency=f.opt_obj("int_latency", Window.from_dict),
            outbuf_latency=f.opt_obj("outbuf_latency", Window.from_dict),
            rtt=f.opt_obj("rtt", Window.from_dict),
            throttle=f.opt_obj("throttle", Window.from_dict),
            toppars=f.str_map("toppars", TopicPartition.from_dict),
        )


@dataclass(frozen=True)
class Topic:
    """Per-topic statistics."""

    topic: str
    metadata_age: int
    batchsize: Window
    batchcnt: Window
    partitions: Dict[int, Partition]

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Topic":
        """Build topic statistics from their decoded JSON object."""
        f = _Fields(cls.__name__, data)
        return cls(
            topic=f.str("topic"),
            metadata_age=f.i64("metadata_age"),
            batchsize=f.obj("batchsize", Window.from_dict),
            batchcnt=f.obj("batchcnt", Window.from_dict),
            partitions=f.i32_map("partitions", Partition.from_dict),
        )


@dataclass(frozen=True)
class Statistics:
    """Overall client statistics."""

    name: str
    client_id: str
    client_type: str
    ts: int
    time: int
    replyq: int
    msg_cnt: int
    msg_size: int
    msg_max: int
    msg_size_max: int
    tx: int
    tx_bytes: int
    rx: int
    rx_bytes: int
    txmsgs: int
    txmsg_bytes: int
    rxmsgs: int
    rxmsg_bytes: int
    simple_cnt: int
    metadata_cache_cnt: int
    brokers: Dict[str, Broker]
    topics: Dict[str, Topic]
    cgrp: Optional[ConsumerGroup] = None
    eos: Optional[ExactlyOnceSemantics] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Statistics":
        """Build statistics from the decoded JSON document."""
        f = _Fields(cls.__name__, data)
        return cls(
            name=f.str("name"),
            client_id=f.str("client_id"),
            client_type=f.str("type"),
            ts=f.i64("ts"),
            time=f.i64("time"),
            replyq=f.i64("replyq"),
            msg_cnt=f.i64("msg_cnt"),
            msg_size=f.i64("msg_size"),
            msg_max=f.i64("msg_max"),
            msg_size_max=f.i64("msg_size_max"),
            tx=f.i64("tx"),
            tx_bytes=f.i64("tx_bytes"),
            rx=f.i64("rx"),
            rx_bytes=f.i64("rx_bytes"),
            txmsgs=f.i64("txmsgs"),
            txmsg_bytes=f.i64("txmsg_bytes"),
            rxmsgs=f.i64("rxmsgs"),
            rxmsg_bytes=f.i64("rxmsg_bytes"),
            simple_cnt=f.i64("simple_cnt"),
            metadata_cache_cnt=f.i64("metadata_cache_cnt"),
            brokers=f.str_map("brokers", Broker.from_dict),
            topics=f.str_map("topics", Topic.from_dict),
            cgrp=f.opt_obj("cgrp", ConsumerGroup.from_dict),
            eos=f.opt_obj("eos", ExactlyOnceSemantics.from_dict),
        )


def parse_statistics(text: Union[str, bytes, bytearray]) -> Statistics:
    """Parse a JSON statistics document."""
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise StatisticsError(f"statistics are not valid JSON: {exc}") from exc
    return Statistics.from_dict(data)