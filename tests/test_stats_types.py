import dataclasses

import pytest

from kafkit.stats_types import (
    ConsumerGroup,
    ExactlyOnceSemantics,
    Partition,
    StatisticsError,
    TopicPartition,
    Window,
)

_WINDOW_FIELDS = (
    "min", "max", "avg", "sum", "stddev", "hdrsize", "p50",
    "p75", "p90", "p95", "p99", "p99_99", "outofrange", "cnt",
)

WINDOW = {name: (index + 1) * 10 for index, name in enumerate(_WINDOW_FIELDS)}

PARTITION = dict(
    partition=3, broker=1, leader=1, desired=True, unknown=False,
    msgq_cnt=12, msgq_bytes=340, xmit_msgq_cnt=2, xmit_msgq_bytes=56,
    fetchq_cnt=7, fetchq_size=890, fetch_state="active",
    query_offset=-1, next_offset=42, app_offset=41, stored_offset=40,
    commited_offset=39, committed_offset=39, eof_offset=-1,
    lo_offset=5, hi_offset=50, ls_offset=50, consumer_lag=9,
    txmsgs=77, txbytes=7700, rxmsgs=66, rxbytes=6600, msgs=143,
    rx_ver_drops=1, msgs_inflight=4, next_ack_seq=8, next_err_seq=9,
    acked_msgid=15,
)

CGRP = dict(
    state="up", stateage=5000, join_state="steady", rebalance_age=4000,
    rebalance_cnt=1, rebalance_reason="", assignment_size=3,
)

EOS = dict(
    idemp_state="Assigned", idemp_stateage=100, txn_state="Ready",
    txn_stateage=50, txn_may_enq=True, producer_id=-1, producer_epoch=-1,
    epoch_cnt=0,
)


def test_window_fields():
    window = Window.from_dict(WINDOW)
    assert window.min == 10
    assert window.max == 20
    assert window.hdrsize == 60
    assert window.p99_99 == 120
    assert window.cnt == 140


def test_window_round_trip_through_asdict():
    window = Window.from_dict(WINDOW)
    assert dataclasses.asdict(window) == WINDOW
    assert Window.from_dict(dataclasses.asdict(window)) == window


def test_topic_partition_fields():
    tp = TopicPartition.from_dict({"topic": "orders", "partition": 2})
    assert tp == TopicPartition(topic="orders", partition=2)


def test_partition_ignores_unknown_keys():
    part = Partition.from_dict(PARTITION)
    assert part.msgq_cnt == 12
    assert part.fetch_state == "active"
    assert part.committed_offset == 39
    assert part.consumer_lag == 9
    assert part.msgs_inflight == 4
    assert part.desired is True
    assert not hasattr(part, "commited_offset")


def test_partition_round_trip():
    part = Partition.from_dict(PARTITION)
    expected = {k: v for k, v in PARTITION.items() if k != "commited_offset"}
    assert dataclasses.asdict(part) == expected


def test_consumer_group_round_trip():
    group = ConsumerGroup.from_dict(CGRP)
    assert dataclasses.asdict(group) == CGRP
    assert group.rebalance_reason == ""


def test_exactly_once_round_trip():
    eos = ExactlyOnceSemantics.from_dict(EOS)
    assert dataclasses.asdict(eos) == EOS
    assert eos.txn_may_enq is True


@pytest.mark.parametrize("missing", ["p99_99", "cnt", "min"])
def test_window_missing_field(missing):
    data = dict(WINDOW)
    del data[missing]
    with pytest.raises(StatisticsError, match=missing):
        Window.from_dict(data)


def test_partition_missing_committed_offset():
    data = dict(PARTITION)
    del data["committed_offset"]
    with pytest.raises(StatisticsError, match="committed_offset"):
        Partition.from_dict(data)


@pytest.mark.parametrize("bad", ["12", 1.5, None, True])
def test_integer_field_rejects_other_types(bad):
    data = dict(WINDOW, avg=bad)
    with pytest.raises(StatisticsError, match="avg"):
        Window.from_dict(data)


def test_bool_field_rejects_integer():
    data = dict(EOS, txn_may_enq=1)
    with pytest.raises(StatisticsError, match="txn_may_enq"):
        ExactlyOnceSemantics.from_dict(data)


def test_string_field_rejects_integer():
    with pytest.raises(StatisticsError, match="topic"):
        TopicPartition.from_dict({"topic": 5, "partition": 0})


def test_i32_range_is_enforced():
    with pytest.raises(StatisticsError, match="partition"):
        TopicPartition.from_dict({"topic": "orders", "partition": 2**31})
    tp = TopicPartition.from_dict({"topic": "orders", "partition": 2**31 - 1})
    assert tp.partition == 2**31 - 1


def test_i64_range_is_enforced():
    with pytest.raises(StatisticsError, match="sum"):
        Window.from_dict(dict(WINDOW, sum=2**63))


@pytest.mark.parametrize("data", [None, [], "window", 3])
def test_non_object_rejected(data):
    with pytest.raises(StatisticsError):
        Window.from_dict(data)


def test_statistics_error_is_value_error():
    with pytest.raises(ValueError):
        ConsumerGroup.from_dict({})


def test_instances_are_frozen():
    tp = TopicPartition.from_dict({"topic": "orders", "partition": 0})
    with pytest.raises(dataclasses.FrozenInstanceError):
        tp.partition = 1  # type: ignore[misc]
    assert tp.partition == 0