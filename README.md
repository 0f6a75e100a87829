# kafkit

Plain-Python building blocks for working with Kafka clients:

- `kafkit.util`: `Timeout` values (a duration or "never") and helpers for
  milliseconds since the Unix epoch.
- `kafkit.topic_partition_list`: `Offset` values with their raw integer
  encoding, and `TopicPartitionList` for tracking topics, partitions and
  offsets.
- `kafkit.stats_types` and `kafkit.statistics`: typed records for the JSON
  statistics document that a Kafka client emits, parsed with
  `parse_statistics`.

The package has no runtime dependencies.

## Installation

```
pip install kafkit
```

## Offsets and topic partition lists

```python
from kafkit.topic_partition_list import Offset, TopicPartitionList

tpl = TopicPartitionList(5)
tpl.add_partition_offset("orders", 0, Offset.beginning())
tpl.add_partition_offset("orders", 1, Offset.at(42))
tpl.add_partition_range("audit", 0, 3)   # partitions 0 to 3, inclusive

elem = tpl.find_partition("orders", 1)
print(elem.topic, elem.partition, elem.offset)   # orders 1 Offset.at(42)

tpl.set_all_offsets(Offset.stored())
print(tpl.to_topic_map())
```

The special offsets are `Offset.beginning()`, `Offset.end()`,
`Offset.stored()` and `Offset.invalid()`. `Offset.at(n)` is an absolute
offset, and `Offset.tail(n)` counts back from the end of a partition.
`Offset.to_raw()` and `Offset.from_raw()` convert to and from the raw integer
encoding. For example, `Offset.tail(10).to_raw()` is `-2010`.

Some offsets cannot be encoded: a negative absolute offset, or a tail of zero
or less. For these `to_raw()` returns `None`, and a list refuses to store them
with `SetPartitionOffsetError`. Setting the offset of a partition that is not
in the list raises the same error.

A new entry starts with `Offset.invalid()`. `add_topic_unassigned` adds a
topic with partition `-1`. `elements()`, `elements_for_topic()`, iteration and
`len()` give the entries in the order they were added. `copy()` returns an
independent list.

Two lists are equal when they hold the same (topic, partition, offset)
entries, in any order. An entry may record an error code in `error`, and
`check_error()` raises it as `OffsetFetchError`. Both error classes derive
from `KafkaError`.

## Timeouts

```python
from datetime import timedelta
from kafkit.util import Timeout, current_time_millis, millis_to_epoch

t = Timeout.after(timedelta(seconds=2))
print(t.as_millis())                  # 2000
print(Timeout.never().as_millis())    # -1
remaining = t - Timeout.after(timedelta(milliseconds=500))
print(Timeout.from_value(None).is_never)   # True
print(current_time_millis())
```

Subtracting a never-expiring timeout raises `ValueError`. A subtraction that
would go below zero raises `ValueError` too. Finite timeouts sort before
`Timeout.never()`.

`millis_to_epoch(dt)` treats naive datetimes as UTC and returns 0 for times
before the epoch.

## Statistics

```python
from kafkit.statistics import parse_statistics

stats = parse_statistics(json_text)
print(stats.name, stats.client_type, stats.msg_cnt)
for name, broker in stats.brokers.items():
    print(name, broker.state, broker.rtt.p99 if broker.rtt else None)
for topic in stats.topics.values():
    for pid, partition in topic.partitions.items():
        print(topic.topic, pid, partition.consumer_lag)
```

The document's `type` key becomes `client_type`, and partition keys become
integers.

The following fields are optional and are `None` when absent: `cgrp`, `eos`,
and the broker's `wakeups`, `connects`, `disconnects`, `int_latency`,
`outbuf_latency`, `rtt` and `throttle`. Every other field is required, and
unknown keys are ignored.

`StatisticsError`, a subclass of `ValueError`, is raised in these cases:

- the text is not valid JSON;
- a required field is missing;
- a field has the wrong type;
- an integer is out of range.

Each record class also has a `from_dict` classmethod for data that has
already been decoded.

## What this package does not do

kafkit does not connect to Kafka. It has no producer, consumer or admin
client, and it does not fetch metadata or collect statistics itself. It
provides the values such a client works with, and it parses statistics
documents that you have obtained elsewhere.

## Running the tests

```
pip install -e ".[test]"
pytest
```