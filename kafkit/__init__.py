"""Kafka client data structures: offsets, topic partition lists, timeouts and statistics."""

__version__ = "0.1.0"

__all__ = ["util", "topic_partition_list", "stats_types", "statistics"]