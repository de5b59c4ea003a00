"""Output sinks for exporting listings and publishing events."""

from estate_map.sinks.console import ConsoleSink
from estate_map.sinks.json_file import JsonFileSink
from estate_map.sinks.kafka import KafkaSink

__all__ = ["ConsoleSink", "JsonFileSink", "KafkaSink"]
