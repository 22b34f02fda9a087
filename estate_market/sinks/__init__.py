"""Output sinks for exporting marketplace snapshots."""

from estate_market.sinks.console import ConsoleSink
from estate_market.sinks.json_file import JsonFileSink
from estate_market.sinks.kafka import KafkaSink

__all__ = ["ConsoleSink", "JsonFileSink", "KafkaSink"]
