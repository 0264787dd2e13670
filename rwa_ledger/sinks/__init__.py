"""Output sinks for published ledger events."""

from rwa_ledger.sinks.json_file import JsonlFileSink
from rwa_ledger.sinks.kafka import KafkaSink
from rwa_ledger.sinks.memory import MemorySink

__all__ = ["JsonlFileSink", "KafkaSink", "MemorySink"]
