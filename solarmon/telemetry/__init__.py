"""
Telemetry core: sample generation and bounded per-plant history.

CHANGELOG:
- 2026-10-19: Initial creation
"""

from solarmon.telemetry.documents import DocumentStore, MemoryDocumentStore, SqlDocumentStore
from solarmon.telemetry.generator import SampleGenerator
from solarmon.telemetry.store import TelemetryStore, aggregate_daily

__all__ = [
    "DocumentStore",
    "MemoryDocumentStore",
    "SampleGenerator",
    "SqlDocumentStore",
    "TelemetryStore",
    "aggregate_daily",
]
