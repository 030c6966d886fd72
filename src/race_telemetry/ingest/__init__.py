"""Datagram ingestion: sources, the work queue and the ingestion pipeline.

Public API
----------
IngestionPipeline   - read → decode → publish loop
UdpDatagramSource   - datagrams from the game's UDP broadcast
IterableSource      - datagrams from memory
WorkQueue           - work-distributing queue behind ``frames()``
TransportError      - datagram source failed
PublishError        - no consumer left
"""

from race_telemetry.ingest.pipeline import IngestionPipeline
from race_telemetry.ingest.source import (
    DEFAULT_PORT,
    DatagramSource,
    IterableSource,
    TransportError,
    UdpDatagramSource,
)
from race_telemetry.ingest.work_queue import PublishError, Subscription, WorkQueue

__all__ = [
    "DEFAULT_PORT",
    "DatagramSource",
    "IngestionPipeline",
    "IterableSource",
    "PublishError",
    "Subscription",
    "TransportError",
    "UdpDatagramSource",
    "WorkQueue",
]
