"""RaceService — keeps a live :class:`Race` fed from the UDP broadcast."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass

from race_telemetry.config import Settings
from race_telemetry.ingest import DatagramSource, IngestionPipeline, UdpDatagramSource
from race_telemetry.protocol import Driver, Frame, Participant
from race_telemetry.race import Race, RaceStateError, SpatialLocation, Status

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RaceSnapshot:
    session_uid: int | None
    status: Status
    participants: list[Participant]
    samples: int


class RaceService:
    """Owns an ingestion pipeline plus the :class:`Race` it feeds.

    The race is guarded by a lock so HTTP handlers can query it while the
    consumer thread feeds it.  A frame from a different session replaces the
    race with a fresh one.

    Parameters
    ----------
    settings:
        Listening address and buffer size.
    source_factory:
        Callable returning a datagram source.  Injected for testability;
        defaults to a :class:`UdpDatagramSource` built from *settings*.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        source_factory: Callable[[], DatagramSource] | None = None,
    ) -> None:
        self._settings = settings or Settings()
        self._source_factory = source_factory or self._udp_source
        self._lock = threading.Lock()
        self._race = Race()
        self._session_uid: int | None = None
        self._pipeline: IngestionPipeline | None = None
        self._consumer: threading.Thread | None = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Start ingesting and feeding the race in background threads."""
        if self._pipeline is not None:
            return
        pipeline = IngestionPipeline(self._source_factory())
        frames = pipeline.frames()
        self._pipeline = pipeline
        self._consumer = threading.Thread(
            target=self._consume, args=(frames,), daemon=True, name="RaceConsumer"
        )
        self._consumer.start()
        pipeline.start_in_background()

    def stop(self) -> None:
        """Stop ingestion and wait for the consumer to drain."""
        if self._pipeline is None:
            return
        self._pipeline.stop()
        if self._consumer is not None:
            self._consumer.join(timeout=2.0)
        if self._pipeline.error is not None:
            _logger.warning("ingestion ended with error: %s", self._pipeline.error)
        self._pipeline = None
        self._consumer = None

    @property
    def running(self) -> bool:
        return self._pipeline is not None and self._pipeline.running

    # ------------------------------------------------------------------
    # Feeding & queries
    # ------------------------------------------------------------------

    def feed(self, frame: Frame) -> None:
        """Apply *frame* to the current race (starting a new one on session change)."""
        with self._lock:
            uid = frame.header.session_uid
            if self._session_uid is not None and uid != self._session_uid:
                _logger.info("new session %d; resetting race", uid)
                self._race = Race()
            self._session_uid = uid
            try:
                self._race.feed_frame(frame)
            except RaceStateError as exc:
                _logger.debug("ignored frame: %s", exc)

    def snapshot(self) -> RaceSnapshot:
        with self._lock:
            return RaceSnapshot(
                session_uid=self._session_uid,
                status=self._race.status,
                participants=list(self._race.participants),
                samples=len(self._race.race_lines),
            )

    def race_line(self, driver: Driver) -> list[SpatialLocation]:
        with self._lock:
            return self._race.race_lines_by_driver(driver)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _udp_source(self) -> UdpDatagramSource:
        s = self._settings
        return UdpDatagramSource(s.host, s.port, s.buffer_size)

    def _consume(self, frames) -> None:
        for frame in frames:
            self.feed(frame)
