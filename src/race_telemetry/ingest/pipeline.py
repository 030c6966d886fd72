"""IngestionPipeline — datagram source → frame decoder → work queue."""

from __future__ import annotations

import logging
import threading

from race_telemetry.ingest.source import DatagramSource, TransportError
from race_telemetry.ingest.work_queue import PublishError, Subscription, WorkQueue
from race_telemetry.protocol import DecodeError, Frame, FrameDecoder

_logger = logging.getLogger(__name__)


class IngestionPipeline:
    """Reads datagrams, decodes them and publishes the frames.

    Datagrams that fail to decode (corrupt, truncated or of an unsupported
    packet type) are dropped and the loop carries on; consumers never see
    them.  Frames are handed out through :meth:`frames`.

    Parameters
    ----------
    source:
        Object with ``read() -> bytes | None`` and ``close()``; ``None`` from
        ``read`` means the source is exhausted.
    decoder:
        Object with ``decode(datagram: bytes) -> Frame``.  Defaults to
        :class:`~race_telemetry.protocol.FrameDecoder`.
    work_queue:
        Queue to publish on.  A fresh :class:`WorkQueue` by default.
    """

    def __init__(
        self,
        source: DatagramSource,
        decoder: FrameDecoder | None = None,
        work_queue: WorkQueue[Frame] | None = None,
    ) -> None:
        self._source = source
        self._decoder = decoder or FrameDecoder()
        self._queue: WorkQueue[Frame] = work_queue if work_queue is not None else WorkQueue()
        self._thread: threading.Thread | None = None
        self.received = 0
        self.published = 0
        self.discarded = 0
        self.error: Exception | None = None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def frames(self) -> Subscription[Frame]:
        """Return a new blocking iterator over published frames.

        Every frame goes to exactly one of the subscriptions open at the time
        it is pulled; subscriptions do not each receive a copy.  Iteration
        ends once the pipeline has stopped and the queue is drained.
        """
        return self._queue.subscribe()

    def start(self) -> None:
        """Run the read loop in the calling thread until the source is exhausted.

        Raises
        ------
        TransportError
            If the source fails.
        PublishError
            If every subscription has been closed.
        """
        _logger.info("ingestion started")
        try:
            while True:
                try:
                    datagram = self._source.read()
                except TransportError:
                    _logger.warning("datagram source failed; stopping ingestion")
                    raise
                if datagram is None:
                    _logger.info("datagram source exhausted")
                    return
                self.received += 1

                try:
                    frame = self._decoder.decode(datagram)
                except DecodeError as exc:
                    self.discarded += 1
                    _logger.debug("discarded %d-byte datagram: %s", len(datagram), exc)
                    continue

                try:
                    self._queue.publish(frame)
                except PublishError:
                    _logger.warning("no consumer left for frames; stopping ingestion")
                    raise
                self.published += 1
        finally:
            self._queue.close()
            _logger.info(
                "ingestion stopped: %d received, %d published, %d discarded",
                self.received,
                self.published,
                self.discarded,
            )

    def start_in_background(self) -> threading.Thread:
        """Run :meth:`start` on a daemon thread.

        The exception that ended the loop, if any, is stored in :attr:`error`.
        """
        self._thread = threading.Thread(target=self._run, daemon=True, name="IngestionPipeline")
        self._thread.start()
        return self._thread

    def stop(self, timeout: float | None = 2.0) -> None:
        """Close the source, which ends the read loop, and join the thread."""
        self._source.close()
        if self._thread is not None:
            self._thread.join(timeout=timeout)
            self._thread = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _run(self) -> None:
        try:
            self.start()
        except (TransportError, PublishError) as exc:
            self.error = exc
