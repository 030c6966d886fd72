"""Race — folds a stream of decoded frames into race state."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator

from race_telemetry.protocol import (
    Driver,
    EventBody,
    Frame,
    MotionBody,
    Participant,
    ParticipantsBody,
    SessionEnded,
    SessionStarted,
)
from race_telemetry.race.models import SpatialLocation, Status

_logger = logging.getLogger(__name__)


class RaceStateError(Exception):
    """Raised when a frame arrives that the current race state cannot apply."""


class RaceLines:
    """Ordered, append-only collection of :class:`SpatialLocation` samples."""

    def __init__(self, data: Iterable[SpatialLocation] = ()) -> None:
        self._data: list[SpatialLocation] = list(data)

    def by_driver(self, driver: Driver) -> RaceLines:
        """Return the samples of *driver*, in arrival order."""
        return RaceLines(loc for loc in self._data if loc.driver == driver)

    def to_list(self) -> list[SpatialLocation]:
        return list(self._data)

    def append(self, location: SpatialLocation) -> None:
        self._data.append(location)

    def __len__(self) -> int:
        return len(self._data)

    def __iter__(self) -> Iterator[SpatialLocation]:
        return iter(self._data)


class Race:
    """Running model of one session, built by feeding frames in arrival order.

    Not thread-safe: drive it from a single consumer.

    * Participants frames replace the roster (slot order is preserved, so
      ``participants[i]`` drives car slot ``i``).
    * ``SSTA`` moves the race to :attr:`Status.UNFOLDING`, ``SEND`` to
      :attr:`Status.FINISHED`.  Nothing leaves ``FINISHED``.
    * Motion frames append one sample per active participant to
      :attr:`race_lines`.
    """

    def __init__(self) -> None:
        self.status = Status.UNKNOWN
        self.participants: list[Participant] = []
        self.race_lines = RaceLines()
        self._roster_known = False

    @property
    def is_finished(self) -> bool:
        return self.status is Status.FINISHED

    # ------------------------------------------------------------------
    # Feeding
    # ------------------------------------------------------------------

    def feed_frame(self, frame: Frame) -> None:
        """Apply one frame.

        Raises
        ------
        RaceStateError
            If a motion frame arrives before any participants frame.
        """
        body = frame.body
        if isinstance(body, ParticipantsBody):
            self._handle_participants(body)
        elif isinstance(body, EventBody):
            self._handle_event(body)
        elif isinstance(body, MotionBody):
            self._handle_motion(frame.header.session_time, body)
        else:
            raise TypeError(f"unexpected frame body {type(body).__name__}")

    def consume(self, frames: Iterable[Frame], stop_when_finished: bool = True) -> int:
        """Feed every frame of *frames*; return how many were applied.

        With *stop_when_finished* the loop returns as soon as the session ends.
        Motion frames that arrive before the roster is known are skipped.
        """
        applied = 0
        for frame in frames:
            try:
                self.feed_frame(frame)
            except RaceStateError as exc:
                _logger.debug("skipped frame %d: %s", frame.header.frame_identifier, exc)
                continue
            applied += 1
            if stop_when_finished and self.is_finished:
                break
        return applied

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def race_lines_by_driver(self, driver: Driver) -> list[SpatialLocation]:
        """Return the samples of *driver* in chronological order."""
        return self.race_lines.by_driver(driver).to_list()

    def human_participants(self) -> list[Participant]:
        return [p for p in self.participants if p.is_human]

    def drivers(self) -> list[Driver]:
        return [p.driver_id for p in self.participants]

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _handle_participants(self, body: ParticipantsBody) -> None:
        self.participants = list(body.participants)
        self._roster_known = True

    def _handle_event(self, body: EventBody) -> None:
        details = body.details
        if isinstance(details, SessionStarted):
            if self.status is not Status.FINISHED:
                self._set_status(Status.UNFOLDING)
        elif isinstance(details, SessionEnded):
            self._set_status(Status.FINISHED)

    def _set_status(self, status: Status) -> None:
        if status is not self.status:
            _logger.info("race status %s -> %s", self.status.value, status.value)
        self.status = status

    def _handle_motion(self, timestamp: float, body: MotionBody) -> None:
        if not self._roster_known:
            raise RaceStateError("motion frame received before any participants frame")
        for participant, motion in zip(self.participants, body.car_motion):
            self.race_lines.append(
                SpatialLocation(
                    driver=participant.driver_id,
                    timestamp=timestamp,
                    coords=(
                        motion.world_position_x,
                        motion.world_position_z,
                        motion.world_position_y,
                    ),
                )
            )
