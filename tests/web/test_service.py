"""RaceService: feeding, session changes and the background lifecycle."""

from __future__ import annotations

import time

from race_telemetry.ingest import IterableSource
from race_telemetry.protocol import Driver, FrameDecoder, Team
from race_telemetry.race import Status
from race_telemetry.web.service import RaceService
from tests.packets import event_packet, motion_packet, participants_packet

_decoder = FrameDecoder()

HAMILTON = (Driver.LEWIS_HAMILTON.value, Team.MERCEDES.value, 1)


def _session(uid: int) -> list[bytes]:
    return [
        event_packet(b"SSTA", session_uid=uid),
        participants_packet([HAMILTON], session_uid=uid),
        motion_packet([(1.0, 2.0, 3.0)], session_uid=uid, session_time=1.0),
    ]


def _wait_until(predicate, timeout: float = 2.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


def test_feed_builds_snapshot():
    service = RaceService(source_factory=lambda: IterableSource([]))
    for datagram in _session(1):
        service.feed(_decoder.decode(datagram))

    snap = service.snapshot()
    assert snap.session_uid == 1
    assert snap.status is Status.UNFOLDING
    assert [p.driver_id for p in snap.participants] == [Driver.LEWIS_HAMILTON]
    assert snap.samples == 1
    assert len(service.race_line(Driver.LEWIS_HAMILTON)) == 1


def test_new_session_resets_race():
    service = RaceService(source_factory=lambda: IterableSource([]))
    for datagram in _session(1) + [event_packet(b"SEND", session_uid=1)]:
        service.feed(_decoder.decode(datagram))
    assert service.snapshot().status is Status.FINISHED

    service.feed(_decoder.decode(event_packet(b"SSTA", session_uid=2)))

    snap = service.snapshot()
    assert snap.session_uid == 2
    assert snap.status is Status.UNFOLDING
    assert snap.participants == []
    assert snap.samples == 0


def test_motion_before_roster_is_ignored():
    service = RaceService(source_factory=lambda: IterableSource([]))
    service.feed(_decoder.decode(motion_packet([(1.0, 1.0, 1.0)])))
    assert service.snapshot().samples == 0


def test_background_ingestion_feeds_race():
    datagrams = _session(5) + [b"garbage"]
    service = RaceService(source_factory=lambda: IterableSource(datagrams))

    service.start()
    try:
        assert _wait_until(lambda: service.snapshot().samples == 1)
        assert _wait_until(lambda: not service.running)
    finally:
        service.stop()

    snap = service.snapshot()
    assert snap.session_uid == 5
    assert snap.status is Status.UNFOLDING


def test_start_is_idempotent_and_stop_without_start_is_noop():
    calls = []

    def factory():
        calls.append(1)
        return IterableSource([])

    service = RaceService(source_factory=factory)
    service.stop()
    service.start()
    service.start()
    service.stop()
    assert calls == [1]
    assert not service.running
