"""Tests for the Race aggregator."""

from __future__ import annotations

import logging

import pytest

from race_telemetry.protocol import Driver, FrameDecoder, Team
from race_telemetry.race import Race, RaceLines, RaceStateError, SpatialLocation, Status
from tests.packets import event_packet, motion_packet, participants_packet

_decoder = FrameDecoder()

HAMILTON = (Driver.LEWIS_HAMILTON.value, Team.MERCEDES.value, 1)
VERSTAPPEN = (Driver.MAX_VERSTAPPEN.value, Team.RED_BULL_RACING.value, 1)
HUMAN = (Driver.NETWORK_HUMAN.value, Team.MY_TEAM.value, 0)


def frame(datagram: bytes):
    return _decoder.decode(datagram)


def started(**header):
    return frame(event_packet(b"SSTA", **header))


def ended(**header):
    return frame(event_packet(b"SEND", **header))


def roster(*entries, **header):
    return frame(participants_packet(entries, **header))


def motion(positions, session_time: float = 0.0):
    return frame(motion_packet(positions, session_time=session_time))


# ---------------------------------------------------------------------------
# Status
# ---------------------------------------------------------------------------

class TestStatus:
    def test_initial_state(self):
        race = Race()
        assert race.status is Status.UNKNOWN
        assert race.participants == []
        assert len(race.race_lines) == 0
        assert not race.is_finished

    def test_session_start_and_end(self):
        race = Race()
        race.feed_frame(started())
        assert race.status is Status.UNFOLDING
        race.feed_frame(ended())
        assert race.status is Status.FINISHED
        assert race.is_finished

    def test_session_end_without_start_finishes(self):
        race = Race()
        race.feed_frame(ended())
        assert race.status is Status.FINISHED

    def test_finished_is_terminal(self):
        race = Race()
        race.feed_frame(ended())
        race.feed_frame(started())
        assert race.status is Status.FINISHED

    @pytest.mark.parametrize("code,payload", [
        (b"FTLP", bytes([3]) + b"\x00\x00\xa0\x42"),
        (b"DRSE", b""),
        (b"CHQF", b""),
        (b"RCWN", bytes([1])),
    ])
    def test_other_events_leave_status_alone(self, code, payload):
        race = Race()
        race.feed_frame(started())
        race.feed_frame(frame(event_packet(code, payload)))
        assert race.status is Status.UNFOLDING

    def test_status_change_is_logged(self, caplog):
        race = Race()
        with caplog.at_level(logging.INFO, logger="race_telemetry.race.aggregator"):
            race.feed_frame(started())
        assert "unknown -> unfolding" in caplog.text


# ---------------------------------------------------------------------------
# Participants
# ---------------------------------------------------------------------------

class TestParticipants:
    def test_roster_is_replaced_wholesale(self):
        race = Race()
        race.feed_frame(roster(HAMILTON, VERSTAPPEN))
        race.feed_frame(roster(VERSTAPPEN))
        assert race.drivers() == [Driver.MAX_VERSTAPPEN]

    def test_human_participants(self):
        race = Race()
        race.feed_frame(roster(HAMILTON, HUMAN, VERSTAPPEN))
        humans = race.human_participants()
        assert [p.driver_id for p in humans] == [Driver.NETWORK_HUMAN]
        assert humans[0].team is Team.MY_TEAM

    def test_participants_do_not_touch_status_or_lines(self):
        race = Race()
        race.feed_frame(roster(HAMILTON))
        assert race.status is Status.UNKNOWN
        assert len(race.race_lines) == 0


# ---------------------------------------------------------------------------
# Motion
# ---------------------------------------------------------------------------

class TestMotion:
    def test_motion_before_participants_is_rejected(self):
        race = Race()
        with pytest.raises(RaceStateError):
            race.feed_frame(motion([(1.0, 2.0, 3.0)]))
        assert len(race.race_lines) == 0

    def test_one_sample_per_active_participant(self):
        race = Race()
        race.feed_frame(roster(HAMILTON, VERSTAPPEN))
        race.feed_frame(motion([(1.0, 2.0, 3.0), (4.0, 5.0, 6.0), (7.0, 8.0, 9.0)], session_time=12.5))

        assert race.race_lines.to_list() == [
            SpatialLocation(Driver.LEWIS_HAMILTON, 12.5, (1.0, 3.0, 2.0)),
            SpatialLocation(Driver.MAX_VERSTAPPEN, 12.5, (4.0, 6.0, 5.0)),
        ]

    def test_coords_put_elevation_last(self):
        race = Race()
        race.feed_frame(roster(HAMILTON))
        race.feed_frame(motion([(10.0, -2.0, 30.0)]))
        (loc,) = race.race_lines
        assert loc.coords == (10.0, 30.0, -2.0)
        assert loc.ground_point == (10.0, 30.0)

    def test_empty_roster_appends_nothing(self):
        race = Race()
        race.feed_frame(roster())
        race.feed_frame(motion([]))
        assert len(race.race_lines) == 0

    def test_race_lines_by_driver_keeps_arrival_order(self):
        race = Race()
        race.feed_frame(roster(HAMILTON, VERSTAPPEN))
        for t in range(5):
            race.feed_frame(motion([(float(t), 0.0, 0.0), (-float(t), 0.0, 0.0)], session_time=float(t)))

        lines = race.race_lines_by_driver(Driver.LEWIS_HAMILTON)
        assert [loc.timestamp for loc in lines] == [0.0, 1.0, 2.0, 3.0, 4.0]
        assert all(loc.driver is Driver.LEWIS_HAMILTON for loc in lines)
        assert race.race_lines_by_driver(Driver.CARLOS_SAINZ) == []

    def test_roster_change_applies_to_later_motion_only(self):
        race = Race()
        race.feed_frame(roster(HAMILTON))
        race.feed_frame(motion([(1.0, 0.0, 0.0)]))
        race.feed_frame(roster(VERSTAPPEN))
        race.feed_frame(motion([(2.0, 0.0, 0.0)]))
        assert [loc.driver for loc in race.race_lines] == [
            Driver.LEWIS_HAMILTON,
            Driver.MAX_VERSTAPPEN,
        ]


# ---------------------------------------------------------------------------
# consume
# ---------------------------------------------------------------------------

class TestConsume:
    def test_skips_early_motion_and_counts_applied(self):
        frames = [
            motion([(1.0, 1.0, 1.0)]),
            started(),
            roster(HAMILTON),
            motion([(2.0, 2.0, 2.0)]),
        ]
        race = Race()
        assert race.consume(frames) == 3
        assert len(race.race_lines) == 1

    def test_stops_when_finished(self):
        frames = iter([started(), roster(HAMILTON), ended(), motion([(1.0, 1.0, 1.0)])])
        race = Race()
        assert race.consume(frames) == 3
        assert race.is_finished
        assert len(race.race_lines) == 0
        assert next(frames).body is not None

    def test_keeps_going_after_finish_when_asked(self):
        frames = [started(), roster(HAMILTON), ended(), motion([(1.0, 1.0, 1.0)])]
        race = Race()
        assert race.consume(frames, stop_when_finished=False) == 4
        assert race.is_finished
        assert len(race.race_lines) == 1


def test_race_lines_filtering():
    a = SpatialLocation(Driver.LEWIS_HAMILTON, 0.0, (0.0, 0.0, 0.0))
    b = SpatialLocation(Driver.MAX_VERSTAPPEN, 0.0, (1.0, 1.0, 1.0))
    lines = RaceLines([a, b, a])
    assert lines.by_driver(Driver.LEWIS_HAMILTON).to_list() == [a, a]
    assert len(lines) == 3
