"""GET /api/race and /api/race/lines/{driver}."""

from __future__ import annotations

import pytest

from race_telemetry.protocol import Driver, FrameDecoder, Team
from tests.packets import event_packet, motion_packet, participants_packet

_decoder = FrameDecoder()

ROSTER = [
    (Driver.LEWIS_HAMILTON.value, Team.MERCEDES.value, 1),
    (Driver.NETWORK_HUMAN.value, Team.MY_TEAM.value, 0),
]


def _feed(service, datagram: bytes) -> None:
    service.feed(_decoder.decode(datagram))


@pytest.fixture
def live(service):
    """Service with a started session, two participants and two motion frames."""
    _feed(service, event_packet(b"SSTA", session_uid=7))
    _feed(service, participants_packet(ROSTER, session_uid=7))
    _feed(service, motion_packet([(1.0, 2.0, 3.0), (4.0, 5.0, 6.0)], session_uid=7, session_time=0.5))
    _feed(service, motion_packet([(1.5, 2.0, 3.5), (4.5, 5.0, 6.5)], session_uid=7, session_time=1.0))
    return service


def test_race_before_any_frame(client):
    data = client.get("/api/race").json()
    assert data == {"session_uid": None, "status": "unknown", "participants": [], "samples": 0}


def test_race_summary(client, live):
    resp = client.get("/api/race")
    assert resp.status_code == 200
    data = resp.json()
    assert data["session_uid"] == 7
    assert data["status"] == "unfolding"
    assert data["samples"] == 4
    assert [p["driver"] for p in data["participants"]] == ["LEWIS_HAMILTON", "NETWORK_HUMAN"]
    human = data["participants"][1]
    assert human["slot"] == 1
    assert human["driver_id"] == 255
    assert human["team"] == "MY_TEAM"
    assert human["ai_controlled"] is False


def test_race_line_by_id(client, live):
    data = client.get(f"/api/race/lines/{Driver.LEWIS_HAMILTON.value}").json()
    assert data["driver"] == "LEWIS_HAMILTON"
    assert data["points"] == [
        {"timestamp": 0.5, "x": 1.0, "z": 3.0, "y": 2.0},
        {"timestamp": 1.0, "x": 1.5, "z": 3.5, "y": 2.0},
    ]


def test_race_line_by_name(client, live):
    data = client.get("/api/race/lines/network_human").json()
    assert data["driver_id"] == 255
    assert [p["x"] for p in data["points"]] == [4.0, 4.5]


def test_race_line_of_absent_driver_is_empty(client, live):
    data = client.get("/api/race/lines/carlos_sainz").json()
    assert data["points"] == []


@pytest.mark.parametrize("driver", ["3", "nobody", "999"])
def test_unknown_driver_returns_404(client, driver):
    resp = client.get(f"/api/race/lines/{driver}")
    assert resp.status_code == 404


def test_finished_race(client, live):
    _feed(live, event_packet(b"SEND", session_uid=7))
    assert client.get("/api/race").json()["status"] == "finished"
