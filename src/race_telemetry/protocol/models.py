"""Typed frames of the F1 2020 telemetry protocol."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from race_telemetry.protocol.enums import (
    Driver,
    InfringementType,
    PacketType,
    PenaltyType,
    Team,
)

MAX_CARS = 22
"""Number of car slots in every per-car array of the protocol."""


@dataclass(frozen=True)
class Header:
    """Header shared by every packet (24 bytes on the wire)."""

    packet_format: int
    """Game year, e.g. ``2020``."""

    game_major_version: int
    game_minor_version: int
    packet_version: int

    packet_id: PacketType
    """Type of the body that follows."""

    session_uid: int
    """Opaque 64-bit identity of the session."""

    session_time: float
    """Seconds since the session started."""

    frame_identifier: int
    player_car_index: int
    secondary_player_car_index: int
    """255 when there is no second player."""


# ---------------------------------------------------------------------------
# Event
# ---------------------------------------------------------------------------


class EventDetails:
    """Base of the event variants selected by an event's 4-byte code."""

    __slots__ = ()


@dataclass(frozen=True)
class SessionStarted(EventDetails):
    pass


@dataclass(frozen=True)
class SessionEnded(EventDetails):
    pass


@dataclass(frozen=True)
class ChequeredFlag(EventDetails):
    pass


@dataclass(frozen=True)
class DRSEnabled(EventDetails):
    pass


@dataclass(frozen=True)
class DRSDisabled(EventDetails):
    pass


@dataclass(frozen=True)
class RaceWinner(EventDetails):
    pass


@dataclass(frozen=True)
class FastestLap(EventDetails):
    vehicle_id: int
    lap_time: float
    """Lap time in seconds."""


@dataclass(frozen=True)
class Retirement(EventDetails):
    vehicle_id: int


@dataclass(frozen=True)
class TeamMateInPits(EventDetails):
    vehicle_id: int


@dataclass(frozen=True)
class SpeedTrap(EventDetails):
    vehicle_id: int
    speed: float
    """Top speed in km/h."""


@dataclass(frozen=True)
class Penalty(EventDetails):
    penalty_type: PenaltyType
    infringement_type: InfringementType
    vehicle_id: int
    other_vehicle_id: int
    time: int
    lap_number: int
    """Lap on which the infringement was committed."""
    places_gained: int


@dataclass(frozen=True)
class EventBody:
    code: str
    """4-character ASCII event code, e.g. ``"SSTA"``."""

    details: EventDetails


# ---------------------------------------------------------------------------
# Motion
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CarMotion:
    """Physics state of one car (60 bytes on the wire).

    Direction vectors are kept in their normalised 16-bit wire encoding.
    There is deliberately no zero/default instance: an all-zero record is a
    real, if degenerate, physical state.
    """

    world_position_x: float
    world_position_y: float
    world_position_z: float
    world_velocity_x: float
    world_velocity_y: float
    world_velocity_z: float
    world_forward_direction_x: int
    world_forward_direction_y: int
    world_forward_direction_z: int
    world_right_direction_x: int
    world_right_direction_y: int
    world_right_direction_z: int
    g_force_lateral: float
    g_force_longitudinal: float
    g_force_vertical: float
    yaw: float
    pitch: float
    roll: float

    @property
    def world_position(self) -> tuple[float, float, float]:
        return (self.world_position_x, self.world_position_y, self.world_position_z)


@dataclass(frozen=True)
class MotionBody:
    car_motion: tuple[CarMotion, ...]
    """Exactly :data:`MAX_CARS` records, indexed by car slot."""

    def __post_init__(self) -> None:
        if len(self.car_motion) != MAX_CARS:
            raise ValueError(
                f"MotionBody needs {MAX_CARS} car motion records, got {len(self.car_motion)}"
            )


# ---------------------------------------------------------------------------
# Participants
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Participant:
    """One car/driver slot of the session (54 bytes on the wire)."""

    driver_id: Driver
    team: Team
    ai_controlled: int
    """0 = human controlled, anything else = AI."""

    race_number: int = 0
    nationality: int = 0
    name: str = ""
    your_telemetry: int = 0
    """0 = restricted, 1 = public (online sessions)."""

    @property
    def is_human(self) -> bool:
        return self.ai_controlled == 0


@dataclass(frozen=True)
class ParticipantsBody:
    """Active participants of the session.

    The wire array always has :data:`MAX_CARS` slots; only the first
    ``num_active_cars`` are meaningful and only those are kept.
    """

    num_active_cars: int
    participants: tuple[Participant, ...]

    def __post_init__(self) -> None:
        if not 0 <= self.num_active_cars <= MAX_CARS:
            raise ValueError(f"num_active_cars out of range: {self.num_active_cars}")
        if len(self.participants) != self.num_active_cars:
            raise ValueError(
                f"{self.num_active_cars} active cars but {len(self.participants)} participants"
            )


# ---------------------------------------------------------------------------
# Frame
# ---------------------------------------------------------------------------

Body = Union[EventBody, MotionBody, ParticipantsBody]


@dataclass(frozen=True)
class Frame:
    """One decoded packet: header plus typed body."""

    header: Header
    body: Body
