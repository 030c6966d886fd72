"""Frame decoder — raw datagram bytes → typed :class:`Frame`.

Every ``decode_*`` function takes a buffer and returns ``(value, remainder)``
where *remainder* holds the unconsumed bytes.  Failures raise a
:class:`~race_telemetry.protocol.errors.DecodeError`; decoding never raises
anything else on malformed input and keeps no state between calls.
"""

from __future__ import annotations

import struct
from collections.abc import Callable
from types import MappingProxyType

from race_telemetry.protocol.enums import (
    PacketType,
    decode_driver,
    decode_infringement_type,
    decode_packet_type,
    decode_penalty_type,
    decode_team,
)
from race_telemetry.protocol.errors import (
    DecodeError,
    UnknownEventCodeError,
    UnsupportedPacketTypeError,
)
from race_telemetry.protocol.models import (
    MAX_CARS,
    Body,
    CarMotion,
    ChequeredFlag,
    DRSDisabled,
    DRSEnabled,
    EventBody,
    EventDetails,
    FastestLap,
    Frame,
    Header,
    MotionBody,
    Participant,
    ParticipantsBody,
    Penalty,
    RaceWinner,
    Retirement,
    SessionEnded,
    SessionStarted,
    SpeedTrap,
    TeamMateInPits,
)
from race_telemetry.protocol.reader import ByteReader

# ---------------------------------------------------------------------------
# Wire layouts
# ---------------------------------------------------------------------------

HEADER_SIZE = 24

# 6 × f32 position/velocity, 6 × u16 directions, 6 × f32 g-forces/orientation
_CAR_MOTION = struct.Struct("<6f6H6f")
CAR_MOTION_SIZE = _CAR_MOTION.size  # 60

# aiControlled, driverId, teamId, raceNumber, nationality, name[48], yourTelemetry
_PARTICIPANT = struct.Struct("<5B48sB")
PARTICIPANT_SIZE = _PARTICIPANT.size  # 54

MAX_PACKET_SIZE = 1464
"""Largest packet of the protocol (the full motion packet)."""


# ---------------------------------------------------------------------------
# Header
# ---------------------------------------------------------------------------


def _read_header(reader: ByteReader) -> Header:
    packet_format = reader.u16("packet_format")
    game_major_version = reader.u8("game_major_version")
    game_minor_version = reader.u8("game_minor_version")
    packet_version = reader.u8("packet_version")
    id_offset = reader.offset
    try:
        packet_id = decode_packet_type(reader.u8("packet_id"))
    except DecodeError as exc:
        exc.field = exc.field or "packet_id"
        exc.offset = id_offset if exc.offset is None else exc.offset
        raise
    return Header(
        packet_format=packet_format,
        game_major_version=game_major_version,
        game_minor_version=game_minor_version,
        packet_version=packet_version,
        packet_id=packet_id,
        session_uid=reader.u64("session_uid"),
        session_time=reader.f32("session_time"),
        frame_identifier=reader.u32("frame_identifier"),
        player_car_index=reader.u8("player_car_index"),
        secondary_player_car_index=reader.u8("secondary_player_car_index"),
    )


def decode_header(buf: bytes) -> tuple[Header, bytes]:
    """Decode the 24-byte packet header at the start of *buf*."""
    reader = ByteReader(buf)
    try:
        header = _read_header(reader)
    except DecodeError as exc:
        raise exc.located("header") from None
    return header, reader.remainder()


# ---------------------------------------------------------------------------
# Event
# ---------------------------------------------------------------------------


def _vehicle(reader: ByteReader) -> int:
    return reader.u8("vehicle_id")


def _read_penalty(reader: ByteReader) -> Penalty:
    offset = reader.offset
    try:
        penalty_type = decode_penalty_type(reader.u8("penalty_type"))
    except DecodeError as exc:
        exc.field, exc.offset = "penalty_type", offset
        raise
    offset = reader.offset
    try:
        infringement_type = decode_infringement_type(reader.u8("infringement_type"))
    except DecodeError as exc:
        exc.field, exc.offset = "infringement_type", offset
        raise
    return Penalty(
        penalty_type=penalty_type,
        infringement_type=infringement_type,
        vehicle_id=reader.u8("vehicle_id"),
        other_vehicle_id=reader.u8("other_vehicle_id"),
        time=reader.u8("time"),
        lap_number=reader.u8("lap_number"),
        places_gained=reader.u8("places_gained"),
    )


# event code → payload reader
_EVENT_DETAILS: MappingProxyType[str, Callable[[ByteReader], EventDetails]] = MappingProxyType({
    "SSTA": lambda r: SessionStarted(),
    "SEND": lambda r: SessionEnded(),
    "FTLP": lambda r: FastestLap(vehicle_id=_vehicle(r), lap_time=r.f32("lap_time")),
    "RTMT": lambda r: Retirement(vehicle_id=_vehicle(r)),
    "DRSE": lambda r: DRSEnabled(),
    "DRSD": lambda r: DRSDisabled(),
    "TMPT": lambda r: TeamMateInPits(vehicle_id=_vehicle(r)),
    "CHQF": lambda r: ChequeredFlag(),
    "RCWN": lambda r: RaceWinner(),
    "PENA": _read_penalty,
    "SPTP": lambda r: SpeedTrap(vehicle_id=_vehicle(r), speed=r.f32("speed")),
})


def _read_event(reader: ByteReader) -> EventBody:
    start = reader.offset
    reader.require(4, "code")
    try:
        code = reader.ascii(4, "code")
    except DecodeError:
        raise UnknownEventCodeError(reader.take(4, "code"), offset=start) from None
    read_details = _EVENT_DETAILS.get(code)
    if read_details is None:
        raise UnknownEventCodeError(code.encode("ascii"), offset=start)
    return EventBody(code=code, details=read_details(reader))


def decode_event_body(buf: bytes) -> tuple[EventBody, bytes]:
    """Decode an event body: 4-byte code followed by its code-specific payload."""
    reader = ByteReader(buf)
    try:
        body = _read_event(reader)
    except DecodeError as exc:
        raise exc.located("event") from None
    return body, reader.remainder()


# ---------------------------------------------------------------------------
# Motion
# ---------------------------------------------------------------------------


def _read_motion(reader: ByteReader) -> MotionBody:
    reader.require(CAR_MOTION_SIZE * MAX_CARS, "car_motion")
    return MotionBody(
        car_motion=tuple(
            CarMotion(*reader.unpack(_CAR_MOTION, "car_motion")) for _ in range(MAX_CARS)
        )
    )


def decode_motion_body(buf: bytes) -> tuple[MotionBody, bytes]:
    """Decode the 22 car motion records; trailing player-only data is left over."""
    reader = ByteReader(buf)
    try:
        body = _read_motion(reader)
    except DecodeError as exc:
        raise exc.located("motion") from None
    return body, reader.remainder()


# ---------------------------------------------------------------------------
# Participants
# ---------------------------------------------------------------------------


def _read_participant(reader: ByteReader) -> Participant:
    start = reader.offset
    ai_controlled, driver_raw, team_raw, race_number, nationality, name, your_telemetry = (
        reader.unpack(_PARTICIPANT, "participant")
    )
    try:
        driver_id = decode_driver(driver_raw)
    except DecodeError as exc:
        exc.field, exc.offset = "driver_id", start + 1
        raise
    try:
        team = decode_team(team_raw)
    except DecodeError as exc:
        exc.field, exc.offset = "team", start + 2
        raise
    return Participant(
        driver_id=driver_id,
        team=team,
        ai_controlled=ai_controlled,
        race_number=race_number,
        nationality=nationality,
        name=name.split(b"\x00", 1)[0].decode("utf-8", errors="replace"),
        your_telemetry=your_telemetry,
    )


def _read_participants(reader: ByteReader) -> ParticipantsBody:
    offset = reader.offset
    num_active_cars = reader.u8("num_active_cars")
    if num_active_cars > MAX_CARS:
        raise DecodeError(
            f"num_active_cars {num_active_cars} exceeds {MAX_CARS} slots",
            field="num_active_cars",
            offset=offset,
        )
    reader.require(PARTICIPANT_SIZE * MAX_CARS, "participants")
    participants = tuple(_read_participant(reader) for _ in range(num_active_cars))
    # Inactive slots carry no meaning and are not validated.
    reader.skip(PARTICIPANT_SIZE * (MAX_CARS - num_active_cars), "participants")
    return ParticipantsBody(num_active_cars=num_active_cars, participants=participants)


def decode_participants_body(buf: bytes) -> tuple[ParticipantsBody, bytes]:
    """Decode the active participants of a participants packet."""
    reader = ByteReader(buf)
    try:
        body = _read_participants(reader)
    except DecodeError as exc:
        raise exc.located("participants") from None
    return body, reader.remainder()


# ---------------------------------------------------------------------------
# Frame
# ---------------------------------------------------------------------------

BODY_DECODERS: MappingProxyType[PacketType, Callable[[bytes], tuple[Body, bytes]]] = (
    MappingProxyType({
        PacketType.MOTION: decode_motion_body,
        PacketType.EVENT: decode_event_body,
        PacketType.PARTICIPANTS: decode_participants_body,
    })
)


def decode_frame(buf: bytes) -> tuple[Frame, bytes]:
    """Decode header and body of one packet.

    Offsets reported by body errors are relative to the start of *buf*.

    Raises
    ------
    UnsupportedPacketTypeError
        If the header names a packet type without a body decoder.
    DecodeError
        On any malformed or truncated input.
    """
    header, rest = decode_header(buf)
    decode_body = BODY_DECODERS.get(header.packet_id)
    if decode_body is None:
        raise UnsupportedPacketTypeError(header.packet_id)
    try:
        body, rest = decode_body(rest)
    except DecodeError as exc:
        raise exc.located(exc.stage, HEADER_SIZE) from None
    return Frame(header=header, body=body), rest


class FrameDecoder:
    """Decodes one datagram into a :class:`Frame`.

    Stateless; an instance can be shared or replaced with a mock in tests.
    """

    def decode(self, datagram: bytes) -> Frame:
        """Decode *datagram*, ignoring any bytes after the body."""
        frame, _ = decode_frame(datagram)
        return frame
