"""Binary decoder for the F1 2020 UDP telemetry protocol.

Public API
----------
decode_frame        - bytes → (Frame, remainder)
FrameDecoder        - stateless datagram → Frame decoder object
Frame, Header       - decoded packet and its header
EventBody, MotionBody, ParticipantsBody - supported bodies
DecodeError         - base of every decoding failure
"""

from race_telemetry.protocol.decoder import (
    MAX_PACKET_SIZE,
    FrameDecoder,
    decode_event_body,
    decode_frame,
    decode_header,
    decode_motion_body,
    decode_participants_body,
)
from race_telemetry.protocol.enums import (
    Driver,
    InfringementType,
    PacketType,
    PenaltyType,
    Team,
    decode_driver,
    decode_infringement_type,
    decode_packet_type,
    decode_penalty_type,
    decode_team,
)
from race_telemetry.protocol.errors import (
    DecodeError,
    InsufficientDataError,
    InvalidOrdinalError,
    UnknownEventCodeError,
    UnsupportedPacketTypeError,
)
from race_telemetry.protocol.models import (
    MAX_CARS,
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

__all__ = [
    "MAX_CARS",
    "MAX_PACKET_SIZE",
    "CarMotion",
    "ChequeredFlag",
    "DRSDisabled",
    "DRSEnabled",
    "DecodeError",
    "Driver",
    "EventBody",
    "EventDetails",
    "FastestLap",
    "Frame",
    "FrameDecoder",
    "Header",
    "InfringementType",
    "InsufficientDataError",
    "InvalidOrdinalError",
    "MotionBody",
    "PacketType",
    "Participant",
    "ParticipantsBody",
    "Penalty",
    "PenaltyType",
    "RaceWinner",
    "Retirement",
    "SessionEnded",
    "SessionStarted",
    "SpeedTrap",
    "Team",
    "TeamMateInPits",
    "UnknownEventCodeError",
    "UnsupportedPacketTypeError",
    "decode_driver",
    "decode_event_body",
    "decode_frame",
    "decode_header",
    "decode_infringement_type",
    "decode_motion_body",
    "decode_packet_type",
    "decode_participants_body",
    "decode_penalty_type",
    "decode_team",
]
