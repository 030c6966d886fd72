"""Enumerations of the F1 2020 telemetry protocol and their ordinal decoders.

Each ``decode_*`` function maps one wire byte to an enumeration member through
an explicit ordinal table.  Bytes outside the table raise
:class:`~race_telemetry.protocol.errors.InvalidOrdinalError`; nothing is
coerced to a default.

``PenaltyType`` and ``InfringementType`` are plain :class:`~enum.Enum` s: the
wire protocol maps two adjacent bytes to the same member in a few places, so
member values are not wire ordinals.  The tables below are the only source of
truth for them.
"""

from __future__ import annotations

from enum import Enum, IntEnum, auto
from types import MappingProxyType

from race_telemetry.protocol.errors import InvalidOrdinalError


class PacketType(IntEnum):
    """The ten packet types of the protocol; value = wire ordinal."""

    MOTION = 0
    SESSION = 1
    LAP_DATA = 2
    EVENT = 3
    PARTICIPANTS = 4
    CAR_SETUPS = 5
    CAR_TELEMETRY = 6
    CAR_STATUS = 7
    FINAL_CLASSIFICATION = 8
    LOBBY_INFO = 9


class PenaltyType(Enum):
    DRIVE_THROUGH = auto()
    STOP_GO = auto()
    GRID_PENALTY = auto()
    PENALTY_REMINDER = auto()
    TIME_PENALTY = auto()
    WARNING = auto()
    DISQUALIFIED = auto()
    REMOVED_FROM_FORMATION_LAP = auto()
    PARKED_TOO_LONG_TIMER = auto()
    TYRE_REGULATIONS = auto()
    THIS_LAP_INVALIDATED = auto()
    THIS_AND_NEXT_LAP_INVALIDATED = auto()
    THIS_LAP_INVALIDATED_WITHOUT_REASON = auto()
    THIS_AND_PREVIOUS_LAP_INVALIDATED = auto()
    THIS_AND_PREVIOUS_LAP_INVALIDATED_WITHOUT_REASON = auto()
    RETIRED = auto()
    BLACK_FLAG_TIMER = auto()


class InfringementType(Enum):
    BLOCKING_BY_SLOW_DRIVING = auto()
    BLOCKING_BY_WRONG_WAY_DRIVING = auto()
    REVERSING_OFF_THE_START_LINE = auto()
    BIG_COLLISION = auto()
    SMALL_COLLISION = auto()
    COLLISION_FAILED_TO_HAND_BACK_POSITION_SINGLE = auto()
    COLLISION_FAILED_TO_HAND_BACK_POSITION_MULTIPLE = auto()
    CORNER_CUTTING_GAINED_TIME = auto()
    CORNER_CUTTING_OVERTAKE_SINGLE = auto()
    CORNER_CUTTING_OVERTAKE_MULTIPLE = auto()
    CROSSED_PIT_EXIT_LANE = auto()
    IGNORING_BLUE_FLAGS = auto()
    IGNORING_YELLOW_FLAGS = auto()
    IGNORING_DRIVE_THROUGH = auto()
    TOO_MANY_DRIVE_THROUGHS = auto()
    DRIVE_THROUGH_REMINDER_SERVE_WITHIN_N_LAPS = auto()
    DRIVE_THROUGH_REMINDER_SERVE_THIS_LAP = auto()
    PIT_LANE_SPEEDING = auto()
    PARKED_FOR_TOO_LONG = auto()
    IGNORING_TYRE_REGULATIONS = auto()
    TOO_MANY_PENALTIES = auto()
    MULTIPLE_WARNINGS = auto()
    APPROACHING_DISQUALIFICATION = auto()
    TYRE_REGULATIONS_SELECT_SINGLE = auto()
    TYRE_REGULATIONS_SELECT_MULTIPLE = auto()
    LAP_INVALIDATED_CORNER_CUTTING = auto()
    LAP_INVALIDATED_RUNNING_WIDE = auto()
    CORNER_CUTTING_RAN_WIDE_GAINED_TIME_MINOR = auto()
    CORNER_CUTTING_RAN_WIDE_GAINED_TIME_SIGNIFICANT = auto()
    CORNER_CUTTING_RAN_WIDE_GAINED_TIME_EXTREME = auto()
    LAP_INVALIDATED_WALL_RIDING = auto()
    LAP_INVALIDATED_FLASHBACK_USED = auto()
    LAP_INVALIDATED_RESET_TO_TRACK = auto()
    BLOCKING_PIT_LANE = auto()
    JUMP_START = auto()
    SAFETY_CAR_TO_CAR_COLLISION = auto()
    SAFETY_CAR_ILLEGAL_OVERTAKE = auto()
    SAFETY_CAR_EXCEEDING_ALLOWED_PACE = auto()
    VIRTUAL_SAFETY_CAR_EXCEEDING_ALLOWED_PACE = auto()
    FORMATION_LAP_BELOW_ALLOWED_SPEED = auto()
    RETIRED_MECHANICAL_FAILURE = auto()
    RETIRED_TERMINALLY_DAMAGED = auto()
    SAFETY_CAR_FALLING_TOO_FAR_BACK = auto()
    BLACK_FLAG_TIMER = auto()
    UNSERVED_STOP_GO_PENALTY = auto()
    UNSERVED_DRIVE_THROUGH_PENALTY = auto()
    ENGINE_COMPONENT_CHANGE = auto()
    GEARBOX_CHANGE = auto()
    LEAGUE_GRID_PENALTY = auto()
    RETRY_PENALTY = auto()
    ILLEGAL_TIME_GAIN = auto()
    MANDATORY_PITSTOP = auto()


class Team(IntEnum):
    """Team ids; value = wire ordinal."""

    MERCEDES = 0
    FERRARI = 1
    RED_BULL_RACING = 2
    WILLIAMS = 3
    RACING_POINT = 4
    RENAULT = 5
    ALPHA_TAURI = 6
    HAAS = 7
    MCLAREN = 8
    ALFA_ROMEO = 9
    MCLAREN_1988 = 10
    MCLAREN_1991 = 11
    WILLIAMS_1992 = 12
    FERRARI_1995 = 13
    WILLIAMS_1996 = 14
    MCLAREN_1998 = 15
    FERRARI_2002 = 16
    FERRARI_2004 = 17
    RENAULT_2006 = 18
    FERRARI_2007 = 19
    MCLAREN_2008 = 20
    RED_BULL_2010 = 21
    FERRARI_1976 = 22
    ART_GRAND_PRIX = 23
    CAMPOS_VEXATEC_RACING = 24
    CARLIN = 25
    CHAROUZ_RACING_SYSTEM = 26
    DAMS = 27
    RUSSIAN_TIME = 28
    MP_MOTORSPORT = 29
    PERTAMINA = 30
    MCLAREN_1990 = 31
    TRIDENT = 32
    BWT_ARDEN = 33
    MCLAREN_1976 = 34
    LOTUS_1972 = 35
    FERRARI_1979 = 36
    MCLAREN_1982 = 37
    WILLIAMS_2003 = 38
    BRAWN_2009 = 39
    LOTUS_1978 = 40
    F1_GENERIC_CAR = 41
    ART_GP_2019 = 42
    CAMPOS_2019 = 43
    CARLIN_2019 = 44
    SAUBER_JUNIOR_CHAROUZ_2019 = 45
    DAMS_2019 = 46
    UNI_VIRTUOSI_2019 = 47
    MP_MOTORSPORT_2019 = 48
    PREMA_2019 = 49
    TRIDENT_2019 = 50
    ARDEN_2019 = 51
    BENETTON_1994 = 53
    BENETTON_1995 = 54
    FERRARI_2000 = 55
    JORDAN_1991 = 56
    MY_TEAM = 255


class Driver(IntEnum):
    """Driver ids; value = wire ordinal.  The table is sparse."""

    CARLOS_SAINZ = 0
    DANIIL_KVYAT = 1
    DANIEL_RICCIARDO = 2
    KIMI_RAIKKONEN = 6
    LEWIS_HAMILTON = 7
    MAX_VERSTAPPEN = 9
    NICO_HULKENBERG = 10
    KEVIN_MAGNUSSEN = 11
    ROMAIN_GROSJEAN = 12
    SEBASTIAN_VETTEL = 13
    SERGIO_PEREZ = 14
    VALTTERI_BOTTAS = 15
    ESTEBAN_OCON = 17
    LANCE_STROLL = 19
    ARRON_BARNES = 20
    MARTIN_GILES = 21
    ALEX_MURRAY = 22
    LUCAS_ROTH = 23
    IGOR_CORREIA = 24
    SOPHIE_LEVASSEUR = 25
    JONAS_SCHIFFER = 26
    ALAIN_FOREST = 27
    JAY_LETOURNEAU = 28
    ESTO_SAARI = 29
    YASAR_ATIYEH = 30
    CALLISTO_CALABRESI = 31
    NAOTA_IZUM = 32
    HOWARD_CLARKE = 33
    WILHEIM_KAUFMANN = 34
    MARIE_LAURSEN = 35
    FLAVIO_NIEVES = 36
    PETER_BELOUSOV = 37
    KLIMEK_MICHALSKI = 38
    SANTIAGO_MORENO = 39
    BENJAMIN_COPPENS = 40
    NOAH_VISSER = 41
    GERT_WALDMULLER = 42
    JULIAN_QUESADA = 43
    DANIEL_JONES = 44
    ARTEM_MARKELOV = 45
    TADASUKE_MAKINO = 46
    SEAN_GELAEL = 47
    NYCK_DE_VRIES = 48
    JACK_AITKEN = 49
    GEORGE_RUSSELL = 50
    MAXIMILIAN_GUNTHER = 51
    NIREI_FUKUZUMI = 52
    LUCA_GHIOTTO = 53
    LANDO_NORRIS = 54
    SERGIO_SETTE_CAMARA = 55
    LOUIS_DELETRAZ = 56
    ANTONIO_FUOCO = 57
    CHARLES_LECLERC = 58
    PIERRE_GASLY = 59
    ALEXANDER_ALBON = 62
    NICHOLAS_LATIFI = 63
    DORIAN_BOCCOLACCI = 64
    NIKO_KARI = 65
    ROBERTO_MERHI = 66
    ARJUN_MAINI = 67
    ALESSIO_LORANDI = 68
    RUBEN_MEIJER = 69
    RASHID_NAIR = 70
    JACK_TREMBLAY = 71
    ANTONIO_GIOVINAZZI = 74
    ROBERT_KUBICA = 75
    NOBUHARU_MATSUSHITA = 78
    NIKITA_MAZEPIN = 79
    GUANYA_ZHOU = 80
    MICK_SCHUMACHER = 81
    CALLUM_ILOTT = 82
    JUAN_MANUEL_CORREA = 83
    JORDAN_KING = 84
    MAHAVEER_RAGHUNATHAN = 85
    TATIANA_CALDERON = 86
    ANTHOINE_HUBERT = 87
    GUILIANO_ALESI = 88
    RALPH_BOSCHUNG = 89
    # Human player in an online session.
    NETWORK_HUMAN = 255


# ---------------------------------------------------------------------------
# Ordinal tables
# ---------------------------------------------------------------------------

PACKET_TYPES = MappingProxyType({m.value: m for m in PacketType})
TEAMS = MappingProxyType({m.value: m for m in Team})
DRIVERS = MappingProxyType({m.value: m for m in Driver})

_P = PenaltyType
PENALTY_TYPES = MappingProxyType({
    0: _P.DRIVE_THROUGH,
    1: _P.STOP_GO,
    2: _P.GRID_PENALTY,
    3: _P.PENALTY_REMINDER,
    4: _P.TIME_PENALTY,
    5: _P.WARNING,
    6: _P.DISQUALIFIED,
    7: _P.REMOVED_FROM_FORMATION_LAP,
    8: _P.PARKED_TOO_LONG_TIMER,
    9: _P.TYRE_REGULATIONS,
    10: _P.THIS_LAP_INVALIDATED,
    11: _P.THIS_AND_NEXT_LAP_INVALIDATED,
    12: _P.THIS_LAP_INVALIDATED_WITHOUT_REASON,
    13: _P.THIS_AND_PREVIOUS_LAP_INVALIDATED,
    14: _P.THIS_AND_PREVIOUS_LAP_INVALIDATED,
    15: _P.THIS_AND_PREVIOUS_LAP_INVALIDATED_WITHOUT_REASON,
    16: _P.RETIRED,
    17: _P.BLACK_FLAG_TIMER,
})

_I = InfringementType
INFRINGEMENT_TYPES = MappingProxyType({
    0: _I.BLOCKING_BY_SLOW_DRIVING,
    1: _I.BLOCKING_BY_WRONG_WAY_DRIVING,
    2: _I.REVERSING_OFF_THE_START_LINE,
    3: _I.BIG_COLLISION,
    4: _I.SMALL_COLLISION,
    5: _I.COLLISION_FAILED_TO_HAND_BACK_POSITION_SINGLE,
    6: _I.COLLISION_FAILED_TO_HAND_BACK_POSITION_MULTIPLE,
    7: _I.CORNER_CUTTING_GAINED_TIME,
    8: _I.CORNER_CUTTING_OVERTAKE_SINGLE,
    9: _I.CORNER_CUTTING_OVERTAKE_MULTIPLE,
    10: _I.CROSSED_PIT_EXIT_LANE,
    11: _I.IGNORING_BLUE_FLAGS,
    12: _I.IGNORING_YELLOW_FLAGS,
    13: _I.IGNORING_DRIVE_THROUGH,
    14: _I.TOO_MANY_DRIVE_THROUGHS,
    15: _I.DRIVE_THROUGH_REMINDER_SERVE_WITHIN_N_LAPS,
    16: _I.DRIVE_THROUGH_REMINDER_SERVE_THIS_LAP,
    17: _I.PIT_LANE_SPEEDING,
    18: _I.PARKED_FOR_TOO_LONG,
    19: _I.IGNORING_TYRE_REGULATIONS,
    20: _I.TOO_MANY_PENALTIES,
    21: _I.MULTIPLE_WARNINGS,
    22: _I.MULTIPLE_WARNINGS,
    23: _I.APPROACHING_DISQUALIFICATION,
    24: _I.TYRE_REGULATIONS_SELECT_SINGLE,
    25: _I.TYRE_REGULATIONS_SELECT_MULTIPLE,
    26: _I.LAP_INVALIDATED_RUNNING_WIDE,
    27: _I.LAP_INVALIDATED_RUNNING_WIDE,
    28: _I.CORNER_CUTTING_RAN_WIDE_GAINED_TIME_MINOR,
    29: _I.CORNER_CUTTING_RAN_WIDE_GAINED_TIME_SIGNIFICANT,
    30: _I.CORNER_CUTTING_RAN_WIDE_GAINED_TIME_EXTREME,
    31: _I.LAP_INVALIDATED_WALL_RIDING,
    32: _I.LAP_INVALIDATED_RESET_TO_TRACK,
    33: _I.BLOCKING_PIT_LANE,
    34: _I.JUMP_START,
    35: _I.SAFETY_CAR_TO_CAR_COLLISION,
    36: _I.SAFETY_CAR_ILLEGAL_OVERTAKE,
    37: _I.SAFETY_CAR_EXCEEDING_ALLOWED_PACE,
    38: _I.VIRTUAL_SAFETY_CAR_EXCEEDING_ALLOWED_PACE,
    39: _I.FORMATION_LAP_BELOW_ALLOWED_SPEED,
    40: _I.RETIRED_MECHANICAL_FAILURE,
    41: _I.RETIRED_TERMINALLY_DAMAGED,
    42: _I.SAFETY_CAR_FALLING_TOO_FAR_BACK,
    43: _I.BLACK_FLAG_TIMER,
    44: _I.UNSERVED_STOP_GO_PENALTY,
    45: _I.UNSERVED_DRIVE_THROUGH_PENALTY,
    46: _I.ENGINE_COMPONENT_CHANGE,
    47: _I.GEARBOX_CHANGE,
    48: _I.LEAGUE_GRID_PENALTY,
    49: _I.RETRY_PENALTY,
    50: _I.ILLEGAL_TIME_GAIN,
    51: _I.MANDATORY_PITSTOP,
})


# ---------------------------------------------------------------------------
# Decoders
# ---------------------------------------------------------------------------


def _lookup(table, enum_name: str, raw: int):
    try:
        return table[raw]
    except KeyError:
        raise InvalidOrdinalError(enum_name, raw) from None


def decode_packet_type(raw: int) -> PacketType:
    return _lookup(PACKET_TYPES, "PacketType", raw)


def decode_penalty_type(raw: int) -> PenaltyType:
    return _lookup(PENALTY_TYPES, "PenaltyType", raw)


def decode_infringement_type(raw: int) -> InfringementType:
    return _lookup(INFRINGEMENT_TYPES, "InfringementType", raw)


def decode_team(raw: int) -> Team:
    return _lookup(TEAMS, "Team", raw)


def decode_driver(raw: int) -> Driver:
    return _lookup(DRIVERS, "Driver", raw)
