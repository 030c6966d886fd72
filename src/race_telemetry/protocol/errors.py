"""Decode errors raised by the binary frame decoder.

Every failure to turn bytes into a :class:`~race_telemetry.protocol.models.Frame`
is a :class:`DecodeError`.  They are recoverable: the ingestion pipeline
discards the offending datagram and reads the next one.
"""

from __future__ import annotations


class DecodeError(Exception):
    """Raised when a buffer cannot be decoded.

    Attributes
    ----------
    stage:
        Decoding stage that failed (``"header"``, ``"event"``, ``"motion"``,
        ``"participants"`` or ``"dispatch"``).
    field:
        Name of the field being read, if known.
    offset:
        Byte offset into the stage's buffer where the failure occurred.
    """

    def __init__(
        self,
        message: str,
        *,
        stage: str = "",
        field: str = "",
        offset: int | None = None,
    ) -> None:
        super().__init__(message)
        self.stage = stage
        self.field = field
        self.offset = offset

    def located(self, stage: str, base_offset: int = 0) -> DecodeError:
        """Tag the error with *stage* (if unset) and shift its offset by *base_offset*."""
        if not self.stage:
            self.stage = stage
        if self.offset is not None:
            self.offset += base_offset
        return self


class InsufficientDataError(DecodeError):
    """Raised when the buffer ends before a field could be read."""

    def __init__(self, field: str, offset: int, needed: int, available: int) -> None:
        super().__init__(
            f"{field!r} needs {needed} byte(s) at offset {offset}, {available} available",
            field=field,
            offset=offset,
        )
        self.needed = needed
        self.available = available


class InvalidOrdinalError(DecodeError):
    """Raised when a byte is not a known ordinal of an enumeration."""

    def __init__(self, enum_name: str, raw: int) -> None:
        super().__init__(f"{raw!r} is not a valid {enum_name}")
        self.enum_name = enum_name
        self.raw = raw


class UnknownEventCodeError(DecodeError):
    """Raised when an event packet carries an undefined 4-byte code."""

    def __init__(self, code: bytes, offset: int | None = None) -> None:
        super().__init__(
            f"{code!r} is not a known event code",
            stage="event",
            field="code",
            offset=offset,
        )
        self.code = code


class UnsupportedPacketTypeError(DecodeError):
    """Raised for a valid packet type that has no body decoder.

    Distinct from the other errors: the bytes were well formed, the packet
    type is simply not handled.
    """

    def __init__(self, packet_type) -> None:
        super().__init__(
            f"no decoder for packet type {packet_type.name}",
            stage="dispatch",
            field="packet_id",
        )
        self.packet_type = packet_type
